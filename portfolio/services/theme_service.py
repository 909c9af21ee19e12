"""
Theme service: CRUD over the theme collection plus the single-active-theme rule.

Activation resolves the target before touching any flag, then sets the target
active and clears every other active flag. With ``MONGODB_USE_TRANSACTIONS``
both writes commit together; otherwise an in-process lock serializes
activations and the set-before-clear order means readers never observe zero
active themes.
"""

import asyncio
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from beanie import PydanticObjectId
from bson import ObjectId
from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import DuplicateKeyError, PyMongoError

from ..core.config import settings
from ..core.database import database
from ..core.exceptions import ConflictError, NotFoundError, StorageError, ValidationError
from ..core.logging_config import get_logger, set_request_context
from ..models.theme import Theme, ThemeVariables
from ..schemas.common import first_error_message
from ..themes.defaults import DEFAULT_THEME_NAME, DEFAULT_THEMES
from .theme_cache import ActiveThemeCache, active_theme_cache

logger = get_logger(__name__)

VariablesInput = Union[ThemeVariables, Dict[str, Any]]


@contextmanager
def storage_errors(action: str):
    """Translate driver failures into StorageError"""
    try:
        yield
    except PyMongoError as e:
        logger.exception("Storage failure while trying to %s", action)
        raise StorageError(f"Failed to {action}") from e


def _parse_id(theme_id: str) -> PydanticObjectId:
    if not theme_id or not ObjectId.is_valid(theme_id):
        raise NotFoundError(f"Theme '{theme_id}' not found")
    return PydanticObjectId(theme_id)


def _validate_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Name is required")
    return name


def _validate_variables(variables: Optional[VariablesInput]) -> ThemeVariables:
    if isinstance(variables, ThemeVariables):
        return variables
    if not isinstance(variables, dict):
        raise ValidationError("Theme variables are required")
    try:
        return ThemeVariables.model_validate(variables)
    except PydanticValidationError as e:
        errors = [{**err, "loc": ("variables", *err["loc"])} for err in e.errors()]
        raise ValidationError(first_error_message(errors)) from e


class ThemeService:
    """Business rules for themes"""

    def __init__(
        self,
        cache: Optional[ActiveThemeCache] = None,
        use_transactions: Optional[bool] = None,
    ):
        self.cache = cache if cache is not None else active_theme_cache
        self.use_transactions = (
            settings.MONGODB_USE_TRANSACTIONS if use_transactions is None else use_transactions
        )
        self._activation_lock = asyncio.Lock()

    async def list_themes(self) -> List[Theme]:
        """All themes, newest first"""
        with storage_errors("list themes"):
            return await Theme.find_all().sort([("created_at", -1)]).to_list()

    async def get_theme(self, theme_id: str) -> Theme:
        object_id = _parse_id(theme_id)
        with storage_errors("fetch theme"):
            theme = await Theme.get(object_id)
        if theme is None:
            raise NotFoundError(f"Theme '{theme_id}' not found")
        return theme

    async def get_active_theme(self) -> Optional[Theme]:
        """The theme flagged active, or None before the first activation"""
        with storage_errors("fetch active theme"):
            # Newest wins if a legacy write left more than one flag set
            return await Theme.find({"is_active": True}).sort([("updated_at", -1)]).first_or_none()

    async def get_active_theme_cached(self) -> Optional[Theme]:
        """Active theme through the TTL cache; storage failures yield None"""
        return await self.cache.get(self.get_active_theme)

    async def create_theme(self, name: str, variables: VariablesInput) -> Theme:
        name = _validate_name(name)
        theme_variables = _validate_variables(variables)

        with storage_errors("create theme"):
            if await Theme.find_one({"name": name}):
                raise ConflictError(f"Theme '{name}' already exists")

            theme = Theme(name=name, is_active=False, variables=theme_variables)
            try:
                await theme.insert()
            except DuplicateKeyError as e:
                raise ConflictError(f"Theme '{name}' already exists") from e

        self.cache.invalidate()
        logger.info("Created theme %s", name, theme_id=str(theme.id))
        return theme

    async def update_theme(
        self,
        theme_id: str,
        name: Optional[str] = None,
        variables: Optional[VariablesInput] = None,
    ) -> Theme:
        """Rename a theme and/or replace its full colour set"""
        theme = await self.get_theme(theme_id)

        if name is not None:
            name = _validate_name(name)
        if variables is not None:
            variables = _validate_variables(variables)

        with storage_errors("update theme"):
            if name is not None and name != theme.name:
                if await Theme.find_one({"name": name, "_id": {"$ne": theme.id}}):
                    raise ConflictError(f"Theme '{name}' already exists")
                theme.name = name
            if variables is not None:
                theme.variables = variables
            theme.updated_at = datetime.utcnow()
            try:
                await theme.save()
            except DuplicateKeyError as e:
                raise ConflictError(f"Theme '{name}' already exists") from e

        self.cache.invalidate()
        logger.info("Updated theme %s", theme.name, theme_id=theme_id)
        return theme

    async def delete_theme(self, theme_id: str) -> None:
        theme = await self.get_theme(theme_id)
        with storage_errors("delete theme"):
            await theme.delete()
        self.cache.invalidate()
        logger.info("Deleted theme %s", theme.name, theme_id=theme_id)

    async def activate_theme(self, theme_id: str) -> Theme:
        """Make ``theme_id`` the only active theme.

        Raises NotFoundError before any flag changes if the id does not
        resolve.
        """
        object_id = _parse_id(theme_id)
        set_request_context(theme_id=theme_id)

        async with self._activation_lock:
            with storage_errors("activate theme"):
                if await Theme.get(object_id) is None:
                    raise NotFoundError(f"Theme '{theme_id}' not found")

                if self.use_transactions:
                    await self._activate_in_transaction(object_id)
                else:
                    await self._set_active(object_id)

                theme = await Theme.get(object_id)

            self.cache.invalidate()

        if theme is None:
            # Deleted between the two writes
            raise NotFoundError(f"Theme '{theme_id}' not found")

        logger.info("Activated theme %s", theme.name, theme_id=theme_id)
        return theme

    async def _activate_in_transaction(self, object_id: PydanticObjectId) -> None:
        async with await database.client.start_session() as session:
            async with session.start_transaction():
                await self._set_active(object_id, session=session)

    async def _set_active(self, object_id: PydanticObjectId, session=None) -> None:
        now = datetime.utcnow()
        await Theme.find_one({"_id": object_id}, session=session).update(
            {"$set": {"is_active": True, "updated_at": now}},
            session=session,
        )
        await Theme.find({"is_active": True, "_id": {"$ne": object_id}}, session=session).update(
            {"$set": {"is_active": False, "updated_at": now}},
            session=session,
        )

    async def seed_default_themes(self) -> List[Theme]:
        """Insert missing built-in themes and activate the default if none is active"""
        created = []
        with storage_errors("seed default themes"):
            for data in DEFAULT_THEMES:
                if await Theme.find_one({"name": data["name"]}):
                    continue
                theme = Theme(name=data["name"], variables=ThemeVariables(**data["variables"]))
                await theme.insert()
                created.append(theme)

        if created:
            logger.info("Seeded %d default themes", len(created))

        if await self.get_active_theme() is None:
            with storage_errors("seed default themes"):
                default = await Theme.find_one({"name": DEFAULT_THEME_NAME})
            if default is not None:
                await self.activate_theme(str(default.id))

        self.cache.invalidate()
        return created


# Global service instance
theme_service = ThemeService()
