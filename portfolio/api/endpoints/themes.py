"""
Theme API endpoints for the portfolio site.
"""

from fastapi import APIRouter, Depends, Request

from ...auth.dependencies import require_auth
from ...core.config import settings
from ...core.exceptions import ForbiddenError
from ...core.logging_config import get_logger
from ...schemas.common import ApiResponse
from ...schemas.theme import ThemeCreate, ThemeResponse, ThemeUpdate
from ...services.theme_service import ThemeService, theme_service
from ..responses import success_response

logger = get_logger(__name__)

router = APIRouter()

# The active theme reflects live state; intermediaries must always revalidate
NO_STORE_HEADERS = {"Cache-Control": "no-cache, no-store, must-revalidate"}


def get_theme_service() -> ThemeService:
    return theme_service


@router.get("", response_model=ApiResponse)
async def list_themes(service: ThemeService = Depends(get_theme_service)):
    """List all themes"""
    themes = await service.list_themes()
    return success_response([ThemeResponse.from_document(t) for t in themes])


@router.post("", response_model=ApiResponse)
async def create_theme(
    theme_data: ThemeCreate,
    user: dict = Depends(require_auth),
    service: ThemeService = Depends(get_theme_service),
):
    """Create a new, inactive theme"""
    theme = await service.create_theme(theme_data.name, theme_data.variables)
    return success_response(ThemeResponse.from_document(theme), message="Theme created successfully")


@router.get("/active", response_model=ApiResponse)
async def get_active_theme(service: ThemeService = Depends(get_theme_service)):
    """
    Get the theme currently applied to the public site.

    Served from the process-wide cache; returns null when no theme is
    active or the store cannot be read.
    """
    theme = await service.get_active_theme_cached()
    data = ThemeResponse.from_document(theme) if theme else None
    return success_response(data, headers=NO_STORE_HEADERS)


@router.get("/{theme_id}", response_model=ApiResponse)
async def get_theme(theme_id: str, service: ThemeService = Depends(get_theme_service)):
    theme = await service.get_theme(theme_id)
    return success_response(ThemeResponse.from_document(theme))


@router.put("/{theme_id}", response_model=ApiResponse)
async def update_theme(
    theme_id: str,
    theme_data: ThemeUpdate,
    user: dict = Depends(require_auth),
    service: ThemeService = Depends(get_theme_service),
):
    theme = await service.update_theme(theme_id, name=theme_data.name, variables=theme_data.variables)
    return success_response(ThemeResponse.from_document(theme), message="Theme updated successfully")


@router.delete("/{theme_id}", response_model=ApiResponse)
async def delete_theme(
    theme_id: str,
    user: dict = Depends(require_auth),
    service: ThemeService = Depends(get_theme_service),
):
    await service.delete_theme(theme_id)
    return success_response(message="Theme deleted successfully")


@router.put("/{theme_id}/activate", response_model=ApiResponse)
async def activate_theme(
    theme_id: str,
    user: dict = Depends(require_auth),
    service: ThemeService = Depends(get_theme_service),
):
    """Make a theme the single active theme (admin only)"""
    theme = await service.activate_theme(theme_id)
    return success_response(ThemeResponse.from_document(theme), message="Theme activated successfully")


@router.put("/{theme_id}/activate-public", response_model=ApiResponse)
async def activate_theme_public(
    theme_id: str,
    request: Request,
    service: ThemeService = Depends(get_theme_service),
):
    """
    Activate a theme without authentication.

    Backs the visitor-facing theme switcher. Anyone can change the site-wide
    theme through this route, so it can be switched off with
    ALLOW_PUBLIC_THEME_ACTIVATION=false.
    """
    if not settings.ALLOW_PUBLIC_THEME_ACTIVATION:
        raise ForbiddenError("Public theme activation is disabled")

    client_host = request.client.host if request.client else "unknown"
    logger.warning("Unauthenticated theme activation from %s", client_host, theme_id=theme_id)

    theme = await service.activate_theme(theme_id)
    return success_response(ThemeResponse.from_document(theme), message="Theme activated successfully")
