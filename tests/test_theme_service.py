import asyncio

import pytest
from bson import ObjectId
from pymongo.errors import OperationFailure, ServerSelectionTimeoutError

from portfolio.core.database import database
from portfolio.core.exceptions import ConflictError, NotFoundError, StorageError, ValidationError
from portfolio.models.theme import Theme
from portfolio.themes.defaults import DEFAULT_THEME_NAME, DEFAULT_THEMES


async def active_ids():
    return [str(t.id) for t in await Theme.find({"is_active": True}).to_list()]


class TestCreateTheme:

    async def test_created_theme_is_listed_inactive(self, service, theme_variables):
        theme = await service.create_theme("Ocean", theme_variables)

        themes = await service.list_themes()
        assert [t.name for t in themes] == ["Ocean"]
        assert themes[0].id == theme.id
        assert themes[0].is_active is False
        assert themes[0].variables.primary == "#0ea5e9"

    async def test_name_is_trimmed(self, service, theme_variables):
        theme = await service.create_theme("  Ocean  ", theme_variables)
        assert theme.name == "Ocean"

    async def test_blank_name_is_rejected(self, service, theme_variables):
        with pytest.raises(ValidationError) as exc_info:
            await service.create_theme("   ", theme_variables)
        assert exc_info.value.message == "Name is required"
        assert await service.list_themes() == []

    async def test_missing_variable_is_rejected(self, service, theme_variables):
        del theme_variables["border"]
        with pytest.raises(ValidationError) as exc_info:
            await service.create_theme("Ocean", theme_variables)
        assert exc_info.value.message == "variables.border: Field required"

    async def test_unknown_variable_is_rejected(self, service, theme_variables):
        theme_variables["shadow"] = "#000000"
        with pytest.raises(ValidationError) as exc_info:
            await service.create_theme("Ocean", theme_variables)
        assert exc_info.value.message.startswith("variables.shadow:")

    async def test_empty_variable_is_rejected(self, service, theme_variables):
        theme_variables["primary"] = "  "
        with pytest.raises(ValidationError) as exc_info:
            await service.create_theme("Ocean", theme_variables)
        assert exc_info.value.message.startswith("variables.primary:")

    @pytest.mark.parametrize("colour", ["white", "rgb(1,2,3)", "#12345", "0ea5e9"])
    async def test_non_hex_colour_is_rejected(self, service, theme_variables, colour):
        theme_variables["background"] = colour
        with pytest.raises(ValidationError) as exc_info:
            await service.create_theme("Named", theme_variables)
        assert exc_info.value.message == "background must be a hex colour such as #1a2b3c"
        assert await service.list_themes() == []

    async def test_update_with_non_hex_colour_keeps_old_colours(self, service, theme_variables):
        theme = await service.create_theme("Ocean", theme_variables)

        with pytest.raises(ValidationError):
            await service.update_theme(str(theme.id), variables=dict(theme_variables, accent="teal"))

        assert (await service.get_theme(str(theme.id))).variables.accent == "#22d3ee"

    async def test_variables_must_be_a_mapping(self, service):
        with pytest.raises(ValidationError):
            await service.create_theme("Ocean", None)

    async def test_duplicate_name_conflicts(self, service, theme_variables):
        await service.create_theme("Ocean", theme_variables)
        with pytest.raises(ConflictError):
            await service.create_theme("Ocean", theme_variables)
        assert len(await service.list_themes()) == 1


class TestActivateTheme:

    async def test_activated_theme_is_the_only_active_one(self, service, theme_variables):
        first = await service.create_theme("Ocean", theme_variables)
        second = await service.create_theme("Emerald", theme_variables)

        await service.activate_theme(str(first.id))
        activated = await service.activate_theme(str(second.id))

        assert activated.is_active is True
        active = await service.get_active_theme()
        assert active.id == second.id
        assert await active_ids() == [str(second.id)]
        assert [t.name for t in await service.list_themes() if t.is_active] == ["Emerald"]

    async def test_reactivating_active_theme_keeps_it_active(self, service, theme_variables):
        theme = await service.create_theme("Ocean", theme_variables)
        await service.activate_theme(str(theme.id))
        await service.activate_theme(str(theme.id))
        assert await active_ids() == [str(theme.id)]

    async def test_unknown_id_leaves_flags_unchanged(self, service, theme_variables):
        theme = await service.create_theme("Ocean", theme_variables)
        await service.activate_theme(str(theme.id))

        with pytest.raises(NotFoundError):
            await service.activate_theme(str(ObjectId()))

        assert await active_ids() == [str(theme.id)]

    async def test_malformed_id_is_not_found(self, service, theme_variables):
        theme = await service.create_theme("Ocean", theme_variables)
        await service.activate_theme(str(theme.id))

        with pytest.raises(NotFoundError):
            await service.activate_theme("not-an-object-id")

        assert await active_ids() == [str(theme.id)]

    async def test_no_active_theme_before_first_activation(self, service, theme_variables):
        await service.create_theme("Ocean", theme_variables)
        assert await service.get_active_theme() is None

    async def test_concurrent_activations_leave_one_active(self, service, theme_variables):
        themes = [await service.create_theme(f"Theme {i}", theme_variables) for i in range(5)]

        await asyncio.gather(*(service.activate_theme(str(t.id)) for t in themes))

        assert len(await active_ids()) == 1

    async def test_activation_invalidates_cached_active_theme(self, service, theme_variables):
        first = await service.create_theme("Ocean", theme_variables)
        second = await service.create_theme("Emerald", theme_variables)
        await service.activate_theme(str(first.id))

        assert (await service.get_active_theme_cached()).id == first.id

        await service.activate_theme(str(second.id))
        assert (await service.get_active_theme_cached()).id == second.id


class TestUpdateAndDelete:

    async def test_update_renames_and_replaces_variables(self, service, theme_variables):
        theme = await service.create_theme("Ocean", theme_variables)
        new_variables = dict(theme_variables, primary="#123456")

        updated = await service.update_theme(str(theme.id), name="Deep Ocean", variables=new_variables)

        assert updated.name == "Deep Ocean"
        assert updated.variables.primary == "#123456"
        stored = await service.get_theme(str(theme.id))
        assert stored.name == "Deep Ocean"

    async def test_update_to_existing_name_conflicts(self, service, theme_variables):
        await service.create_theme("Ocean", theme_variables)
        other = await service.create_theme("Emerald", theme_variables)

        with pytest.raises(ConflictError):
            await service.update_theme(str(other.id), name="Ocean")

    async def test_update_unknown_theme(self, service):
        with pytest.raises(NotFoundError):
            await service.update_theme(str(ObjectId()), name="Ocean")

    async def test_delete_removes_theme(self, service, theme_variables):
        theme = await service.create_theme("Ocean", theme_variables)
        await service.delete_theme(str(theme.id))

        assert await service.list_themes() == []
        with pytest.raises(NotFoundError):
            await service.get_theme(str(theme.id))

    async def test_deleting_active_theme_leaves_none_active(self, service, theme_variables):
        theme = await service.create_theme("Ocean", theme_variables)
        await service.activate_theme(str(theme.id))
        await service.get_active_theme_cached()

        await service.delete_theme(str(theme.id))

        assert await service.get_active_theme_cached() is None


class TestSeedDefaultThemes:

    async def test_seeds_builtin_themes_and_activates_default(self, service):
        created = await service.seed_default_themes()

        assert sorted(t.name for t in created) == sorted(t["name"] for t in DEFAULT_THEMES)
        active = await service.get_active_theme()
        assert active.name == DEFAULT_THEME_NAME

    async def test_seeding_is_idempotent(self, service):
        await service.seed_default_themes()
        assert await service.seed_default_themes() == []
        assert len(await service.list_themes()) == len(DEFAULT_THEMES)

    async def test_seeding_keeps_existing_active_theme(self, service, theme_variables):
        custom = await service.create_theme("Custom", theme_variables)
        await service.activate_theme(str(custom.id))

        await service.seed_default_themes()

        assert (await service.get_active_theme()).id == custom.id


class TestStorageFailures:

    async def test_list_failure_raises_storage_error(self, service, monkeypatch):
        def broken(*args, **kwargs):
            raise ServerSelectionTimeoutError("no servers available")

        monkeypatch.setattr(Theme, "find_all", broken)

        with pytest.raises(StorageError):
            await service.list_themes()

    async def test_cached_read_fails_open(self, service, monkeypatch):
        async def broken():
            raise StorageError("Failed to fetch active theme")

        monkeypatch.setattr(service, "get_active_theme", broken)

        assert await service.get_active_theme_cached() is None


class FakeTransaction:

    def __init__(self, session):
        self.session = session

    async def __aenter__(self):
        self.session.in_transaction = True
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.session.in_transaction = False
        self.session.outcome = "committed" if exc_type is None else "aborted"
        return False


class FakeSession:

    def __init__(self):
        self.in_transaction = False
        self.outcome = None
        self.ended = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.ended = True
        return False

    def start_transaction(self):
        return FakeTransaction(self)


class FakeSessionClient:

    def __init__(self):
        self.sessions = []

    async def start_session(self):
        session = FakeSession()
        self.sessions.append(session)
        return session


class RecordedUpdate:
    """Query stand-in that records the session each update runs under"""

    def __init__(self, calls, label, error=None):
        self.calls = calls
        self.label = label
        self.error = error

    async def update(self, *args, session=None, **kwargs):
        self.calls.append((self.label, session, session.in_transaction if session else False))
        if self.error:
            raise self.error


class TestTransactionalActivation:

    @pytest.fixture
    async def ocean(self, service, theme_variables):
        return await service.create_theme("Ocean", theme_variables)

    @pytest.fixture
    def session_client(self, service, ocean, monkeypatch):
        client = FakeSessionClient()

        async def get(document_id, *args, **kwargs):
            return ocean

        monkeypatch.setattr(database, "client", client)
        monkeypatch.setattr(Theme, "get", get)
        monkeypatch.setattr(service, "use_transactions", True)
        return client

    async def test_both_writes_share_one_transaction(self, service, ocean, session_client, monkeypatch):
        calls = []
        monkeypatch.setattr(Theme, "find_one", lambda *args, **kwargs: RecordedUpdate(calls, "set"))
        monkeypatch.setattr(Theme, "find", lambda *args, **kwargs: RecordedUpdate(calls, "clear"))

        activated = await service.activate_theme(str(ocean.id))

        assert activated is ocean
        [session] = session_client.sessions
        assert calls == [("set", session, True), ("clear", session, True)]
        assert session.outcome == "committed"
        assert session.ended

    async def test_failed_second_write_aborts_and_raises_storage_error(
        self, service, ocean, session_client, monkeypatch
    ):
        calls = []
        monkeypatch.setattr(Theme, "find_one", lambda *args, **kwargs: RecordedUpdate(calls, "set"))
        monkeypatch.setattr(
            Theme,
            "find",
            lambda *args, **kwargs: RecordedUpdate(calls, "clear", OperationFailure("WriteConflict")),
        )

        with pytest.raises(StorageError):
            await service.activate_theme(str(ocean.id))

        [session] = session_client.sessions
        assert [label for label, _, _ in calls] == ["set", "clear"]
        assert session.outcome == "aborted"
