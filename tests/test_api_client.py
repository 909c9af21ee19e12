"""
Client-side helpers driven against the real app over an in-process transport.
"""

import pytest
import httpx
from httpx import ASGITransport

from portfolio import cli
from portfolio.client import ApiError, LoaderState, ThemeApiClient, ThemeLoader, ThemeState
from portfolio.main import app
from portfolio.schemas.theme import ThemeResponse
from portfolio.themes.applier import apply_theme_colors

pytestmark = pytest.mark.client


@pytest.fixture
async def api(client, admin_token):
    """ThemeApiClient bound to the app; ``client`` installs the test service"""
    async with ThemeApiClient(
        base_url="http://test", token=admin_token, transport=ASGITransport(app=app)
    ) as api_client:
        yield api_client


class TestThemeApiClient:

    async def test_create_activate_and_fetch_active(self, api, theme_variables):
        theme = await api.create_theme("Ocean", theme_variables)
        assert isinstance(theme, ThemeResponse)
        assert theme.is_active is False

        activated = await api.activate_theme(theme.id)
        assert activated.is_active is True

        active = await api.get_active_theme()
        assert active.id == theme.id
        assert [t.name for t in await api.list_themes()] == ["Ocean"]

    async def test_no_active_theme(self, api):
        assert await api.get_active_theme() is None

    async def test_update_and_delete(self, api, theme_variables):
        theme = await api.create_theme("Ocean", theme_variables)

        updated = await api.update_theme(theme.id, name="Deep Ocean")
        assert updated.name == "Deep Ocean"

        await api.delete_theme(theme.id)
        assert await api.list_themes() == []

    async def test_error_envelope_becomes_api_error(self, api, theme_variables):
        api.token = None
        with pytest.raises(ApiError) as exc_info:
            await api.create_theme("Ocean", theme_variables)
        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "No token provided"

    async def test_unknown_theme_is_404(self, api):
        with pytest.raises(ApiError) as exc_info:
            await api.activate_theme("64b7f0c2a1b2c3d4e5f60718")
        assert exc_info.value.status_code == 404


class TestMalformedResponses:

    @pytest.mark.parametrize("status_code, body", [
        (200, [1, 2, 3]),
        (502, "Bad Gateway"),
        (200, None),
    ])
    async def test_non_envelope_body_becomes_api_error(self, status_code, body):
        def handler(request):
            return httpx.Response(status_code, json=body)

        async with ThemeApiClient(base_url="http://test", transport=httpx.MockTransport(handler)) as api_client:
            with pytest.raises(ApiError) as exc_info:
                await api_client.list_themes()

        assert exc_info.value.status_code == status_code
        assert exc_info.value.message == f"HTTP {status_code}"

    async def test_connection_failure_is_503(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with ThemeApiClient(base_url="http://test", transport=httpx.MockTransport(handler)) as api_client:
            with pytest.raises(ApiError) as exc_info:
                await api_client.get_active_theme()

        assert exc_info.value.status_code == 503


class TestLoaderAgainstApi:

    async def test_loader_applies_active_theme(self, api, theme_variables):
        theme = await api.create_theme("Ocean", theme_variables)
        await api.activate_theme(theme.id)

        state = ThemeState()
        root = {}
        state.subscribe(lambda active: apply_theme_colors(active, root))

        loader = ThemeLoader.for_client(state, api)
        await loader.load()

        assert loader.status == LoaderState.SUCCEEDED
        assert state.active_theme.name == "Ocean"
        assert root["--color-border"] == "#1e293b"

    async def test_loader_gives_up_without_active_theme(self, api):
        delays = []

        async def no_wait(seconds):
            delays.append(seconds)

        state = ThemeState()
        loader = ThemeLoader.for_client(state, api, sleep=no_wait)
        await loader.load()

        assert loader.status == LoaderState.GAVE_UP
        assert state.active_theme is None
        assert delays == pytest.approx([0.35, 0.7])


class TestCli:

    def test_parser_requires_every_colour_for_create(self):
        parser = cli.build_parser()
        with pytest.raises(SystemExit):
            parser.parse_args(["themes", "create", "Sunset", "--primary", "#ff7e5f"])

    def test_parser_reads_activate(self):
        args = cli.build_parser().parse_args(["--token", "t", "themes", "activate", "abc"])
        assert (args.resource, args.action, args.theme_id, args.token) == ("themes", "activate", "abc", "t")

    def test_table_stars_active_theme(self, theme_variables):
        state = ThemeState()
        state.set_themes([
            ThemeResponse(id="1", name="Ocean", is_active=True, variables=theme_variables),
            ThemeResponse(id="2", name="Emerald", is_active=False, variables=theme_variables),
        ])

        lines = cli.format_theme_table(state).splitlines()

        assert lines[0].startswith("* 1  Ocean")
        assert lines[1].startswith("  2  Emerald")
        assert "#0ea5e9" in lines[0]

    def test_empty_table(self):
        assert cli.format_theme_table(ThemeState()) == "No themes found"

    def test_api_errors_exit_non_zero(self, monkeypatch, capsys):
        async def failing_run(args):
            raise ApiError("Authentication required", status_code=401)

        monkeypatch.setattr(cli, "run", failing_run)

        assert cli.main(["themes", "list"]) == 1
        assert "Authentication required" in capsys.readouterr().err
