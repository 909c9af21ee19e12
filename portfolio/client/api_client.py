"""
Async HTTP client for the portfolio API.
Unwraps the ``{success, data, error, message}`` envelope.
"""

from typing import Any, Dict, List, Optional

import httpx

from ..core.config import settings
from ..core.logging_config import get_logger
from ..schemas.theme import ThemeResponse

logger = get_logger(__name__)


class ApiError(Exception):
    """Non-success answer from the API"""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ThemeApiClient:
    """Client for the theme and auth endpoints"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.prefix = settings.API_V1_STR
        self.token = token
        self._client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> "ThemeApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self):
        await self._client.aclose()

    async def request(self, method: str, endpoint: str, json: Optional[Dict[str, Any]] = None) -> Any:
        """Send a request and return the envelope's ``data``"""
        headers = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        try:
            response = await self._client.request(method, f"{self.prefix}{endpoint}", json=json, headers=headers)
        except httpx.HTTPError as e:
            raise ApiError(str(e) or e.__class__.__name__, status_code=503) from e

        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}

        if response.is_error or not payload.get("success"):
            message = payload.get("message") or payload.get("error") or f"HTTP {response.status_code}"
            raise ApiError(message, status_code=response.status_code)

        return payload.get("data")

    async def login(self, email: str, password: str) -> str:
        data = await self.request("POST", "/auth/login", json={"email": email, "password": password})
        self.token = data["token"]
        return self.token

    async def list_themes(self) -> List[ThemeResponse]:
        data = await self.request("GET", "/themes")
        return [ThemeResponse.model_validate(item) for item in data or []]

    async def get_active_theme(self) -> Optional[ThemeResponse]:
        data = await self.request("GET", "/themes/active")
        return ThemeResponse.model_validate(data) if data else None

    async def create_theme(self, name: str, variables: Dict[str, str]) -> ThemeResponse:
        data = await self.request("POST", "/themes", json={"name": name, "variables": variables})
        return ThemeResponse.model_validate(data)

    async def update_theme(
        self,
        theme_id: str,
        name: Optional[str] = None,
        variables: Optional[Dict[str, str]] = None,
    ) -> ThemeResponse:
        body: Dict[str, Any] = {}
        if name is not None:
            body["name"] = name
        if variables is not None:
            body["variables"] = variables
        data = await self.request("PUT", f"/themes/{theme_id}", json=body)
        return ThemeResponse.model_validate(data)

    async def activate_theme(self, theme_id: str) -> ThemeResponse:
        data = await self.request("PUT", f"/themes/{theme_id}/activate")
        return ThemeResponse.model_validate(data)

    async def activate_theme_public(self, theme_id: str) -> ThemeResponse:
        data = await self.request("PUT", f"/themes/{theme_id}/activate-public")
        return ThemeResponse.model_validate(data)

    async def delete_theme(self, theme_id: str) -> None:
        await self.request("DELETE", f"/themes/{theme_id}")
