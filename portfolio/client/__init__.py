from .api_client import ApiError, ThemeApiClient
from .state import ThemeState
from .theme_loader import LoaderState, ThemeLoader

__all__ = [
    "ApiError",
    "ThemeApiClient",
    "ThemeState",
    "LoaderState",
    "ThemeLoader",
]
