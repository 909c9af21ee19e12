# Models package

from .theme import Theme, ThemeVariables, THEME_VARIABLE_NAMES
from .user import AdminUser

__all__ = [
    "Theme",
    "ThemeVariables",
    "THEME_VARIABLE_NAMES",
    "AdminUser",
]
