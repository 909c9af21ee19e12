"""
Theme helpers for the portfolio site.
Built-in theme definitions and the CSS variable mapping.
"""

from .applier import apply_theme_colors, render_css, theme_css_variables
from .defaults import DEFAULT_THEME_NAME, DEFAULT_THEMES

__all__ = [
    "apply_theme_colors",
    "render_css",
    "theme_css_variables",
    "DEFAULT_THEME_NAME",
    "DEFAULT_THEMES",
]
