"""
Maps a theme's six colours onto the CSS variables used by the presentation layer.

The HSL variables follow the shadcn/ui convention ("210 100% 12%", no
``hsl()`` wrapper); the ``--color-*`` variables carry the raw values for
older stylesheets.
"""

from typing import Any, Dict, MutableMapping, Optional, Tuple, Union

LIGHT_FOREGROUND = "0 0% 9%"
DARK_FOREGROUND = "0 0% 98%"


def _rgb(hex_color: str) -> Tuple[int, int, int]:
    value = hex_color.strip().lstrip("#")
    if len(value) == 3:
        value = "".join(ch * 2 for ch in value)
    if len(value) != 6:
        raise ValueError(f"Invalid hex colour: {hex_color!r}")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def hex_to_hsl(hex_color: str) -> str:
    """Convert ``#RRGGBB`` to ``"H S% L%"``"""
    r, g, b = (channel / 255 for channel in _rgb(hex_color))

    high = max(r, g, b)
    low = min(r, g, b)
    h = s = 0.0
    lightness = (high + low) / 2

    if high != low:
        d = high - low
        s = d / (2 - high - low) if lightness > 0.5 else d / (high + low)
        if high == r:
            h = (g - b) / d + (6 if g < b else 0)
        elif high == g:
            h = (b - r) / d + 2
        else:
            h = (r - g) / d + 4
        h /= 6

    return f"{round(h * 360)} {round(s * 100)}% {round(lightness * 100)}%"


def is_light_color(hex_color: str) -> bool:
    r, g, b = _rgb(hex_color)
    luminance = (0.299 * r + 0.587 * g + 0.114 * b) / 255
    return luminance > 0.5


def get_foreground_color(background_color: str) -> str:
    """Readable text colour (HSL) for the given background"""
    return LIGHT_FOREGROUND if is_light_color(background_color) else DARK_FOREGROUND


def get_muted_colors(background_color: str) -> Dict[str, str]:
    if is_light_color(background_color):
        return {"muted": "0 0% 96.1%", "muted_foreground": "0 0% 45.1%"}
    return {"muted": "0 0% 14.9%", "muted_foreground": "0 0% 63.9%"}


def _variables_of(theme: Any) -> Dict[str, str]:
    variables = theme["variables"] if isinstance(theme, dict) else theme.variables
    if hasattr(variables, "model_dump"):
        return variables.model_dump()
    return dict(variables)


def theme_css_variables(theme: Any) -> Dict[str, str]:
    """Every CSS custom property the theme sets, in application order"""
    v = _variables_of(theme)

    background = hex_to_hsl(v["background"])
    foreground = hex_to_hsl(v["foreground"])
    border = hex_to_hsl(v["border"])
    muted = get_muted_colors(v["background"])

    return {
        "--primary": hex_to_hsl(v["primary"]),
        "--primary-foreground": get_foreground_color(v["primary"]),
        "--secondary": hex_to_hsl(v["secondary"]),
        "--secondary-foreground": get_foreground_color(v["secondary"]),
        "--background": background,
        "--foreground": foreground,
        "--accent": hex_to_hsl(v["accent"]),
        "--accent-foreground": get_foreground_color(v["accent"]),
        "--border": border,
        "--input": border,
        "--card": background,
        "--card-foreground": foreground,
        "--popover": background,
        "--popover-foreground": foreground,
        "--muted": muted["muted"],
        "--muted-foreground": muted["muted_foreground"],
        # Legacy variables
        "--color-primary": v["primary"],
        "--color-secondary": v["secondary"],
        "--color-bg": v["background"],
        "--color-text": v["foreground"],
        "--color-accent": v["accent"],
        "--color-border": v["border"],
    }


def apply_theme_colors(theme: Optional[Any], root: Union[MutableMapping[str, str], Any]) -> None:
    """Set the theme's variables on ``root``.

    ``root`` is either a style object exposing ``set_property(name, value)``
    or a plain mutable mapping. Does nothing when ``theme`` is None.
    """
    if theme is None:
        return

    for name, value in theme_css_variables(theme).items():
        if hasattr(root, "set_property"):
            root.set_property(name, value)
        else:
            root[name] = value


def render_css(theme: Optional[Any], selector: str = ":root") -> str:
    """Stylesheet block for server-side injection; empty for no theme"""
    if theme is None:
        return ""
    lines = [f"  {name}: {value};" for name, value in theme_css_variables(theme).items()]
    return selector + " {\n" + "\n".join(lines) + "\n}\n"
