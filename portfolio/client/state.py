"""
Client-side theme state shared by the loader, the applier and admin views.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional

from ..schemas.theme import ThemeResponse

ThemeListener = Callable[[Optional[ThemeResponse]], None]


@dataclass
class ThemeState:
    themes: List[ThemeResponse] = field(default_factory=list)
    active_theme: Optional[ThemeResponse] = None
    is_loading: bool = False
    error: Optional[str] = None
    _listeners: List[ThemeListener] = field(default_factory=list, init=False, repr=False)

    def subscribe(self, listener: ThemeListener) -> Callable[[], None]:
        """Call ``listener`` whenever the active theme changes; returns an unsubscribe function"""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_active_theme(self, theme: Optional[ThemeResponse]) -> None:
        self.active_theme = theme
        for listener in list(self._listeners):
            listener(theme)

    def set_themes(self, themes: List[ThemeResponse]) -> None:
        self.themes = list(themes)
        self.error = None

    def add_theme(self, theme: ThemeResponse) -> None:
        self.themes.append(theme)

    def apply_activation(self, theme: ThemeResponse) -> None:
        """Record a successful activation: only ``theme`` stays flagged active"""
        self.themes = [t.model_copy(update={"is_active": t.id == theme.id}) for t in self.themes]
        self.set_active_theme(theme)

    def remove_theme(self, theme_id: str) -> None:
        self.themes = [t for t in self.themes if t.id != theme_id]
        if self.active_theme is not None and self.active_theme.id == theme_id:
            self.set_active_theme(None)
