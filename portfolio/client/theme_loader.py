"""
Loads the active theme once per client session.

The loader is a small state machine::

    IDLE -> ATTEMPTING(n) -> SUCCEEDED
                          -> GAVE_UP
    any non-final state  -> CANCELLED

Up to ``max_attempts`` fetches are made, waiting ``backoff_step * n`` seconds
after the n-th failure. A fetch that raises or returns None counts as a
failure. When every attempt fails the client state is left unset and the
presentation layer keeps its static default styling.

``cancel()`` is the teardown hook. The cancellation flag is checked after
every await and before every transition, so once cancelled the loader issues
no further fetch and never writes to the client state.
"""

import asyncio
from enum import Enum
from typing import Awaitable, Callable, Optional

from ..core.logging_config import get_logger
from ..schemas.theme import ThemeResponse
from .api_client import ThemeApiClient
from .state import ThemeState

logger = get_logger(__name__)

MAX_ATTEMPTS = 3
BACKOFF_STEP_SECONDS = 0.35

FetchActiveTheme = Callable[[], Awaitable[Optional[ThemeResponse]]]
Sleep = Callable[[float], Awaitable[None]]


class LoaderState(str, Enum):
    IDLE = "idle"
    ATTEMPTING = "attempting"
    SUCCEEDED = "succeeded"
    GAVE_UP = "gave_up"
    CANCELLED = "cancelled"


FINAL_STATES = (LoaderState.SUCCEEDED, LoaderState.GAVE_UP, LoaderState.CANCELLED)


class ThemeLoader:
    """Fetch-with-backoff for the active theme, cancellable on teardown"""

    def __init__(
        self,
        state: ThemeState,
        fetch: FetchActiveTheme,
        sleep: Sleep = asyncio.sleep,
        max_attempts: int = MAX_ATTEMPTS,
        backoff_step: float = BACKOFF_STEP_SECONDS,
    ):
        self.state = state
        self._fetch = fetch
        self._sleep = sleep
        self.max_attempts = max_attempts
        self.backoff_step = backoff_step

        self.status = LoaderState.IDLE
        self.attempt = 0
        self._cancelled = False
        self._task: Optional[asyncio.Task] = None

    @classmethod
    def for_client(cls, state: ThemeState, client: ThemeApiClient, **kwargs) -> "ThemeLoader":
        return cls(state, client.get_active_theme, **kwargs)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def _transition(self, status: LoaderState) -> bool:
        """Move to ``status`` unless cancelled; False means stop"""
        if self._cancelled:
            self.status = LoaderState.CANCELLED
            return False
        self.status = status
        return True

    def start(self) -> asyncio.Task:
        """Run ``load()`` as a task (the mount hook)"""
        if self._task is None:
            self._task = asyncio.ensure_future(self.load())
        return self._task

    def cancel(self) -> None:
        """Teardown: stop retrying and never touch the state again"""
        self._cancelled = True
        if self.status not in FINAL_STATES:
            self.status = LoaderState.CANCELLED
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def load(self) -> Optional[ThemeResponse]:
        if self.state.active_theme is not None:
            return self.state.active_theme
        if self.status != LoaderState.IDLE:
            # Runs once per session
            return self.state.active_theme

        try:
            return await self._run()
        except asyncio.CancelledError:
            self._cancelled = True
            self.status = LoaderState.CANCELLED
            raise

    async def _run(self) -> Optional[ThemeResponse]:
        for attempt in range(1, self.max_attempts + 1):
            if attempt > 1:
                await self._sleep(self.backoff_step * (attempt - 1))

            if not self._transition(LoaderState.ATTEMPTING):
                return None
            self.attempt = attempt

            try:
                theme = await self._fetch()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.debug("Active theme fetch attempt %d failed: %s", attempt, e)
                theme = None

            if self._cancelled:
                self.status = LoaderState.CANCELLED
                return None

            if theme is not None:
                self._transition(LoaderState.SUCCEEDED)
                self.state.set_active_theme(theme)
                return theme

        if self._transition(LoaderState.GAVE_UP):
            logger.warning("Giving up on active theme after %d attempts", self.max_attempts)
        return None
