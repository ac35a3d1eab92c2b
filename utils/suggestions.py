# utils/suggestions.py
"""
Debounced, stale-safe autocomplete.

Typing calls `update(text)` on every change. Short queries clear the
suggestions at once; longer ones wait for a quiet period and then issue a
single request. A result is shown only if it belongs to the latest issued
request and the text has not changed since.
"""
import asyncio
import itertools
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional

from config import Config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SuggestionQuery:
    raw_text: str
    sequence_id: int


class SuggestionDebouncer:
    def __init__(self, fetch: Callable[[str], Awaitable[List[str]]],
                 on_change: Optional[Callable[['SuggestionDebouncer'], None]] = None,
                 min_length: int = Config.SUGGESTION_MIN_LENGTH,
                 quiet_period: float = Config.SUGGESTION_QUIET_PERIOD,
                 max_results: int = Config.SUGGESTION_LIMIT):
        self._fetch = fetch
        self._on_change = on_change
        self.min_length = min_length
        self.quiet_period = quiet_period
        self.max_results = max_results

        self.text = ''
        self.suggestions: List[str] = []
        self.requests_issued = 0

        self._sequence = itertools.count(1)
        self._latest_issued_id = 0
        self._timer: Optional[asyncio.Task] = None
        self._in_flight = set()

    @property
    def loading(self):
        return bool(self._in_flight)

    def _notify(self):
        if self._on_change is not None:
            self._on_change(self)

    def _set_suggestions(self, suggestions):
        if suggestions != self.suggestions:
            self.suggestions = suggestions
            self._notify()

    def _cancel_timer(self):
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    def update(self, text: str) -> None:
        """Record a new query text. Must be called from the event loop."""
        self.text = (text or '').strip()
        self._cancel_timer()

        if len(self.text) < self.min_length:
            self._set_suggestions([])
            return

        query = SuggestionQuery(raw_text=self.text, sequence_id=next(self._sequence))
        self._timer = asyncio.get_running_loop().create_task(self._wait_then_issue(query))

    async def _wait_then_issue(self, query: SuggestionQuery):
        await asyncio.sleep(self.quiet_period)
        self._timer = None
        self._issue(query)

    def _issue(self, query: SuggestionQuery):
        self._latest_issued_id = query.sequence_id
        self.requests_issued += 1
        logger.debug(f"Issuing suggestion request #{query.sequence_id} for '{query.raw_text}'")

        task = asyncio.get_running_loop().create_task(self._run(query))
        self._in_flight.add(task)
        if len(self._in_flight) == 1:
            self._notify()

    async def _run(self, query: SuggestionQuery):
        try:
            result = await self._fetch(query.raw_text)
            result = [s for s in (result or []) if s][:self.max_results]
        except asyncio.CancelledError:
            raise
        except Exception as e:
            # Suggestions degrade silently
            logger.warning(f"Suggestion request for '{query.raw_text}' failed: {e}")
            result = []
        finally:
            self._in_flight.discard(asyncio.current_task())

        if self.is_current(query):
            self.suggestions = result
        else:
            logger.debug(f"Dropping stale suggestions for '{query.raw_text}' (now '{self.text}')")
        self._notify()

    def is_current(self, query: SuggestionQuery) -> bool:
        return query.sequence_id == self._latest_issued_id and query.raw_text == self.text

    async def settle(self) -> None:
        """Wait for the pending quiet period and every outstanding request."""
        while self._timer is not None or self._in_flight:
            pending = [t for t in [self._timer, *self._in_flight] if t is not None]
            await asyncio.gather(*pending, return_exceptions=True)

    def close(self) -> None:
        """Drop any pending request that has not been issued yet."""
        self._cancel_timer()
