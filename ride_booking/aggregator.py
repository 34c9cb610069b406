# ride_booking/aggregator.py
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Callable, List, Optional, Tuple

import requests

from .autocomplete import (
    AutocompleteQuery,
    PlacesAutocompleteError,
    Suggestion,
    current_language_code,
    fetch_predictions,
    join_suggestions,
)
from .config import Settings
from .http_client import HttpClient

logger = logging.getLogger(__name__)

Listener = Callable[[Tuple[Suggestion, ...], bool], None]

# Anything a failed round can raise: transport, HTTP status, JSON decode, bad shape
ROUND_ERRORS = (requests.RequestException, ValueError, PlacesAutocompleteError)


class PendingSearch:
    """Handle for one armed debounce timer and the round it may start."""

    def __init__(self, owner: "AutocompleteAggregator", generation: int, timer):
        self._owner = owner
        self.generation = generation
        self._timer = timer

    def cancel(self) -> None:
        self._timer.cancel()
        self._owner._invalidate(self.generation)


class AutocompleteAggregator:
    """
    Debounced two-locale place autocomplete.

    Each round asks the provider twice, once in the user's language and once
    in English, and publishes only suggestions present in both answers.
    State is read through `suggestions` / `is_loading` or pushed to
    subscribers.
    """

    def __init__(
        self,
        client: HttpClient,
        settings: Settings,
        language_code: Optional[str] = None,
        timer_factory=threading.Timer,
    ):
        self.client = client
        self.settings = settings
        self.language_code = language_code or current_language_code(settings.fallback_language)
        self._timer_factory = timer_factory
        self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="autocomplete")

        self._lock = threading.Lock()
        self._generation = 0
        self._pending: Optional[PendingSearch] = None
        self._suggestions: Tuple[Suggestion, ...] = ()
        self._loading = False
        self._listeners: List[Listener] = []

    # -------------------------
    # Observable state
    # -------------------------
    @property
    def suggestions(self) -> Tuple[Suggestion, ...]:
        return self._suggestions

    @property
    def is_loading(self) -> bool:
        return self._loading

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, snapshot: Tuple[Tuple[Suggestion, ...], bool]) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(*snapshot)
            except Exception:
                logger.exception("Suggestion listener %r failed", listener)

    # -------------------------
    # Query entry points
    # -------------------------
    def submit_query(self, text: str) -> Optional[PendingSearch]:
        if not text:
            self.clear()
            return None

        with self._lock:
            self._generation += 1
            generation = self._generation
            if self._pending is not None:
                self._pending._timer.cancel()
            timer = self._timer_factory(self.settings.debounce_sec, self._run_round, args=(generation, text))
            timer.daemon = True
            self._pending = PendingSearch(self, generation, timer)
            pending = self._pending
        timer.start()
        return pending

    def clear(self) -> None:
        with self._lock:
            self._generation += 1
            if self._pending is not None:
                self._pending._timer.cancel()
                self._pending = None
            self._suggestions = ()
            self._loading = False
            snapshot = (self._suggestions, self._loading)
        self._notify(snapshot)

    def search(self, text: str) -> List[Suggestion]:
        """Run one round right away and publish it. Errors propagate."""
        if not text:
            self.clear()
            return []

        with self._lock:
            self._generation += 1
            generation = self._generation
        suggestions = self._fetch_joined(text)
        self._publish(generation, suggestions)
        return suggestions

    def close(self) -> None:
        with self._lock:
            self._generation += 1
            if self._pending is not None:
                self._pending._timer.cancel()
                self._pending = None
        self._executor.shutdown(wait=False)

    # -------------------------
    # Round execution
    # -------------------------
    def _invalidate(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._generation += 1
            self._pending = None
            self._loading = False
            snapshot = (self._suggestions, self._loading)
        self._notify(snapshot)

    def _queries(self, text: str) -> Tuple[AutocompleteQuery, AutocompleteQuery]:
        regions = frozenset(self.settings.included_regions)
        localized = AutocompleteQuery(text, self.language_code, self.settings.region_code, regions)
        english = AutocompleteQuery(text, "en", self.settings.region_code, regions)
        return localized, english

    def _fetch_joined(self, text: str) -> List[Suggestion]:
        localized_q, english_q = self._queries(text)
        logger.debug("Autocomplete round for %r (%s + en)", text, localized_q.language_code)

        futures = [
            self._executor.submit(fetch_predictions, self.client, self.settings, q)
            for q in (localized_q, english_q)
        ]
        # zip join: both branches settle before either result is used
        wait(futures)
        localized, english = (f.result() for f in futures)
        return join_suggestions(localized, english)

    def _run_round(self, generation: int, text: str) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._pending = None
            self._loading = True
            snapshot = (self._suggestions, self._loading)

        try:
            self._notify(snapshot)
            self._publish(generation, self._fetch_joined(text))
        except ROUND_ERRORS as e:
            logger.warning("Autocomplete round for %r failed: %s", text, e)
        finally:
            self._settle(generation)

    def _settle(self, generation: int) -> None:
        # a round that did not publish still owes the busy flag back to idle
        with self._lock:
            if generation != self._generation or not self._loading:
                return
            self._loading = False
            snapshot = (self._suggestions, self._loading)
        self._notify(snapshot)

    def _publish(self, generation: int, suggestions: List[Suggestion]) -> None:
        with self._lock:
            if generation != self._generation:
                logger.debug("Discarding superseded autocomplete round")
                return
            self._suggestions = tuple(suggestions)
            self._loading = False
            snapshot = (self._suggestions, self._loading)
        logger.info("Published %d suggestions", len(snapshot[0]))
        self._notify(snapshot)
