"""
View state controller for the catalogue.

``ViewStateController`` owns the fetched records, the active filter
text and the current page index. The visible slice is always derived
from those three values (see ``store``), so the controller never keeps
a filtered copy around.

Two pagination strategies share the same controller:

* ``PaginationMode.CURSOR``: the API paginates. Each load fetches the
  page at the current cursor; moving past the last local page follows
  the ``next``/``previous`` cursors returned by the API.
* ``PaginationMode.CLIENT``: the whole collection is fetched once and
  then filtered and paged locally.

Loads are tagged with a generation number. When two loads overlap,
only the most recently started one is allowed to update the state; a
superseded load is dropped when it resolves.
"""

from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Tuple

from . import store
from .pokeapi_service import FetchFailure
from .schemas import Record, ResultPage, ViewSnapshot


logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

DEFAULT_PAGE_SIZE = 20


class PaginationMode(str, enum.Enum):
    CURSOR = "cursor"
    CLIENT = "client"


class RecordFetcher(Protocol):
    def load_cursor_page(self, url: str) -> Tuple[ResultPage, List[Record]]: ...

    def fetch_collection(self, limit: int) -> List[Record]: ...


@dataclass
class ViewState:
    all_records: List[Record] = field(default_factory=list)
    filter_text: str = ""
    page_index: int = 1
    loading: bool = False
    error: Optional[str] = None
    # Cursor mode only.
    current_url: Optional[str] = None
    next_url: Optional[str] = None
    previous_url: Optional[str] = None


class ViewStateController:
    def __init__(
        self,
        fetcher: RecordFetcher,
        mode: PaginationMode = PaginationMode.CURSOR,
        page_size: int = DEFAULT_PAGE_SIZE,
        start_url: Optional[str] = None,
        fetch_limit: int = 151,
    ):
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        if PaginationMode(mode) is PaginationMode.CURSOR and not start_url:
            raise ValueError("cursor mode needs a start_url")
        self.fetcher = fetcher
        self.mode = PaginationMode(mode)
        self.page_size = page_size
        self.fetch_limit = fetch_limit
        self.state = ViewState(current_url=start_url)
        self._generation = 0
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Derivations

    def _filtered(self) -> List[Record]:
        return store.filter_records(self.state.all_records, self.state.filter_text)

    def max_pages(self) -> int:
        return store.page_count(len(self._filtered()), self.page_size)

    def compute_visible_slice(self) -> List[Record]:
        """Records shown on the current page, after filtering."""
        return store.slice_page(self._filtered(), self.state.page_index, self.page_size)

    @property
    def has_next(self) -> bool:
        if self.state.page_index < self.max_pages():
            return True
        return self.mode is PaginationMode.CURSOR and bool(self.state.next_url)

    @property
    def has_previous(self) -> bool:
        if self.state.page_index > 1:
            return True
        return self.mode is PaginationMode.CURSOR and bool(self.state.previous_url)

    def snapshot(self, title: str = "Pokédex") -> ViewSnapshot:
        with self._lock:
            filtered = self._filtered()
            page = self.state.page_index
            return ViewSnapshot(
                title=title,
                mode=self.mode.value,
                loading=self.state.loading,
                error=self.state.error,
                filter_text=self.state.filter_text,
                page=page,
                page_size=self.page_size,
                total_pages=store.page_count(len(filtered), self.page_size),
                total=len(filtered),
                has_previous=self.has_previous,
                has_next=self.has_next,
                cards=[store.to_card(r) for r in store.slice_page(filtered, page, self.page_size)],
            )

    # ------------------------------------------------------------------
    # User input

    def set_filter(self, text: Optional[str]) -> None:
        with self._lock:
            self.state.filter_text = text or ""
            self.state.page_index = 1

    def go_to_next_page(self) -> bool:
        """Advance one page. Returns ``False`` when a cursor load failed."""
        with self._lock:
            if self.state.page_index < self.max_pages():
                self.state.page_index += 1
                return True
            if self.mode is not PaginationMode.CURSOR or not self.state.next_url:
                return True
            target = self.state.next_url
        return self._load(cursor=target)

    def go_to_prev_page(self) -> bool:
        """Go back one page. Returns ``False`` when a cursor load failed."""
        with self._lock:
            if self.state.page_index > 1:
                self.state.page_index -= 1
                return True
            if self.mode is not PaginationMode.CURSOR or not self.state.previous_url:
                return True
            target = self.state.previous_url
        return self._load(cursor=target)

    # ------------------------------------------------------------------
    # Loading

    def load_records(self) -> bool:
        """Fetch records for the current mode and replace the result set.

        Returns ``True`` when the records were replaced. On failure the
        previous records and cursors are kept, ``state.error`` holds the
        message and ``False`` is returned. A load that was overtaken by
        a newer one also returns ``False`` without touching the state.
        """
        return self._load()

    def _load(self, cursor: Optional[str] = None) -> bool:
        # ``cursor`` only becomes the current URL once its page has loaded,
        # so a failed move leaves the state describing what is on display.
        with self._lock:
            self._generation += 1
            generation = self._generation
            self.state.loading = True
            url = cursor or self.state.current_url

        try:
            try:
                if self.mode is PaginationMode.CURSOR:
                    page, records = self.fetcher.load_cursor_page(url)
                else:
                    page, records = None, self.fetcher.fetch_collection(self.fetch_limit)
            except Exception as exc:
                if isinstance(exc, FetchFailure):
                    logger.error("error loading records: %s", exc)
                else:
                    logger.exception("unexpected error loading records")
                with self._lock:
                    if generation != self._generation:
                        logger.info("Dropping failure of superseded load %d", generation)
                        return False
                    self.state.error = str(exc) or type(exc).__name__
                return False

            with self._lock:
                if generation != self._generation:
                    logger.info("Dropping result of superseded load %d", generation)
                    return False
                self.state.all_records = list(records)
                if page is not None:
                    self.state.current_url = url
                    self.state.next_url = page.next
                    self.state.previous_url = page.previous
                if cursor is not None:
                    self.state.page_index = 1
                self.state.page_index = store.clamp_page(
                    self.state.page_index, len(self._filtered()), self.page_size
                )
                self.state.error = None
        finally:
            # Only the newest load owns the loading flag.
            with self._lock:
                if generation == self._generation:
                    self.state.loading = False
        logger.info("Showing %d records (%s mode)", len(records), self.mode.value)
        return True
