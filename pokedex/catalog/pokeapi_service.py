"""
PokéAPI integration for the catalogue.  This module is the only place
that talks to the network.  It exposes:

* ``fetch_page()``: fetch one page of a list endpoint, including the
  ``next``/``previous`` cursors.

* ``fetch_record()``: resolve a single record URL into a ``Record``.

* ``resolve_records()``: resolve a batch of references concurrently.
  The batch is all-or-nothing: one failed resolution fails the batch.

* ``PokeApiFetcher``: the object the view controller depends on.  It
  binds the functions above to a base URL, timeout and worker count.

Every failure (network error, timeout, non-200 status, bad JSON or a
payload that does not look like a PokéAPI resource) is raised as
``FetchFailure``.  Nothing here retries or caches.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from concurrent.futures import ThreadPoolExecutor
from typing import List, Sequence, Tuple

from pydantic import ValidationError

from ..config import Settings
from .schemas import Record, RecordRef, ResultPage


logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

DEFAULT_TIMEOUT = 10.0


class FetchFailure(Exception):
    """Raised when a record or page could not be fetched."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


def _http_get_json(url: str, timeout: float = DEFAULT_TIMEOUT) -> dict:
    """Perform an HTTP GET and return the parsed JSON object.

    Raises ``FetchFailure`` on any problem: a malformed URL, a transport
    error, a non-200 status or a body that is not a JSON object.
    """
    try:
        request = urllib.request.Request(
            url,
            headers={
                'User-Agent': 'pokedex-viewer/0.1 (+https://pokeapi.co)',
                'Accept': 'application/json',
            },
        )
        with urllib.request.urlopen(request, timeout=timeout) as response:
            if response.status != 200:
                logger.warning(
                    "PokéAPI request to %s returned status %s", url, response.status
                )
                raise FetchFailure(url, f"status {response.status}")
            data = response.read().decode('utf-8', errors='replace')
    except FetchFailure:
        raise
    except urllib.error.HTTPError as exc:
        logger.warning("PokéAPI request to %s returned status %s", url, exc.code)
        raise FetchFailure(url, f"status {exc.code}") from exc
    except Exception as exc:
        logger.error("Error fetching %s: %s", url, exc)
        raise FetchFailure(url, str(exc) or type(exc).__name__) from exc
    try:
        payload = json.loads(data)
    except ValueError as exc:
        raise FetchFailure(url, "response is not valid JSON") from exc
    if not isinstance(payload, dict):
        raise FetchFailure(url, "expected a JSON object")
    return payload


def fetch_page(url: str, timeout: float = DEFAULT_TIMEOUT) -> ResultPage:
    """Fetch one page of a list endpoint."""
    data = _http_get_json(url, timeout=timeout)
    if 'results' not in data:
        raise FetchFailure(url, "payload has no 'results'")
    try:
        return ResultPage.model_validate(data)
    except ValidationError as exc:
        raise FetchFailure(url, f"malformed page: {exc.error_count()} errors") from exc


def fetch_record(url: str, timeout: float = DEFAULT_TIMEOUT) -> Record:
    """Resolve one record URL into a ``Record``.

    Only ``id``, ``name`` and ``sprites.front_default`` are kept; the
    sprite may be ``null`` for some forms, in which case the image URL
    is left empty.
    """
    data = _http_get_json(url, timeout=timeout)
    sprites = data.get('sprites')
    image_url = ''
    if isinstance(sprites, dict) and isinstance(sprites.get('front_default'), str):
        image_url = sprites['front_default']
    try:
        return Record(id=data.get('id'), name=data.get('name'), image_url=image_url)
    except ValidationError as exc:
        raise FetchFailure(url, f"malformed record: {exc.error_count()} errors") from exc


def resolve_records(
    refs: Sequence[RecordRef],
    timeout: float = DEFAULT_TIMEOUT,
    max_workers: int = 8,
) -> List[Record]:
    """Resolve every reference into a full record, preserving order.

    Resolutions run concurrently.  If any of them fails, its
    ``FetchFailure`` propagates and no partial result is returned.
    """
    if not refs:
        return []
    workers = max(1, min(max_workers, len(refs)))
    with ThreadPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(lambda ref: fetch_record(ref.url, timeout=timeout), refs))


def collection_url(base_url: str, limit: int) -> str:
    return f"{base_url}?{urllib.parse.urlencode({'limit': max(1, int(limit))})}"


class PokeApiFetcher:
    """Record fetcher used by the view controller."""

    def __init__(
        self,
        base_url: str = "https://pokeapi.co/api/v2/pokemon",
        timeout: float = DEFAULT_TIMEOUT,
        max_workers: int = 8,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.max_workers = max_workers

    @classmethod
    def from_settings(cls, settings: Settings) -> "PokeApiFetcher":
        return cls(
            base_url=settings.collection_url,
            timeout=settings.timeout,
            max_workers=settings.max_workers,
        )

    def page_url(self, limit: int) -> str:
        """URL of the first page of the collection."""
        return collection_url(self.base_url, limit)

    def load_cursor_page(self, url: str) -> Tuple[ResultPage, List[Record]]:
        """Fetch the page at ``url`` and resolve all of its records."""
        page = fetch_page(url, timeout=self.timeout)
        records = resolve_records(page.results, timeout=self.timeout, max_workers=self.max_workers)
        logger.info("Loaded %d records from %s", len(records), url)
        return page, records

    def fetch_collection(self, limit: int) -> List[Record]:
        """Fetch the first ``limit`` records of the collection in full."""
        url = collection_url(self.base_url, limit)
        page = fetch_page(url, timeout=self.timeout)
        records = resolve_records(page.results, timeout=self.timeout, max_workers=self.max_workers)
        logger.info("Loaded %d records from %s", len(records), url)
        return records
