"""
Pure helpers that derive the visible part of the catalogue.

Nothing in this module holds state: the controller passes in the full
record list, the filter text and the page index, and gets back the
filtered list, the page count or the slice to display. Keeping these
as plain functions means they can be tested without any fetcher or
web layer.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from .schemas import Card, Record


def _norm(s: Optional[str]) -> str:
    """Normalize a string for case-insensitive comparison.

    Parameters
    ----------
    s : Optional[str]
        The string to normalize.

    Returns
    -------
    str
        The lowercased string. An empty string is returned when the
        input is ``None`` or empty.
    """
    return (s or "").lower()


def filter_records(records: Sequence[Record], text: Optional[str]) -> List[Record]:
    """Return the records whose name contains ``text``.

    Matching is a case-insensitive substring test on the record name.
    The original order is preserved. An empty or ``None`` filter
    matches every record.

    Parameters
    ----------
    records : Sequence[Record]
        The full, ordered record list.
    text : Optional[str]
        The filter text typed by the user.

    Returns
    -------
    List[Record]
        A new list holding the matching records.
    """
    nq = _norm(text)
    if not nq:
        return list(records)
    return [r for r in records if nq in _norm(r.name)]


def page_count(total: int, page_size: int) -> int:
    """Number of pages needed for ``total`` items, never less than 1."""
    if total <= 0:
        return 1
    return (total + page_size - 1) // page_size


def clamp_page(page: int, total: int, page_size: int) -> int:
    return min(max(1, page), page_count(total, page_size))


def slice_page(items: Sequence[Record], page: int, page_size: int) -> List[Record]:
    """Return the contiguous window for a 1-indexed ``page``."""
    start = (page - 1) * page_size
    end = start + page_size
    return list(items[start:end])


def to_card(record: Record) -> Card:
    return Card(
        id=record.id,
        name=record.display_name,
        label=record.label,
        image_url=record.image_url,
    )
