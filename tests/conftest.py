"""Shared fixtures built on the helpers module."""

import pytest

from .helpers import BASE, FakeFetcher, make_records, page_of


@pytest.fixture
def records_25():
    return make_records(25)


@pytest.fixture
def cursor_fetcher():
    """Three server pages of 20, 20 and 5 records linked by cursors."""
    p1, p2, p3 = f"{BASE}?limit=20", f"{BASE}?offset=20&limit=20", f"{BASE}?offset=40&limit=20"
    r1, r2, r3 = make_records(20, 1), make_records(20, 21), make_records(5, 41)
    return FakeFetcher(
        pages={
            p1: (page_of(r1, next_url=p2), r1),
            p2: (page_of(r2, next_url=p3, previous_url=p1), r2),
            p3: (page_of(r3, previous_url=p2), r3),
        }
    )
