"""Test doubles and record factories shared by the test modules."""

from typing import Dict, List, Optional, Tuple

from pokedex.catalog.pokeapi_service import FetchFailure
from pokedex.catalog.schemas import Record, RecordRef, ResultPage


BASE = "https://pokeapi.co/api/v2/pokemon"


def make_records(count: int, start: int = 1) -> List[Record]:
    return [
        Record(id=i, name=f"mon{i:03d}", image_url=f"https://img.test/{i}.png")
        for i in range(start, start + count)
    ]


def page_of(records: List[Record], next_url=None, previous_url=None) -> ResultPage:
    return ResultPage(
        results=[RecordRef(name=r.name, url=f"{BASE}/{r.id}/") for r in records],
        next=next_url,
        previous=previous_url,
        count=len(records),
    )


class FakeFetcher:
    """Serves canned pages and collections; ``fail`` makes every call raise."""

    def __init__(
        self,
        pages: Optional[Dict[str, Tuple[ResultPage, List[Record]]]] = None,
        collection: Optional[List[Record]] = None,
    ):
        self.pages = pages or {}
        self.collection = collection or []
        self.fail = False
        self.calls: List[str] = []

    def load_cursor_page(self, url: str) -> Tuple[ResultPage, List[Record]]:
        self.calls.append(url)
        if self.fail or url not in self.pages:
            raise FetchFailure(url, "boom")
        return self.pages[url]

    def fetch_collection(self, limit: int) -> List[Record]:
        self.calls.append(f"collection:{limit}")
        if self.fail:
            raise FetchFailure(f"{BASE}?limit={limit}", "boom")
        return list(self.collection[:limit])
