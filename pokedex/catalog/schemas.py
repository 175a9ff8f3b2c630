"""
Pydantic schema definitions for the catalog module.

The ``Record`` model captures the minimal fields required to render a
catalogue card: identifier, name and sprite URL. ``ResultPage`` mirrors
a PokéAPI list endpoint (one page of references plus the cursors to the
neighbouring pages). ``ViewSnapshot`` bundles the visible cards with
pagination metadata so that clients know which controls to show.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Record(BaseModel):
    """A single catalogue entry.

    Records are immutable once fetched. ``image_url`` is an empty
    string when the API has no sprite for the entry.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    image_url: str = ""

    @property
    def display_name(self) -> str:
        return self.name[:1].upper() + self.name[1:]

    @property
    def label(self) -> str:
        return f"#{self.id}"


class RecordRef(BaseModel):
    """A reference to a record as listed by a collection endpoint."""

    name: str
    url: str


class ResultPage(BaseModel):
    """One page of a list endpoint with its next/previous cursors."""

    results: List[RecordRef] = Field(default_factory=list)
    next: Optional[str] = None
    previous: Optional[str] = None
    count: int = 0


class Card(BaseModel):
    id: int
    name: str
    label: str
    image_url: str = ""


class FilterRequest(BaseModel):
    text: str = ""


class ViewSnapshot(BaseModel):
    """Everything the presentation layer needs to render one view."""

    title: str
    mode: str
    loading: bool
    error: Optional[str] = None
    filter_text: str = ""
    page: int
    page_size: int
    total_pages: int
    # Count of records matching the filter, before slicing.
    total: int
    has_previous: bool
    has_next: bool
    cards: List[Card] = Field(default_factory=list)
