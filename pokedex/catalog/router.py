"""
Route definitions for the catalogue API.

Endpoints under /api/catalog:
- GET  /view      : current view (cards + pagination controls)
- PUT  /filter    : replace the filter text, back to page 1
- POST /next      : next page (follows the API cursor when needed)
- POST /previous  : previous page
- POST /reload    : fetch the records again

Every endpoint answers with a ``ViewSnapshot``. A failed fetch is part
of the view (``error`` is set, ``loading`` is false), not an HTTP error.
"""

from __future__ import annotations

import threading
from typing import Optional

from fastapi import APIRouter, Depends

from ..config import Settings, get_settings
from .controller import PaginationMode, ViewStateController
from .pokeapi_service import PokeApiFetcher
from .schemas import FilterRequest, ViewSnapshot


router = APIRouter(prefix="/api/catalog", tags=["catalog"])

# One controller per process, created lazily from the settings.
_controller: Optional[ViewStateController] = None
_controller_lock = threading.Lock()


def build_controller(settings: Settings) -> ViewStateController:
    fetcher = PokeApiFetcher.from_settings(settings)
    return ViewStateController(
        fetcher,
        mode=PaginationMode(settings.mode),
        page_size=settings.page_size,
        start_url=fetcher.page_url(settings.page_size),
        fetch_limit=settings.fetch_limit,
    )


def get_controller() -> ViewStateController:
    global _controller
    with _controller_lock:
        if _controller is None:
            _controller = build_controller(get_settings())
        return _controller


def get_title() -> str:
    return get_settings().title


@router.get("/view", response_model=ViewSnapshot)
def view(
    controller: ViewStateController = Depends(get_controller),
    title: str = Depends(get_title),
) -> ViewSnapshot:
    return controller.snapshot(title)


@router.put("/filter", response_model=ViewSnapshot)
def set_filter(
    req: FilterRequest,
    controller: ViewStateController = Depends(get_controller),
    title: str = Depends(get_title),
) -> ViewSnapshot:
    controller.set_filter(req.text)
    return controller.snapshot(title)


@router.post("/next", response_model=ViewSnapshot)
def next_page(
    controller: ViewStateController = Depends(get_controller),
    title: str = Depends(get_title),
) -> ViewSnapshot:
    controller.go_to_next_page()
    return controller.snapshot(title)


@router.post("/previous", response_model=ViewSnapshot)
def previous_page(
    controller: ViewStateController = Depends(get_controller),
    title: str = Depends(get_title),
) -> ViewSnapshot:
    controller.go_to_prev_page()
    return controller.snapshot(title)


@router.post("/reload", response_model=ViewSnapshot)
def reload(
    controller: ViewStateController = Depends(get_controller),
    title: str = Depends(get_title),
) -> ViewSnapshot:
    controller.load_records()
    return controller.snapshot(title)
