# pokedex/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool

from .catalog import catalog_router
from .catalog.router import get_controller


logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initial fetch, as when the page is first mounted.
    controller = app.dependency_overrides.get(get_controller, get_controller)()
    if not await run_in_threadpool(controller.load_records):
        logger.warning("Initial load failed; starting with an empty catalogue")
    yield


app = FastAPI(
    title="Pokédex",
    description=(
        "Catalogue viewer over the public PokéAPI: paginated cards "
        "with a text filter on the Pokémon name."
    ),
    version="1.0.0",
    lifespan=lifespan,
)
app.include_router(catalog_router)


# 🔹 Basic route for a quick liveness check
@app.get("/")
def health_check():
    return {"status": "ok", "message": "Pokédex live 🚀"}
