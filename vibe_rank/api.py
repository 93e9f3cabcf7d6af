from __future__ import annotations

"""
FastAPI surface for the gallery ranking engine.

One GalleryController per process holds the current query, the active
concept axes and the displayed ordering. Nothing is persisted; a restart
starts from an empty gallery.
"""

import sys
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from .config import (
    LOG_DIR,
    LOG_LEVEL,
    LOG_TO_FILE,
    AddAxisRequest,
    AxisPositionRequest,
    AxisView,
    GalleryView,
    HealthResponse,
    QueryRequest,
)
from .constants import CATEGORIES
from .controller import GalleryController

app = FastAPI(title="vibe-rank", version="1.0.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

_controller: Optional[GalleryController] = None


def get_controller() -> GalleryController:
    global _controller
    if _controller is None:
        _controller = GalleryController()
    return _controller


def configure_logging() -> None:
    logger.remove()
    logger.add(sys.stderr, level=LOG_LEVEL)
    if LOG_TO_FILE:
        LOG_DIR.mkdir(exist_ok=True)
        logger.add(LOG_DIR / "vibe_rank.log", level=LOG_LEVEL, rotation="10 MB", retention=5)


def gallery_view(controller: GalleryController) -> GalleryView:
    return GalleryView(
        query=controller.query,
        category=controller.category,
        axes=[controller.axis_view(a) for a in controller.axis_ids],
        items=controller.visible_items,
        total=len(controller.ordered_items),
        revealed=controller.revealed,
    )


@app.on_event("startup")
def startup_event() -> None:
    configure_logging()
    controller = get_controller()
    logger.info(
        "Gallery ready (retrieval={}, concepts={})",
        type(controller.retrieval).__name__,
        type(controller.concepts).__name__,
    )


@app.on_event("shutdown")
async def shutdown_event() -> None:
    if _controller is not None:
        await _controller.aclose()


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="healthy")


@app.post("/query", response_model=GalleryView)
async def set_query(req: QueryRequest) -> GalleryView:
    category = (req.category or "all").strip().lower()
    if category not in CATEGORIES:
        raise HTTPException(status_code=422, detail=f"Unknown category '{req.category}'")
    controller = get_controller()
    await controller.set_query(req.query, category)
    return gallery_view(controller)


@app.post("/axes", response_model=AxisView)
async def add_axis(req: AddAxisRequest) -> AxisView:
    controller = get_controller()
    try:
        axis_id = await controller.add_axis(req.concept)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    try:
        return controller.axis_view(axis_id)
    except KeyError:
        # removed while its candidates were still loading
        raise HTTPException(status_code=404, detail=f"Axis '{axis_id}' was removed")


@app.put("/axes/{axis_id}/position", response_model=AxisView)
def set_axis_position(axis_id: str, req: AxisPositionRequest) -> AxisView:
    controller = get_controller()
    try:
        controller.set_axis_position(axis_id, req.position)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown axis '{axis_id}'")
    return controller.axis_view(axis_id)


@app.delete("/axes/{axis_id}", response_model=GalleryView)
def remove_axis(axis_id: str) -> GalleryView:
    controller = get_controller()
    try:
        controller.remove_axis(axis_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown axis '{axis_id}'")
    return gallery_view(controller)


@app.get("/items", response_model=GalleryView)
def items() -> GalleryView:
    return gallery_view(get_controller())


@app.post("/items/reveal", response_model=GalleryView)
def reveal_more() -> GalleryView:
    controller = get_controller()
    controller.reveal_more()
    return gallery_view(controller)
