"""
Review dashboard API.

- GET  /v1/health
- GET  /v1/items                      list items (optionally auto-analyze)
- GET  /v1/items/{item_id}            one item with its moderation state
- POST /v1/items/{item_id}/analysis   run analysis again
- GET  /v1/items/{item_id}/flags      review panel flags
- POST /v1/items/{item_id}/decision   accept / reject / escalate
"""
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from modreview.analysis.controller import AnalysisController
from modreview.analysis.store import get_store
from modreview.api.schemas import (
    ContentItemDTO,
    ContentItemListResponse,
    DecisionRequest,
    FlagDTO,
    HealthResponse,
)
from modreview.core.config import settings
from modreview.core.logging import get_logger
from modreview.db.connection import get_db
from modreview.db.repository import ContentItemRepository
from modreview.items.models import ContentItem, Priority
from modreview.moderation.flags import build_flags
from modreview.moderation.result import ModerationStatus
from modreview.providers.http import create_function_adapters

logger = get_logger("api.routes")

router = APIRouter(prefix="/v1", tags=["moderation"])

# Global controller instance
_controller: Optional[AnalysisController] = None


def get_controller() -> AnalysisController:
    """Get or create the analysis controller."""
    global _controller
    if _controller is None:
        _controller = AnalysisController(create_function_adapters(), get_store())
    return _controller


async def shutdown_controller() -> None:
    """Close provider adapter clients if the controller was created."""
    global _controller
    if _controller is None:
        return
    for adapter in _controller.adapters:
        await adapter.close()
    _controller = None


async def _load_item(item_id: str, db: Session, controller: AnalysisController) -> ContentItem:
    record = ContentItemRepository(db).get(item_id)
    if not record:
        raise HTTPException(404, f"Content item {item_id} not found")
    item = record.to_item()
    await controller.refresh(item)
    return item


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=settings.version,
        providers=list(settings.enabled_providers),
    )


@router.get("/items", response_model=ContentItemListResponse)
async def list_items(
    background_tasks: BackgroundTasks,
    auto_analyze: bool = Query(True),
    priority: Optional[Priority] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    controller: AnalysisController = Depends(get_controller),
):
    """
    List content items with their moderation state.

    With ``auto_analyze`` set, PENDING items that have a source locator are
    analyzed in the background. Nothing else is re-analyzed.
    """
    records = ContentItemRepository(db).list(skip=skip, limit=limit, priority=priority)
    items = [record.to_item() for record in records]
    for item in items:
        await controller.refresh(item)

    dispatched = 0
    if auto_analyze:
        eligible = [item for item in items if controller.should_auto_analyze(item)]
        dispatched = len(eligible)
        if eligible:
            logger.info(f"Dispatching background analysis for {dispatched} item(s)")
            background_tasks.add_task(controller.auto_analyze, eligible)

    return ContentItemListResponse(
        items=[ContentItemDTO.from_item(item) for item in items],
        total=len(items),
        analysis_dispatched=dispatched,
    )


@router.get("/items/{item_id}", response_model=ContentItemDTO)
async def get_item(
    item_id: str,
    db: Session = Depends(get_db),
    controller: AnalysisController = Depends(get_controller),
):
    item = await _load_item(item_id, db, controller)
    return ContentItemDTO.from_item(item)


@router.post("/items/{item_id}/analysis", response_model=ContentItemDTO)
async def run_analysis(
    item_id: str,
    db: Session = Depends(get_db),
    controller: AnalysisController = Depends(get_controller),
):
    """
    Run analysis again for an item.

    Allowed from any state except ANALYZING; the previous result is
    discarded when the new run starts.
    """
    item = await _load_item(item_id, db, controller)
    if item.moderation.status == ModerationStatus.ANALYZING:
        raise HTTPException(409, f"Analysis already in progress for item {item_id}")

    await controller.reanalyze(item)
    return ContentItemDTO.from_item(item)


@router.get("/items/{item_id}/flags", response_model=List[FlagDTO])
async def get_item_flags(
    item_id: str,
    db: Session = Depends(get_db),
    controller: AnalysisController = Depends(get_controller),
):
    """Flags shown in the review panel for an item."""
    item = await _load_item(item_id, db, controller)
    return [FlagDTO.from_flag(flag) for flag in build_flags(item.moderation)]


@router.post("/items/{item_id}/decision", response_model=ContentItemDTO)
async def record_decision(
    item_id: str,
    request: DecisionRequest,
    db: Session = Depends(get_db),
    controller: AnalysisController = Depends(get_controller),
):
    """Record a reviewer decision for an item."""
    item = await _load_item(item_id, db, controller)
    item.apply_decision(request.decision)

    ContentItemRepository(db).update(
        item_id,
        status=item.status,
        priority=item.priority,
        escalated=item.escalated,
    )
    logger.info(f"Item {item_id}: reviewer decision '{request.decision.value}' -> {item.status.value}")
    return ContentItemDTO.from_item(item)
