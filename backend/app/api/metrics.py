"""Report generation performance endpoints."""

import logging

from fastapi import APIRouter, Depends, Request

from backend.app.services.metrics import MetricsCollector

router = APIRouter(prefix="/metrics", tags=["metrics"])
logger = logging.getLogger(__name__)


def get_metrics_collector(request: Request) -> MetricsCollector:
    """Collector created in the application lifespan."""
    return request.app.state.metrics


@router.get("/performance")
async def get_performance(collector: MetricsCollector = Depends(get_metrics_collector)) -> dict:
    """Current timing statistics and threshold checks."""
    snapshot = collector.snapshot()
    thresholds = collector.check_thresholds()
    return {
        **snapshot.model_dump(by_alias=True),
        **thresholds.model_dump(by_alias=True),
    }


@router.delete("/performance")
async def reset_performance(collector: MetricsCollector = Depends(get_metrics_collector)) -> dict:
    """Drop all collected samples."""
    logger.info(f"[METRICS] Resetting collector\n{collector.detailed_report()}")
    collector.reset()
    return {"message": "Performance metrics reset"}
