"""Report generation API endpoints."""

import logging
import time
from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, status
from fastapi.responses import Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.metrics import get_metrics_collector
from backend.app.core.exceptions import ReportGenerationError, ReportNotFoundError, SessionNotFoundError
from backend.app.db.base import get_db
from backend.app.models.report import Report
from backend.app.models.session import IdeationSession
from backend.app.schemas.report import HTMLReport, ReportListItem, ReportListResponse, ReportRequest
from backend.app.services.metrics import MetricsCollector
from backend.app.services.pdf_generator import PDFGenerator
from backend.app.services.report_generator import ReportGenerator

router = APIRouter(prefix="/reports", tags=["reports"])
logger = logging.getLogger(__name__)

# Global generator instances
_report_generator: ReportGenerator | None = None
_pdf_generator: PDFGenerator | None = None


def get_report_generator() -> ReportGenerator:
    """Get or create report generator instance."""
    global _report_generator
    if _report_generator is None:
        _report_generator = ReportGenerator()
    return _report_generator


def get_pdf_generator() -> PDFGenerator:
    """Get or create PDF generator instance."""
    global _pdf_generator
    if _pdf_generator is None:
        _pdf_generator = PDFGenerator()
    return _pdf_generator


async def _get_report_or_404(report_id: UUID, db: AsyncSession) -> Report:
    report = await db.get(Report, str(report_id))
    if not report:
        raise ReportNotFoundError(str(report_id))
    return report


@router.post("/", response_model=HTMLReport, status_code=status.HTTP_201_CREATED)
async def create_report(
    report_request: ReportRequest,
    db: AsyncSession = Depends(get_db),
    collector: MetricsCollector = Depends(get_metrics_collector),
    generator: ReportGenerator = Depends(get_report_generator),
) -> HTMLReport:
    """
    Generate and store the business report for a session.

    Every attempt, successful or not, is timed into the metrics collector.
    """
    session = await db.get(IdeationSession, str(report_request.session_id))
    if not session:
        raise SessionNotFoundError(str(report_request.session_id))

    started = time.perf_counter()
    try:
        report = generator.generate(report_request)

        db.add(Report(
            id=report.id,
            session_id=session.id,
            idea_id=report.idea_id,
            title=report.title,
            data_quality_score=report.metrics.data_quality_score,
            generation_time_ms=int(round(report.generation_time)),
            content=report.model_dump(mode="json", by_alias=True),
            html_content=report.html_content,
        ))
        await db.commit()
    except Exception as e:
        collector.record((time.perf_counter() - started) * 1000, success=False)
        logger.exception(f"[REPORT] Failed to generate report for session {session.id}")
        raise ReportGenerationError("generate", e) from e

    collector.record((time.perf_counter() - started) * 1000, success=True)
    return report


@router.get("/", response_model=ReportListResponse)
async def list_reports(
    session_id: UUID | None = None,
    db: AsyncSession = Depends(get_db),
) -> ReportListResponse:
    """List stored reports newest first, optionally for one session."""
    query = select(Report)
    if session_id is not None:
        query = query.where(Report.session_id == str(session_id))
    query = query.order_by(Report.created_at.desc())

    result = await db.execute(query)
    return ReportListResponse(reports=[ReportListItem.model_validate(r) for r in result.scalars().all()])


@router.get("/{report_id}", response_model=HTMLReport)
async def get_report(
    report_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> HTMLReport:
    """Fetch a stored report."""
    report = await _get_report_or_404(report_id, db)
    return HTMLReport.model_validate(report.content)


@router.get("/{report_id}/export")
async def export_report(
    report_id: UUID,
    format: Literal["json", "pdf"] = "json",
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Download a stored report as JSON or PDF."""
    stored = await _get_report_or_404(report_id, db)
    report = HTMLReport.model_validate(stored.content)
    logger.info(f"[REPORT] Exporting report {report_id} as {format}")

    if format == "pdf":
        try:
            pdf_bytes = get_pdf_generator().report_to_pdf(report)
        except Exception as e:
            logger.exception(f"[PDF] Failed to render report {report_id}")
            raise ReportGenerationError("pdf export", e) from e
        return Response(
            content=pdf_bytes,
            media_type="application/pdf",
            headers={"Content-Disposition": f'attachment; filename="report_{report_id}.pdf"'},
        )

    return Response(
        content=report.model_dump_json(by_alias=True, indent=2),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="report_{report_id}.json"'},
    )
