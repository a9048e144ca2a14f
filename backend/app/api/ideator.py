"""Ideator agent endpoints."""

import json
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from backend.app.schemas.idea import IdeaValidateRequest
from backend.app.schemas.validation import FieldError, errors_from_exception
from backend.app.services.idea_quality import IdeaQualityValidator

router = APIRouter(prefix="/agents/ideator", tags=["ideator"])
logger = logging.getLogger(__name__)

validator = IdeaQualityValidator()


def _bad_request(details: list[FieldError]) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Invalid request parameters",
            "details": [detail.model_dump() for detail in details],
        },
    )


@router.post("/validate")
async def validate_idea(request: Request) -> JSONResponse:
    """
    Validate a business idea and optionally analyse it.

    Body: ``{"idea": BusinessIdea, "analyzeStrengthsAndWeaknesses": bool?}``.
    Schema violations return 400 with every failing field; the analysis is
    only computed when the flag is true.
    """
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _bad_request([
            FieldError(field="body", message="Request body is not valid JSON", type="json_invalid"),
        ])

    try:
        payload = IdeaValidateRequest.model_validate(body)
    except ValidationError as e:
        return _bad_request(errors_from_exception(e))

    try:
        validation = validator.validate(payload.idea)
        analysis = validator.analyze(payload.idea) if payload.analyze_strengths_and_weaknesses else None
    except Exception as e:
        logger.exception(f"[IDEATOR] Failed to validate idea {payload.idea.id}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to validate idea", "details": str(e)},
        )

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "success": True,
            "data": {
                "validation": validation.model_dump(by_alias=True),
                "analysis": analysis.model_dump(by_alias=True) if analysis else None,
            },
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )
