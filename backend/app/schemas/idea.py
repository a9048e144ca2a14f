"""Business idea schemas for the ideator validation endpoint."""

from typing import Annotated, Literal

from pydantic import Field

from backend.app.schemas.common import CamelModel

ImplementationDifficulty = Literal["low", "medium", "high"]
IssueSeverity = Literal["error", "warning", "info"]

NonEmptyStr = Annotated[str, Field(min_length=1)]


class BusinessIdea(CamelModel):
    """Idea produced by the ideator agent."""

    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=30)
    description: str = Field(..., min_length=10, max_length=500)
    target_customers: list[NonEmptyStr] = Field(..., min_length=1)
    customer_pains: list[NonEmptyStr] = Field(..., min_length=1)
    value_proposition: str = Field(..., min_length=10)
    revenue_model: str = Field(..., min_length=10)
    estimated_revenue: float = Field(..., ge=0, strict=True, description="Estimated operating profit (JPY)")
    implementation_difficulty: ImplementationDifficulty
    market_opportunity: str = Field(..., min_length=10)


class IdeaValidateRequest(CamelModel):
    """Body of POST /api/agents/ideator/validate."""

    idea: BusinessIdea
    analyze_strengths_and_weaknesses: bool | None = Field(default=None, strict=True)


class ValidationIssue(CamelModel):
    field: str
    message: str
    severity: IssueSeverity


class IdeaValidationResult(CamelModel):
    is_valid: bool
    issues: list[ValidationIssue]
    quality_score: float = Field(..., ge=0, le=100)
    idea_id: str


class IdeaAnalysis(CamelModel):
    strengths: list[str]
    weaknesses: list[str]
    validation_result: IdeaValidationResult
    suggestions: list[str]
