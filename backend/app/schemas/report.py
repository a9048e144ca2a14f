"""Report and report-metrics schemas.

Field names on the wire are camelCase and form the contract consumed by the
dashboard and export clients. Every monetary figure is a ``MonetaryValue``
carrying both the whole-yen amount and its ``¥1,234`` display string.
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import Field, field_validator, model_validator

from backend.app.schemas.common import CamelModel, Percentage
from backend.app.services.formatting import whole_yen, yen
from backend.app.services.grading import DifficultyLevel, SynergyGrade, grade_for_score

Trend = Literal["increasing", "stable", "decreasing"]
Rating = Literal["excellent", "good", "fair", "poor"]
SectionType = Literal["summary", "business_model", "market", "synergy", "validation"]


class MonetaryValue(CamelModel):
    """Whole-yen amount paired with its formatted display string."""

    value: int
    formatted: str
    label: str | None = None

    @model_validator(mode="after")
    def validate_formatted(self) -> "MonetaryValue":
        """Formatted string must be exactly what the currency formatter produces."""
        expected = yen.format(self.value)
        if self.formatted != expected:
            raise ValueError(f"formatted must be {expected!r} for value {self.value}")
        return self

    @classmethod
    def of(cls, value: int | float, label: str | None = None) -> "MonetaryValue":
        amount = whole_yen(value)
        return cls(value=amount, formatted=yen.format(amount), label=label)


# ---------------------------------------------------------------------------
# Business metrics
# ---------------------------------------------------------------------------


class GrowthRate(CamelModel):
    value: float
    formatted: str
    trend: Trend


class MarketSizeMetrics(CamelModel):
    tam: MonetaryValue
    pam: MonetaryValue
    sam: MonetaryValue
    growth_rate: GrowthRate


class RevenueProjection(CamelModel):
    year1: MonetaryValue
    year2: MonetaryValue
    year3: MonetaryValue


class RoiMetric(CamelModel):
    value: float
    formatted: str
    payback_period: int = Field(..., ge=0, description="Months")


class InvestmentRequired(CamelModel):
    initial: MonetaryValue
    total_3y: MonetaryValue = Field(..., alias="total3Y")


class FinancialMetrics(CamelModel):
    revenue_projection: RevenueProjection
    roi: RoiMetric
    investment_required: InvestmentRequired


class SynergyTotalScore(CamelModel):
    value: Percentage
    grade: SynergyGrade
    color: str

    @model_validator(mode="after")
    def validate_grade(self) -> "SynergyTotalScore":
        expected = grade_for_score(self.value)
        if self.grade != expected:
            raise ValueError(f"grade must be {expected} for score {self.value}")
        return self


class SynergyFactor(CamelModel):
    score: Percentage
    label: str
    description: str


class SynergyBreakdown(CamelModel):
    real_estate: SynergyFactor
    customer_base: SynergyFactor
    brand_value: SynergyFactor


class SynergyMetrics(CamelModel):
    total_score: SynergyTotalScore
    breakdown: SynergyBreakdown


class DifficultyMetric(CamelModel):
    level: DifficultyLevel
    score: int = Field(..., ge=1, le=10)
    factors: list[str]
    color: str


class TimeToMarket(CamelModel):
    value: int = Field(..., ge=0, description="Months")
    phase: Literal["immediate", "short", "medium", "long"]
    formatted: str


class RoleCount(CamelModel):
    role: str = Field(..., min_length=1)
    count: int = Field(..., ge=0)


class Personnel(CamelModel):
    total: int = Field(..., ge=0)
    by_role: list[RoleCount]


class BudgetLine(CamelModel):
    category: str
    amount: MonetaryValue
    percentage: Percentage


class Budget(CamelModel):
    total: MonetaryValue
    breakdown: list[BudgetLine]


class ResourceRequirement(CamelModel):
    personnel: Personnel
    budget: Budget


class ImplementationMetrics(CamelModel):
    difficulty: DifficultyMetric
    time_to_market: TimeToMarket
    resource_requirement: ResourceRequirement


class BusinessMetrics(CamelModel):
    market_size: MarketSizeMetrics
    financial: FinancialMetrics
    synergy: SynergyMetrics
    implementation: ImplementationMetrics


# ---------------------------------------------------------------------------
# Performance, competitive and summary metrics
# ---------------------------------------------------------------------------


class GenerationTimeBreakdown(CamelModel):
    data_integration: float = Field(..., ge=0)
    section_generation: float = Field(..., ge=0)
    html_rendering: float = Field(..., ge=0)
    database_write: float = Field(..., ge=0)


class GenerationTime(CamelModel):
    total: float = Field(..., ge=0, description="Milliseconds")
    breakdown: GenerationTimeBreakdown


class DataQuality(CamelModel):
    completeness: Percentage
    consistency: bool
    warnings: int = Field(..., ge=0)


class PerformanceMetrics(CamelModel):
    generation_time: GenerationTime
    data_quality: DataQuality
    cache_hit: bool = False
    parallel_execution: bool = False


class MarketPosition(CamelModel):
    rank: int = Field(..., ge=1)
    total_competitors: int = Field(..., ge=0)
    competitive_advantage: list[str]

    @model_validator(mode="after")
    def validate_rank(self) -> "MarketPosition":
        if self.rank > self.total_competitors + 1:
            raise ValueError("rank cannot exceed the number of competitors plus one")
        return self


class Differentiators(CamelModel):
    unique: list[str]
    shared: list[str]
    disadvantages: list[str]


class Benchmark(CamelModel):
    metric: str
    our_value: float | str
    industry_average: float | str
    top_performer: float | str


class CompetitiveMetrics(CamelModel):
    market_position: MarketPosition
    differentiators: Differentiators
    benchmarks: list[Benchmark]


class KeyMetric(CamelModel):
    label: str
    value: str | float
    unit: str | None = None
    trend: Literal["up", "down", "stable"] | None = None
    importance: Literal["critical", "high", "medium", "low"]


class StatusIndicators(CamelModel):
    feasibility: Rating
    market_opportunity: Rating
    synergy_fit: Rating
    overall_score: Percentage


class MetricsSummary(CamelModel):
    key_metrics: list[KeyMetric]
    status_indicators: StatusIndicators


# ---------------------------------------------------------------------------
# HTML report
# ---------------------------------------------------------------------------


class EstimatedRevenue(CamelModel):
    year1: MonetaryValue
    year3: MonetaryValue
    year5: MonetaryValue


class ReportSummary(CamelModel):
    executive: str
    target_market: str
    value_proposition: str
    estimated_revenue: EstimatedRevenue


class ValuePropositionBlock(CamelModel):
    core: str
    differentiators: list[str]


class Channels(CamelModel):
    primary: list[str]
    secondary: list[str]


class RevenueModelBlock(CamelModel):
    primary: str
    secondary: list[str]
    pricing: str


class CostStructure(CamelModel):
    fixed: MonetaryValue
    variable: MonetaryValue
    break_even_point: str


class BusinessModel(CamelModel):
    overview: str
    customer_segments: list[str]
    value_proposition: ValuePropositionBlock
    channels: Channels
    revenue_model: RevenueModelBlock
    cost_structure: CostStructure


class MarketSize(CamelModel):
    tam: MonetaryValue
    pam: MonetaryValue
    sam: MonetaryValue


class MarketAnalysis(CamelModel):
    market_size: MarketSize
    growth_rate: float = Field(..., ge=-100, le=1000)
    competitors: list[str]
    competitive_advantage: str
    trends: list[str]


class SynergyAnalysis(CamelModel):
    overall_score: Percentage
    grade: SynergyGrade
    opportunities: list[str]
    risks: list[str]
    strategic_fit: str
    recommendations: list[str]

    @model_validator(mode="after")
    def validate_grade(self) -> "SynergyAnalysis":
        expected = grade_for_score(self.overall_score)
        if self.grade != expected:
            raise ValueError(f"grade must be {expected} for score {self.overall_score}")
        return self


class ValidationPhase(CamelModel):
    phase: int = Field(..., ge=1)
    name: str = Field(..., min_length=1)
    duration: str
    objectives: list[str]
    budget: MonetaryValue
    success_criteria: list[str]


class ValidationPlan(CamelModel):
    phases: list[ValidationPhase] = Field(..., min_length=1)
    total_budget: MonetaryValue
    timeline: str

    @field_validator("phases")
    @classmethod
    def validate_phase_order(cls, phases: list[ValidationPhase]) -> list[ValidationPhase]:
        """Phases must be listed by strictly increasing phase number."""
        numbers = [p.phase for p in phases]
        if any(later <= earlier for earlier, later in zip(numbers, numbers[1:])):
            raise ValueError("phases must be ordered by strictly increasing phase number")
        return phases


class ReportSection(CamelModel):
    id: str
    type: SectionType
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    order: int = Field(..., ge=0, le=10)


class GenerationMetrics(CamelModel):
    completion_percentage: Percentage
    sections_generated: int = Field(..., ge=0)
    generation_time: float = Field(..., ge=0, description="Milliseconds")
    data_quality_score: Percentage


class HTMLReport(CamelModel):
    """Business report artifact produced at the end of a session."""

    id: str
    session_id: str
    idea_id: str
    title: str = Field(..., min_length=1, max_length=200)
    html_content: str = Field(..., min_length=1)
    summary: ReportSummary
    business_model: BusinessModel
    market_analysis: MarketAnalysis
    synergy: SynergyAnalysis
    validation_plan: ValidationPlan
    sections: list[ReportSection]
    metrics: GenerationMetrics
    business_metrics: BusinessMetrics
    metrics_summary: MetricsSummary
    competitive: CompetitiveMetrics
    performance: PerformanceMetrics
    generated_at: datetime
    generation_time: float = Field(..., ge=0, description="Milliseconds")

    @field_validator("sections")
    @classmethod
    def validate_section_order(cls, sections: list[ReportSection]) -> list[ReportSection]:
        orders = [s.order for s in sections]
        if any(later <= earlier for earlier, later in zip(orders, orders[1:])):
            raise ValueError("sections must be listed in increasing order")
        return sections


# ---------------------------------------------------------------------------
# Generation request / responses
# ---------------------------------------------------------------------------


class ReportIdeaInput(CamelModel):
    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    target_market: str = ""
    value_proposition: str = Field(..., min_length=1)
    revenue_model: str = ""
    pricing: str = ""
    estimated_revenue: int = Field(..., ge=0, strict=True, description="Annual revenue at maturity (JPY)")
    implementation_difficulty: DifficultyLevel = "medium"
    customer_segments: list[str] = Field(default_factory=list)
    differentiators: list[str] = Field(default_factory=list)
    channels: list[str] = Field(default_factory=list)


class MarketInput(CamelModel):
    tam: int = Field(..., ge=0, strict=True)
    pam: int = Field(..., ge=0, strict=True)
    sam: int = Field(..., ge=0, strict=True)
    growth_rate: float = Field(..., ge=-100, le=1000, strict=True)
    competitors: list[str] = Field(default_factory=list)
    trends: list[str] = Field(default_factory=list)
    competitive_advantage: str = ""
    shared_features: list[str] = Field(default_factory=list)
    disadvantages: list[str] = Field(default_factory=list)
    market_rank: int | None = Field(default=None, ge=1, strict=True, description="Entry rank; last place when omitted")
    benchmarks: list[Benchmark] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_rank(self) -> "MarketInput":
        if self.market_rank is not None and self.market_rank > len(self.competitors) + 1:
            raise ValueError("marketRank cannot exceed the number of competitors plus one")
        return self


class SynergyBreakdownInput(CamelModel):
    real_estate: Percentage
    customer_base: Percentage
    brand_value: Percentage


class StrategicAlignmentInput(CamelModel):
    synergy_score: Percentage
    breakdown: SynergyBreakdownInput | None = None
    opportunities: list[str] = Field(default_factory=list)
    risks: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    strategic_fit: str = ""


class ValidationPhaseInput(CamelModel):
    name: str = Field(..., min_length=1)
    duration_months: int = Field(..., ge=1, le=36, strict=True)
    objectives: list[str] = Field(default_factory=list)
    budget: int = Field(..., ge=0, strict=True)
    success_criteria: list[str] = Field(default_factory=list)


class ReportRequest(CamelModel):
    """Analyst output handed to the report generator."""

    session_id: UUID
    business_idea: ReportIdeaInput
    market_analysis: MarketInput
    strategic_alignment: StrategicAlignmentInput
    validation_phases: list[ValidationPhaseInput] | None = Field(default=None, min_length=1, max_length=5)
    personnel: list[RoleCount] = Field(default_factory=list)


class ReportListItem(CamelModel):
    id: str
    session_id: str
    idea_id: str
    title: str
    data_quality_score: float
    generation_time_ms: int
    created_at: datetime

    model_config = {"from_attributes": True}


class ReportListResponse(CamelModel):
    reports: list[ReportListItem]
