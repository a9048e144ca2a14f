"""Business report assembly from analyst output."""

import html
import logging
import time
import uuid
from datetime import datetime, timezone

from backend.app.schemas.report import (
    Budget,
    BudgetLine,
    BusinessMetrics,
    BusinessModel,
    Channels,
    CompetitiveMetrics,
    CostStructure,
    DataQuality,
    Differentiators,
    DifficultyMetric,
    EstimatedRevenue,
    FinancialMetrics,
    GenerationMetrics,
    GenerationTime,
    GenerationTimeBreakdown,
    GrowthRate,
    HTMLReport,
    ImplementationMetrics,
    InvestmentRequired,
    KeyMetric,
    MarketAnalysis,
    MarketPosition,
    MarketSize,
    MarketSizeMetrics,
    MetricsSummary,
    MonetaryValue,
    PerformanceMetrics,
    Personnel,
    ReportRequest,
    ReportSection,
    ReportSummary,
    ResourceRequirement,
    RevenueModelBlock,
    RevenueProjection,
    RoiMetric,
    StatusIndicators,
    SynergyAnalysis,
    SynergyBreakdown,
    SynergyFactor,
    SynergyMetrics,
    SynergyTotalScore,
    TimeToMarket,
    ValidationPhase,
    ValidationPhaseInput,
    ValidationPlan,
    ValuePropositionBlock,
)
from backend.app.services.formatting import format_months, format_percent, yen
from backend.app.services.grading import (
    DIFFICULTY_COLORS,
    DIFFICULTY_SCORES,
    grade_color,
    grade_for_score,
)

logger = logging.getLogger(__name__)

# Share of estimated_revenue (annual revenue at maturity) booked per year
REVENUE_RAMP = {"year1": 0.3, "year2": 0.6, "year3": 1.0, "year5": 1.5}

MAX_PAYBACK_MONTHS = 60

# Growth rates outside this band are flagged as implausible
PLAUSIBLE_GROWTH = (-50.0, 100.0)

DEFAULT_VALIDATION_PHASES = [
    ValidationPhaseInput(
        name="MVP開発",
        duration_months=3,
        objectives=["プロトタイプ作成", "初期ユーザーでの仮説検証"],
        budget=1_000_000,
        success_criteria=["ユーザー10名獲得"],
    ),
    ValidationPhaseInput(
        name="パイロット展開",
        duration_months=6,
        objectives=["市場検証", "オペレーションの確立"],
        budget=3_000_000,
        success_criteria=["ユーザー100名獲得"],
    ),
    ValidationPhaseInput(
        name="本格展開",
        duration_months=12,
        objectives=["スケール"],
        budget=10_000_000,
        success_criteria=["月間売上1000万円達成"],
    ),
]

DIFFICULTY_FACTORS = {
    "low": ["既存アセットと技術で実装可能"],
    "medium": ["一部の新規開発が必要", "外部パートナーとの連携"],
    "high": ["大規模な新規開発が必要", "専門人材の確保", "規制対応"],
}

SECTION_TITLES = {
    "summary": "エグゼクティブサマリー",
    "business_model": "ビジネスモデル",
    "market": "市場分析",
    "synergy": "シナジー分析",
    "validation": "検証計画",
}

RATING_POINTS = {"excellent": 100, "good": 75, "fair": 50, "poor": 25}


def _esc(text: str) -> str:
    return html.escape(text, quote=True)


def _list_items(items: list[str], empty: str) -> str:
    if not items:
        return f"<p>{_esc(empty)}</p>"
    return "<ul>" + "".join(f"<li>{_esc(item)}</li>" for item in items) + "</ul>"


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 3)


def growth_trend(growth_rate: float) -> str:
    if growth_rate > 5:
        return "increasing"
    if growth_rate < 0:
        return "decreasing"
    return "stable"


def time_to_market_phase(months: int) -> str:
    if months <= 3:
        return "immediate"
    if months <= 6:
        return "short"
    if months <= 12:
        return "medium"
    return "long"


def payback_months(total_investment: int, yearly_revenue: list[float]) -> int:
    """
    Months of cumulative revenue needed to cover the investment.

    Each year's revenue is spread evenly over its months; after the last
    listed year revenue stays at that year's level. Capped at 60 months.
    """
    if total_investment <= 0:
        return 0

    cumulative = 0.0
    for month in range(1, MAX_PAYBACK_MONTHS + 1):
        year_index = min((month - 1) // 12, len(yearly_revenue) - 1)
        cumulative += yearly_revenue[year_index] / 12
        if cumulative >= total_investment:
            return month
    return MAX_PAYBACK_MONTHS


def assess_data_quality(request: ReportRequest) -> DataQuality:
    """
    Completeness of optional inputs plus soft consistency checks.

    Inconsistent or sparse input lowers the score but never fails a report.
    """
    idea = request.business_idea
    market = request.market_analysis
    alignment = request.strategic_alignment

    optional_inputs = [
        idea.target_market,
        idea.revenue_model,
        idea.pricing,
        idea.customer_segments,
        idea.differentiators,
        idea.channels,
        market.competitors,
        market.trends,
        market.competitive_advantage,
        alignment.breakdown,
        alignment.opportunities,
        alignment.risks,
        alignment.recommendations,
        alignment.strategic_fit,
        request.validation_phases,
        request.personnel,
    ]
    present = sum(1 for value in optional_inputs if value)
    completeness = round(present / len(optional_inputs) * 100, 1)

    consistent = market.tam >= market.pam >= market.sam

    warnings = []
    if not consistent:
        warnings.append("market sizes are not ordered tam >= pam >= sam")
    if not market.competitors:
        warnings.append("no competitors listed")
    if not market.trends:
        warnings.append("no market trends listed")
    if not alignment.risks:
        warnings.append("no risks listed")
    low, high = PLAUSIBLE_GROWTH
    if not low <= market.growth_rate <= high:
        warnings.append(f"growth rate {market.growth_rate}% is outside the plausible range")

    for warning in warnings:
        logger.debug(f"[REPORT] Data quality warning for session {request.session_id}: {warning}")

    return DataQuality(completeness=completeness, consistency=consistent, warnings=len(warnings))


def data_quality_score(quality: DataQuality) -> float:
    penalty = 5 * quality.warnings + (0 if quality.consistency else 15)
    return max(0.0, min(100.0, quality.completeness - penalty))


class ReportGenerator:
    """Assemble an HTMLReport with business metrics from analyst output."""

    def generate(self, request: ReportRequest) -> HTMLReport:
        """
        Build the full report for a request.

        Deterministic for a given request apart from the report id, the
        generation timestamp and the measured timings.
        """
        started = time.perf_counter()
        idea = request.business_idea
        logger.info(f"[REPORT] Generating report for session {request.session_id}, idea {idea.id}")

        # Data integration
        step = time.perf_counter()
        phases_input = request.validation_phases or DEFAULT_VALIDATION_PHASES
        quality = assess_data_quality(request)
        quality_score = data_quality_score(quality)
        business_metrics = self._business_metrics(request, phases_input)
        integration_ms = _elapsed_ms(step)

        # Section generation
        step = time.perf_counter()
        summary = self._summary(request, business_metrics)
        business_model = self._business_model(request, business_metrics)
        market_analysis = self._market_analysis(request)
        competitive = self._competitive(request)
        synergy = self._synergy(request)
        validation_plan = self._validation_plan(phases_input)
        sections = self._sections(
            summary, business_model, market_analysis, synergy, validation_plan, business_metrics, competitive
        )
        section_ms = _elapsed_ms(step)

        # HTML rendering
        step = time.perf_counter()
        html_content = self._render_document(idea.title, sections)
        rendering_ms = _elapsed_ms(step)

        total_ms = _elapsed_ms(started)
        performance = PerformanceMetrics(
            generation_time=GenerationTime(
                total=total_ms,
                breakdown=GenerationTimeBreakdown(
                    data_integration=integration_ms,
                    section_generation=section_ms,
                    html_rendering=rendering_ms,
                    database_write=0.0,
                ),
            ),
            data_quality=quality,
        )

        report = HTMLReport(
            id=str(uuid.uuid4()),
            session_id=str(request.session_id),
            idea_id=idea.id,
            title=idea.title,
            html_content=html_content,
            summary=summary,
            business_model=business_model,
            market_analysis=market_analysis,
            synergy=synergy,
            validation_plan=validation_plan,
            sections=sections,
            metrics=GenerationMetrics(
                completion_percentage=100.0,
                sections_generated=len(sections),
                generation_time=total_ms,
                data_quality_score=quality_score,
            ),
            business_metrics=business_metrics,
            metrics_summary=self._metrics_summary(request, business_metrics),
            competitive=competitive,
            performance=performance,
            generated_at=datetime.now(timezone.utc),
            generation_time=total_ms,
        )

        logger.info(
            f"[REPORT] Generated report {report.id} in {total_ms:.1f}ms "
            f"(quality={quality_score:.1f}, warnings={quality.warnings})"
        )
        return report

    # ------------------------------------------------------------------
    # Metrics
    # ------------------------------------------------------------------

    def _business_metrics(self, request: ReportRequest, phases: list[ValidationPhaseInput]) -> BusinessMetrics:
        idea = request.business_idea
        market = request.market_analysis
        alignment = request.strategic_alignment

        yearly = [idea.estimated_revenue * REVENUE_RAMP[year] for year in ("year1", "year2", "year3")]
        total_investment = sum(phase.budget for phase in phases)
        initial_investment = phases[0].budget

        if total_investment > 0:
            roi = (sum(yearly) - total_investment) / total_investment * 100
        else:
            roi = 0.0
        roi = round(roi, 1)

        synergy_score = alignment.synergy_score
        grade = grade_for_score(synergy_score)
        breakdown = alignment.breakdown

        time_to_market = sum(phase.duration_months for phase in phases[:-1])

        by_role = list(request.personnel)
        budget_lines = [
            BudgetLine(
                category=phase.name,
                amount=MonetaryValue.of(phase.budget),
                percentage=round(phase.budget / total_investment * 100, 1) if total_investment else 0.0,
            )
            for phase in phases
        ]

        return BusinessMetrics(
            market_size=MarketSizeMetrics(
                tam=MonetaryValue.of(market.tam, "TAM"),
                pam=MonetaryValue.of(market.pam, "PAM"),
                sam=MonetaryValue.of(market.sam, "SAM"),
                growth_rate=GrowthRate(
                    value=market.growth_rate,
                    formatted=format_percent(market.growth_rate),
                    trend=growth_trend(market.growth_rate),
                ),
            ),
            financial=FinancialMetrics(
                revenue_projection=RevenueProjection(
                    year1=MonetaryValue.of(yearly[0], "1年目"),
                    year2=MonetaryValue.of(yearly[1], "2年目"),
                    year3=MonetaryValue.of(yearly[2], "3年目"),
                ),
                roi=RoiMetric(
                    value=roi,
                    formatted=format_percent(roi),
                    payback_period=payback_months(total_investment, yearly),
                ),
                investment_required=InvestmentRequired(
                    initial=MonetaryValue.of(initial_investment, "初期投資"),
                    total_3y=MonetaryValue.of(total_investment, "3年間総投資"),
                ),
            ),
            synergy=SynergyMetrics(
                total_score=SynergyTotalScore(value=synergy_score, grade=grade, color=grade_color(grade)),
                breakdown=SynergyBreakdown(
                    real_estate=SynergyFactor(
                        score=breakdown.real_estate if breakdown else synergy_score,
                        label="不動産活用",
                        description="保有不動産・施設の活用度",
                    ),
                    customer_base=SynergyFactor(
                        score=breakdown.customer_base if breakdown else synergy_score,
                        label="顧客基盤活用",
                        description="既存テナント・顧客ネットワークの活用度",
                    ),
                    brand_value=SynergyFactor(
                        score=breakdown.brand_value if breakdown else synergy_score,
                        label="ブランド価値向上",
                        description="ブランド価値への寄与",
                    ),
                ),
            ),
            implementation=ImplementationMetrics(
                difficulty=DifficultyMetric(
                    level=idea.implementation_difficulty,
                    score=DIFFICULTY_SCORES[idea.implementation_difficulty],
                    factors=DIFFICULTY_FACTORS[idea.implementation_difficulty],
                    color=DIFFICULTY_COLORS[idea.implementation_difficulty],
                ),
                time_to_market=TimeToMarket(
                    value=time_to_market,
                    phase=time_to_market_phase(time_to_market),
                    formatted=format_months(time_to_market),
                ),
                resource_requirement=ResourceRequirement(
                    personnel=Personnel(total=sum(r.count for r in by_role), by_role=by_role),
                    budget=Budget(total=MonetaryValue.of(total_investment), breakdown=budget_lines),
                ),
            ),
        )

    def _metrics_summary(self, request: ReportRequest, metrics: BusinessMetrics) -> MetricsSummary:
        growth = request.market_analysis.growth_rate
        synergy_score = request.strategic_alignment.synergy_score
        financial = metrics.financial

        feasibility = {"low": "excellent", "medium": "good", "high": "fair"}[
            request.business_idea.implementation_difficulty
        ]
        if growth >= 20:
            market_opportunity = "excellent"
        elif growth >= 10:
            market_opportunity = "good"
        elif growth >= 0:
            market_opportunity = "fair"
        else:
            market_opportunity = "poor"
        if synergy_score >= 80:
            synergy_fit = "excellent"
        elif synergy_score >= 60:
            synergy_fit = "good"
        elif synergy_score >= 40:
            synergy_fit = "fair"
        else:
            synergy_fit = "poor"

        ratings = [feasibility, market_opportunity, synergy_fit]
        overall = round(sum(RATING_POINTS[r] for r in ratings) / len(ratings), 1)

        trend = {"increasing": "up", "decreasing": "down", "stable": "stable"}[metrics.market_size.growth_rate.trend]
        key_metrics = [
            KeyMetric(label="TAM", value=metrics.market_size.tam.formatted, trend=trend, importance="critical"),
            KeyMetric(
                label="3年目売上",
                value=financial.revenue_projection.year3.formatted,
                importance="critical",
            ),
            KeyMetric(label="ROI", value=financial.roi.value, unit="%", importance="high"),
            KeyMetric(label="シナジースコア", value=synergy_score, unit="点", importance="high"),
            KeyMetric(
                label="市場投入期間",
                value=metrics.implementation.time_to_market.formatted,
                importance="medium",
            ),
        ]
        return MetricsSummary(
            key_metrics=key_metrics,
            status_indicators=StatusIndicators(
                feasibility=feasibility,
                market_opportunity=market_opportunity,
                synergy_fit=synergy_fit,
                overall_score=overall,
            ),
        )

    # ------------------------------------------------------------------
    # Report blocks
    # ------------------------------------------------------------------

    def _summary(self, request: ReportRequest, metrics: BusinessMetrics) -> ReportSummary:
        idea = request.business_idea
        revenue = metrics.financial.revenue_projection
        executive = (
            f"{idea.title}は、{idea.description}を実現する新規事業提案です。"
            f"{self._recommendation(request.strategic_alignment.synergy_score, request.market_analysis.growth_rate)}"
        )
        return ReportSummary(
            executive=executive,
            target_market=idea.target_market,
            value_proposition=idea.value_proposition,
            estimated_revenue=EstimatedRevenue(
                year1=revenue.year1,
                year3=revenue.year3,
                year5=MonetaryValue.of(idea.estimated_revenue * REVENUE_RAMP["year5"], "5年目"),
            ),
        )

    @staticmethod
    def _recommendation(synergy_score: float, growth_rate: float) -> str:
        if synergy_score >= 80 and growth_rate >= 15:
            return "高いシナジー効果と市場成長性を持つ優先度の高い案件です。早期の実装開始を推奨します。"
        if synergy_score >= 60 or growth_rate >= 10:
            return "一定のポテンシャルがある案件です。詳細な実現可能性調査の実施を推奨します。"
        return "慎重な検討が必要な案件です。追加の市場調査や戦略の見直しを推奨します。"

    def _business_model(self, request: ReportRequest, metrics: BusinessMetrics) -> BusinessModel:
        idea = request.business_idea
        investment = metrics.financial.investment_required
        payback = metrics.financial.roi.payback_period
        channels = idea.channels

        if payback >= MAX_PAYBACK_MONTHS:
            break_even = f"{format_months(MAX_PAYBACK_MONTHS)}以上"
        else:
            break_even = format_months(payback)

        revenue_sources = [s.strip() for s in idea.revenue_model.split("、") if s.strip()]
        return BusinessModel(
            overview=idea.description,
            customer_segments=idea.customer_segments,
            value_proposition=ValuePropositionBlock(core=idea.value_proposition, differentiators=idea.differentiators),
            channels=Channels(primary=channels[:1], secondary=channels[1:]),
            revenue_model=RevenueModelBlock(
                primary=revenue_sources[0] if revenue_sources else idea.revenue_model,
                secondary=revenue_sources[1:],
                pricing=idea.pricing,
            ),
            cost_structure=CostStructure(
                fixed=investment.initial,
                variable=MonetaryValue.of(investment.total_3y.value - investment.initial.value),
                break_even_point=break_even,
            ),
        )

    def _market_analysis(self, request: ReportRequest) -> MarketAnalysis:
        market = request.market_analysis
        return MarketAnalysis(
            market_size=MarketSize(
                tam=MonetaryValue.of(market.tam, "TAM"),
                pam=MonetaryValue.of(market.pam, "PAM"),
                sam=MonetaryValue.of(market.sam, "SAM"),
            ),
            growth_rate=market.growth_rate,
            competitors=market.competitors,
            competitive_advantage=market.competitive_advantage,
            trends=market.trends,
        )

    def _competitive(self, request: ReportRequest) -> CompetitiveMetrics:
        market = request.market_analysis
        advantages = [market.competitive_advantage] if market.competitive_advantage else []
        return CompetitiveMetrics(
            market_position=MarketPosition(
                # A new entrant without an analyst estimate starts behind every listed competitor
                rank=market.market_rank or len(market.competitors) + 1,
                total_competitors=len(market.competitors),
                competitive_advantage=advantages,
            ),
            differentiators=Differentiators(
                unique=request.business_idea.differentiators,
                shared=market.shared_features,
                disadvantages=market.disadvantages,
            ),
            benchmarks=market.benchmarks,
        )

    def _synergy(self, request: ReportRequest) -> SynergyAnalysis:
        alignment = request.strategic_alignment
        return SynergyAnalysis(
            overall_score=alignment.synergy_score,
            grade=grade_for_score(alignment.synergy_score),
            opportunities=alignment.opportunities,
            risks=alignment.risks,
            strategic_fit=alignment.strategic_fit,
            recommendations=alignment.recommendations,
        )

    def _validation_plan(self, phases: list[ValidationPhaseInput]) -> ValidationPlan:
        total_months = sum(phase.duration_months for phase in phases)
        return ValidationPlan(
            phases=[
                ValidationPhase(
                    phase=number,
                    name=phase.name,
                    duration=format_months(phase.duration_months),
                    objectives=phase.objectives,
                    budget=MonetaryValue.of(phase.budget),
                    success_criteria=phase.success_criteria,
                )
                for number, phase in enumerate(phases, 1)
            ],
            total_budget=MonetaryValue.of(sum(phase.budget for phase in phases)),
            timeline=format_months(total_months),
        )

    # ------------------------------------------------------------------
    # HTML
    # ------------------------------------------------------------------

    def _sections(
        self,
        summary: ReportSummary,
        business_model: BusinessModel,
        market: MarketAnalysis,
        synergy: SynergyAnalysis,
        plan: ValidationPlan,
        metrics: BusinessMetrics,
        competitive: CompetitiveMetrics,
    ) -> list[ReportSection]:
        revenue = summary.estimated_revenue
        position = competitive.market_position
        contents = {
            "summary": (
                f"<p>{_esc(summary.executive)}</p>"
                "<h3>想定売上</h3><ul>"
                f"<li>1年目: {revenue.year1.formatted}</li>"
                f"<li>3年目: {revenue.year3.formatted}</li>"
                f"<li>5年目: {revenue.year5.formatted}</li></ul>"
                f"<h3>ターゲット市場</h3><p>{_esc(summary.target_market or '未設定')}</p>"
            ),
            "business_model": (
                f"<p>{_esc(business_model.overview)}</p>"
                f"<h3>価値提案</h3><p>{_esc(business_model.value_proposition.core)}</p>"
                + _list_items(business_model.value_proposition.differentiators, "差別化要因は未設定です。")
                + "<h3>顧客セグメント</h3>"
                + _list_items(business_model.customer_segments, "顧客セグメントは未設定です。")
                + "<h3>コスト構造</h3><table class=\"data-table\">"
                f"<tr><th>固定費</th><td>{business_model.cost_structure.fixed.formatted}</td></tr>"
                f"<tr><th>変動費</th><td>{business_model.cost_structure.variable.formatted}</td></tr>"
                f"<tr><th>損益分岐点</th><td>{_esc(business_model.cost_structure.break_even_point)}</td></tr>"
                "</table>"
            ),
            "market": (
                "<h3>市場規模</h3><table class=\"data-table\">"
                f"<tr><th>TAM</th><td>{market.market_size.tam.formatted}</td></tr>"
                f"<tr><th>PAM</th><td>{market.market_size.pam.formatted}</td></tr>"
                f"<tr><th>SAM</th><td>{market.market_size.sam.formatted}</td></tr>"
                "</table>"
                f"<p>年間成長率: <strong>{metrics.market_size.growth_rate.formatted}</strong></p>"
                "<h3>競合</h3>"
                f"<p>市場ポジション: {position.rank}位 / {position.total_competitors + 1}社</p>"
                + _list_items(market.competitors, "競合情報は現在収集中です。")
                + "<h3>市場トレンド</h3>"
                + _list_items(market.trends, "トレンド情報は現在収集中です。")
            ),
            "synergy": (
                f"<p>シナジースコア: <strong>{synergy.overall_score:g}点 ({synergy.grade})</strong></p>"
                f"<p>{_esc(synergy.strategic_fit)}</p>"
                "<h3>機会</h3>"
                + _list_items(synergy.opportunities, "特記事項なし")
                + "<h3>リスク</h3>"
                + _list_items(synergy.risks, "特記事項なし")
                + "<h3>推奨事項</h3>"
                + _list_items(synergy.recommendations, "特記事項なし")
            ),
            "validation": (
                f"<p>総期間: <strong>{_esc(plan.timeline)}</strong> / "
                f"必要予算: <strong>{plan.total_budget.formatted}</strong></p>"
                "<table class=\"data-table\"><tr><th>フェーズ</th><th>期間</th><th>予算</th></tr>"
                + "".join(
                    f"<tr><td>{phase.phase}. {_esc(phase.name)}</td>"
                    f"<td>{_esc(phase.duration)}</td><td>{phase.budget.formatted}</td></tr>"
                    for phase in plan.phases
                )
                + "</table>"
            ),
        }
        return [
            ReportSection(
                id=section_type,
                type=section_type,
                title=SECTION_TITLES[section_type],
                content=content,
                order=order,
            )
            for order, (section_type, content) in enumerate(contents.items(), 1)
        ]

    @staticmethod
    def _render_document(title: str, sections: list[ReportSection]) -> str:
        navigation = "".join(f'<li><a href="#{s.id}">{_esc(s.title)}</a></li>' for s in sections)
        body = "".join(
            f'<section id="{s.id}" class="section"><h2>{_esc(s.title)}</h2>{s.content}</section>'
            for s in sections
        )
        return (
            "<!DOCTYPE html>\n"
            '<html lang="ja">\n'
            '<head><meta charset="UTF-8">'
            f"<title>{_esc(title)} - ビジネスアイデアレポート</title></head>\n"
            f'<body><div class="container"><header><h1>{_esc(title)}</h1></header>'
            f'<nav><ul>{navigation}</ul></nav><main class="content">{body}</main></div></body>\n'
            "</html>"
        )
