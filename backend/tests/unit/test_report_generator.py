"""Unit tests for business report assembly."""

import uuid

import pytest

from backend.app.schemas.report import HTMLReport, ReportRequest
from backend.app.services.report_generator import (
    ReportGenerator,
    growth_trend,
    payback_months,
    time_to_market_phase,
)


@pytest.fixture
def generator() -> ReportGenerator:
    return ReportGenerator()


@pytest.fixture
def report_request(report_request_payload) -> ReportRequest:
    return ReportRequest.model_validate({"sessionId": str(uuid.uuid4()), **report_request_payload})


def degrade(payload: dict) -> dict:
    """Strip optional inputs and break the market size ordering."""
    return {
        **payload,
        "marketAnalysis": {"tam": 100, "pam": 500, "sam": 50, "growthRate": 500},
        "strategicAlignment": {"synergyScore": 55},
        "personnel": [],
    }


class TestReportGenerator:
    """Test cases for ReportGenerator.generate."""

    def test_financial_metrics(self, generator, report_request):
        """Test revenue ramp, investment, ROI and payback from the default plan."""
        financial = generator.generate(report_request).business_metrics.financial

        assert financial.revenue_projection.year1.formatted == "¥30,000,000"
        assert financial.revenue_projection.year2.value == 60_000_000
        assert financial.revenue_projection.year3.value == 100_000_000
        assert financial.investment_required.initial.value == 1_000_000
        assert financial.investment_required.total_3y.formatted == "¥14,000,000"
        assert financial.roi.value == pytest.approx(1257.1)
        assert financial.roi.payback_period == 6

    def test_summary_and_business_model(self, generator, report_request):
        """Test summary revenue figures and cost structure."""
        report = generator.generate(report_request)

        assert report.summary.estimated_revenue.year5.formatted == "¥150,000,000"
        assert report.summary.target_market == "丸の内エリアの入居企業"
        cost = report.business_model.cost_structure
        assert cost.fixed.formatted == "¥1,000,000"
        assert cost.variable.formatted == "¥13,000,000"
        assert cost.break_even_point == "6ヶ月"
        assert report.business_model.channels.primary == ["直販"]
        assert report.business_model.revenue_model.primary == "月額サブスクリプション"
        assert report.business_model.revenue_model.secondary == ["予約手数料"]

    def test_default_validation_plan(self, generator, report_request):
        """Test the three-phase default plan when none is given."""
        plan = generator.generate(report_request).validation_plan

        assert [p.name for p in plan.phases] == ["MVP開発", "パイロット展開", "本格展開"]
        assert [p.phase for p in plan.phases] == [1, 2, 3]
        assert [p.duration for p in plan.phases] == ["3ヶ月", "6ヶ月", "12ヶ月"]
        assert plan.total_budget.formatted == "¥14,000,000"
        assert plan.timeline == "21ヶ月"

    def test_custom_validation_plan(self, generator, report_request_payload):
        """Test given phases drive the plan, budget and time to market."""
        request = ReportRequest.model_validate({
            "sessionId": str(uuid.uuid4()),
            **report_request_payload,
            "validationPhases": [
                {"name": "PoC", "durationMonths": 2, "budget": 500_000},
                {"name": "展開", "durationMonths": 4, "budget": 1_500_000},
            ],
        })
        report = generator.generate(request)
        implementation = report.business_metrics.implementation

        assert report.validation_plan.timeline == "6ヶ月"
        assert implementation.time_to_market.value == 2
        assert implementation.time_to_market.phase == "immediate"
        assert [line.percentage for line in implementation.resource_requirement.budget.breakdown] == [25.0, 75.0]

    def test_synergy_and_market_metrics(self, generator, report_request):
        """Test grade, colour, breakdown and growth trend."""
        report = generator.generate(report_request)
        synergy = report.business_metrics.synergy

        assert synergy.total_score.grade == "A"
        assert synergy.total_score.color == "text-green-600"
        assert synergy.breakdown.real_estate.score == 90
        assert report.synergy.grade == "A"
        assert report.business_metrics.market_size.growth_rate.trend == "increasing"
        assert report.business_metrics.market_size.growth_rate.formatted == "25.0%"
        assert report.market_analysis.market_size.tam.formatted == "¥5,000,000,000"

    def test_implementation_metrics(self, generator, report_request):
        """Test difficulty score, time to market and personnel."""
        implementation = generator.generate(report_request).business_metrics.implementation

        assert implementation.difficulty.level == "medium"
        assert implementation.difficulty.score == 6
        assert implementation.time_to_market.value == 9
        assert implementation.time_to_market.phase == "medium"
        assert implementation.time_to_market.formatted == "9ヶ月"
        assert implementation.resource_requirement.personnel.total == 5

    def test_competitive_metrics_default_position(self, generator, report_request):
        """Test a new entrant ranks behind every listed competitor."""
        report = generator.generate(report_request)
        competitive = report.competitive

        assert competitive.market_position.rank == 3
        assert competitive.market_position.total_competitors == 2
        assert competitive.market_position.competitive_advantage == ["自社保有ビルのネットワーク"]
        assert competitive.differentiators.unique == ["ビル横断の在庫", "入居企業向け特典"]
        assert competitive.benchmarks == []
        assert "市場ポジション: 3位 / 3社" in report.html_content

    def test_competitive_metrics_from_analyst_input(self, generator, report_request_payload):
        """Test rank, shared features, disadvantages and benchmarks are carried into the report."""
        market = {
            **report_request_payload["marketAnalysis"],
            "marketRank": 2,
            "sharedFeatures": ["オンライン決済"],
            "disadvantages": ["知名度"],
            "benchmarks": [
                {"metric": "稼働率", "ourValue": 72.5, "industryAverage": 60, "topPerformer": "85%"},
            ],
        }
        payload = {**report_request_payload, "marketAnalysis": market}
        report = generator.generate(ReportRequest.model_validate({"sessionId": str(uuid.uuid4()), **payload}))
        competitive = report.competitive

        assert competitive.market_position.rank == 2
        assert competitive.differentiators.shared == ["オンライン決済"]
        assert competitive.differentiators.disadvantages == ["知名度"]
        benchmark = competitive.benchmarks[0]
        assert benchmark.metric == "稼働率"
        assert benchmark.our_value == 72.5
        assert benchmark.top_performer == "85%"
        assert report.model_dump(by_alias=True)["competitive"]["benchmarks"][0]["industryAverage"] == 60

    def test_market_rank_bounded_by_competitors(self, report_request_payload):
        """Test a rank past last place is rejected."""
        market = {**report_request_payload["marketAnalysis"], "marketRank": 4}
        with pytest.raises(ValueError):
            ReportRequest.model_validate(
                {"sessionId": str(uuid.uuid4()), **report_request_payload, "marketAnalysis": market}
            )

    def test_sections_ordered(self, generator, report_request):
        """Test five sections rendered in order and embedded in the document."""
        report = generator.generate(report_request)

        assert [s.type for s in report.sections] == ["summary", "business_model", "market", "synergy", "validation"]
        assert [s.order for s in report.sections] == [1, 2, 3, 4, 5]
        assert report.metrics.sections_generated == 5
        assert report.html_content.startswith("<!DOCTYPE html>")
        for section in report.sections:
            assert f'id="{section.id}"' in report.html_content

    def test_user_text_is_escaped(self, generator, report_request_payload):
        """Test idea text cannot inject markup into the document."""
        payload = dict(report_request_payload)
        payload["businessIdea"] = {**payload["businessIdea"], "title": "<script>alert(1)</script>"}
        report = generator.generate(ReportRequest.model_validate({"sessionId": str(uuid.uuid4()), **payload}))

        assert "<script>" not in report.html_content
        assert "&lt;script&gt;" in report.html_content

    def test_data_quality_complete_input(self, generator, report_request):
        """Test near-complete consistent input scores its completeness."""
        report = generator.generate(report_request)
        quality = report.performance.data_quality

        assert quality.consistency is True
        assert quality.warnings == 0
        assert quality.completeness == pytest.approx(93.75, abs=0.1)
        assert report.metrics.data_quality_score == quality.completeness

    def test_degraded_input_still_reports(self, generator, report_request_payload):
        """Test inconsistent, sparse input yields a report with a lower score."""
        request = ReportRequest.model_validate({"sessionId": str(uuid.uuid4()), **degrade(report_request_payload)})
        report = generator.generate(request)
        quality = report.performance.data_quality

        assert quality.consistency is False
        assert quality.warnings == 5
        expected = max(0.0, quality.completeness - 5 * 5 - 15)
        assert report.metrics.data_quality_score == pytest.approx(expected)
        assert report.synergy.grade == "D"
        assert report.business_metrics.synergy.breakdown.brand_value.score == 55

    def test_metrics_summary(self, generator, report_request):
        """Test status indicators and key metrics."""
        summary = generator.generate(report_request).metrics_summary

        assert summary.status_indicators.feasibility == "good"
        assert summary.status_indicators.market_opportunity == "excellent"
        assert summary.status_indicators.synergy_fit == "excellent"
        assert summary.status_indicators.overall_score == pytest.approx(91.7)
        assert summary.key_metrics[0].label == "TAM"
        assert summary.key_metrics[0].trend == "up"

    def test_report_round_trips_through_storage_format(self, generator, report_request):
        """Test the stored camelCase document validates back into a report."""
        report = generator.generate(report_request)
        stored = report.model_dump(mode="json", by_alias=True)

        assert "total3Y" in stored["businessMetrics"]["financial"]["investmentRequired"]
        assert HTMLReport.model_validate(stored) == report

    def test_generation_timings(self, generator, report_request):
        """Test generation time is recorded and consistent."""
        report = generator.generate(report_request)

        assert report.generation_time >= 0
        assert report.metrics.generation_time == report.generation_time
        assert report.performance.generation_time.total == report.generation_time
        assert report.session_id == str(report_request.session_id)


class TestReportHelpers:
    """Test cases for report calculation helpers."""

    @pytest.mark.parametrize("rate,trend", [(25, "increasing"), (5, "stable"), (0, "stable"), (-0.1, "decreasing")])
    def test_growth_trend(self, rate, trend):
        assert growth_trend(rate) == trend

    @pytest.mark.parametrize(
        "months,phase",
        [(0, "immediate"), (3, "immediate"), (4, "short"), (6, "short"), (12, "medium"), (13, "long")],
    )
    def test_time_to_market_phase(self, months, phase):
        assert time_to_market_phase(months) == phase

    def test_payback_months(self):
        """Test cumulative monthly revenue covers the investment."""
        assert payback_months(0, [100.0]) == 0
        assert payback_months(1200, [1200.0, 2400.0, 2400.0]) == 12
        assert payback_months(1300, [1200.0, 2400.0, 2400.0]) == 13
        assert payback_months(10**12, [12.0]) == 60
