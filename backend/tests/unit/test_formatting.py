"""Unit tests for currency formatting, grading and monetary values."""

import pytest
from pydantic import ValidationError

from backend.app.schemas.report import MarketPosition, MonetaryValue, SynergyTotalScore, ValidationPlan
from backend.app.services.formatting import format_months, format_percent, yen
from backend.app.services.grading import grade_color, grade_for_score


class TestCurrencyFormatter:
    """Test cases for the JPY formatter."""

    def test_format(self):
        """Test whole-yen amounts get separators and the yen sign."""
        assert yen.format(10_000_000) == "¥10,000,000"
        assert yen.format(0) == "¥0"
        assert yen.format(999) == "¥999"
        assert yen.format(-1000) == "-¥1,000"

    def test_format_rounds_to_whole_yen(self):
        """Test fractional amounts round to whole yen."""
        assert yen.format(1234.6) == "¥1,235"

    @pytest.mark.parametrize(
        "value,expected",
        [(2.5, "¥3"), (3.5, "¥4"), (0.5, "¥1"), (-2.5, "-¥3"), (2.4999, "¥2"), (1_000_000.5, "¥1,000,001")],
    )
    def test_halves_round_away_from_zero(self, value, expected):
        """Test halves round away from zero, not to even."""
        assert yen.format(value) == expected

    @pytest.mark.parametrize("value", [0, 7, 1000, 10_000_000, 123_456_789_012, -42_000])
    def test_parse_inverts_format(self, value):
        """Test parse(format(v)) == v."""
        assert yen.parse(yen.format(value)) == value

    @pytest.mark.parametrize("text", ["10,000,000", "¥10,00,000", "$100", "¥", "¥1,000.5"])
    def test_parse_rejects_other_strings(self, text):
        """Test strings the formatter would not produce are rejected."""
        with pytest.raises(ValueError):
            yen.parse(text)

    def test_options(self):
        """Test formatter options describe JPY without fraction digits."""
        assert yen.options == {
            "currency": "JPY",
            "locale": "ja-JP",
            "minimumFractionDigits": 0,
            "maximumFractionDigits": 0,
        }

    def test_percent_and_months(self):
        """Test percentage and duration helpers."""
        assert format_percent(15.5) == "15.5%"
        assert format_percent(-3) == "-3.0%"
        assert format_months(6) == "6ヶ月"


class TestSynergyGrades:
    """Test cases for score-to-grade mapping."""

    @pytest.mark.parametrize(
        "score,grade",
        [(100, "S"), (90, "S"), (89.9, "A"), (80, "A"), (70, "B"), (60, "C"), (59.9, "D"), (0, "D")],
    )
    def test_grade_boundaries(self, score, grade):
        """Test lower bounds are inclusive."""
        assert grade_for_score(score) == grade

    @pytest.mark.parametrize("score", [-1, 100.5])
    def test_out_of_range(self, score):
        """Test scores outside 0..100 are rejected."""
        with pytest.raises(ValueError):
            grade_for_score(score)

    def test_grade_colors(self):
        """Test each grade has a colour class."""
        assert grade_color("S") == "text-purple-600"
        assert grade_color("D") == "text-red-600"

    def test_total_score_grade_must_match(self):
        """Test a total score carrying the wrong grade is rejected."""
        SynergyTotalScore(value=85, grade="A", color="text-green-600")
        with pytest.raises(ValidationError, match="grade must be A"):
            SynergyTotalScore(value=85, grade="S", color="text-purple-600")


class TestReportValueModels:
    """Test cases for report model invariants."""

    def test_monetary_value_of(self):
        """Test the factory pairs value and formatted string."""
        money = MonetaryValue.of(10_000_000, "TAM")
        assert money.model_dump() == {"value": 10_000_000, "formatted": "¥10,000,000", "label": "TAM"}

    def test_monetary_value_of_rounds_halves_up(self):
        """Test the factory rounds halves the same way as the formatter."""
        assert MonetaryValue.of(2.5).value == 3
        assert MonetaryValue.of(2.5).formatted == "¥3"

    def test_monetary_value_mismatch_rejected(self):
        """Test formatted must match the formatter's output."""
        with pytest.raises(ValidationError, match="formatted must be"):
            MonetaryValue(value=1000, formatted="¥1000")

    def test_market_position_rank(self):
        """Test rank is bounded by competitor count plus one."""
        MarketPosition(rank=3, total_competitors=2, competitive_advantage=[])
        with pytest.raises(ValidationError, match="rank cannot exceed"):
            MarketPosition(rank=4, total_competitors=2, competitive_advantage=[])

    def test_validation_plan_phase_order(self):
        """Test plan phases must be strictly increasing."""
        phase = {
            "name": "MVP",
            "duration": "3ヶ月",
            "objectives": [],
            "budget": MonetaryValue.of(1_000_000),
            "successCriteria": [],
        }
        plan = {"totalBudget": MonetaryValue.of(2_000_000), "timeline": "6ヶ月"}

        ValidationPlan(phases=[{**phase, "phase": 1}, {**phase, "phase": 2}], **plan)
        with pytest.raises(ValidationError, match="strictly increasing"):
            ValidationPlan(phases=[{**phase, "phase": 2}, {**phase, "phase": 2}], **plan)
