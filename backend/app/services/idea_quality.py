"""Rule-based quality checks for ideator business ideas."""

import logging
from typing import Callable

from backend.app.schemas.idea import (
    BusinessIdea,
    IdeaAnalysis,
    IdeaValidationResult,
    ValidationIssue,
)

logger = logging.getLogger(__name__)

QualityRule = Callable[[BusinessIdea], ValidationIssue | None]

# Yen thresholds
UNREALISTIC_REVENUE = 100_000_000_000
SMALL_REVENUE = 10_000_000
HIGH_REVENUE = 1_000_000_000
LIMITED_MARKET_REVENUE = 100_000_000
REALISTIC_RANGE = (100_000_000, 10_000_000_000)

MAX_TITLE_LENGTH = 30
MIN_DESCRIPTION_LENGTH = 50
MAX_DESCRIPTION_LENGTH = 500

SEVERITY_PENALTY = {"error": 20, "warning": 10, "info": 5}

SUGGESTIONS = {
    "description": "説明文をより具体的にし、独自性と価値提案を明確にしてください。",
    "targetCustomers": "ターゲット顧客をより具体的に定義し、ペルソナを明確にしてください。",
    "estimatedRevenue": "市場規模と獲得可能シェアから、より現実的な収益予測を行ってください。",
    "valueProposition": "競合と差別化された明確な価値提案を定義してください。",
    "revenueModel": "収益化の具体的な方法（価格設定、課金モデル等）を詳細に説明してください。",
    "customerPains": "解決する顧客課題を優先順位付けし、最も重要なものに焦点を当ててください。",
    "implementationDifficulty": "技術的要件、必要リソース、期間を考慮して実装難易度を再評価してください。",
    "marketOpportunity": "市場調査データに基づいて、具体的な市場機会を説明してください。",
}


def _issue(field: str, message: str, severity: str) -> ValidationIssue:
    return ValidationIssue(field=field, message=message, severity=severity)


def check_title(idea: BusinessIdea) -> ValidationIssue | None:
    if not idea.title:
        return _issue("title", "タイトルが設定されていません", "error")
    if len(idea.title) > MAX_TITLE_LENGTH:
        return _issue("title", "タイトルは30文字以内にしてください", "error")
    return None


def check_description(idea: BusinessIdea) -> ValidationIssue | None:
    if len(idea.description) < MIN_DESCRIPTION_LENGTH:
        return _issue("description", "説明文が短すぎます。より詳細な説明を追加してください", "warning")
    if len(idea.description) > MAX_DESCRIPTION_LENGTH:
        return _issue("description", "説明文が長すぎます。要点を絞って簡潔にしてください", "warning")
    return None


def check_target_customers(idea: BusinessIdea) -> ValidationIssue | None:
    if not idea.target_customers:
        return _issue("targetCustomers", "ターゲット顧客が設定されていません", "error")
    if any(len(customer) < 2 for customer in idea.target_customers):
        return _issue("targetCustomers", "ターゲット顧客の説明が不十分です", "warning")
    return None


def check_revenue(idea: BusinessIdea) -> ValidationIssue | None:
    if idea.estimated_revenue <= 0:
        return _issue("estimatedRevenue", "推定営業利益が設定されていません", "error")
    if idea.estimated_revenue > UNREALISTIC_REVENUE:
        return _issue("estimatedRevenue", "推定営業利益が非現実的に高い可能性があります", "warning")
    if idea.estimated_revenue < SMALL_REVENUE:
        return _issue("estimatedRevenue", "推定営業利益が事業として小さすぎる可能性があります", "info")
    return None


def check_value_proposition(idea: BusinessIdea) -> ValidationIssue | None:
    if len(idea.value_proposition) < 10:
        return _issue("valueProposition", "提供価値が不明確です", "error")
    return None


def check_revenue_model(idea: BusinessIdea) -> ValidationIssue | None:
    if len(idea.revenue_model) < 10:
        return _issue("revenueModel", "収益モデルの説明が不十分です", "warning")
    return None


def check_customer_pains(idea: BusinessIdea) -> ValidationIssue | None:
    if not idea.customer_pains:
        return _issue("customerPains", "解決する顧客課題が設定されていません", "warning")
    if len(idea.customer_pains) > 10:
        return _issue("customerPains", "顧客課題が多すぎます。焦点を絞ることを検討してください", "info")
    return None


def check_difficulty(idea: BusinessIdea) -> ValidationIssue | None:
    # High revenue at low difficulty usually means the moat was overlooked
    if idea.estimated_revenue > HIGH_REVENUE and idea.implementation_difficulty == "low":
        return _issue(
            "implementationDifficulty",
            "高収益にも関わらず実装難易度が低いです。競合優位性を再検討してください",
            "info",
        )
    return None


def check_market_opportunity(idea: BusinessIdea) -> ValidationIssue | None:
    if len(idea.market_opportunity) < 10:
        return _issue("marketOpportunity", "市場機会の説明が不十分です", "warning")
    return None


DEFAULT_RULES: list[QualityRule] = [
    check_title,
    check_description,
    check_target_customers,
    check_revenue,
    check_value_proposition,
    check_revenue_model,
    check_customer_pains,
    check_difficulty,
    check_market_opportunity,
]


class IdeaQualityValidator:
    """Validate ideas against quality rules and analyse strengths/weaknesses."""

    def __init__(self, rules: list[QualityRule] | None = None):
        self.rules = rules if rules is not None else list(DEFAULT_RULES)

    def validate(self, idea: BusinessIdea) -> IdeaValidationResult:
        """Run every rule; errors make the idea invalid, warnings/info only cost score."""
        issues = []
        for rule in self.rules:
            issue = rule(idea)
            if issue is not None:
                issues.append(issue)
        is_valid = not any(issue.severity == "error" for issue in issues)
        score = self.quality_score(idea, issues)

        logger.info(
            f"[IDEATOR] Validated idea {idea.id}: valid={is_valid}, "
            f"issues={len(issues)}, score={score}"
        )
        return IdeaValidationResult(
            is_valid=is_valid,
            issues=issues,
            quality_score=score,
            idea_id=idea.id,
        )

    @staticmethod
    def quality_score(idea: BusinessIdea, issues: list[ValidationIssue]) -> float:
        """
        Score an idea 0-100.

        Starts at 100, subtracts 20/10/5 per error/warning/info, adds 5 for
        each completeness bonus and 10 for revenue in the realistic range.
        """
        score = 100.0
        score -= sum(SEVERITY_PENALTY[issue.severity] for issue in issues)

        if len(idea.description) > 100:
            score += 5
        if len(idea.target_customers) >= 2:
            score += 5
        if len(idea.customer_pains) >= 2:
            score += 5
        if len(idea.revenue_model) > 20:
            score += 5

        low, high = REALISTIC_RANGE
        if low < idea.estimated_revenue < high:
            score += 10

        return max(0.0, min(100.0, score))

    @staticmethod
    def strengths(idea: BusinessIdea) -> list[str]:
        strengths = []
        if idea.estimated_revenue > HIGH_REVENUE:
            strengths.append("高い収益性が期待できる")
        if idea.implementation_difficulty == "low":
            strengths.append("実装が比較的容易で早期実現が可能")
        if len(idea.target_customers) >= 3:
            strengths.append("幅広い顧客セグメントに対応可能")
        if len(idea.customer_pains) >= 3:
            strengths.append("複数の顧客課題を同時に解決")
        if len(idea.value_proposition) > 50:
            strengths.append("明確な価値提案による差別化")
        return strengths

    @staticmethod
    def weaknesses(idea: BusinessIdea) -> list[str]:
        weaknesses = []
        if idea.implementation_difficulty == "high":
            weaknesses.append("実装が複雑で時間とリソースが必要")
        if idea.estimated_revenue < LIMITED_MARKET_REVENUE:
            weaknesses.append("市場規模が限定的で成長性に課題")
        if len(idea.target_customers) == 1:
            weaknesses.append("ターゲット顧客が限定的でリスクが高い")
        if len(idea.revenue_model) < 30:
            weaknesses.append("収益モデルの具体性が不足")
        return weaknesses

    @staticmethod
    def suggestions(idea: BusinessIdea, result: IdeaValidationResult) -> list[str]:
        """Improvement suggestions: errors first, then warnings, then a general hint."""
        suggestions = []
        for severity in ("error", "warning"):
            for issue in result.issues:
                if issue.severity != severity:
                    continue
                if issue.field == "title":
                    suggestions.append(f"タイトル「{idea.title}」を見直し、より魅力的で簡潔な表現にしてください。")
                else:
                    suggestions.append(
                        SUGGESTIONS.get(issue.field, f"{issue.field}に関する問題: {issue.message}")
                    )

        if result.quality_score < 60:
            suggestions.append("アイデアの具体性を高め、実現可能性を詳細に検討してください。")
        elif result.quality_score < 80:
            suggestions.append("収益モデルと市場機会の説明をより詳細にしてください。")
        return suggestions

    def analyze(self, idea: BusinessIdea) -> IdeaAnalysis:
        """Strengths, weaknesses, validation result and suggestions for one idea."""
        result = self.validate(idea)
        return IdeaAnalysis(
            strengths=self.strengths(idea),
            weaknesses=self.weaknesses(idea),
            validation_result=result,
            suggestions=self.suggestions(idea, result),
        )
