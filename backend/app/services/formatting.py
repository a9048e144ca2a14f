"""Locale formatting for report figures (JPY, ja-JP)."""

import re
from decimal import ROUND_HALF_UP, Decimal

_YEN_PATTERN = re.compile(r"^(-)?¥(\d{1,3}(?:,\d{3})*)$")


def whole_yen(value: int | float) -> int:
    """Round to whole yen, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    if isinstance(value, int):
        return value
    return int(Decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))


class CurrencyFormatter:
    """Format and parse whole-yen amounts as ``¥1,234,567``."""

    currency = "JPY"
    locale = "ja-JP"
    minimum_fraction_digits = 0
    maximum_fraction_digits = 0

    @property
    def options(self) -> dict:
        return {
            "currency": self.currency,
            "locale": self.locale,
            "minimumFractionDigits": self.minimum_fraction_digits,
            "maximumFractionDigits": self.maximum_fraction_digits,
        }

    def format(self, value: int | float) -> str:
        """Format a yen amount, rounding to whole yen."""
        amount = whole_yen(value)
        sign = "-" if amount < 0 else ""
        return f"{sign}¥{abs(amount):,}"

    def parse(self, formatted: str) -> int:
        """
        Parse a string produced by ``format`` back to its amount.

        Raises:
            ValueError: If the string is not a formatted yen amount
        """
        match = _YEN_PATTERN.match(formatted.strip())
        if not match:
            raise ValueError(f"Not a formatted yen amount: {formatted!r}")
        amount = int(match.group(2).replace(",", ""))
        return -amount if match.group(1) else amount


yen = CurrencyFormatter()


def format_percent(value: float, digits: int = 1) -> str:
    """Format a percentage, e.g. 15.5 -> '15.5%'."""
    return f"{value:.{digits}f}%"


def format_months(months: int) -> str:
    """Format a duration in months, e.g. 6 -> '6ヶ月'."""
    return f"{months}ヶ月"
