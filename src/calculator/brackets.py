"""
Progressive bracket tax and preferential-rate stacking.

Shared by the regular tax, the qualified dividend and capital gain worksheet,
the alternative minimum tax and the state modules. All amounts are integer
cents; each routine rounds once, after accumulating in Decimal.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, List, Optional, Sequence, Tuple

from calculator.decimal_math import to_cents, to_decimal, whole_cents
from calculator.tax_year_config import TaxYearConfig


@dataclass(frozen=True)
class TaxBracket:
    """
    One bracket: income up to ``upper_bound`` (cents) is taxed at ``rate``.

    The last bracket of a table has ``upper_bound=None`` (unbounded).
    """
    upper_bound: Optional[int]
    rate: float


def brackets_from_floors(floors: Sequence[Tuple[float, float]]) -> List[TaxBracket]:
    """
    Convert ``[(floor_in_dollars, rate), ...]`` into ``TaxBracket`` list.

    Each floor starts a bracket, so a bracket's upper bound is the next
    bracket's floor.

    Examples:
        >>> brackets_from_floors([(0, 0.10), (11925, 0.12)])
        [TaxBracket(upper_bound=1192500, rate=0.1), TaxBracket(upper_bound=None, rate=0.12)]
    """
    ordered = sorted(floors, key=lambda item: item[0])
    result: List[TaxBracket] = []
    for index, (_floor, rate_value) in enumerate(ordered):
        if index + 1 < len(ordered):
            upper: Optional[int] = to_cents(ordered[index + 1][0])
        else:
            upper = None
        result.append(TaxBracket(upper_bound=upper, rate=rate_value))
    return result


def _bracket_tax_decimal(taxable_income: int, brackets: Sequence[TaxBracket]) -> Decimal:
    total = Decimal("0")
    lower = 0
    for bracket in brackets:
        if taxable_income <= lower:
            break
        upper = taxable_income if bracket.upper_bound is None else min(taxable_income, bracket.upper_bound)
        if upper > lower:
            total += Decimal(upper - lower) * to_decimal(bracket.rate)
        if bracket.upper_bound is None:
            break
        lower = bracket.upper_bound
    return total


def bracket_tax(taxable_income: int, brackets: Sequence[TaxBracket]) -> int:
    """
    Tax on ``taxable_income`` under a progressive table.

    Returns 0 for non-positive income.

    Examples:
        >>> bracket_tax(5000000, [TaxBracket(1000000, 0.10), TaxBracket(None, 0.20)])
        900000
    """
    if taxable_income <= 0:
        return 0
    return whole_cents(_bracket_tax_decimal(taxable_income, brackets))


def ordinary_brackets(filing_status: str, config: TaxYearConfig) -> List[TaxBracket]:
    table = config.ordinary_income_brackets.get(filing_status) or config.ordinary_income_brackets["single"]
    return brackets_from_floors(table)


def ordinary_tax(taxable_income: int, filing_status: str, config: TaxYearConfig) -> int:
    """Regular tax on ordinary income (Tax Table / Tax Rate Schedules)."""
    return bracket_tax(taxable_income, ordinary_brackets(filing_status, config))


def preferential_brackets(filing_status: str, config: TaxYearConfig) -> List[TaxBracket]:
    """0% / 15% / 20% bands for qualified dividends and long-term gains."""
    return [
        TaxBracket(config.cents(config.qd_ltcg_0_rate_threshold, filing_status), 0.0),
        TaxBracket(config.cents(config.qd_ltcg_15_rate_threshold, filing_status), 0.15),
        TaxBracket(None, 0.20),
    ]


def stacked_preferential_tax(
    total: int,
    preferential: int,
    preferential_brackets: Sequence[TaxBracket],
    ordinary_tax_fn: Callable[[int], int],
) -> int:
    """
    Tax when preferential income is stacked on top of ordinary income.

    Ordinary income fills the brackets first; each preferential band is
    applied only to the slice of ``[ordinary, total)`` it covers. The
    result never exceeds taxing everything as ordinary income.
    """
    if total <= 0:
        return 0
    preferential = max(0, min(preferential, total))
    ordinary = total - preferential

    pref_tax = Decimal("0")
    lower = 0
    for bracket in preferential_brackets:
        upper = bracket.upper_bound
        start = max(lower, ordinary)
        end = total if upper is None else min(upper, total)
        if end > start:
            pref_tax += Decimal(end - start) * to_decimal(bracket.rate)
        if upper is None:
            break
        lower = upper

    stacked = ordinary_tax_fn(ordinary) + whole_cents(pref_tax)
    return min(stacked, ordinary_tax_fn(total))


def net_cap_gain_for_qdcg(schedule_d_line15: int, schedule_d_line16: int) -> int:
    """Net capital gain entering the QDCG worksheet (smaller of lines 15 and 16)."""
    if schedule_d_line15 <= 0 or schedule_d_line16 <= 0:
        return 0
    return min(schedule_d_line15, schedule_d_line16)


def qdcg_tax(
    taxable_income: int,
    qualified_dividends: int,
    net_capital_gain: int,
    filing_status: str,
    config: TaxYearConfig,
) -> int:
    """Qualified Dividends and Capital Gain Tax Worksheet (Form 1040, Line 16)."""
    preferential = max(0, qualified_dividends) + max(0, net_capital_gain)
    return stacked_preferential_tax(
        taxable_income,
        preferential,
        preferential_brackets(filing_status, config),
        lambda amount: ordinary_tax(amount, filing_status, config),
    )


def amt_bracket_tax(amount: int, filing_status: str, config: TaxYearConfig) -> int:
    """26% up to the 28% threshold, 28% above (Form 6251, Line 7)."""
    threshold = config.cents(config.amt_28_threshold, filing_status, 232600.0)
    return bracket_tax(
        amount,
        [TaxBracket(threshold, config.amt_rate_26), TaxBracket(None, config.amt_rate_28)],
    )
