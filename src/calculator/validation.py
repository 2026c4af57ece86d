from __future__ import annotations

from dataclasses import dataclass
from typing import List

from models.deductions import DeductionMethod
from models.tax_return import TaxReturn
from models.taxpayer import FilingStatus


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    message: str
    severity: str = "error"  # "error" | "warning"


class TaxReturnValidator:
    def validate(self, tax_return: TaxReturn, tax_year: int) -> List[ValidationIssue]:
        issues: List[ValidationIssue] = []

        if tax_return.tax_year != tax_year:
            issues.append(
                ValidationIssue(
                    "tax_year",
                    f"Return is for {tax_return.tax_year} but parameters are for {tax_year}.",
                    severity="warning",
                )
            )

        if tax_return.filing_status == FilingStatus.MARRIED_JOINT and tax_return.spouse is None:
            issues.append(
                ValidationIssue("spouse", "Married filing jointly without spouse information.", severity="warning")
            )

        if tax_return.deductions.method == DeductionMethod.ITEMIZED and tax_return.deductions.itemized is None:
            issues.append(
                ValidationIssue(
                    "deductions.itemized",
                    "Itemized deductions elected but no Schedule A detail provided; standard deduction used.",
                    severity="warning",
                )
            )

        for w2 in tax_return.w2s:
            if w2.state_tax_withheld > 0 and not w2.state_code:
                issues.append(
                    ValidationIssue(
                        f"w2s[{w2.id}].state_code",
                        "State tax withheld (Box 17) without a state code (Box 15).",
                        severity="warning",
                    )
                )

        for div in tax_return.form1099_divs:
            if div.qualified_dividends > div.ordinary_dividends:
                issues.append(
                    ValidationIssue(
                        f"form1099_divs[{div.id}].qualified_dividends",
                        "Qualified dividends cannot exceed total ordinary dividends.",
                    )
                )

        for business in tax_return.schedule_c_businesses:
            if business.total_expenses > business.gross_receipts:
                issues.append(
                    ValidationIssue(
                        f"schedule_c_businesses[{business.id}].total_expenses",
                        "Business expenses exceed gross receipts; confirm this is correct.",
                        severity="warning",
                    )
                )

        return issues
