"""
Income documentation rules.

Decides which income documents each borrower must supply, based on the
income classifier's predicates. Every predicate that holds contributes its own
documents; branches do not suppress one another.
"""

from datetime import date
from typing import Dict, List, Tuple

from mismo_checklist.checklist import conditional, required
from mismo_checklist.constants import (
    K1_OWNERSHIP_THRESHOLD,
    NEW_JOB_OFFER_LETTER_DAYS,
    NEW_JOB_PRIOR_PAYSTUB_DAYS,
    SELF_EMPLOYED_SINGLE_YEAR_THRESHOLD,
    W2_YEARS_REQUIRED,
    MortgageProgram,
    OtherIncomeCategory,
    RequirementCategory,
    RequirementStatus,
)
from mismo_checklist.coverage import detect_employment_gaps
from mismo_checklist.income_classifier import (
    DISABILITY_PATTERN,
    PENSION_PATTERN,
    RETIREMENT_DISTRIBUTION_PATTERN,
    SOCIAL_SECURITY_PATTERN,
    classify_borrower,
    has_military_income,
    has_variable_income,
)
from mismo_checklist.models import Borrower, DocumentRequirement, Employment, LoanContext
from mismo_checklist.tax_years import format_tax_years, tax_years
from mismo_checklist.utils import setup_logging

logger = setup_logging()

INCOME = RequirementCategory.INCOME

# (name suffix, status, reason) pairs per other-income category
OTHER_INCOME_DOCUMENTS: Dict[OtherIncomeCategory, Tuple[Tuple[str, RequirementStatus, str], ...]] = {
    OtherIncomeCategory.CAPITAL_GAINS: (
        ("Personal tax returns (1040s) with Schedule D - 2 years (signed)", RequirementStatus.REQUIRED,
         "Capital gains income requires Schedule D."),
        ("Current asset statement showing investment holdings", RequirementStatus.REQUIRED,
         "Verify the assets generating capital gains will continue."),
    ),
    OtherIncomeCategory.DIVIDEND_INTEREST: (
        ("Personal tax returns (1040s) with Schedule B - 2 years (signed)", RequirementStatus.REQUIRED,
         "Dividend or interest income requires Schedule B."),
        ("Current statement for interest/dividend-bearing accounts", RequirementStatus.REQUIRED,
         "Verify source and continuance of investment income."),
    ),
    OtherIncomeCategory.FOSTER_CARE: (
        ("Verification letter from foster care organization", RequirementStatus.REQUIRED,
         "Foster care income requires official verification."),
        ("Bank statements - 12 months showing foster care payment receipt", RequirementStatus.REQUIRED,
         "Verify consistent receipt of foster care payments."),
    ),
    OtherIncomeCategory.FOREIGN: (
        ("Personal tax returns (1040s) - 2 years (signed)", RequirementStatus.REQUIRED,
         "Foreign income must be reported on US tax returns."),
        ("Documentation of foreign income source and amount (translated, USD)", RequirementStatus.CONDITIONAL,
         "May be required if income is not fully reported on US returns."),
    ),
    OtherIncomeCategory.UNEMPLOYMENT: (
        ("Personal tax returns (1040s) - 2 years", RequirementStatus.CONDITIONAL,
         "Unemployment income requires tax returns if employment is seasonal (recurring annually)."),
        ("Unemployment benefit statements", RequirementStatus.REQUIRED,
         "Verify unemployment benefit amount and duration."),
    ),
    OtherIncomeCategory.ROYALTIES: (
        ("Personal tax returns (1040s) with Schedule E - 2 years (signed)", RequirementStatus.REQUIRED,
         "Royalty income requires Schedule E documentation."),
        ("Royalty contract, agreement, or statement", RequirementStatus.REQUIRED,
         "Confirm royalty amount, payment frequency, and duration."),
    ),
    OtherIncomeCategory.TRUST: (
        ("Full trust document", RequirementStatus.REQUIRED,
         "Trust income requires complete trust documentation."),
        ("Trust bank statements - 2 months showing distribution", RequirementStatus.REQUIRED,
         "Verify continuance of trust distributions."),
    ),
    OtherIncomeCategory.NOTE_RECEIVABLE: (
        ("Copy of the note receivable showing amount, frequency, and duration", RequirementStatus.REQUIRED,
         "Note income must continue for at least 3 years."),
        ("Bank statements - 12 months showing note payment receipt", RequirementStatus.REQUIRED,
         "Verify regular receipt of note payments."),
    ),
    OtherIncomeCategory.BOARDER_INCOME: (
        ("Personal tax returns (1040s) - 1 year showing boarder income", RequirementStatus.REQUIRED,
         "Boarder income must be reported on the borrower's tax returns."),
        ("Proof of shared residency with boarder - 12 months", RequirementStatus.REQUIRED,
         "Boarder must have lived with the borrower for the past 12 months."),
    ),
}


def _employer(employment: Employment) -> str:
    return employment.employer_name or "Employer"


def _unique(values: List[str]) -> List[str]:
    seen: List[str] = []
    for value in values:
        if value and value not in seen:
            seen.append(value)
    return seen


class IncomeDocumentationRules:
    """
    Evaluates income documentation for one borrower.

    Stateless: every method is a function of its arguments.
    """

    def evaluate_borrower(
        self,
        borrower: Borrower,
        loan: LoanContext,
        reference_date: date,
    ) -> List[DocumentRequirement]:
        """
        Run every income branch for one borrower.

        Args:
            borrower: Borrower to evaluate
            loan: Loan context (program-specific income items)
            reference_date: Date used for tax years and new-job windows

        Returns:
            Income requirements in branch order
        """
        profile = classify_borrower(borrower)
        docs: List[DocumentRequirement] = []

        if profile.self_employed:
            docs.extend(self.evaluate_self_employed(borrower, loan, reference_date))
        if profile.alimony:
            docs.extend(self.evaluate_alimony(borrower))
        if profile.base_income:
            docs.extend(self.evaluate_base_income(borrower, reference_date))
        if profile.retired:
            docs.extend(self.evaluate_retired(borrower))
        if profile.other_categories:
            docs.extend(self.evaluate_other_income(borrower, profile.other_categories))
        docs.extend(self.evaluate_employment_gaps(borrower, reference_date))

        logger.debug(
            "Income rules for %s: self_employed=%s alimony=%s base=%s retired=%s other=%s -> %d items",
            borrower.name, profile.self_employed, profile.alimony, profile.base_income,
            profile.retired, [c.value for c in profile.other_categories], len(docs),
        )
        return docs

    def evaluate_self_employed(
        self,
        borrower: Borrower,
        loan: LoanContext,
        reference_date: date,
    ) -> List[DocumentRequirement]:
        tag = borrower.tag
        docs = []

        self_employed = [e for e in borrower.employments if e.is_self_employed]
        oldest = min(
            self_employed,
            key=lambda e: e.start_date or reference_date,
            default=None,
        )
        years_in_business = (oldest.months_employed or 0) / 12 if oldest else 0
        years_needed = 1 if years_in_business > SELF_EMPLOYED_SINGLE_YEAR_THRESHOLD else 2
        years_label = format_tax_years(tax_years(years_needed, reference_date))

        if years_needed == 1:
            reason = (f"Self-employed for {int(years_in_business)} years "
                      f"(more than {SELF_EMPLOYED_SINGLE_YEAR_THRESHOLD}). Only 1 year required.")
        else:
            reason = (f"Self-employed for {int(years_in_business)} years "
                      f"({SELF_EMPLOYED_SINGLE_YEAR_THRESHOLD} or fewer). 2 years required.")
        docs.append(required(INCOME, f"{tag} Personal tax returns (1040s) - {years_label}", reason))
        docs.append(required(
            INCOME,
            f"{tag} Year-to-date Profit & Loss (P&L) statement",
            "Self-employment income requires current year performance documentation.",
        ))

        entities = [e for e in self_employed if e.has_entity_type]
        for employment in entities:
            employer = _employer(employment)
            if employment.is_s_corp or employment.is_1120:
                docs.append(required(
                    INCOME,
                    f"{tag} Business-issued W-2s - {employer} ({years_label})",
                    "S-Corporation or C-Corporation pays the borrower through W-2 wages.",
                ))
                docs.append(required(
                    INCOME,
                    f"{tag} 1120/1120S business tax returns - {employer} ({years_label})",
                    "Corporate entity requires business returns.",
                ))
            if employment.is_partnership or employment.is_1065:
                docs.append(required(
                    INCOME,
                    f"{tag} 1065 partnership tax returns - {employer} ({years_label})",
                    "Partnership entity requires 1065 returns.",
                ))

        if not entities:
            docs.append(required(
                INCOME,
                f"{tag} Business bank statements - 3 months",
                "Self-employed without a separate business entity (sole proprietor).",
            ))
            docs.append(conditional(
                INCOME,
                f"{tag} Paycheck stubs (if generated)",
                "Provide if the self-employed business generates paychecks.",
            ))

        for employment in borrower.employments:
            pct = employment.ownership_percent
            if pct is not None and pct < K1_OWNERSHIP_THRESHOLD:
                docs.append(required(
                    INCOME,
                    f"{tag} K-1 tax form - {_employer(employment)} (ownership < 25%)",
                    f"Ownership interest of {pct:g}% is less than 25% of the business.",
                ))

        if loan.program == MortgageProgram.FHA:
            docs.append(required(
                INCOME,
                f"{tag} Business verification letter (CPA, business license, or regulatory listing)",
                "FHA requires third-party verification that the business is currently operating.",
            ))

        return docs

    def evaluate_alimony(self, borrower: Borrower) -> List[DocumentRequirement]:
        tag = borrower.tag
        return [
            required(
                INCOME,
                f"{tag} Divorce decree or separation agreement",
                "Alimony or child support income requires legal documentation.",
            ),
            required(
                INCOME,
                f"{tag} Bank statements - 6 months showing alimony/child support receipt",
                "Verify consistent receipt of alimony or child support payments.",
            ),
        ]

    def evaluate_base_income(self, borrower: Borrower, reference_date: date) -> List[DocumentRequirement]:
        tag = borrower.tag
        docs = []

        w2_jobs = [e for e in borrower.employments if not e.is_self_employed]
        current = [e for e in w2_jobs if e.is_current]
        prior = [e for e in w2_jobs if not e.is_current]
        current_names = _unique([e.employer_name for e in current])
        prior_names = _unique([e.employer_name for e in prior])

        # Paystubs, or the LES for military pay
        if has_military_income(borrower):
            docs.append(required(
                INCOME,
                f"{tag} Leave & Earnings Statement (LES) - most recent",
                "Military income is verified with the LES in place of paystubs.",
            ))
        elif current_names:
            for name in current_names:
                docs.append(required(
                    INCOME,
                    f"{tag} Paycheck stubs - 30 days (most recent) - {name}",
                    "Standard documentation for W-2 employment income.",
                ))
        else:
            docs.append(required(
                INCOME,
                f"{tag} Paycheck stubs - 30 days (most recent)",
                "Standard documentation for W-2 employment income.",
            ))

        w2_label = format_tax_years(tax_years(W2_YEARS_REQUIRED, reference_date))
        employers = _unique(current_names + prior_names)
        w2_name = f"{tag} W-2 forms - {w2_label}"
        if employers:
            w2_name += f" ({', '.join(employers)})"
        docs.append(required(INCOME, w2_name, "Verify 2-year employment income history."))

        for employment in current:
            if employment.start_date is None:
                continue
            days = (reference_date - employment.start_date).days
            if days <= NEW_JOB_OFFER_LETTER_DAYS:
                docs.append(required(
                    INCOME,
                    f"{tag} Offer letter for new employment - {_employer(employment)}",
                    "Employment started within the last 30 days.",
                ))
            elif days <= NEW_JOB_PRIOR_PAYSTUB_DAYS and prior_names:
                docs.append(conditional(
                    INCOME,
                    f"{tag} Final paystub from prior employer ({', '.join(prior_names)})",
                    "Current employment started within the last 6 months.",
                ))

        if has_variable_income(borrower):
            reason = ("Variable income (bonus/tips/overtime/commission) or part-time "
                      "employment requires extended history.")
            docs.append(required(INCOME, f"{tag} Personal tax returns (1040s) - {w2_label}", reason))
            docs.append(required(
                INCOME,
                f"{tag} Last paycheck from prior calendar year and/or each job over last 2 years",
                reason,
            ))

        return docs

    def evaluate_retired(self, borrower: Borrower) -> List[DocumentRequirement]:
        tag = borrower.tag
        docs = []
        types = [income.income_type or "" for income in borrower.incomes]

        if any(SOCIAL_SECURITY_PATTERN.search(t) for t in types):
            docs.append(required(
                INCOME,
                f"{tag} Social Security award letter",
                "Social Security income requires verification of the benefit amount.",
            ))
            docs.append(required(
                INCOME,
                f"{tag} Bank statements showing current receipt of Social Security",
                "Verify the benefit is currently being received.",
            ))
            docs.append(conditional(
                INCOME,
                f"{tag} Proof of 3 years continuance (if not borrower's own Social Security)",
                "Required if receiving Social Security on behalf of another person.",
            ))

        for label, pattern in (("Pension", PENSION_PATTERN), ("Disability", DISABILITY_PATTERN)):
            if not any(pattern.search(t) for t in types):
                continue
            lowered = label.lower()
            docs.append(required(
                INCOME,
                f"{tag} {label} benefit statement or award letter",
                f"{label} income requires documentation of benefit amount.",
            ))
            docs.append(required(
                INCOME,
                f"{tag} Bank statements showing current receipt of {lowered}",
                f"Verify ongoing receipt of {lowered} benefits.",
            ))
            docs.append(required(
                INCOME,
                f"{tag} Proof of 3 years continuance of {lowered}",
                f"{label} income must be expected to continue for at least 3 years.",
            ))

        has_distribution = any(
            RETIREMENT_DISTRIBUTION_PATTERN.search(t)
            and not (SOCIAL_SECURITY_PATTERN.search(t) or PENSION_PATTERN.search(t))
            for t in types
        )
        if has_distribution:
            docs.append(required(
                INCOME,
                f"{tag} Retirement distribution award letter or account custodian letter",
                "Retirement account distributions require documentation of the payment terms.",
            ))
            docs.append(required(
                INCOME,
                f"{tag} Bank statements - 3 months showing retirement distribution receipt",
                "Regular retirement account distributions require proof of consistent receipt.",
            ))
            docs.append(required(
                INCOME,
                f"{tag} Retirement account statement showing 3 years continuance",
                "Account balance must support distributions for at least 3 years.",
            ))

        return docs

    def evaluate_other_income(
        self,
        borrower: Borrower,
        categories: List[OtherIncomeCategory],
    ) -> List[DocumentRequirement]:
        tag = borrower.tag
        docs = []
        for category in categories:
            for suffix, status, reason in OTHER_INCOME_DOCUMENTS[category]:
                docs.append(DocumentRequirement(f"{tag} {suffix}", status, reason, INCOME))
        return docs

    def evaluate_employment_gaps(self, borrower: Borrower, reference_date: date) -> List[DocumentRequirement]:
        tag = borrower.tag
        return [
            required(
                INCOME,
                f"{tag} Letter of explanation - employment gap ({gap.from_employer} to {gap.to_employer})",
                f"{gap.gap_months}-month gap in employment between "
                f"{gap.from_employer} and {gap.to_employer}.",
            )
            for gap in detect_employment_gaps(borrower.employments, reference_date)
        ]
