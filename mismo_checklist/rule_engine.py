"""
Requirement Rule Engine.

Walks a fixed sequence of rule groups over a Deal and collects
DocumentRequirement records into the income, general, assets and credit
buckets. Groups only read the Deal; none depends on what another group
produced.
"""

import re
from datetime import date
from typing import Dict, List

from mismo_checklist.checklist import ChecklistBuilder, conditional, required, satisfied
from mismo_checklist.constants import (
    CONVENTIONAL_PMI_LTV_THRESHOLD,
    HISTORY_MONTHS_REQUIRED,
    OPERATING_STATEMENT_MIN_UNITS,
    MortgageProgram,
    RequirementCategory,
)
from mismo_checklist.coverage import (
    detect_coverage_gaps,
    employment_coverage,
    residence_coverage,
)
from mismo_checklist.income_rules import IncomeDocumentationRules
from mismo_checklist.models import (
    ChecklistResult,
    Deal,
    DocumentRequirement,
    LoanSummary,
    StatusIndicator,
)
from mismo_checklist.utils import setup_logging

logger = setup_logging()

INCOME = RequirementCategory.INCOME
GENERAL = RequirementCategory.GENERAL
ASSETS = RequirementCategory.ASSETS
CREDIT = RequirementCategory.CREDIT

CONDO_PATTERN = re.compile(r"condo", re.IGNORECASE)
MANUFACTURED_PATTERN = re.compile(r"manufactured|mobile", re.IGNORECASE)
INVESTMENT_PATTERN = re.compile(r"invest", re.IGNORECASE)
SECOND_HOME_PATTERN = re.compile(r"second", re.IGNORECASE)
ACTIVE_DUTY_PATTERN = re.compile(r"active\s*duty|military|armed\s*forces", re.IGNORECASE)
GIFT_PATTERN = re.compile(r"gift", re.IGNORECASE)
RENT_PATTERN = re.compile(r"rent", re.IGNORECASE)


class RequirementRuleEngine:
    """
    Produces the document checklist for a Deal.

    Holds no per-deal state; one engine can evaluate any number of deals,
    concurrently or not.
    """

    def __init__(self, income_rules: IncomeDocumentationRules = None):
        self.income_rules = income_rules or IncomeDocumentationRules()

    def evaluate_universal(self, deal: Deal) -> List[DocumentRequirement]:
        return [
            required(
                GENERAL,
                "IRS Form 4506-C (transcript authorization)",
                "Standard for income verification.",
            ),
        ]

    def evaluate_purpose(self, deal: Deal) -> List[DocumentRequirement]:
        """
        Purchase vs. refinance documents.

        Refinances branch again on cash-out vs. rate/term.
        """
        loan = deal.loan
        docs = []
        if loan.is_purchase:
            docs.append(required(GENERAL, "Executed purchase contract", "Loan purpose is Purchase."))
            docs.append(required(
                GENERAL,
                "Earnest money proof (canceled check / statement)",
                "Shows source of EMD.",
            ))
        elif loan.is_refinance:
            docs.append(required(
                GENERAL,
                "Current mortgage statement (subject property)",
                "Refinance transaction.",
            ))
            docs.append(required(GENERAL, "Promissory Note (copy)", "Refinance transaction."))
            if loan.is_cash_out:
                docs.append(required(
                    GENERAL,
                    "Letter of explanation - use of cash-out proceeds",
                    "Cash-out refinance.",
                ))
            else:
                docs.append(required(
                    GENERAL,
                    "Payoff statement for existing mortgage",
                    "Rate/term refinance pays off the existing lien.",
                ))
        else:
            logger.debug("Loan purpose %r not recognized; no purpose documents", loan.loan_purpose_text)
        return docs

    def evaluate_borrower_identity(self, deal: Deal) -> List[DocumentRequirement]:
        """
        Identity, residency and declaration documents for every borrower.

        Args:
            deal: Deal being evaluated

        Returns:
            General and credit requirements, borrower by borrower
        """
        docs = []
        for borrower in deal.borrowers:
            tag = borrower.tag
            dec = borrower.declarations

            docs.append(required(GENERAL, f"{tag} Government-issued photo ID", "Always required per borrower."))

            if dec.us_citizen is False:
                if dec.permanent_resident_alien:
                    docs.append(required(
                        GENERAL,
                        f"{tag} I-551 (Green Card) - front & back",
                        "Non-US citizen (permanent resident).",
                    ))
                elif dec.non_permanent_resident_alien:
                    docs.append(required(
                        GENERAL,
                        f"{tag} Valid EAD card (I-766) or visa with work authorization + I-94",
                        "Non-permanent resident alien.",
                    ))
                else:
                    docs.append(conditional(
                        GENERAL,
                        f"{tag} Proof of lawful residency",
                        "Non-US citizen with residency status not declared.",
                    ))

            if dec.bankruptcy:
                docs.append(required(
                    CREDIT,
                    f"{tag} Bankruptcy documents (petition, schedules, discharge)",
                    "Bankruptcy indicated on declarations.",
                ))
                docs.append(required(
                    CREDIT,
                    f"{tag} Letter of explanation - bankruptcy",
                    "Bankruptcy indicated on declarations.",
                ))
            if dec.foreclosure:
                docs.append(required(
                    CREDIT,
                    f"{tag} Foreclosure / short sale documents + LOE",
                    "History of foreclosure/short sale.",
                ))
            if dec.outstanding_judgments:
                docs.append(required(
                    CREDIT,
                    f"{tag} Court payoff / release for outstanding judgments",
                    "Outstanding judgments indicated.",
                ))
            if dec.alimony_obligation or dec.child_support_obligation:
                docs.append(required(
                    CREDIT,
                    f"{tag} Divorce decree / court order for support obligation",
                    "Alimony or child support obligation indicated on declarations.",
                ))
        return docs

    def evaluate_income(self, deal: Deal, reference_date: date) -> List[DocumentRequirement]:
        docs = []
        for borrower in deal.borrowers:
            docs.extend(self.income_rules.evaluate_borrower(borrower, deal.loan, reference_date))
        return docs

    def evaluate_program(self, deal: Deal) -> List[DocumentRequirement]:
        """
        Program-specific documents (FHA, VA, USDA).

        Conventional loans only get the PMI check.
        """
        loan = deal.loan
        docs = []

        if loan.program == MortgageProgram.FHA:
            if loan.fha_case_number:
                docs.append(satisfied(
                    GENERAL,
                    "FHA case number assignment",
                    f"FHA case number {loan.fha_case_number} on file.",
                ))
            else:
                docs.append(required(GENERAL, "FHA case number assignment", "FHA loan program."))
            if loan.is_purchase:
                docs.append(required(
                    GENERAL,
                    "FHA Amendatory Clause / Real Estate Certification (signed)",
                    "FHA purchase transaction.",
                ))
                docs.append(conditional(
                    GENERAL,
                    "Prior sale documentation (FHA anti-flipping)",
                    "Required if the seller acquired the property within the last 180 days.",
                ))
            elif loan.is_refinance:
                docs.append(conditional(
                    GENERAL,
                    "FHA Streamline net tangible benefit worksheet",
                    "Required if the refinance is an FHA Streamline.",
                ))
            docs.append(required(GENERAL, "CAIVRS clearance", "FHA requires a CAIVRS check for every borrower."))
            docs.append(conditional(
                CREDIT,
                "Collection account explanation / payoff",
                "FHA: collections totaling $2,000 or more must be addressed.",
            ))

        elif loan.program == MortgageProgram.VA:
            docs.append(required(GENERAL, "Certificate of Eligibility (COE)", "VA loan program."))
            active_duty = any(
                ACTIVE_DUTY_PATTERN.search(text or "")
                for borrower in deal.borrowers
                for emp in borrower.employments
                for text in (emp.classification_type, emp.status_type, emp.position_description)
            )
            if active_duty:
                docs.append(required(
                    GENERAL,
                    "Statement of Service (signed by commanding officer)",
                    "Borrower appears to be on active duty.",
                ))
            else:
                docs.append(required(
                    GENERAL,
                    "DD-214 (Certificate of Release or Discharge)",
                    "Veteran no longer on active duty.",
                ))
            docs.append(conditional(
                GENERAL,
                "VA funding fee exemption letter",
                "Required if the veteran claims a funding fee exemption.",
            ))
            docs.append(conditional(
                GENERAL,
                "Termite / wood-destroying insect inspection",
                "Required by VA in designated areas.",
            ))

        elif loan.program == MortgageProgram.USDA:
            docs.append(required(
                GENERAL,
                "USDA property eligibility determination",
                "USDA loans require an eligible rural property.",
            ))
            docs.append(required(
                INCOME,
                "USDA household income eligibility worksheet",
                "Total household income must be within the area limit.",
            ))
            docs.append(required(
                GENERAL,
                "USDA guarantee fee disclosure",
                "USDA loan program.",
            ))

        else:
            if loan.ltv is not None and loan.ltv > CONVENTIONAL_PMI_LTV_THRESHOLD:
                docs.append(conditional(
                    GENERAL,
                    "Private mortgage insurance (PMI) certificate",
                    f"Conventional loan with LTV {loan.ltv:g}% above "
                    f"{CONVENTIONAL_PMI_LTV_THRESHOLD:g}%.",
                ))
        return docs

    def evaluate_property(self, deal: Deal) -> List[DocumentRequirement]:
        loan = deal.loan
        property_type = loan.property_type or ""
        occupancy = loan.occupancy_type or ""
        units = loan.number_of_units or 0
        docs = []

        if CONDO_PATTERN.search(property_type):
            docs.append(required(GENERAL, "Condo questionnaire", "Condominium project review."))
            docs.append(required(
                GENERAL,
                "Condo master insurance policy",
                "Condominium project review.",
            ))
            if loan.program == MortgageProgram.FHA:
                docs.append(required(
                    GENERAL,
                    "FHA condo project approval",
                    "FHA loans require an approved condominium project.",
                ))
        if MANUFACTURED_PATTERN.search(property_type):
            docs.append(required(GENERAL, "HUD data plate / certification label", "Manufactured home."))
            docs.append(required(GENERAL, "Engineer's foundation certification", "Manufactured home."))
            docs.append(required(
                GENERAL,
                "Affidavit of affixation (titled as real property)",
                "Manufactured home must be real property.",
            ))

        if units > 1:
            docs.append(required(
                INCOME,
                "Lease agreements for all rental units",
                f"Multi-unit property ({units} units).",
            ))
        if units >= OPERATING_STATEMENT_MIN_UNITS:
            docs.append(conditional(
                INCOME,
                "Small residential income property appraisal / operating statement",
                f"{units}-unit property; rental income may be used to qualify.",
            ))

        if INVESTMENT_PATTERN.search(occupancy):
            docs.append(required(INCOME, "Lease agreement (subject property)", "Investment property."))
            docs.append(required(
                INCOME,
                "Schedule E from personal tax returns",
                "Investment property rental history.",
            ))
            docs.append(required(ASSETS, "Reserves - 6 months PITIA", "Investment property."))
        elif SECOND_HOME_PATTERN.search(occupancy):
            docs.append(required(GENERAL, "Second home occupancy affidavit", "Second home occupancy."))

        docs.append(conditional(
            GENERAL,
            "Solar panel lease / PACE lien documentation",
            "Required if the property has leased solar panels or a PACE lien.",
        ))
        return docs

    def evaluate_assets(self, deal: Deal) -> List[DocumentRequirement]:
        docs = []
        for asset in deal.assets:
            label = asset.holder_name or asset.account_identifier or "Account"
            docs.append(required(
                ASSETS,
                f"Account statements (2 months) - {asset.asset_type or 'Asset'} at {label}",
                "Verify funds to close & reserves.",
            ))
        if not deal.assets and deal.loan.is_purchase:
            docs.append(required(
                ASSETS,
                "Proof of funds for down payment & closing",
                "No assets listed in XML.",
            ))

        if any(GIFT_PATTERN.search(asset.asset_type or "") for asset in deal.assets):
            reason = "Gift funds listed in assets."
            docs.append(required(ASSETS, "Signed gift letter", reason))
            docs.append(required(ASSETS, "Donor's proof of funds (bank statement)", reason))
            docs.append(required(ASSETS, "Evidence of gift transfer / deposit", reason))

        docs.append(conditional(
            ASSETS,
            "Letter of explanation - large deposits",
            "Required for any non-payroll deposit over 50% of monthly income.",
        ))
        return docs

    def evaluate_reo(self, deal: Deal) -> List[DocumentRequirement]:
        docs = []
        reo_count = len(deal.reo_properties)
        schedule_e_added = False
        for idx, prop in enumerate(deal.reo_properties, start=1):
            label = prop.address or f"Property #{idx}"
            docs.append(required(CREDIT, f"Mortgage/HELOC statement - {label}", "REO property identified."))
            docs.append(required(CREDIT, f"Hazard insurance declaration - {label}", "Verify coverage."))
            if prop.is_investment:
                docs.append(required(CREDIT, f"Lease agreement - {label}", "Rental REO property."))
                if not schedule_e_added:
                    docs.append(required(
                        INCOME,
                        f"Personal tax returns with Schedule E ({reo_count} REO properties)",
                        "Rental income from REO properties.",
                    ))
                    schedule_e_added = True
        return docs

    def evaluate_trailing(self, deal: Deal) -> List[DocumentRequirement]:
        docs = [
            required(GENERAL, "Homeowner's insurance declaration (subject property)", "Required at closing."),
            conditional(GENERAL, "Flood insurance policy", "Required if the property is in a flood zone."),
        ]
        if deal.loan.has_hoa:
            docs.append(required(GENERAL, "HOA dues statement", "Property is part of an association."))
            docs.append(conditional(
                GENERAL,
                "HOA contact information / certification",
                "Required if the lender must verify association standing.",
            ))
        for liability in deal.liabilities:
            if not liability.to_be_paid_at_closing:
                continue
            label = liability.holder_name or liability.account_identifier or liability.liability_type or "Account"
            docs.append(required(CREDIT, f"Payoff letter - {label}", "Liability to be paid at closing."))
        docs.append(conditional(
            CREDIT,
            "Letter of explanation - recent credit inquiries",
            "Required for inquiries within the last 90 days.",
        ))
        rents = any(
            RENT_PATTERN.search(residence.residency_type or "")
            or RENT_PATTERN.search(residence.residency_basis or "")
            for borrower in deal.borrowers
            for residence in borrower.residences
        )
        if rents:
            docs.append(conditional(
                CREDIT,
                "Verification of rent (12 months cancelled checks or VOR)",
                "Borrower currently or previously rented.",
            ))
        return docs

    def build_summary(self, deal: Deal, reference_date: date) -> LoanSummary:
        """
        Loan summary and status indicators for renderers.

        Coverage indicators report the worst borrower.
        """
        loan = deal.loan
        indicators: Dict[str, StatusIndicator] = {}

        worst_employment = max((employment_coverage(b).months_needed for b in deal.borrowers), default=0)
        if worst_employment > 0:
            indicators["employment"] = StatusIndicator(f"Employment: need +{worst_employment} mo", "need")
        else:
            indicators["employment"] = StatusIndicator(f"Employment: {HISTORY_MONTHS_REQUIRED} mo", "ok")

        worst_residence = max((residence_coverage(b).months_needed for b in deal.borrowers), default=0)
        if worst_residence > 0:
            indicators["residence"] = StatusIndicator(f"Residence: need +{worst_residence} mo", "need")
        else:
            indicators["residence"] = StatusIndicator(f"Residence: {HISTORY_MONTHS_REQUIRED} mo", "ok")

        reo_count = len(deal.reo_properties)
        if reo_count:
            indicators["reo"] = StatusIndicator(f"REO: {reo_count}", "warn")
        else:
            indicators["reo"] = StatusIndicator("REO: none", "ok")

        flagged = any(
            b.declarations.bankruptcy
            or b.declarations.foreclosure
            or b.declarations.outstanding_judgments
            or b.declarations.us_citizen is False
            for b in deal.borrowers
        )
        if flagged:
            indicators["declarations"] = StatusIndicator("Declarations: flags present", "warn")
        else:
            indicators["declarations"] = StatusIndicator("Declarations: clear", "ok")

        coverage_gaps = {
            b.name: len(detect_coverage_gaps(b.employments, reference_date))
            for b in deal.borrowers
        }

        return LoanSummary(
            borrower_names=[b.name for b in deal.borrowers],
            loan_purpose=loan.loan_purpose_text,
            mortgage_type=loan.mortgage_type_text,
            program=loan.program.value,
            base_loan_amount=loan.base_loan_amount,
            occupancy_type=loan.occupancy_type,
            ltv=loan.ltv,
            complexity_flags=list(deal.complexity_flags),
            indicators=indicators,
            coverage_gaps=coverage_gaps,
        )

    def evaluate(self, deal: Deal, reference_date: date) -> ChecklistResult:
        """
        Run every rule group on a deal.

        Args:
            deal: Extracted deal
            reference_date: Date standing in for "now"

        Returns:
            ChecklistResult with de-duplicated category buckets and summary
        """
        builder = ChecklistBuilder()
        groups = [
            ("universal", self.evaluate_universal(deal)),
            ("purpose", self.evaluate_purpose(deal)),
            ("borrower_identity", self.evaluate_borrower_identity(deal)),
            ("income", self.evaluate_income(deal, reference_date)),
            ("program", self.evaluate_program(deal)),
            ("property", self.evaluate_property(deal)),
            ("assets", self.evaluate_assets(deal)),
            ("reo", self.evaluate_reo(deal)),
            ("trailing", self.evaluate_trailing(deal)),
        ]
        for group, requirements in groups:
            kept = builder.extend(requirements)
            logger.debug("Rule group %s: %d items (%d duplicates skipped)",
                         group, kept, len(requirements) - kept)

        result = builder.build(self.build_summary(deal, reference_date))
        logger.info(
            "Checklist built for %d borrower(s), program=%s: income=%d general=%d assets=%d credit=%d",
            deal.borrower_count, deal.loan.program.value,
            len(result.income), len(result.general), len(result.assets), len(result.credit),
        )
        return result
