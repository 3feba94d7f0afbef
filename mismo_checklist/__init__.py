"""
MISMO Document Requirement Engine

Reads a MISMO 3.4 loan file and produces the categorized list of documents
an underwriter needs to collect (income, general, assets, credit).
"""

from mismo_checklist.constants import (
    LoanPurpose,
    MortgageProgram,
    OtherIncomeCategory,
    RequirementCategory,
    RequirementStatus,
)
from mismo_checklist.exceptions import ChecklistError, MISMOParseError, UnsupportedFileError
from mismo_checklist.models import (
    Asset,
    Borrower,
    ChecklistResult,
    Deal,
    Declarations,
    DocumentRequirement,
    Employment,
    Income,
    Liability,
    LoanContext,
    LoanSummary,
    REOProperty,
    Residence,
)
from mismo_checklist.coverage import (
    Coverage,
    EmploymentGap,
    calculate_coverage,
    detect_coverage_gaps,
    detect_employment_gaps,
)
from mismo_checklist.tax_years import tax_years
from mismo_checklist.rule_engine import RequirementRuleEngine
from mismo_checklist.processor import MISMOChecklistProcessor, generate_checklist

__version__ = "0.1.0"

__all__ = [
    # Constants
    "LoanPurpose",
    "MortgageProgram",
    "OtherIncomeCategory",
    "RequirementCategory",
    "RequirementStatus",
    # Errors
    "ChecklistError",
    "MISMOParseError",
    "UnsupportedFileError",
    # Domain model
    "Asset",
    "Borrower",
    "ChecklistResult",
    "Deal",
    "Declarations",
    "DocumentRequirement",
    "Employment",
    "Income",
    "Liability",
    "LoanContext",
    "LoanSummary",
    "REOProperty",
    "Residence",
    # Coverage
    "Coverage",
    "EmploymentGap",
    "calculate_coverage",
    "detect_coverage_gaps",
    "detect_employment_gaps",
    "tax_years",
    # Engine
    "RequirementRuleEngine",
    "MISMOChecklistProcessor",
    "generate_checklist",
]
