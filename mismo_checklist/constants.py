"""
Constants and enums for MISMO document checklist generation.
"""

from enum import Enum


MISMO_NAMESPACE = "http://www.mismo.org/residential/2009/schemas"


class LoanPurpose(str, Enum):
    """Loan purpose values."""
    PURCHASE = "purchase"
    REFINANCE = "refinance"
    UNKNOWN = "unknown"


class MortgageProgram(str, Enum):
    """Mortgage programs the checklist distinguishes."""
    CONVENTIONAL = "conventional"
    FHA = "fha"
    VA = "va"
    USDA = "usda"


class RequirementStatus(str, Enum):
    """Status of a document requirement."""
    REQUIRED = "required"
    CONDITIONAL = "conditional"
    OK = "ok"


class RequirementCategory(str, Enum):
    """Checklist sections, in presentation order."""
    INCOME = "income"
    GENERAL = "general"
    ASSETS = "assets"
    CREDIT = "credit"


class OtherIncomeCategory(str, Enum):
    """Non-employment income categories with their own document pairs."""
    CAPITAL_GAINS = "capital_gains"
    DIVIDEND_INTEREST = "dividend_interest"
    FOSTER_CARE = "foster_care"
    FOREIGN = "foreign"
    UNEMPLOYMENT = "unemployment"
    ROYALTIES = "royalties"
    TRUST = "trust"
    NOTE_RECEIVABLE = "note_receivable"
    BOARDER_INCOME = "boarder_income"


# Two-year history rule
HISTORY_MONTHS_REQUIRED = 24

# Employment gap thresholds (days)
LOE_GAP_DAYS = 30
COVERAGE_GAP_DAYS = 1

# New-job windows (days since start)
NEW_JOB_OFFER_LETTER_DAYS = 30
NEW_JOB_PRIOR_PAYSTUB_DAYS = 180

# Self-employment
SELF_EMPLOYED_SINGLE_YEAR_THRESHOLD = 5  # years in business
K1_OWNERSHIP_THRESHOLD = 25.0  # percent

# Base W-2 history
W2_YEARS_REQUIRED = 2

# Conventional PMI
CONVENTIONAL_PMI_LTV_THRESHOLD = 80.0  # percent

# Multi-unit thresholds
OPERATING_STATEMENT_MIN_UNITS = 3

# Complexity flags
PORTFOLIO_REO_COUNT = 3
MIXED_INCOME_TYPE_COUNT = 3

# Marker used when a gap runs up to the reference date
CURRENT_EMPLOYMENT_MARKER = "(current)"

# Income type values that count as base pay
BASE_INCOME_TYPES = {"Base", "Hourly", "Salary"}
