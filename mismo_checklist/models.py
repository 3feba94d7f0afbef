"""
Domain model for MISMO loan files and the checklist produced from them.
"""

import hashlib
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from mismo_checklist.constants import (
    LoanPurpose,
    MortgageProgram,
    RequirementCategory,
    RequirementStatus,
)


@dataclass(frozen=True)
class SubjectProperty:
    """Subject property address."""
    address: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    county: str = ""


@dataclass(frozen=True)
class LoanContext:
    """
    Loan-level facts that drive program and property rules.

    ``ltv`` and ``cltv`` are percentages (85.0 means 85%).
    """
    purpose: LoanPurpose = LoanPurpose.UNKNOWN
    is_cash_out: bool = False
    program: MortgageProgram = MortgageProgram.CONVENTIONAL
    property_type: Optional[str] = None
    occupancy_type: Optional[str] = None
    number_of_units: Optional[int] = None
    ltv: Optional[float] = None
    base_loan_amount: Optional[float] = None
    has_hoa: bool = False

    loan_purpose_text: Optional[str] = None
    mortgage_type_text: Optional[str] = None
    property_value: Optional[float] = None
    purchase_price: Optional[float] = None
    cltv: Optional[float] = None
    subject_property: Optional[SubjectProperty] = None

    fha_case_number: Optional[str] = None
    fha_ufmip_amount: Optional[float] = None
    va_funding_fee_amount: Optional[float] = None
    va_entitlement_amount: Optional[float] = None
    va_first_use: Optional[bool] = None

    @property
    def is_purchase(self) -> bool:
        return self.purpose == LoanPurpose.PURCHASE

    @property
    def is_refinance(self) -> bool:
        return self.purpose == LoanPurpose.REFINANCE


@dataclass
class Income:
    """A single CURRENT_INCOME_ITEM."""
    income_type: str = ""
    monthly_amount: float = 0.0
    is_employment_income: bool = False


@dataclass
class Employment:
    """
    A single EMPLOYER/EMPLOYMENT record.

    ``end_date`` holds the reference date when the position is open-ended.
    """
    employer_name: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_current: bool = False
    months_employed: Optional[int] = None
    is_self_employed: bool = False
    classification_type: str = ""
    status_type: str = ""
    position_description: str = ""
    ownership_percent: Optional[float] = None
    employer_phone: str = ""
    employer_city: str = ""
    employer_state: str = ""
    is_s_corp: bool = False
    is_partnership: bool = False
    is_1120: bool = False
    is_1065: bool = False

    @property
    def has_entity_type(self) -> bool:
        return self.is_s_corp or self.is_partnership or self.is_1120 or self.is_1065


@dataclass
class Residence:
    """A single RESIDENCE record."""
    months_at_residence: int = 0
    residency_type: str = ""
    residency_basis: str = ""
    address: str = ""
    city: str = ""
    state: str = ""


@dataclass
class Declarations:
    """
    Borrower declarations.

    Citizenship answers are tri-state (None means not answered).
    """
    us_citizen: Optional[bool] = None
    permanent_resident_alien: Optional[bool] = None
    non_permanent_resident_alien: Optional[bool] = None
    bankruptcy: bool = False
    foreclosure: bool = False
    outstanding_judgments: bool = False
    alimony_obligation: bool = False
    child_support_obligation: bool = False
    ownership_interest: bool = False
    prior_property_usage: Optional[str] = None
    prior_property_title: Optional[str] = None


@dataclass
class Borrower:
    """One BORROWER role, identified by position in the deal."""
    name: str
    index: int = 0
    incomes: List[Income] = field(default_factory=list)
    employments: List[Employment] = field(default_factory=list)
    residences: List[Residence] = field(default_factory=list)
    declarations: Declarations = field(default_factory=Declarations)

    @property
    def tag(self) -> str:
        """Prefix used in per-borrower document names."""
        return f"[{self.name}]"


@dataclass
class Asset:
    asset_type: str = ""
    holder_name: str = ""
    account_identifier: str = ""
    amount: Optional[float] = None


@dataclass
class Liability:
    liability_type: str = ""
    to_be_paid_at_closing: bool = False
    account_identifier: str = ""
    holder_name: str = ""
    monthly_payment_amount: Optional[float] = None
    unpaid_balance: Optional[float] = None


@dataclass
class REOProperty:
    address: str = ""
    address_line: str = ""
    city: str = ""
    state: str = ""
    usage: str = ""
    disposition: str = ""
    rental_income: Optional[float] = None
    is_primary_residence: bool = False
    is_investment: bool = False


@dataclass
class Deal:
    """Everything extracted from one MISMO file."""
    loan: LoanContext = field(default_factory=LoanContext)
    borrowers: List[Borrower] = field(default_factory=list)
    assets: List[Asset] = field(default_factory=list)
    liabilities: List[Liability] = field(default_factory=list)
    reo_properties: List[REOProperty] = field(default_factory=list)
    total_income_types: int = 0
    complexity_flags: List[str] = field(default_factory=list)

    @property
    def borrower_count(self) -> int:
        return len(self.borrowers)


@dataclass(frozen=True)
class DocumentRequirement:
    """
    A single checklist entry.

    ``item_id`` is derived from the entry's content, so repeated runs over
    the same deal produce the same identifiers.
    """
    name: str
    status: RequirementStatus
    reason: str
    category: RequirementCategory

    @property
    def item_id(self) -> str:
        key = f"{self.category.value}|{self.name}|{self.reason}"
        return hashlib.sha1(key.encode("utf-8")).hexdigest()[:12]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.item_id,
            "name": self.name,
            "status": self.status.value,
            "reason": self.reason,
            "category": self.category.value,
        }


@dataclass
class StatusIndicator:
    """Summary chip shown next to the checklist."""
    label: str
    state: str  # ok, warn, need


@dataclass
class LoanSummary:
    """Loan-level summary consumed by checklist renderers."""
    borrower_names: List[str] = field(default_factory=list)
    loan_purpose: Optional[str] = None
    mortgage_type: Optional[str] = None
    program: Optional[str] = None
    base_loan_amount: Optional[float] = None
    occupancy_type: Optional[str] = None
    ltv: Optional[float] = None
    complexity_flags: List[str] = field(default_factory=list)
    indicators: Dict[str, StatusIndicator] = field(default_factory=dict)
    coverage_gaps: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ChecklistResult:
    """Categorized requirements for one deal."""
    income: List[DocumentRequirement] = field(default_factory=list)
    general: List[DocumentRequirement] = field(default_factory=list)
    assets: List[DocumentRequirement] = field(default_factory=list)
    credit: List[DocumentRequirement] = field(default_factory=list)
    summary: LoanSummary = field(default_factory=LoanSummary)

    def items(self, category: RequirementCategory) -> List[DocumentRequirement]:
        return getattr(self, category.value)

    def all_items(self) -> List[DocumentRequirement]:
        result = []
        for category in RequirementCategory:
            result.extend(self.items(category))
        return result

    def to_dict(self) -> Dict[str, Any]:
        data = {"summary": self.summary.to_dict()}
        for category in RequirementCategory:
            data[category.value] = [item.to_dict() for item in self.items(category)]
        return data
