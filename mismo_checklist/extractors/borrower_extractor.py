"""
Borrower extractor: names, incomes, employments, residences, declarations.
"""

import re
from datetime import date
from typing import List, Optional

from mismo_checklist.coverage import months_between
from mismo_checklist.models import (
    Borrower,
    Declarations,
    Employment,
    Income,
    Residence,
)
from mismo_checklist.xml_tree import (
    XmlNode,
    all_of,
    bool_of,
    child_text,
    date_of,
    first,
    int_of,
    num_of,
    text_of,
)


S_CORP_PATTERN = re.compile(r"s-?corp|s\s*corporation", re.IGNORECASE)
PARTNERSHIP_PATTERN = re.compile(r"partnership", re.IGNORECASE)
FORM_1120_PATTERN = re.compile(r"1120", re.IGNORECASE)
FORM_1065_PATTERN = re.compile(r"1065", re.IGNORECASE)
CURRENT_STATUS_PATTERN = re.compile(r"current", re.IGNORECASE)

OWNERSHIP_FIELDS = (
    "EmploymentOwnershipInterestPercent",
    "OwnershipInterestPercent",
    "OwnershipPercent",
    "OwnershipPercentage",
)


def extract_borrowers(doc: XmlNode, reference_date: date) -> List[Borrower]:
    """
    Extract one Borrower per BORROWER element, in document order.

    Names are matched to INDIVIDUAL elements by position.

    Args:
        doc: Root node of the MISMO document
        reference_date: Date used as the end of open-ended employment

    Returns:
        List of borrowers
    """
    names = [_individual_name(ind) for ind in all_of(doc, "INDIVIDUAL")]

    borrowers = []
    for index, borrower_el in enumerate(all_of(doc, "BORROWER")):
        name = names[index] if index < len(names) else f"Borrower #{index + 1}"
        borrowers.append(Borrower(
            name=name,
            index=index,
            incomes=extract_incomes(borrower_el),
            employments=extract_employments(borrower_el, reference_date),
            residences=extract_residences(borrower_el),
            declarations=extract_declarations(borrower_el),
        ))
    return borrowers


def _individual_name(individual: XmlNode) -> str:
    name_el = first(individual, "NAME")
    if name_el is None:
        return "Borrower"
    full_name = text_of(first(name_el, "FullName"))
    if full_name:
        return full_name
    first_name = text_of(first(name_el, "FirstName"))
    last_name = text_of(first(name_el, "LastName"))
    return f"{first_name} {last_name}".strip() or "Borrower"


def extract_incomes(borrower_el: XmlNode) -> List[Income]:
    incomes = []
    for item in all_of(first(borrower_el, "CURRENT_INCOME_ITEMS"), "CURRENT_INCOME_ITEM"):
        detail = first(item, "CURRENT_INCOME_ITEM_DETAIL")
        if detail is None:
            continue
        incomes.append(Income(
            income_type=text_of(first(detail, "IncomeType")),
            monthly_amount=num_of(first(detail, "CurrentIncomeMonthlyTotalAmount")) or 0.0,
            is_employment_income=bool_of(first(detail, "EmploymentIncomeIndicator")) is True,
        ))
    return incomes


def extract_employments(borrower_el: XmlNode, reference_date: date) -> List[Employment]:
    employments = []
    for employer in all_of(first(borrower_el, "EMPLOYERS"), "EMPLOYER"):
        employment = first(employer, "EMPLOYMENT")
        if employment is None:
            continue

        start_date = date_of(first(employment, "EmploymentStartDate"))
        end_date = date_of(first(employment, "EmploymentEndDate"))
        status_type = text_of(first(employment, "EmploymentStatusType"))
        is_current = end_date is None or bool(CURRENT_STATUS_PATTERN.search(status_type))
        if end_date is None:
            end_date = reference_date

        classification = text_of(first(employment, "EmploymentClassificationType"))
        address = first(employer, "ADDRESS")

        employments.append(Employment(
            employer_name=(
                text_of(first(employment, "EmployerName"))
                or child_text(employer, "FullName", "Name", "LegalEntityName")
            ),
            start_date=start_date,
            end_date=end_date,
            is_current=is_current,
            months_employed=months_between(start_date, end_date),
            is_self_employed=bool_of(
                first(employment, "EmploymentBorrowerSelfEmployedIndicator")
            ) is True,
            classification_type=classification,
            status_type=status_type,
            position_description=child_text(
                employment, "EmploymentPositionDescription", "PositionDescription"
            ),
            ownership_percent=_ownership_percent(employment),
            employer_phone=(
                text_of(first(employer, "ContactPointTelephoneValue"))
                or text_of(first(employment, "EmployerTelephoneNumber"))
            ),
            employer_city=text_of(first(address, "CityName")),
            employer_state=text_of(first(address, "StateCode")),
            is_s_corp=bool(S_CORP_PATTERN.search(classification)),
            is_partnership=bool(PARTNERSHIP_PATTERN.search(classification)),
            is_1120=bool(FORM_1120_PATTERN.search(classification)),
            is_1065=bool(FORM_1065_PATTERN.search(classification)),
        ))
    return employments


def _ownership_percent(employment: XmlNode) -> Optional[float]:
    for field_name in OWNERSHIP_FIELDS:
        value = num_of(first(employment, field_name))
        if value is not None:
            return value
    return None


def extract_residences(borrower_el: XmlNode) -> List[Residence]:
    residences = []
    for residence in all_of(first(borrower_el, "RESIDENCES"), "RESIDENCE"):
        detail = first(residence, "RESIDENCE_DETAIL")
        if detail is None:
            continue
        address = first(residence, "ADDRESS")
        residences.append(Residence(
            months_at_residence=int_of(first(detail, "BorrowerResidencyDurationMonthsCount")) or 0,
            residency_type=text_of(first(detail, "BorrowerResidencyType")),
            residency_basis=text_of(first(detail, "BorrowerResidencyBasisType")),
            address=child_text(address, "AddressLineText", "AddressLine1Text"),
            city=text_of(first(address, "CityName")),
            state=text_of(first(address, "StateCode")),
        ))
    return residences


def extract_declarations(borrower_el: XmlNode) -> Declarations:
    """
    Read DECLARATION_DETAIL indicators.

    Falls back to searching the whole BORROWER element when the
    DECLARATION block is missing, so indicators placed elsewhere still count.
    """
    declaration = first(borrower_el, "DECLARATION") or borrower_el
    detail = first(declaration, "DECLARATION_DETAIL") or declaration

    def indicator(*names: str) -> Optional[bool]:
        # True if any alias says true, False if one answered false, else None
        values = [bool_of(first(detail, name)) for name in names]
        if any(values):
            return True
        if False in values:
            return False
        return None

    return Declarations(
        us_citizen=indicator("USCitizenIndicator"),
        permanent_resident_alien=indicator("PermanentResidentAlienIndicator"),
        non_permanent_resident_alien=indicator("NonPermanentResidentAlienIndicator"),
        bankruptcy=bool(indicator("BankruptcyIndicator", "BorrowerHadBankruptcyIndicator")),
        foreclosure=bool(indicator(
            "PropertyForeclosureIndicator",
            "PriorPropertyForeclosureCompletedIndicator",
            "BorrowerHadPropertyForeclosedIndicator",
        )),
        outstanding_judgments=bool(indicator("OutstandingJudgmentsIndicator")),
        alimony_obligation=bool(indicator("AlimonyChildSupportObligationIndicator")),
        child_support_obligation=bool(indicator("ChildSupportObligationIndicator")),
        ownership_interest=bool(indicator(
            "PropertyOwnershipInterestIndicator",
            "HomeownerPastThreeYearsIndicator",
        )),
        prior_property_usage=text_of(first(detail, "PriorPropertyUsageType")) or None,
        prior_property_title=text_of(first(detail, "PriorPropertyTitleType")) or None,
    )
