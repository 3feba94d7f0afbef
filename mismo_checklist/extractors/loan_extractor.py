"""
Loan-level extractor: terms, program, subject property, LTV, FHA/VA details.
"""

import re
from typing import Optional

from mismo_checklist.constants import LoanPurpose, MortgageProgram
from mismo_checklist.models import LoanContext, SubjectProperty
from mismo_checklist.xml_tree import (
    XmlNode,
    all_of,
    bool_of,
    child_text,
    first,
    first_of,
    int_of,
    num_of,
    text_of,
)


FHA_PATTERN = re.compile(r"federal\s*housing", re.IGNORECASE)
VA_PATTERN = re.compile(r"veterans?\s*affairs|veteran", re.IGNORECASE)
USDA_PATTERN = re.compile(r"rural\s*development|rural\s*housing", re.IGNORECASE)
REFINANCE_PATTERN = re.compile(r"refi", re.IGNORECASE)
CASH_OUT_PATTERN = re.compile(r"cash[-\s]?out", re.IGNORECASE)
HOA_EXPENSE_PATTERN = re.compile(r"association|hoa", re.IGNORECASE)
CONDO_PATTERN = re.compile(r"condo", re.IGNORECASE)


def classify_program(mortgage_type: Optional[str]) -> MortgageProgram:
    """Map a MortgageType value to a program; anything unrecognized is Conventional."""
    mt = (mortgage_type or "").strip().lower()
    if mt == "fha" or FHA_PATTERN.search(mt):
        return MortgageProgram.FHA
    if mt == "va" or VA_PATTERN.search(mt):
        return MortgageProgram.VA
    if mt == "usda" or USDA_PATTERN.search(mt):
        return MortgageProgram.USDA
    return MortgageProgram.CONVENTIONAL


def classify_purpose(loan_purpose: Optional[str]) -> LoanPurpose:
    lp = (loan_purpose or "").strip().lower()
    if lp == "purchase":
        return LoanPurpose.PURCHASE
    if lp == "refinance" or REFINANCE_PATTERN.search(lp):
        return LoanPurpose.REFINANCE
    return LoanPurpose.UNKNOWN


def extract_loan_context(doc: XmlNode) -> LoanContext:
    """
    Extract the LoanContext from a parsed MISMO document.

    Every field degrades to None/False when its element is missing.

    Args:
        doc: Root node of the MISMO document

    Returns:
        Populated LoanContext
    """
    base_loan_amount = None
    loan_purpose_text = None
    mortgage_type_text = None

    terms = first(doc, "TERMS_OF_LOAN")
    if terms is not None:
        base_loan_amount = num_of(first(terms, "BaseLoanAmount"))
        loan_purpose_text = text_of(first(terms, "LoanPurposeType")) or None
        mortgage_type_text = text_of(first(terms, "MortgageType")) or None

    program = classify_program(mortgage_type_text)
    purpose = classify_purpose(loan_purpose_text)

    cash_out_determination = text_of(first(doc, "RefinanceCashOutDeterminationType"))
    is_cash_out = bool(
        CASH_OUT_PATTERN.search(loan_purpose_text or "")
        or (purpose == LoanPurpose.REFINANCE and CASH_OUT_PATTERN.search(cash_out_determination))
    )

    # Property
    property_type = None
    occupancy_type = None
    number_of_units = None
    property_value = None
    has_hoa = False
    subject_property = None

    property_el = first_of(doc, "SUBJECT_PROPERTY", "PROPERTY")
    if property_el is not None:
        addr = first(property_el, "ADDRESS")
        if addr is not None:
            subject_property = SubjectProperty(
                address=child_text(addr, "AddressLineText", "AddressLine1Text"),
                city=text_of(first(addr, "CityName")),
                state=text_of(first(addr, "StateCode")),
                zip=text_of(first(addr, "PostalCode")),
                county=text_of(first(addr, "CountyName")),
            )

        prop_detail = first(property_el, "PROPERTY_DETAIL")
        if prop_detail is not None:
            property_type, occupancy_type, number_of_units, pud = _property_detail(prop_detail)
            has_hoa = has_hoa or pud

        valuation = first_of(property_el, "PROPERTY_VALUATIONS", "PROPERTY_VALUATION")
        val_detail = first(valuation, "PROPERTY_VALUATION_DETAIL")
        if val_detail is not None:
            property_value = num_of(first(val_detail, "PropertyValuationAmount"))

    # Fallback to a document-level PROPERTY_DETAIL
    if not property_type:
        root_detail = first(doc, "PROPERTY_DETAIL")
        if root_detail is not None:
            fb_type, fb_occupancy, fb_units, pud = _property_detail(root_detail)
            property_type = property_type or fb_type
            occupancy_type = occupancy_type or fb_occupancy
            number_of_units = number_of_units or fb_units
            has_hoa = has_hoa or pud

    # Purchase price
    purchase_price = None
    sales_contract = first_of(doc, "SALES_CONTRACT", "PURCHASE_CREDIT")
    if sales_contract is not None:
        purchase_price = (
            num_of(first(sales_contract, "SalesContractAmount"))
            or num_of(first(sales_contract, "RealPropertyAmount"))
        )
    if not purchase_price and property_value:
        purchase_price = property_value

    # LTV
    ltv = None
    cltv = None
    ltv_el = first(doc, "LTV")
    if ltv_el is not None:
        ltv = num_of(first(ltv_el, "LTVRatioPercent"))
        cltv = num_of(first(ltv_el, "CombinedLTVRatioPercent"))
    if not ltv and base_loan_amount and property_value:
        ltv = round(base_loan_amount / property_value * 100, 2)

    # FHA
    fha_case_number = None
    fha_ufmip_amount = None
    if program == MortgageProgram.FHA:
        fha_loan = first(doc, "FHA_LOAN")
        if fha_loan is not None:
            fha_case_number = text_of(first(fha_loan, "FHACaseIdentifier")) or None
            fha_ufmip_amount = num_of(first(fha_loan, "FHAUpfrontMIPremiumAmount"))
        mi_data = first_of(doc, "MI_DATA", "MORTGAGE_INSURANCE")
        if mi_data is not None and fha_ufmip_amount is None:
            fha_ufmip_amount = num_of(first(mi_data, "MIInitialPremiumAmount"))

    # VA
    va_funding_fee_amount = None
    va_entitlement_amount = None
    va_first_use = None
    if program == MortgageProgram.VA:
        va_loan = first(doc, "VA_LOAN")
        if va_loan is not None:
            va_funding_fee_amount = num_of(first(va_loan, "FundingFeeAmount"))
            va_entitlement_amount = num_of(first(va_loan, "EntitlementAmount"))
            va_first_use = bool_of(first(va_loan, "FirstTimeUseIndicator"))

    # HOA from housing expenses and condo property type
    for expense in all_of(doc, "HOUSING_EXPENSE"):
        if HOA_EXPENSE_PATTERN.search(text_of(first(expense, "HousingExpenseType"))):
            has_hoa = True
    if CONDO_PATTERN.search(property_type or ""):
        has_hoa = True

    return LoanContext(
        purpose=purpose,
        is_cash_out=is_cash_out,
        program=program,
        property_type=property_type,
        occupancy_type=occupancy_type,
        number_of_units=number_of_units,
        ltv=ltv,
        base_loan_amount=base_loan_amount,
        has_hoa=has_hoa,
        loan_purpose_text=loan_purpose_text,
        mortgage_type_text=mortgage_type_text,
        property_value=property_value,
        purchase_price=purchase_price,
        cltv=cltv,
        subject_property=subject_property,
        fha_case_number=fha_case_number,
        fha_ufmip_amount=fha_ufmip_amount,
        va_funding_fee_amount=va_funding_fee_amount,
        va_entitlement_amount=va_entitlement_amount,
        va_first_use=va_first_use,
    )


def _property_detail(detail: XmlNode):
    """Return (property_type, occupancy_type, number_of_units, pud_indicator)."""
    property_type = child_text(
        detail,
        "PropertyType",
        "ProjectLegalStructureType",
        "ConstructionMethodType",
        "PropertyEstateType",
    ) or None
    occupancy_type = text_of(first(detail, "PropertyUsageType")) or None
    number_of_units = (
        int_of(first(detail, "FinancedUnitCount"))
        or int_of(first(detail, "PropertyUnitCount"))
        or None
    )
    pud = bool_of(first(detail, "PUDIndicator")) is True
    return property_type, occupancy_type, number_of_units, pud
