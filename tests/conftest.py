"""
Shared fixtures: a small MISMO 3.4 document builder.

Tests describe a deal with plain dicts and get back namespaced XML text shaped
like a real MISMO export (DEAL_SETS/DEAL_SET/DEALS/DEAL).
"""
from datetime import date
from xml.sax.saxutils import escape

import pytest

from mismo_checklist.constants import MISMO_NAMESPACE


def _leaf(name, value):
    if value is None:
        return ""
    if isinstance(value, bool):
        value = "true" if value else "false"
    return f"<{name}>{escape(str(value))}</{name}>"


def _employment_xml(emp):
    return (
        "<EMPLOYER>"
        f"<LEGAL_ENTITY><LEGAL_ENTITY_DETAIL>{_leaf('FullName', emp.get('employer'))}"
        "</LEGAL_ENTITY_DETAIL></LEGAL_ENTITY>"
        "<EMPLOYMENT>"
        + _leaf("EmploymentStartDate", emp.get("start"))
        + _leaf("EmploymentEndDate", emp.get("end"))
        + _leaf("EmploymentStatusType", emp.get("status"))
        + _leaf("EmploymentClassificationType", emp.get("classification"))
        + _leaf("EmploymentBorrowerSelfEmployedIndicator", emp.get("self_employed"))
        + _leaf("EmploymentPositionDescription", emp.get("position"))
        + _leaf("OwnershipInterestPercent", emp.get("ownership"))
        + "</EMPLOYMENT></EMPLOYER>"
    )


def _borrower_xml(borrower):
    incomes = "".join(
        "<CURRENT_INCOME_ITEM><CURRENT_INCOME_ITEM_DETAIL>"
        + _leaf("IncomeType", income_type)
        + _leaf("CurrentIncomeMonthlyTotalAmount", amount)
        + "</CURRENT_INCOME_ITEM_DETAIL></CURRENT_INCOME_ITEM>"
        for income_type, amount in borrower.get("incomes", [])
    )
    employments = "".join(_employment_xml(emp) for emp in borrower.get("employments", []))
    residences = "".join(
        "<RESIDENCE><RESIDENCE_DETAIL>"
        + _leaf("BorrowerResidencyDurationMonthsCount", months)
        + _leaf("BorrowerResidencyBasisType", basis)
        + "</RESIDENCE_DETAIL></RESIDENCE>"
        for months, basis in borrower.get("residences", [])
    )
    declarations = "".join(
        _leaf(name, value) for name, value in borrower.get("declarations", {}).items()
    )
    return (
        "<BORROWER>"
        f"<CURRENT_INCOME><CURRENT_INCOME_ITEMS>{incomes}</CURRENT_INCOME_ITEMS></CURRENT_INCOME>"
        f"<DECLARATION><DECLARATION_DETAIL>{declarations}</DECLARATION_DETAIL></DECLARATION>"
        f"<EMPLOYERS>{employments}</EMPLOYERS>"
        f"<RESIDENCES>{residences}</RESIDENCES>"
        "</BORROWER>"
    )


def build_mismo_xml(
    loan_purpose="Purchase",
    mortgage_type="Conventional",
    base_loan_amount=300000,
    ltv=None,
    property_value=None,
    property_type=None,
    occupancy="PrimaryResidence",
    units=1,
    borrowers=None,
    assets=None,
    liabilities=None,
    reo=None,
    fha_case_number=None,
    housing_expenses=None,
):
    """
    Build a MISMO 3.4 document.

    borrowers: list of dicts with keys name, incomes [(type, amount)],
        employments [dict], residences [(months, basis)], declarations {indicator: bool}
    assets: list of (type, holder)
    liabilities: list of (type, holder, paid_at_closing)
    reo: list of (address line, city, state, usage)
    """
    borrowers = borrowers if borrowers is not None else [{"name": "Jane Doe"}]

    parties = "".join(
        "<PARTY><INDIVIDUAL><NAME>"
        + _leaf("FullName", b.get("name"))
        + "</NAME></INDIVIDUAL><ROLES><ROLE>"
        + _borrower_xml(b)
        + "</ROLE></ROLES></PARTY>"
        for b in borrowers
    )

    asset_xml = "".join(
        "<ASSET><ASSET_DETAIL>"
        + _leaf("AssetType", asset_type)
        + _leaf("HolderName", holder)
        + "</ASSET_DETAIL></ASSET>"
        for asset_type, holder in (assets or [])
    )
    reo_xml = "".join(
        "<REO_PROPERTY><PROPERTY><ADDRESS>"
        + _leaf("AddressLineText", line)
        + _leaf("CityName", city)
        + _leaf("StateCode", state)
        + "</ADDRESS></PROPERTY>"
        + _leaf("PropertyCurrentUsageType", usage)
        + "</REO_PROPERTY>"
        for line, city, state, usage in (reo or [])
    )
    liability_xml = "".join(
        "<LIABILITY><LIABILITY_DETAIL>"
        + _leaf("LiabilityType", liability_type)
        + _leaf("HolderName", holder)
        + _leaf("PayoffIncludedInClosingIndicator", paid)
        + "</LIABILITY_DETAIL></LIABILITY>"
        for liability_type, holder, paid in (liabilities or [])
    )
    expense_xml = "".join(
        "<HOUSING_EXPENSE>" + _leaf("HousingExpenseType", expense) + "</HOUSING_EXPENSE>"
        for expense in (housing_expenses or [])
    )

    valuation = ""
    if property_value is not None:
        valuation = (
            "<PROPERTY_VALUATIONS><PROPERTY_VALUATION><PROPERTY_VALUATION_DETAIL>"
            + _leaf("PropertyValuationAmount", property_value)
            + "</PROPERTY_VALUATION_DETAIL></PROPERTY_VALUATION></PROPERTY_VALUATIONS>"
        )

    ltv_xml = f"<LTV>{_leaf('LTVRatioPercent', ltv)}</LTV>" if ltv is not None else ""
    fha_xml = (
        f"<FHA_LOAN>{_leaf('FHACaseIdentifier', fha_case_number)}</FHA_LOAN>"
        if fha_case_number else ""
    )

    return (
        f'<?xml version="1.0" encoding="UTF-8"?>'
        f'<MESSAGE xmlns="{MISMO_NAMESPACE}"><DEAL_SETS><DEAL_SET><DEALS><DEAL>'
        f"<ASSETS>{asset_xml}</ASSETS>"
        f"<REO_PROPERTIES>{reo_xml}</REO_PROPERTIES>"
        "<COLLATERALS><COLLATERAL><SUBJECT_PROPERTY>"
        "<ADDRESS>"
        + _leaf("AddressLineText", "100 Main St")
        + _leaf("CityName", "Springfield")
        + _leaf("StateCode", "IL")
        + _leaf("PostalCode", "62701")
        + "</ADDRESS>"
        "<PROPERTY_DETAIL>"
        + _leaf("PropertyType", property_type)
        + _leaf("PropertyUsageType", occupancy)
        + _leaf("FinancedUnitCount", units)
        + "</PROPERTY_DETAIL>"
        + valuation
        + "</SUBJECT_PROPERTY></COLLATERAL></COLLATERALS>"
        f"<LIABILITIES>{liability_xml}</LIABILITIES>"
        "<LOANS><LOAN>"
        f"<HOUSING_EXPENSES>{expense_xml}</HOUSING_EXPENSES>"
        + ltv_xml
        + fha_xml
        + "<TERMS_OF_LOAN>"
        + _leaf("BaseLoanAmount", base_loan_amount)
        + _leaf("LoanPurposeType", loan_purpose)
        + _leaf("MortgageType", mortgage_type)
        + "</TERMS_OF_LOAN></LOAN></LOANS>"
        f"<PARTIES>{parties}</PARTIES>"
        "</DEAL></DEALS></DEAL_SET></DEAL_SETS></MESSAGE>"
    )


@pytest.fixture
def mismo_xml():
    """Return the MISMO document builder."""
    return build_mismo_xml


@pytest.fixture
def reference_date():
    """Fixed evaluation date used across tests."""
    return date(2026, 2, 1)
