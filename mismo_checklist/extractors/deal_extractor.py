"""
Deal extractor: assembles the full domain model from a MISMO document.
"""

from datetime import date
from typing import List, Union

from mismo_checklist.constants import MIXED_INCOME_TYPE_COUNT, PORTFOLIO_REO_COUNT
from mismo_checklist.extractors.asset_extractor import (
    extract_assets,
    extract_liabilities,
    extract_reo_properties,
)
from mismo_checklist.extractors.borrower_extractor import extract_borrowers
from mismo_checklist.extractors.loan_extractor import extract_loan_context
from mismo_checklist.models import Deal
from mismo_checklist.xml_tree import XmlNode, parse_xml


def extract_deal(source: Union[str, bytes, XmlNode], reference_date: date) -> Deal:
    """
    Build a Deal from MISMO XML.

    Args:
        source: Raw XML text/bytes, or an already-parsed XmlNode
        reference_date: Date standing in for "now" (open-ended employment)

    Returns:
        Deal with loan context, borrowers, assets, liabilities and REO

    Raises:
        MISMOParseError: If raw text is not well-formed XML
    """
    doc = source if isinstance(source, XmlNode) else parse_xml(source)

    deal = Deal(
        loan=extract_loan_context(doc),
        borrowers=extract_borrowers(doc, reference_date),
        assets=extract_assets(doc),
        liabilities=extract_liabilities(doc),
        reo_properties=extract_reo_properties(doc),
    )

    income_types = {
        income.income_type
        for borrower in deal.borrowers
        for income in borrower.incomes
        if income.income_type
    }
    deal.total_income_types = len(income_types)
    deal.complexity_flags = build_complexity_flags(deal)
    return deal


def build_complexity_flags(deal: Deal) -> List[str]:
    """Human-readable indicators of a complex file."""
    flags = []
    if deal.borrower_count > 1:
        flags.append(f"Multiple borrowers ({deal.borrower_count})")
    if len(deal.reo_properties) >= PORTFOLIO_REO_COUNT:
        flags.append(f"Portfolio borrower ({len(deal.reo_properties)} REO properties)")
    if deal.total_income_types >= MIXED_INCOME_TYPE_COUNT:
        flags.append(f"Mixed income types ({deal.total_income_types} types)")
    if any(e.is_self_employed for b in deal.borrowers for e in b.employments):
        flags.append("Self-employment income")
    units = deal.loan.number_of_units
    if units and units > 1:
        flags.append(f"Multi-unit property ({units} units)")
    if deal.loan.is_cash_out:
        flags.append("Cash-out refinance")
    return flags
