"""
Extractors that turn a MISMO 3.4 document into the checklist domain model.

Each module reads one slice of the deal; ``extract_deal`` combines them.
"""

from mismo_checklist.extractors.asset_extractor import (
    extract_assets,
    extract_liabilities,
    extract_reo_properties,
)
from mismo_checklist.extractors.borrower_extractor import extract_borrowers
from mismo_checklist.extractors.deal_extractor import build_complexity_flags, extract_deal
from mismo_checklist.extractors.loan_extractor import extract_loan_context

__all__ = [
    "extract_assets",
    "extract_liabilities",
    "extract_reo_properties",
    "extract_borrowers",
    "extract_deal",
    "build_complexity_flags",
    "extract_loan_context",
]
