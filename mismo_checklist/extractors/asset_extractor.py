"""
Asset, liability and REO property extractor.
"""

import re
from typing import List

from mismo_checklist.models import Asset, Liability, REOProperty
from mismo_checklist.xml_tree import (
    XmlNode,
    all_of,
    bool_of,
    child_text,
    first,
    first_of,
    num_of,
    text_of,
)


PRIMARY_USAGE_PATTERN = re.compile(r"primary|principal", re.IGNORECASE)
INVESTMENT_USAGE_PATTERN = re.compile(r"invest|rental", re.IGNORECASE)


def extract_assets(doc: XmlNode) -> List[Asset]:
    assets = []
    for asset in all_of(doc, "ASSET"):
        detail = first(asset, "ASSET_DETAIL")
        if detail is None:
            continue
        assets.append(Asset(
            asset_type=text_of(first(detail, "AssetType")),
            holder_name=(
                text_of(first(detail, "HolderName"))
                or text_of(first(first(asset, "ASSET_HOLDER"), "FullName"))
            ),
            account_identifier=text_of(first(detail, "AssetAccountIdentifier"))
            or text_of(first(detail, "AccountIdentifier")),
            amount=num_of(first(detail, "AssetCashOrMarketValueAmount")),
        ))
    return assets


def extract_liabilities(doc: XmlNode) -> List[Liability]:
    liabilities = []
    for liability in all_of(doc, "LIABILITY"):
        detail = first(liability, "LIABILITY_DETAIL")
        if detail is None:
            continue
        liabilities.append(Liability(
            liability_type=text_of(first(detail, "LiabilityType")),
            to_be_paid_at_closing=bool_of(first_of(
                detail,
                "PayoffIncludedInClosingIndicator",
                "LiabilityPayoffStatusIndicator",
            )) is True,
            account_identifier=child_text(
                detail, "LiabilityAccountIdentifier", "AccountIdentifier"
            ),
            holder_name=(
                child_text(detail, "HolderName", "CompanyName")
                or text_of(first(first(liability, "LIABILITY_HOLDER"), "FullName"))
            ),
            monthly_payment_amount=num_of(first(detail, "LiabilityMonthlyPaymentAmount")),
            unpaid_balance=num_of(first(detail, "LiabilityUnpaidBalanceAmount")),
        ))
    return liabilities


def extract_reo_properties(doc: XmlNode) -> List[REOProperty]:
    properties = []
    for reo in all_of(doc, "REO_PROPERTY"):
        prop = first(reo, "PROPERTY")
        address = first(prop, "ADDRESS") or first(reo, "ADDRESS")
        address_line = child_text(address, "AddressLineText", "AddressLine1Text")
        city = text_of(first(address, "CityName"))
        state = text_of(first(address, "StateCode"))
        locality = f"{city}, {state}" if city and state else (city or state)
        usage = child_text(reo, "PropertyUsageType", "PropertyCurrentUsageType")

        properties.append(REOProperty(
            address=" ".join(part for part in (address_line, locality) if part),
            address_line=address_line,
            city=city,
            state=state,
            usage=usage,
            disposition=text_of(first(reo, "PropertyDispositionStatusType")),
            rental_income=(
                num_of(first(reo, "GrossRentalIncomeAmount"))
                or num_of(first(reo, "NetRentalIncomeAmount"))
            ),
            is_primary_residence=bool(PRIMARY_USAGE_PATTERN.search(usage)),
            is_investment=bool(INVESTMENT_USAGE_PATTERN.search(usage)),
        ))
    return properties
