"""
MISMO checklist processor.

Entry point used by the API server and the batch script: parse a MISMO 3.4
file, extract the deal, and run the rule engine against a caller-supplied
reference date.
"""

from datetime import date
from pathlib import Path
from typing import Optional, Union

from mismo_checklist.extractors import extract_deal
from mismo_checklist.models import ChecklistResult, Deal
from mismo_checklist.rule_engine import RequirementRuleEngine
from mismo_checklist.utils import setup_logging

logger = setup_logging()

XmlSource = Union[str, bytes]


class MISMOChecklistProcessor:
    """
    Turns MISMO XML into a document checklist.

    Handles:
    - Parsing (malformed XML raises MISMOParseError, nothing partial)
    - Deal extraction
    - Rule evaluation against an explicit reference date
    """

    def __init__(self, engine: Optional[RequirementRuleEngine] = None):
        self.engine = engine or RequirementRuleEngine()

    def parse(self, xml: XmlSource, reference_date: date) -> Deal:
        """
        Extract the deal without evaluating rules.

        Args:
            xml: MISMO XML text or bytes
            reference_date: Date standing in for "now"

        Returns:
            Extracted Deal
        """
        deal = extract_deal(xml, reference_date)
        logger.debug(
            "Extracted deal: %d borrower(s), %d asset(s), %d liability(ies), %d REO",
            deal.borrower_count, len(deal.assets), len(deal.liabilities), len(deal.reo_properties),
        )
        return deal

    def process(self, xml: XmlSource, reference_date: date) -> ChecklistResult:
        deal = self.parse(xml, reference_date)
        return self.engine.evaluate(deal, reference_date)

    def process_file(self, path: Union[str, Path], reference_date: date) -> ChecklistResult:
        """Read a MISMO file from disk and process it."""
        path = Path(path)
        logger.info("Processing MISMO file %s (reference date %s)", path.name, reference_date.isoformat())
        return self.process(path.read_bytes(), reference_date)


def generate_checklist(xml: XmlSource, reference_date: date) -> ChecklistResult:
    """Convenience wrapper around MISMOChecklistProcessor.process."""
    return MISMOChecklistProcessor().process(xml, reference_date)
