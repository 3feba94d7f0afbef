"""
Helpers for building DocumentRequirement lists.
"""

from typing import Dict, Iterable, List, Set, Tuple

from mismo_checklist.constants import RequirementCategory, RequirementStatus
from mismo_checklist.models import ChecklistResult, DocumentRequirement, LoanSummary


def required(category: RequirementCategory, name: str, reason: str) -> DocumentRequirement:
    return DocumentRequirement(name, RequirementStatus.REQUIRED, reason, category)


def conditional(category: RequirementCategory, name: str, reason: str) -> DocumentRequirement:
    return DocumentRequirement(name, RequirementStatus.CONDITIONAL, reason, category)


def satisfied(category: RequirementCategory, name: str, reason: str) -> DocumentRequirement:
    return DocumentRequirement(name, RequirementStatus.OK, reason, category)


class ChecklistBuilder:
    """
    Collects requirements into per-category buckets.

    An item is skipped when its bucket already holds one with the same
    (name, reason).
    """

    def __init__(self):
        self._buckets: Dict[RequirementCategory, List[DocumentRequirement]] = {
            category: [] for category in RequirementCategory
        }
        self._seen: Dict[RequirementCategory, Set[Tuple[str, str]]] = {
            category: set() for category in RequirementCategory
        }

    def add(self, requirement: DocumentRequirement) -> bool:
        """Add one requirement; return False if it was a duplicate."""
        key = (requirement.name, requirement.reason)
        seen = self._seen[requirement.category]
        if key in seen:
            return False
        seen.add(key)
        self._buckets[requirement.category].append(requirement)
        return True

    def extend(self, requirements: Iterable[DocumentRequirement]) -> int:
        """Add several requirements; return how many were kept."""
        return sum(1 for requirement in requirements if self.add(requirement))

    def build(self, summary: LoanSummary) -> ChecklistResult:
        return ChecklistResult(
            income=list(self._buckets[RequirementCategory.INCOME]),
            general=list(self._buckets[RequirementCategory.GENERAL]),
            assets=list(self._buckets[RequirementCategory.ASSETS]),
            credit=list(self._buckets[RequirementCategory.CREDIT]),
            summary=summary,
        )
