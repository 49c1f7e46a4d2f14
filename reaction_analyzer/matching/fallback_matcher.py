"""
Fallback matching against the local compound table.

Rules are attempted in a fixed order and stop at the first rule that yields
at least one match:

1. Exact CAS number
2. Exact case-insensitive synonym
3. Case-insensitive substring of the identifier within a synonym
4. Nothing matched -> not_found, suggesting every canonical name
"""

import logging
from typing import Optional, Tuple

from reaction_analyzer.matching.fallback_table import FALLBACK_COMPOUNDS, FallbackCompound
from reaction_analyzer.matching.types import ResolutionOutcome

logger = logging.getLogger(__name__)

RULE_BLANK = 'blank'
RULE_CAS = 'cas_exact'
RULE_SYNONYM = 'synonym_exact'
RULE_SUBSTRING = 'synonym_substring'
RULE_NONE = 'no_match'


class FallbackMatcher:
    """
    Matches identifiers against an immutable table of known compounds.

    One match resolves; several matches are ambiguous and return every
    matching canonical name in table order.
    """

    name = 'fallback'

    def __init__(self, table: Optional[Tuple[FallbackCompound, ...]] = None):
        """
        Args:
            table: Compound rows (defaults to FALLBACK_COMPOUNDS)
        """
        self.table = tuple(table) if table is not None else FALLBACK_COMPOUNDS

    def match(self, identifier: str) -> ResolutionOutcome:
        """Resolve ``identifier`` against the table."""
        outcome, _ = self.match_with_rule(identifier)
        return outcome

    def match_with_rule(self, identifier: str) -> Tuple[ResolutionOutcome, str]:
        """
        Resolve ``identifier`` and report which rule decided.

        Returns:
            Tuple of (ResolutionOutcome, rule name)
        """
        if not identifier or not isinstance(identifier, str) or not identifier.strip():
            return ResolutionOutcome.not_found(), RULE_BLANK

        key = identifier.strip()
        lower = key.lower()

        for row in self.table:
            if row.cas_number == key:
                return ResolutionOutcome.resolved(row.compound), RULE_CAS

        exact = [row for row in self.table
                 if any(synonym.lower() == lower for synonym in row.synonyms)]
        if exact:
            return self._decide(exact), RULE_SYNONYM

        partial = [row for row in self.table
                   if any(lower in synonym.lower() for synonym in row.synonyms)]
        if partial:
            return self._decide(partial), RULE_SUBSTRING

        logger.debug(f"No fallback match for '{key}'")
        return ResolutionOutcome.not_found(row.canonical_name for row in self.table), RULE_NONE

    def __call__(self, key: str, steps: Optional[list] = None) -> ResolutionOutcome:
        outcome, rule = self.match_with_rule(key)
        if steps is not None:
            if outcome.is_resolved:
                steps.append(
                    f"Local fallback used ({rule}): {outcome.compound.canonical_name} for \"{key}\"."
                )
            else:
                steps.append(
                    f"Local fallback ({rule}): \"{key}\" is {outcome.status.value}, "
                    f"{len(outcome.suggestions)} suggestion(s)."
                )
        return outcome

    @staticmethod
    def _decide(rows) -> ResolutionOutcome:
        if len(rows) == 1:
            return ResolutionOutcome.resolved(rows[0].compound)
        return ResolutionOutcome.ambiguous(row.canonical_name for row in rows)
