"""
Entry extraction from free reaction text.

Splits a reaction description such as ``"5 g NaCl, 1 mmol AcOH"`` into
segments and derives one candidate chemical entry per segment:

- CAS number (first match wins)
- Amount + unit from an ordered unit rule table
- Identifier (segment minus quantity and unit)
- Role from an ordered keyword rule table
- SMILES-like token (only without a CAS number)

Extraction never raises; malformed segments degrade to coarser fields.
"""
import re
from typing import Any, Iterable, List, Optional, Tuple

from loguru import logger

from reaction_analyzer.matching.types import Amount, ChemicalEntry, Role
from reaction_analyzer.normalization.cas_extractor import CASExtractor

# Ordered unit rules: (unit, pattern). mmol/mg must come before mol/g.
# A unit token may follow a digit ("5g") but never a letter ("Mg" is not g).
UNIT_PATTERNS: Tuple[Tuple[str, re.Pattern], ...] = (
    ('mmol', re.compile(r'(?<![A-Za-z_])mmol(?![A-Za-z0-9_])', re.IGNORECASE)),
    ('mol', re.compile(r'(?<![A-Za-z_])mol(?![A-Za-z0-9_])', re.IGNORECASE)),
    ('mg', re.compile(r'(?<![A-Za-z_])mg(?![A-Za-z0-9_])', re.IGNORECASE)),
    ('g', re.compile(r'(?<![A-Za-z_])g(?![A-Za-z0-9_])', re.IGNORECASE)),
    ('mL', re.compile(r'(?<![A-Za-z_])m[lL](?![A-Za-z0-9_])')),
)

# Ordered role rules, case-insensitive substrings; first hit wins.
ROLE_KEYWORDS: Tuple[Tuple[Role, Tuple[str, ...]], ...] = (
    (Role.CATALYST, ('catalyst', 'katalys')),
    (Role.SOLVENT, ('solvent', 'lösung')),
    (Role.PRODUCT, ('product', 'yield', 'produkt', 'ausbeute')),
)

NUMBER_PATTERN = re.compile(r'[-+]?[0-9]*\.?[0-9]+')
QUANTITY_TAIL_PATTERN = re.compile(r'[0-9]\s*$')
SEGMENT_SPLIT_PATTERN = re.compile(r'[,\n]')
SMILES_TOKEN_PATTERN = re.compile(r'[A-Za-z0-9@=+#\[\]()\\/.%-]+')
SMILES_MARKERS = ('=', '[', ']')


class EntryExtractor:
    """
    Rule-based extractor of candidate chemical entries.

    The unit and role rules are plain data (``UNIT_PATTERNS``,
    ``ROLE_KEYWORDS``) so they can be enumerated and swapped in tests.
    """

    def __init__(self,
                 unit_patterns: Optional[Iterable[Tuple[str, re.Pattern]]] = None,
                 role_keywords: Optional[Iterable[Tuple[Role, Tuple[str, ...]]]] = None,
                 cas_extractor: Optional[CASExtractor] = None):
        self.unit_patterns = tuple(unit_patterns) if unit_patterns is not None else UNIT_PATTERNS
        self.role_keywords = tuple(role_keywords) if role_keywords is not None else ROLE_KEYWORDS
        self.cas_extractor = cas_extractor or CASExtractor()

    def extract(self, text: Any) -> List[ChemicalEntry]:
        """
        Extract one entry per comma/newline separated segment.

        Args:
            text: Free reaction description

        Returns:
            Entries in segment order (empty for empty or non-string input)
        """
        if not text or not isinstance(text, str):
            return []

        segments = [part.strip() for part in SEGMENT_SPLIT_PATTERN.split(text)]
        entries = [self.parse_segment(segment) for segment in segments if segment]
        logger.debug(f"Extracted {len(entries)} entries from {len(text)} characters")
        return entries

    def parse_segment(self, segment: str) -> ChemicalEntry:
        """Derive a single ChemicalEntry from one trimmed segment."""
        trimmed = segment.strip()
        cas_number = self.cas_extractor.extract_cas(trimmed)

        unit, unit_match = self.detect_unit(trimmed)
        amount = None
        number_match = None
        if unit is not None:
            # CAS digits and hyphens would otherwise read as numbers
            number_match = NUMBER_PATTERN.search(self.cas_extractor.strip_cas(trimmed))
            if number_match:
                amount = Amount(value=float(number_match.group(0)), unit=unit)

        identifier = trimmed
        if amount is not None:
            for start, end in sorted([number_match.span(), unit_match.span()], reverse=True):
                identifier = identifier[:start] + ' ' + identifier[end:]
            identifier = ' '.join(identifier.split())

        return ChemicalEntry(
            raw_text=trimmed,
            identifier=identifier or trimmed,
            cas_number=cas_number,
            smiles=None if cas_number else self.detect_smiles(trimmed),
            amount=amount,
            role=self.infer_role(trimmed),
        )

    def detect_unit(self, text: str) -> Tuple[Optional[str], Optional[re.Match]]:
        """
        Return ``(unit, match)`` for the unit token in ``text``.

        A token directly after a number ("2 g", "5g") is preferred, so the
        element symbol in "2 g Mg" is not read as milligrams. Without such a
        token the first rule matching anywhere wins.
        """
        loose = None
        for unit, pattern in self.unit_patterns:
            for match in pattern.finditer(text):
                if QUANTITY_TAIL_PATTERN.search(text[:match.start()]):
                    return unit, match
                if loose is None:
                    loose = (unit, match)
        return loose or (None, None)

    def infer_role(self, text: str) -> Role:
        """Map keyword cues to a role; defaults to reagent."""
        lower = text.lower()
        for role, keywords in self.role_keywords:
            if any(keyword in lower for keyword in keywords):
                return role
        return Role.REAGENT

    def detect_smiles(self, text: str) -> Optional[str]:
        """
        Return the first whitespace token that looks like SMILES.

        Plain words are rejected: the token must contain ``=``, ``[`` or ``]``.
        """
        if self.cas_extractor.extract_cas(text):
            return None
        for token in text.split():
            if SMILES_TOKEN_PATTERN.fullmatch(token) and any(m in token for m in SMILES_MARKERS):
                return token
        return None


_default_extractor = EntryExtractor()


def extract(text: Any) -> List[ChemicalEntry]:
    """Extract entries with the default rule tables."""
    return _default_extractor.extract(text)
