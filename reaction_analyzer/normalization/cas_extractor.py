"""
CAS number extraction and validation module.

Handles CAS (Chemical Abstracts Service) Registry Number detection in free
reaction text and check-digit validation.
"""

import re
from typing import Optional


class CASExtractor:
    """
    Extracts and validates CAS Registry Numbers.

    Format: 2-7 digits, hyphen, 2 digits, hyphen, 1 check digit
    Example: 64-19-7 (Acetic acid)

    Extraction is purely pattern based (first match wins); the check digit
    is only consulted by ``validate_cas`` for diagnostics.
    """

    # Format: \d{2,7}-\d{2}-\d
    CAS_PATTERN = re.compile(r'\b(\d{2,7}-\d{2}-\d)\b')
    CAS_FULL_PATTERN = re.compile(r'^\d{2,7}-\d{2}-\d$')

    def extract_cas(self, text: str) -> Optional[str]:
        """
        Return the first CAS-formatted token in ``text``.

        Examples:
            >>> CASExtractor().extract_cas("64-19-7 Essigsäure")
            '64-19-7'
            >>> CASExtractor().extract_cas("No CAS here") is None
            True
        """
        if not text or not isinstance(text, str):
            return None

        match = self.CAS_PATTERN.search(text)
        return match.group(1) if match else None

    def strip_cas(self, text: str) -> str:
        """Blank out every CAS-formatted token, keeping character offsets."""
        if not text:
            return ""
        return self.CAS_PATTERN.sub(lambda m: ' ' * len(m.group(0)), text)

    def validate_cas(self, cas: str) -> bool:
        """
        Validate CAS number using the check digit algorithm.

        Digits (without the check digit) are weighted 1, 2, 3, ... from the
        right; the sum modulo 10 must equal the check digit.

        Examples:
            >>> CASExtractor().validate_cas("64-19-7")
            True
            >>> CASExtractor().validate_cas("64-19-8")
            False
        """
        if not self.is_cas_format(cas):
            return False

        digits_only = cas.strip().replace('-', '')
        check_digit = int(digits_only[-1])

        total = 0
        for i, digit in enumerate(reversed(digits_only[:-1]), start=1):
            total += int(digit) * i

        return check_digit == total % 10

    def is_cas_format(self, text: str) -> bool:
        """Check if the whole of ``text`` is CAS-formatted (no checksum)."""
        if not text or not isinstance(text, str):
            return False

        return self.CAS_FULL_PATTERN.match(text.strip()) is not None


_default_extractor = CASExtractor()


def is_cas_number(text: str) -> bool:
    """Module-level shortcut for ``CASExtractor().is_cas_format``."""
    return _default_extractor.is_cas_format(text)
