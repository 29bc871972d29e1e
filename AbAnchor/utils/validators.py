"""
Validation utilities for sequences and parameters.
"""

import re
from typing import Tuple
import logging

logger = logging.getLogger(__name__)

# Valid amino acid letters
VALID_AMINO_ACIDS = set('ACDEFGHIKLMNPQRSTVWY')

# Canonical numbering scheme names keyed by their lower-case spelling
VALID_NUMBERING_SCHEMES = {
    'imgt': 'IMGT',
    'kabat': 'Kabat',
    'chothia': 'Chothia',
}

_NON_LETTER = re.compile(r'[^A-Z]')


def clean_sequence(sequence: str) -> str:
    """
    Normalize raw user text into an amino acid sequence.

    The text is upper-cased and every character outside A-Z (whitespace,
    digits, gaps, punctuation) is removed. Non-standard letters such as 'X'
    survive cleaning.

    Parameters
    ----------
    sequence : str
        Arbitrary text

    Returns
    -------
    str
        Cleaned sequence (possibly empty)

    Raises
    ------
    TypeError
        If the input is not a string
    """
    if not isinstance(sequence, str):
        raise TypeError(f"Invalid sequence input type: {type(sequence)}")
    return _NON_LETTER.sub('', sequence.upper())


def validate_numbering_scheme(scheme: str) -> str:
    """
    Validate a numbering scheme name and return its canonical spelling.

    Parameters
    ----------
    scheme : str
        Scheme name, case-insensitive ('imgt', 'Kabat', 'CHOTHIA', ...)

    Returns
    -------
    str
        One of 'IMGT', 'Kabat', 'Chothia'

    Raises
    ------
    ValueError
        If the scheme is not supported
    """
    canonical = VALID_NUMBERING_SCHEMES.get(str(scheme).lower())
    if canonical is None:
        raise ValueError(
            f"Unknown scheme: {scheme}. "
            f"Available: {list(VALID_NUMBERING_SCHEMES.values())}"
        )
    return canonical


def validate_sequence(
    sequence: str,
    allow_x: bool = False,
    min_length: int = 1,
    max_length: int = 1000
) -> Tuple[bool, str]:
    """
    Validate an amino acid sequence.

    Parameters
    ----------
    sequence : str
        Amino acid sequence
    allow_x : bool
        Allow X (unknown) amino acids
    min_length : int
        Minimum sequence length
    max_length : int
        Maximum sequence length

    Returns
    -------
    tuple
        (is_valid, error_message)
    """
    if not sequence:
        return False, "Empty sequence"

    sequence = sequence.upper()

    if len(sequence) < min_length:
        return False, f"Sequence too short (minimum {min_length} residues)"

    if len(sequence) > max_length:
        return False, f"Sequence too long (maximum {max_length} residues)"

    valid_chars = VALID_AMINO_ACIDS.copy()
    if allow_x:
        valid_chars.add('X')

    invalid_chars = set(sequence) - valid_chars
    if invalid_chars:
        return False, f"Invalid characters found: {', '.join(sorted(invalid_chars))}"

    if re.search(r'(.)\1{9,}', sequence):  # 10+ consecutive identical residues
        logger.warning("Sequence contains unusual repeat pattern")

    return True, ""
