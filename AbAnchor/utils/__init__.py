"""
Utility functions for antibody region annotation.
"""

import logging
from pathlib import Path

from .file_handlers import (
    detect_file_format,
    read_fasta,
    load_sequence_table,
    write_results
)

from .validators import (
    VALID_AMINO_ACIDS,
    VALID_NUMBERING_SCHEMES,
    clean_sequence,
    validate_sequence,
    validate_numbering_scheme
)

from .converters import (
    sequence_to_fasta,
    fasta_to_dict,
    numbering_to_string,
    numbering_to_region_string
)

logger = logging.getLogger(__name__)


def parse_sequence(sequence_input) -> str:
    """
    Parse a sequence from a FASTA/text file path or from raw text.

    The first record of a FASTA file is used. The result is cleaned with
    :func:`clean_sequence`; letters outside the 20 standard residues are
    kept but logged as a warning.
    """
    if not isinstance(sequence_input, (str, Path)):
        raise TypeError(f"Invalid sequence input type: {type(sequence_input)}")

    path = Path(str(sequence_input))
    try:
        is_file = path.is_file()
    except OSError:
        # Long raw sequences can exceed the file name limit
        is_file = False

    if not is_file:
        sequence = clean_sequence(str(sequence_input))
    elif detect_file_format(path, default='text') == 'fasta':
        records = read_fasta(path)
        if not records:
            raise ValueError(f"No sequences found in FASTA file: {path}")
        sequence = clean_sequence(next(iter(records.values())))
    else:
        with open(path, 'r') as f:
            text = f.read()
        if text.lstrip().startswith('>'):
            records = fasta_to_dict(text)
            sequence = clean_sequence(next(iter(records.values()), ''))
        else:
            sequence = clean_sequence(text)

    if sequence:
        is_valid, message = validate_sequence(sequence)
        if not is_valid:
            logger.warning(f"Input sequence: {message}")
    return sequence


__all__ = [
    # File handlers
    'detect_file_format',
    'read_fasta',
    'load_sequence_table',
    'write_results',
    # Validators
    'VALID_AMINO_ACIDS',
    'VALID_NUMBERING_SCHEMES',
    'clean_sequence',
    'validate_sequence',
    'validate_numbering_scheme',
    # Converters
    'sequence_to_fasta',
    'fasta_to_dict',
    'numbering_to_string',
    'numbering_to_region_string',
    'parse_sequence'
]
