"""
Conversion utilities for various data formats and types.
"""

import re
from typing import Dict, List, Tuple
import logging

logger = logging.getLogger(__name__)


def sequence_to_fasta(
    sequence: str,
    seq_id: str = "sequence",
    line_length: int = 60
) -> str:
    """
    Convert sequence to FASTA format string.

    Parameters
    ----------
    sequence : str
        Amino acid sequence
    seq_id : str
        Sequence identifier
    line_length : int
        Number of characters per line

    Returns
    -------
    str
        FASTA formatted string
    """
    sequence = re.sub(r'\s+', '', sequence.upper())

    lines = [f">{seq_id}"]
    for i in range(0, len(sequence), line_length):
        lines.append(sequence[i:i + line_length])

    return '\n'.join(lines)


def fasta_to_dict(fasta_string: str) -> Dict[str, str]:
    """
    Parse FASTA format string to dictionary.

    Parameters
    ----------
    fasta_string : str
        FASTA formatted string

    Returns
    -------
    dict
        Dictionary mapping sequence IDs to sequences
    """
    sequences = {}
    current_id = None
    current_seq = []

    for line in fasta_string.strip().split('\n'):
        line = line.strip()
        if line.startswith('>'):
            if current_id is not None:
                sequences[current_id] = ''.join(current_seq)
            current_id = line[1:].split()[0] if line[1:].strip() else f"seq{len(sequences) + 1}"
            current_seq = []
        elif line:
            current_seq.append(line)

    if current_id is not None:
        sequences[current_id] = ''.join(current_seq)

    return sequences


def numbering_to_string(numbering: List[Tuple[int, str, str]], region: str = None) -> str:
    """
    Join the residues of a numbering table back into a sequence.

    Parameters
    ----------
    numbering : list
        (position, amino_acid, region) tuples
    region : str, optional
        Only keep residues of this region
    """
    return ''.join(aa for _, aa, reg in numbering if region is None or reg == region)


def numbering_to_region_string(numbering: List[Tuple[int, str, str]]) -> str:
    """
    One character per residue marking its region ('1'..'7' for FR1..FR4).

    Parameters
    ----------
    numbering : list
        (position, amino_acid, region) tuples

    Returns
    -------
    str
        Region track aligned to the sequence
    """
    codes = {'FR1': '1', 'CDR1': '2', 'FR2': '3', 'CDR2': '4',
             'FR3': '5', 'CDR3': '6', 'FR4': '7'}
    return ''.join(codes.get(reg, '?') for _, _, reg in numbering)
