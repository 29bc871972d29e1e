"""
Conserved anchor detection for antibody variable domains.

Four structural landmarks are located in a cleaned sequence:

- ``cys1``: the first conserved cysteine (IMGT C23), closing FR1
- ``trp41``: the conserved tryptophan opening FR2 (IMGT W41)
- ``cys104``: the second conserved cysteine (IMGT C104), closing FR3
- ``fr4_motif``: start of the J-region ``[WF]GxG`` motif opening FR4

All positions are 0-based offsets; ``None`` marks an anchor that was not
found. The anchors are only trusted together: region boundaries are derived
from them when all four are present.
"""

import re
from dataclasses import dataclass
from typing import Optional
import logging

logger = logging.getLogger(__name__)

FR4_MOTIF = re.compile(r'[WF]G.G')

# FR4 must start in the last 30% of the sequence
FR4_MIN_FRACTION = 0.7
# Longest CDR3 searched when walking back from the FR4 motif
MAX_CDR3_LENGTH = 25
# First cysteine must sit in the N-terminal 31 residues
MAX_CYS1_INDEX = 30
# Tryptophan window relative to the first cysteine: [cys1 + 10, cys1 + 25)
TRP_WINDOW = (10, 25)


@dataclass(frozen=True)
class AnchorSet:
    """Positions of the four conserved anchors in a cleaned sequence."""

    cys1: Optional[int] = None
    trp41: Optional[int] = None
    cys104: Optional[int] = None
    fr4_motif: Optional[int] = None
    # Matched motif text, e.g. 'WGQG'
    motif: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        """True when all four anchors were detected."""
        return None not in (self.cys1, self.trp41, self.cys104, self.fr4_motif)

    @property
    def missing(self) -> list:
        """Names of the anchors that were not found."""
        return [name for name in ('cys1', 'trp41', 'cys104', 'fr4_motif')
                if getattr(self, name) is None]


def find_fr4_motif(sequence: str) -> Optional[int]:
    """
    Locate the J-region motif that opens FR4.

    Scans every non-overlapping ``[WF]GxG`` match from left to right and
    keeps the last one starting past 70% of the sequence length.
    """
    threshold = len(sequence) * FR4_MIN_FRACTION
    found = None
    for match in FR4_MOTIF.finditer(sequence):
        if match.start() > threshold:
            found = match.start()
    return found


def find_cys104(sequence: str, fr4_index: Optional[int]) -> Optional[int]:
    """
    Walk backward from the FR4 motif to the nearest cysteine.

    At most ``MAX_CDR3_LENGTH`` residues before the motif are examined.
    """
    if fr4_index is None:
        return None
    lower = max(0, fr4_index - MAX_CDR3_LENGTH)
    for i in range(fr4_index - 1, lower - 1, -1):
        if sequence[i] == 'C':
            return i
    return None


def find_cys1(sequence: str) -> Optional[int]:
    """First cysteine of the sequence, if it lies at index 30 or earlier."""
    index = sequence.find('C')
    if index == -1 or index > MAX_CYS1_INDEX:
        return None
    return index


def find_trp41(sequence: str, cys1_index: Optional[int]) -> Optional[int]:
    """First tryptophan in ``[cys1 + 10, cys1 + 25)``."""
    if cys1_index is None:
        return None
    start = cys1_index + TRP_WINDOW[0]
    end = min(cys1_index + TRP_WINDOW[1], len(sequence))
    for i in range(start, end):
        if sequence[i] == 'W':
            return i
    return None


def detect_anchors(sequence: str) -> AnchorSet:
    """
    Detect the four conserved anchors of a variable domain.

    Parameters
    ----------
    sequence : str
        Cleaned, upper-case amino acid sequence

    Returns
    -------
    AnchorSet
        Detected positions; missing anchors are ``None``

    Examples
    --------
    >>> anchors = detect_anchors("EVQLVESGGGLVQPGGSLRLSCAAS...")
    >>> anchors.is_complete
    """
    fr4_index = find_fr4_motif(sequence)
    cys104 = find_cys104(sequence, fr4_index)
    cys1 = find_cys1(sequence)
    trp41 = find_trp41(sequence, cys1)

    motif = sequence[fr4_index:fr4_index + 4] if fr4_index is not None else None

    anchors = AnchorSet(cys1=cys1, trp41=trp41, cys104=cys104,
                        fr4_motif=fr4_index, motif=motif)
    logger.debug(f"Anchors for {len(sequence)} aa sequence: {anchors}")
    return anchors
