"""
Scheme-aware region boundary derivation.

Boundaries are the six cut-points separating the seven variable-domain
regions (FR1, CDR1, FR2, CDR2, FR3, CDR3, FR4). When all four conserved
anchors are known, every cut-point is an anchor position plus a fixed,
scheme-specific offset. Otherwise the boundaries of an archetypal
120-residue domain are scaled to the sequence length.

IMGT CDRs are the most inclusive; Kabat places a longer CDR2 and starts
CDR1 later; Chothia uses short structural loops for CDR1 and CDR2.
"""

import math
from dataclasses import dataclass, astuple
from typing import Dict, List, Tuple
import logging

from .anchors import AnchorSet
from ..utils.validators import validate_numbering_scheme

logger = logging.getLogger(__name__)

ANCHORED_SCORE = 0.95
FALLBACK_SCORE = 0.4

BOUNDARY_NAMES = ('fr1_end', 'cdr1_end', 'fr2_end', 'cdr2_end', 'fr3_end', 'cdr3_end')

# IMGT FR2 ends 14 past W41 and CDR2 spans the next 10 residues
IMGT_FR2_OFFSET = 14
IMGT_CDR2_LENGTH = 10

# (anchor, offset) per boundary. cdr3_end is always the FR4 motif start.
SCHEME_OFFSETS: Dict[str, Dict[str, Tuple[str, int]]] = {
    'IMGT': {
        'fr1_end': ('cys1', 4),
        'cdr1_end': ('trp41', -2),
        'fr2_end': ('trp41', IMGT_FR2_OFFSET),
        'cdr2_end': ('trp41', IMGT_FR2_OFFSET + IMGT_CDR2_LENGTH),
        'fr3_end': ('cys104', 1),   # includes the cysteine
        'cdr3_end': ('fr4_motif', 0),
    },
    'Kabat': {
        'fr1_end': ('cys1', 7),
        'cdr1_end': ('trp41', -4),
        'fr2_end': ('trp41', 9),
        'cdr2_end': ('trp41', 24),
        'fr3_end': ('cys104', 3),
        'cdr3_end': ('fr4_motif', 0),
    },
    'Chothia': {
        'fr1_end': ('cys1', 4),
        'cdr1_end': ('trp41', -6),
        'fr2_end': ('trp41', 11),
        'cdr2_end': ('trp41', 17),
        'fr3_end': ('cys104', 3),
        'cdr3_end': ('fr4_motif', 0),
    },
}

# Archetypal boundaries of a 120-residue domain (fr1_end .. fr3_end)
ARCHETYPE_LENGTH = 120
ARCHETYPE_BOUNDARIES = (26, 38, 55, 65, 104)
# Residues always reserved for FR4 by the fallback model
FALLBACK_FR4_LENGTH = 11


@dataclass(frozen=True)
class BoundarySet:
    """
    Six monotonically non-decreasing cut-points over a sequence.

    Region ``i`` spans ``[previous cut-point, cut-point i)``; FR4 runs from
    ``cdr3_end`` to the end of the sequence.
    """

    fr1_end: int
    cdr1_end: int
    fr2_end: int
    cdr2_end: int
    fr3_end: int
    cdr3_end: int

    def as_tuple(self) -> Tuple[int, ...]:
        return astuple(self)

    def intervals(self, length: int) -> List[Tuple[int, int]]:
        """Seven ``(start, end)`` pairs, FR1 through FR4."""
        cuts = (0,) + self.as_tuple() + (length,)
        return [(cuts[i], cuts[i + 1]) for i in range(7)]

    def is_monotonic(self, length: int) -> bool:
        cuts = (0,) + self.as_tuple() + (length,)
        return all(a <= b for a, b in zip(cuts, cuts[1:]))


@dataclass(frozen=True)
class BoundaryCall:
    """Boundaries together with the confidence and reasoning that produced them."""

    boundaries: BoundarySet
    score: float
    reasoning: Tuple[str, ...]
    anchored: bool


def clamp_boundaries(values, length: int) -> BoundarySet:
    """
    Clamp raw cut-points into a valid, monotonic BoundarySet.

    Each value is clamped into ``[previous cut-point, length]``; the first
    into ``[0, length]``.
    """
    clamped = []
    lower = 0
    for value in values:
        value = min(max(value, lower), length)
        clamped.append(value)
        lower = value
    return BoundarySet(*clamped)


def describe_anchors(anchors: AnchorSet) -> List[str]:
    """Human-readable reasoning for a complete anchor set (1-based positions)."""
    return [
        f"Identified conserved Cysteine (C23) at pos {anchors.cys1 + 1}.",
        f"Identified conserved Tryptophan (W41) at pos {anchors.trp41 + 1}.",
        f"Identified 2nd Cysteine (C104) at pos {anchors.cys104 + 1} bounding FR3.",
        f"Identified J-region motif ({anchors.motif}) at pos {anchors.fr4_motif + 1}.",
    ]


def anchored_boundaries(anchors: AnchorSet, length: int, scheme: str) -> BoundarySet:
    """Anchor-plus-offset boundaries for a complete anchor set."""
    offsets = SCHEME_OFFSETS[scheme]
    raw = [getattr(anchors, anchor) + offset
           for anchor, offset in (offsets[name] for name in BOUNDARY_NAMES)]
    return clamp_boundaries(raw, length)


def fallback_boundaries(length: int) -> BoundarySet:
    """
    Proportional boundaries for sequences whose anchors are ambiguous.

    The first five cut-points are scaled from a 120-residue archetype and
    floored; the last always reserves eleven residues for FR4, unscaled.
    """
    scale = length / ARCHETYPE_LENGTH
    raw = [math.floor(b * scale) for b in ARCHETYPE_BOUNDARIES]
    raw.append(length - FALLBACK_FR4_LENGTH)
    return clamp_boundaries(raw, length)


def compute_boundaries(anchors: AnchorSet, length: int, scheme: str = 'IMGT') -> BoundaryCall:
    """
    Convert anchors (or, failing that, the sequence length) into boundaries.

    Parameters
    ----------
    anchors : AnchorSet
        Output of :func:`detect_anchors`
    length : int
        Length of the cleaned sequence
    scheme : str
        Numbering scheme ('IMGT', 'Kabat' or 'Chothia', case-insensitive)

    Returns
    -------
    BoundaryCall
        Boundaries, confidence score (0.95 anchored, 0.4 fallback) and
        reasoning strings
    """
    scheme = validate_numbering_scheme(scheme)

    if anchors.is_complete:
        boundaries = anchored_boundaries(anchors, length, scheme)
        logger.debug(f"{scheme} anchored boundaries: {boundaries.as_tuple()}")
        return BoundaryCall(
            boundaries=boundaries,
            score=ANCHORED_SCORE,
            reasoning=tuple(describe_anchors(anchors)),
            anchored=True,
        )

    logger.info(f"Anchors missing ({', '.join(anchors.missing)}); "
                f"using proportional model for {length} aa")
    return BoundaryCall(
        boundaries=fallback_boundaries(length),
        score=FALLBACK_SCORE,
        reasoning=("Structural anchors were ambiguous. "
                   "Falling back to statistical length models.",),
        anchored=False,
    )
