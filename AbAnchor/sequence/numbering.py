"""
Antibody numbering and region annotation module.

This module provides functions for:
- Segmenting a variable domain into FR1-CDR1-FR2-CDR2-FR3-CDR3-FR4
- Assigning a per-residue position and owning region
- Reporting a confidence score and the reasoning behind it

Regions are placed from conserved anchors (see :mod:`.anchors`) using the
offsets of the requested scheme (see :mod:`.boundaries`). This is a fast,
explainable approximation, not an HMM alignment: residues are numbered
sequentially and no insertion codes are produced.

Supports the IMGT, Kabat and Chothia schemes.

References
----------
.. [1] Lefranc et al. (2003) "IMGT unique numbering for immunoglobulin"
.. [2] Kabat et al. (1991) "Sequences of Proteins of Immunological Interest"
.. [3] Chothia & Lesk (1987) "Canonical structures for the hypervariable regions"
"""

from dataclasses import dataclass, asdict
from typing import Dict, List, Optional, Sequence, Tuple
import logging

import pandas as pd

from .anchors import AnchorSet, detect_anchors
from .boundaries import BoundarySet, ANCHORED_SCORE, compute_boundaries
from .properties import get_property
from ..utils.validators import clean_sequence, validate_numbering_scheme

logger = logging.getLogger(__name__)

REGION_ORDER = ('FR1', 'CDR1', 'FR2', 'CDR2', 'FR3', 'CDR3', 'FR4')

REGION_NAMES = {
    'FR1': 'Framework 1',
    'CDR1': 'CDR 1',
    'FR2': 'Framework 2',
    'CDR2': 'CDR 2',
    'FR3': 'Framework 3',
    'CDR3': 'CDR 3',
    'FR4': 'Framework 4',
}

CDR_TYPES = ('CDR1', 'CDR2', 'CDR3')


@dataclass(frozen=True)
class Region:
    """A contiguous region ``sequence[start:end]`` (0-based, half-open)."""

    type: str
    start: int
    end: int
    sequence: str
    name: str

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def is_cdr(self) -> bool:
        return self.type in CDR_TYPES


@dataclass(frozen=True)
class NumberingEntry:
    """One residue: its 1-based position, letter and owning region."""

    position: int
    residue: str
    region: str


@dataclass(frozen=True)
class AnalysisResult:
    """
    Outcome of annotating one sequence under one scheme.

    Attributes
    ----------
    sequence : str
        Cleaned sequence
    scheme : str
        Canonical scheme name
    regions : tuple of Region
        Emitted regions, left to right. Regions starting past the end of the
        sequence are omitted.
    numbering : tuple of NumberingEntry
        One entry per residue
    score : float
        Confidence, 0.95 when anchored and 0.4 otherwise
    reasoning : tuple of str
        Human-readable justification
    """

    sequence: str
    scheme: str
    regions: Tuple[Region, ...]
    numbering: Tuple[NumberingEntry, ...]
    score: float
    reasoning: Tuple[str, ...]

    @property
    def confidence(self) -> float:
        return self.score

    @property
    def is_anchored(self) -> bool:
        return self.score == ANCHORED_SCORE

    def get_region(self, region_type: str) -> Optional[Region]:
        """Return the region with the given tag, or None if it was not emitted."""
        for region in self.regions:
            if region.type == region_type:
                return region
        return None

    def region_sequences(self) -> Dict[str, str]:
        """Mapping of every region tag to its sequence ('' when not emitted)."""
        sequences = {tag: '' for tag in REGION_ORDER}
        for region in self.regions:
            sequences[region.type] = region.sequence
        return sequences

    def cdr_lengths(self) -> Dict[str, int]:
        return {tag: len(self.region_sequences()[tag]) for tag in CDR_TYPES}

    def to_dict(self) -> Dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            'sequence': self.sequence,
            'scheme': self.scheme,
            'score': self.score,
            'reasoning': list(self.reasoning),
            'regions': [asdict(r) for r in self.regions],
            'numbering': [asdict(n) for n in self.numbering],
        }

    def numbering_dataframe(self) -> pd.DataFrame:
        """Per-residue numbering table."""
        return pd.DataFrame(
            [(n.position, n.residue, n.region) for n in self.numbering],
            columns=['Position', 'Residue', 'Region'],
        )

    def region_dataframe(self) -> pd.DataFrame:
        """
        Per-region summary with simple physicochemical properties.

        Start and End are 1-based and inclusive. Hydrophobicity is the mean
        Kyte-Doolittle value of the region (0 for empty regions).
        """
        rows = []
        for region in self.regions:
            hydro = sum(get_property(aa, 'hydro') for aa in region.sequence)
            rows.append({
                'Region': region.type,
                'Name': region.name,
                'Start': region.start + 1,
                'End': region.end,
                'Length': region.length,
                'Sequence': region.sequence,
                'Hydrophobicity': hydro / region.length if region.length else 0.0,
                'Net_Charge': sum(get_property(aa, 'charge') for aa in region.sequence),
                'Mass': sum(get_property(aa, 'mass') for aa in region.sequence),
            })
        columns = ['Region', 'Name', 'Start', 'End', 'Length', 'Sequence',
                   'Hydrophobicity', 'Net_Charge', 'Mass']
        return pd.DataFrame(rows, columns=columns)


def segment(sequence: str,
            boundaries: BoundarySet,
            scheme: str,
            score: float,
            reasoning: Sequence[str]) -> AnalysisResult:
    """
    Slice a sequence into named regions and number every residue.

    Each region starts where the previous emitted region ended, so the
    emitted regions always tile the sequence without gaps or overlaps even if
    the cut-points are not monotonic. A region starting at or past the end of
    the sequence is not emitted; a region whose end does not exceed its start
    is emitted empty.

    Parameters
    ----------
    sequence : str
        Cleaned sequence
    boundaries : BoundarySet
        Cut-points from :func:`compute_boundaries`
    scheme : str
        Scheme name recorded on the result
    score : float
        Confidence score
    reasoning : sequence of str
        Reasoning strings

    Returns
    -------
    AnalysisResult
    """
    length = len(sequence)
    ends = boundaries.as_tuple() + (length,)

    regions = []
    numbering = []
    current = 0
    for region_type, end in zip(REGION_ORDER, ends):
        start = current
        if start >= length:
            continue
        end = min(end, length)
        if end <= start:
            end = start

        regions.append(Region(
            type=region_type,
            start=start,
            end=end,
            sequence=sequence[start:end],
            name=REGION_NAMES[region_type],
        ))
        numbering.extend(
            NumberingEntry(position=i + 1, residue=sequence[i], region=region_type)
            for i in range(start, end)
        )
        current = end

    return AnalysisResult(
        sequence=sequence,
        scheme=scheme,
        regions=tuple(regions),
        numbering=tuple(numbering),
        score=score,
        reasoning=tuple(reasoning),
    )


def annotate(sequence: str, scheme: str = 'IMGT') -> AnalysisResult:
    """
    Annotate the regions of an antibody variable domain.

    Parameters
    ----------
    sequence : str
        Arbitrary text; it is upper-cased and stripped of non-letters first
    scheme : str
        'IMGT', 'Kabat' or 'Chothia' (case-insensitive)

    Returns
    -------
    AnalysisResult

    Raises
    ------
    ValueError
        If the scheme is unknown. Sequence content never raises.

    Examples
    --------
    >>> result = annotate("EVQLVESGGGLVQPGGSLRLSCAAS...", scheme="Kabat")
    >>> result.get_region("CDR3").sequence
    """
    scheme = validate_numbering_scheme(scheme)
    cleaned = clean_sequence(sequence)

    anchors = detect_anchors(cleaned)
    call = compute_boundaries(anchors, len(cleaned), scheme)
    return segment(cleaned, call.boundaries, scheme, call.score, call.reasoning)


class AntibodyNumbering:
    """
    Class for antibody sequence numbering and region annotation.

    Attributes
    ----------
    scheme : str
        Numbering scheme to use

    Examples
    --------
    >>> numbering = AntibodyNumbering(scheme='kabat')
    >>> result = numbering.number_sequence("QVQLV...")
    >>> regions = numbering.annotate_regions("QVQLV...")
    """

    def __init__(self, scheme: str = "IMGT"):
        """
        Initialize the numbering system.

        Parameters
        ----------
        scheme : str
            Numbering scheme ('IMGT', 'Kabat', 'Chothia')
        """
        self.scheme = validate_numbering_scheme(scheme)

    def detect_anchors(self, sequence: str) -> AnchorSet:
        return detect_anchors(clean_sequence(sequence))

    def number_sequence(self, sequence: str) -> AnalysisResult:
        """Annotate a single sequence with this instance's scheme."""
        return annotate(sequence, self.scheme)

    def number_sequences(self, sequences: Dict[str, str]) -> Dict[str, AnalysisResult]:
        """
        Number multiple sequences.

        Parameters
        ----------
        sequences : dict
            Dictionary of {identifier: sequence}

        Returns
        -------
        dict
            Dictionary of {identifier: AnalysisResult}
        """
        return {seq_id: self.number_sequence(seq) for seq_id, seq in sequences.items()}

    def annotate_regions(self, sequence: str) -> List[Tuple[int, str, str]]:
        """
        Annotate regions residue by residue.

        Returns
        -------
        list
            List of (position, amino_acid, region) tuples
        """
        result = self.number_sequence(sequence)
        return [(n.position, n.residue, n.region) for n in result.numbering]


def number_sequences(sequences: Dict[str, str], scheme: str = "IMGT") -> Dict[str, AnalysisResult]:
    """Convenience function to number several sequences with one scheme."""
    return AntibodyNumbering(scheme=scheme).number_sequences(sequences)


def annotate_regions(sequence: str, scheme: str = "IMGT") -> List[Tuple[int, str, str]]:
    """Convenience function returning (position, amino_acid, region) tuples."""
    return AntibodyNumbering(scheme=scheme).annotate_regions(sequence)
