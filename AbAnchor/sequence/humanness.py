"""
Humanness and physicochemical scoring of antibody VH sequences.

This module calculates:
- Percent identity to a reference human germline (position by position)
- A T20-style tolerance indicator derived from that identity
- Mean Kyte-Doolittle hydrophobicity and net charge
- A quick framework/CDR split based on the conserved cysteines and the
  last 'WG' dipeptide

The region split here is intentionally independent of the scheme-aware
annotator in :mod:`.numbering`; it needs only two cysteines and never
consults the J-region motif.

References
----------
.. [1] Gao et al. (2013) "Monoclonal antibody humanness score and its
       applications" (T20 score)
"""

import json
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Dict, List, Tuple, Union
import logging

import numpy as np
import pandas as pd

from .properties import (
    ADALIMUMAB_VH,
    DEFAULT_GERMLINE,
    HUMAN_GERMLINES,
    get_property,
)
from ..utils.validators import clean_sequence

logger = logging.getLogger(__name__)

# Identity (%) above which a sequence is considered human
HUMAN_IDENTITY_THRESHOLD = 85.0
# Identity span mapped onto one T20 unit
T20_SCALE = 10.0

# Fixed offsets used when the cysteines cannot be placed
DEFAULT_REGION_OFFSETS = (25, 33, 50, 58, 95, 105)

SIMPLE_REGION_KEYS = ('fr1', 'cdr1', 'fr2', 'cdr2', 'fr3', 'cdr3', 'fr4')


@dataclass(frozen=True)
class HumannessMetrics:
    """
    Humanness and physicochemical summary of one sequence.

    Attributes
    ----------
    identity : float
        Percent identity to the reference germline over the compared length
    t20 : float
        ``(identity - 85) / 10``, unclamped
    avg_hydrophobicity : float
        Mean Kyte-Doolittle hydropathy
    net_charge : float
        Sum of residue charges at neutral pH
    is_human : bool
        ``identity > 85``
    germline : str
        Name of the reference germline
    """

    identity: float
    t20: float
    avg_hydrophobicity: float
    net_charge: float
    is_human: bool
    germline: str = DEFAULT_GERMLINE

    @property
    def t20_label(self) -> str:
        return f"{self.t20:.2f}"

    def to_dict(self) -> Dict:
        return asdict(self)


def _window(sequence: str, start: int, end: int) -> str:
    """Slice with both ends clamped into the sequence; reversed ends are swapped."""
    length = len(sequence)
    start = min(max(start, 0), length)
    end = min(max(end, 0), length)
    return sequence[min(start, end):max(start, end)]


def parse_regions(sequence: str) -> Dict[str, str]:
    """
    Split a VH sequence into framework and CDR regions with a quick heuristic.

    The first and last cysteines and the last 'WG' carve fixed-width regions.
    When the cysteines are missing or misordered, fixed absolute offsets
    (25/33/50/58/95/105) are used instead. A window whose end falls before
    its start is read between the two cut-points, so CDR2 or CDR3 can
    overlap a neighbouring region on short or unusual sequences.

    Parameters
    ----------
    sequence : str
        Cleaned sequence

    Returns
    -------
    dict
        Keys 'fr1', 'cdr1', 'fr2', 'cdr2', 'fr3', 'cdr3', 'fr4'
    """
    cys1 = sequence.find('C')
    cys2 = sequence.rfind('C')
    wg = sequence.rfind('WG')

    if cys1 == -1 or cys2 <= cys1:
        cuts = (0,) + DEFAULT_REGION_OFFSETS + (len(sequence),)
    else:
        fr4_start = wg if wg != -1 else len(sequence) - 10
        cuts = (0, cys1 + 4, cys1 + 12, cys1 + 29, cys2 - 32, cys2 + 3,
                fr4_start, len(sequence))

    return {key: _window(sequence, cuts[i], cuts[i + 1])
            for i, key in enumerate(SIMPLE_REGION_KEYS)}


def _positional_matches(sequence: str, reference: str) -> Tuple[int, int]:
    """Count identical residues over the shorter of the two sequences."""
    compared = min(len(sequence), len(reference))
    if compared == 0:
        return 0, 0
    query = np.frombuffer(sequence[:compared].encode('ascii'), dtype=np.uint8)
    subject = np.frombuffer(reference[:compared].encode('ascii'), dtype=np.uint8)
    return int(np.count_nonzero(query == subject)), compared


def percent_identity(sequence: str, reference: str) -> float:
    """Ungapped percent identity; positions past the shorter sequence are ignored."""
    matches, compared = _positional_matches(sequence, reference)
    return matches / compared * 100 if compared else 0.0


def _get_germline(germline: str) -> str:
    if germline not in HUMAN_GERMLINES:
        raise ValueError(f"Unknown germline: {germline}. "
                         f"Available: {list(HUMAN_GERMLINES)}")
    return HUMAN_GERMLINES[germline]


def score_humanness(sequence: str, germline: str = DEFAULT_GERMLINE) -> HumannessMetrics:
    """
    Score humanness and simple physicochemical properties.

    Parameters
    ----------
    sequence : str
        Arbitrary text; cleaned before scoring
    germline : str
        Reference germline name (default IGHV3-23)

    Returns
    -------
    HumannessMetrics

    Raises
    ------
    ValueError
        If the germline is unknown
    """
    reference = _get_germline(germline)
    sequence = clean_sequence(sequence)

    identity = percent_identity(sequence, reference)

    total_hydro = sum(get_property(aa, 'hydro') for aa in sequence)
    charge = sum(get_property(aa, 'charge') for aa in sequence)
    avg_hydro = total_hydro / len(sequence) if sequence else 0.0

    return HumannessMetrics(
        identity=identity,
        t20=(identity - HUMAN_IDENTITY_THRESHOLD) / T20_SCALE,
        avg_hydrophobicity=avg_hydro,
        net_charge=charge,
        is_human=identity > HUMAN_IDENTITY_THRESHOLD,
        germline=germline,
    )


def germline_identities(sequence: str) -> pd.DataFrame:
    """
    Identity of a sequence against every reference germline, best first.

    Returns
    -------
    pd.DataFrame
        Columns: Germline, Identity, Compared, Matches
    """
    sequence = clean_sequence(sequence)
    rows = []
    for name, reference in HUMAN_GERMLINES.items():
        matches, compared = _positional_matches(sequence, reference)
        rows.append({
            'Germline': name,
            'Identity': matches / compared * 100 if compared else 0.0,
            'Compared': compared,
            'Matches': matches,
        })
    df = pd.DataFrame(rows, columns=['Germline', 'Identity', 'Compared', 'Matches'])
    return df.sort_values('Identity', ascending=False, kind='stable').reset_index(drop=True)


def closest_germline(sequence: str) -> Tuple[str, float]:
    """Name and identity of the most similar reference germline."""
    best = germline_identities(sequence).iloc[0]
    return best['Germline'], float(best['Identity'])


def reference_alignment(sequence: str, reference: str = ADALIMUMAB_VH) -> pd.DataFrame:
    """
    Ungapped residue-by-residue comparison against a reference sequence.

    The shorter sequence is padded with '-' up to the longer one.

    Returns
    -------
    pd.DataFrame
        Columns: Position (1-based), Query, Reference, Match, Gap
    """
    sequence = clean_sequence(sequence)
    length = max(len(sequence), len(reference))
    query = sequence.ljust(length, '-')
    subject = reference.ljust(length, '-')

    rows = []
    for i, (q, s) in enumerate(zip(query, subject)):
        gap = q == '-' or s == '-'
        rows.append({
            'Position': i + 1,
            'Query': q,
            'Reference': s,
            'Match': (q == s) and not gap,
            'Gap': gap,
        })
    return pd.DataFrame(rows, columns=['Position', 'Query', 'Reference', 'Match', 'Gap'])


def alignment_blocks(sequence: str,
                     reference: str = ADALIMUMAB_VH,
                     width: int = 40) -> List[Tuple[int, str, str]]:
    """
    Break a query/reference comparison into fixed-width display blocks.

    Returns
    -------
    list
        (start, query_chunk, reference_chunk) tuples, chunks padded with '-'
    """
    if width < 1:
        raise ValueError(f"width must be >= 1, got {width}")
    sequence = clean_sequence(sequence)
    length = max(len(sequence), len(reference))
    return [
        (start,
         sequence[start:start + width].ljust(width, '-'),
         reference[start:start + width].ljust(width, '-'))
        for start in range(0, length, width)
    ]


class HumannessAnalyzer:
    """
    Analyzer for humanness and physicochemical properties of VH sequences.

    Attributes
    ----------
    germline : str
        Reference germline used for identity
    results : dict
        Result of the last :meth:`analyze` call

    Examples
    --------
    >>> analyzer = HumannessAnalyzer()
    >>> results = analyzer.analyze("EVQLLESGGGLVQPGG...")
    >>> results['metrics'].is_human
    >>> analyzer.save_results("humanness.csv")
    """

    def __init__(self, germline: str = DEFAULT_GERMLINE):
        _get_germline(germline)
        self.germline = germline
        self.results = None

    def analyze(self, sequence: str) -> Dict:
        """
        Score a sequence and split it into regions.

        Parameters
        ----------
        sequence : str
            Arbitrary text; cleaned before analysis

        Returns
        -------
        dict
            'sequence', 'metrics' (HumannessMetrics), 'regions' (dict),
            'closest_germline' and 'closest_identity'
        """
        cleaned = clean_sequence(sequence)
        metrics = score_humanness(cleaned, self.germline)
        closest, closest_identity = closest_germline(cleaned)

        self.results = {
            'sequence': cleaned,
            'metrics': metrics,
            'regions': parse_regions(cleaned),
            'closest_germline': closest,
            'closest_identity': closest_identity,
        }
        logger.debug(f"Identity to {self.germline}: {metrics.identity:.1f}%")
        return self.results

    def to_dataframe(self) -> pd.DataFrame:
        """Convert the last result to a one-row DataFrame."""
        if not self.results:
            return pd.DataFrame()

        metrics = self.results['metrics']
        row = {
            'Sequence': self.results['sequence'],
            'Germline': metrics.germline,
            'Identity': metrics.identity,
            'T20': metrics.t20,
            'Avg_Hydrophobicity': metrics.avg_hydrophobicity,
            'Net_Charge': metrics.net_charge,
            'Is_Human': metrics.is_human,
            'Closest_Germline': self.results['closest_germline'],
            'Closest_Identity': self.results['closest_identity'],
        }
        for key, value in self.results['regions'].items():
            row[key.upper()] = value
        return pd.DataFrame([row])

    def save_results(self, output_file: Union[str, Path], format: str = "csv"):
        """
        Save the last result to file.

        Parameters
        ----------
        output_file : str or Path
            Output file path
        format : str
            Output format ('csv', 'json', 'excel')
        """
        if not self.results:
            raise ValueError("No results to save. Run analyze() first.")

        output_file = Path(output_file)

        if format == "csv":
            self.to_dataframe().to_csv(output_file, index=False)
        elif format == "json":
            payload = dict(self.results, metrics=self.results['metrics'].to_dict())
            with open(output_file, 'w') as f:
                json.dump(payload, f, indent=2)
        elif format == "excel":
            self.to_dataframe().to_excel(output_file, index=False)
        else:
            raise ValueError(f"Unsupported format: {format}")

        logger.info(f"Results saved to {output_file}")
