"""
Sequence-based annotation modules for antibody variable domains.
"""

from .properties import (
    AMINO_ACID_PROPERTIES,
    HUMAN_GERMLINES,
    DEFAULT_GERMLINE,
    ADALIMUMAB_VH,
    get_property,
    residue_category
)
from .anchors import AnchorSet, detect_anchors
from .boundaries import BoundarySet, BoundaryCall, compute_boundaries
from .numbering import (
    REGION_ORDER,
    Region,
    NumberingEntry,
    AnalysisResult,
    AntibodyNumbering,
    annotate,
    segment,
    number_sequences,
    annotate_regions
)
from .humanness import (
    HumannessMetrics,
    HumannessAnalyzer,
    score_humanness,
    parse_regions,
    percent_identity,
    germline_identities,
    closest_germline,
    reference_alignment,
    alignment_blocks
)

__all__ = [
    'AMINO_ACID_PROPERTIES',
    'HUMAN_GERMLINES',
    'DEFAULT_GERMLINE',
    'ADALIMUMAB_VH',
    'get_property',
    'residue_category',
    'AnchorSet',
    'detect_anchors',
    'BoundarySet',
    'BoundaryCall',
    'compute_boundaries',
    'REGION_ORDER',
    'Region',
    'NumberingEntry',
    'AnalysisResult',
    'AntibodyNumbering',
    'annotate',
    'segment',
    'number_sequences',
    'annotate_regions',
    'HumannessMetrics',
    'HumannessAnalyzer',
    'score_humanness',
    'parse_regions',
    'percent_identity',
    'germline_identities',
    'closest_germline',
    'reference_alignment',
    'alignment_blocks'
]
