"""
AbAnchor: anchor-based region annotation for antibody variable domains.

Locates the conserved cysteines, tryptophan and J-region motif of a VH
domain, places FR/CDR boundaries under the IMGT, Kabat or Chothia
scheme, and scores humanness against reference human germlines.
"""

from .__version__ import __version__
from .core import AntibodyRegionAnnotator, Config, load_config
from .sequence import (
    AnalysisResult,
    HumannessMetrics,
    Region,
    NumberingEntry,
    AntibodyNumbering,
    HumannessAnalyzer,
    annotate,
    score_humanness,
    parse_regions
)
from .utils import clean_sequence

__all__ = [
    '__version__',
    'AntibodyRegionAnnotator',
    'Config',
    'load_config',
    'AnalysisResult',
    'HumannessMetrics',
    'Region',
    'NumberingEntry',
    'AntibodyNumbering',
    'HumannessAnalyzer',
    'annotate',
    'score_humanness',
    'parse_regions',
    'clean_sequence'
]
