"""
Core module for antibody region annotation.
"""

from .main import AntibodyRegionAnnotator
from .config import Config, load_config, create_default_config
from .prompts import (
    build_liability_prompt,
    build_humanization_prompt,
    build_developability_prompt,
    build_optimization_prompt,
    parse_mutation_suggestions
)

__all__ = [
    'AntibodyRegionAnnotator',
    'Config',
    'load_config',
    'create_default_config',
    'build_liability_prompt',
    'build_humanization_prompt',
    'build_developability_prompt',
    'build_optimization_prompt',
    'parse_mutation_suggestions'
]
