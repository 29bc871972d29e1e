"""
Configuration management for antibody region annotation.
"""

import json
import os
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass, asdict
import logging

from ..sequence.properties import DEFAULT_GERMLINE, HUMAN_GERMLINES
from ..utils.validators import validate_numbering_scheme

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = 'ABANCHOR_CONFIG'

VALID_OUTPUT_FORMATS = ['csv', 'json', 'excel', 'parquet']


@dataclass
class Config:
    """
    Configuration class for antibody region annotation.

    Attributes
    ----------
    numbering_scheme : str
        Numbering scheme ('IMGT', 'Kabat', 'Chothia'); any case is accepted
        and normalized
    reference_germline : str
        Germline used for humanness identity ('IGHV1-69', 'IGHV3-23', 'IGHV4-34')
    calculate_humanness : bool
        Whether to add humanness metrics to each result row
    calculate_region_properties : bool
        Whether to add per-region hydrophobicity and charge columns
    output_format : str
        Default output format ('csv', 'json', 'excel', 'parquet')
    verbose : bool
        Whether errors inside an analysis are re-raised instead of logged
    n_jobs : int
        Number of worker processes for batch annotation
    """

    numbering_scheme: str = 'IMGT'
    reference_germline: str = DEFAULT_GERMLINE

    # Analysis selection flags
    calculate_humanness: bool = True
    calculate_region_properties: bool = True

    # Output parameters
    output_format: str = 'csv'
    verbose: bool = True
    n_jobs: int = 1

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_config()

    def _validate_config(self):
        """Validate configuration parameters."""
        self.numbering_scheme = validate_numbering_scheme(self.numbering_scheme)

        if self.reference_germline not in HUMAN_GERMLINES:
            raise ValueError(f"Invalid reference germline: {self.reference_germline}. "
                             f"Must be one of {list(HUMAN_GERMLINES)}")

        if self.n_jobs < 1:
            raise ValueError(f"n_jobs must be >= 1, got {self.n_jobs}")

        if self.output_format not in VALID_OUTPUT_FORMATS:
            raise ValueError(f"Invalid output format: {self.output_format}. "
                             f"Must be one of {VALID_OUTPUT_FORMATS}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self)

    def save(self, filepath: str):
        """
        Save configuration to JSON file.

        Parameters
        ----------
        filepath : str
            Path to save configuration file
        """
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Configuration saved to {filepath}")

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'Config':
        """
        Create Config instance from dictionary.

        Parameters
        ----------
        config_dict : Dict[str, Any]
            Configuration dictionary

        Returns
        -------
        Config
            Configuration instance
        """
        return cls(**config_dict)

    @classmethod
    def load(cls, filepath: str) -> 'Config':
        """Load configuration from JSON file."""
        with open(filepath, 'r') as f:
            config_dict = json.load(f)
        return cls.from_dict(config_dict)

    def update(self, **kwargs):
        """
        Update configuration parameters.

        Parameters
        ----------
        **kwargs
            Configuration parameters to update
        """
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)
            else:
                logger.warning(f"Unknown configuration parameter: {key}")
        self._validate_config()

    def get_analysis_modules(self) -> Dict[str, bool]:
        """Dictionary mapping optional analysis names to enabled status."""
        return {
            'humanness': self.calculate_humanness,
            'region_properties': self.calculate_region_properties,
        }

    def __repr__(self) -> str:
        return (f"Config(scheme={self.numbering_scheme}, "
                f"germline={self.reference_germline}, n_jobs={self.n_jobs})")


def load_config(filepath: Optional[str] = None) -> Config:
    """
    Load configuration from file or environment.

    This function attempts to load configuration from:
    1. Specified filepath
    2. Environment variable ABANCHOR_CONFIG
    3. Default configuration

    Parameters
    ----------
    filepath : str, optional
        Path to configuration file

    Returns
    -------
    Config
        Configuration instance
    """
    if filepath and Path(filepath).exists():
        return Config.load(filepath)

    env_config = os.environ.get(CONFIG_ENV_VAR)
    if env_config and Path(env_config).exists():
        logger.info(f"Loading config from environment: {env_config}")
        return Config.load(env_config)

    logger.info("Using default configuration")
    return Config()


def create_default_config(output_path: str = 'config.json') -> Config:
    """
    Create a default configuration file.

    Parameters
    ----------
    output_path : str
        Path to save default configuration
    """
    config = Config()
    config.save(output_path)
    return config
