"""
Main module for antibody region annotation.

This module provides the central interface for annotating variable-domain
regions and scoring humanness for single sequences and batches.
"""

import json
import logging
from concurrent.futures import ProcessPoolExecutor
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import pandas as pd
from tqdm import tqdm

from .config import Config
from ..sequence import (
    AnalysisResult,
    AntibodyNumbering,
    HumannessAnalyzer,
    HumannessMetrics,
    REGION_ORDER,
)
from ..utils import write_results

logger = logging.getLogger(__name__)


class AntibodyRegionAnnotator:
    """
    Main class for annotating antibody variable domains.

    This class coordinates the anchor-based region annotator and the
    humanness analyzer, and flattens their results into pandas rows for
    reporting and batch processing.

    Parameters
    ----------
    config : Config or dict, optional
        Configuration object or dictionary. If None, uses default configuration.

    Attributes
    ----------
    config : Config
        Configuration object containing all settings
    results : dict
        Dictionary storing the latest results
    metadata : dict
        Metadata about the analysis run

    Examples
    --------
    >>> from AbAnchor import AntibodyRegionAnnotator
    >>> annotator = AntibodyRegionAnnotator()
    >>> df = annotator.analyze("EVQLVESGGGLVQPGG...", sequence_id="mAb1")

    Custom configuration:

    >>> annotator = AntibodyRegionAnnotator(config={'numbering_scheme': 'kabat'})
    """

    def __init__(self, config: Optional[Union[Config, Dict]] = None):
        """Initialize the annotator."""
        if config is None:
            self.config = Config()
        elif isinstance(config, dict):
            self.config = Config.from_dict(config)
        elif isinstance(config, Config):
            self.config = config
        else:
            raise TypeError(f"Config must be Config object or dict, got {type(config)}")

        self.results = {}
        self.metadata = {
            'version': self._get_version(),
            'timestamp': datetime.now().isoformat(),
            'config': self.config.to_dict()
        }

        self.numbering = AntibodyNumbering(scheme=self.config.numbering_scheme)
        self.humanness_analyzer = HumannessAnalyzer(germline=self.config.reference_germline)

    def _get_version(self) -> str:
        """Get package version."""
        from ..__version__ import __version__
        return __version__

    def annotate(self, sequence: str, scheme: Optional[str] = None) -> AnalysisResult:
        """
        Annotate regions of one sequence.

        Parameters
        ----------
        sequence : str
            Raw sequence text
        scheme : str, optional
            Overrides the configured numbering scheme

        Returns
        -------
        AnalysisResult
        """
        if scheme is None:
            return self.numbering.number_sequence(sequence)
        return AntibodyNumbering(scheme=scheme).number_sequence(sequence)

    def score_humanness(self, sequence: str) -> HumannessMetrics:
        """Humanness metrics against the configured reference germline."""
        return self.humanness_analyzer.analyze(sequence)['metrics']

    def analyze(
        self,
        sequence: str,
        sequence_id: str = "Antibody",
        return_details: bool = False
    ) -> Union[pd.DataFrame, Tuple[pd.DataFrame, Dict[str, Any]]]:
        """
        Annotate a sequence and compute all enabled metrics.

        Parameters
        ----------
        sequence : str
            Raw sequence text
        sequence_id : str
            Identifier for the sequence
        return_details : bool
            If True, also return the AnalysisResult and humanness details

        Returns
        -------
        pd.DataFrame
            One-row DataFrame with columns:
            - SeqID, Scheme, Length, Confidence, Anchored, Reasoning
            - <Region>_Seq and <Region>_Length for FR1..FR4
            - Region properties and humanness columns when enabled
        """
        logger.info(f"Annotating {sequence_id} ({self.config.numbering_scheme})")

        annotation = self.numbering.number_sequence(sequence)
        results = self._flatten_annotation(annotation)
        results = {'SeqID': sequence_id, **results}
        details = {'annotation': annotation}
        modules = self.config.get_analysis_modules()

        if modules['region_properties']:
            try:
                results.update(self._flatten_region_properties(annotation))
            except Exception as e:
                logger.error(f"  Error in region property calculation: {e}")
                if self.config.verbose:
                    raise

        if modules['humanness']:
            logger.debug("  Scoring humanness...")
            try:
                humanness = self.humanness_analyzer.analyze(annotation.sequence)
                results.update(self._flatten_humanness_results(humanness))
                details['humanness'] = humanness
            except Exception as e:
                logger.error(f"  Error in humanness analysis: {e}")
                if self.config.verbose:
                    raise

        self.results = {'sequence': results}

        df = pd.DataFrame([results])
        if return_details:
            return df, details
        return df

    def analyze_batch(
        self,
        sequences: Union[Dict[str, str], List[str]],
        progress: bool = False
    ) -> pd.DataFrame:
        """
        Analyze many sequences.

        Failures are recorded in an ``Error`` column instead of aborting the
        batch. With ``n_jobs > 1`` sequences are spread over worker processes;
        row order always follows the input order.

        Parameters
        ----------
        sequences : dict or list
            {identifier: sequence} or a list of sequences
        progress : bool
            Show a progress bar

        Returns
        -------
        pd.DataFrame
            One row per input sequence
        """
        if isinstance(sequences, dict):
            items = list(sequences.items())
        elif isinstance(sequences, list):
            items = [(f'Seq_{i + 1}', seq) for i, seq in enumerate(sequences)]
        else:
            raise ValueError("sequences must be a list or dictionary")

        logger.info(f"Processing {len(items)} sequences with {self.config.n_jobs} job(s)")
        config_dict = self.config.to_dict()
        tasks = [(config_dict, seq_id, seq) for seq_id, seq in items]

        if self.config.n_jobs > 1 and len(tasks) > 1:
            with ProcessPoolExecutor(max_workers=self.config.n_jobs) as executor:
                rows = executor.map(_analyze_task, tasks)
                rows = list(tqdm(rows, total=len(tasks), desc="Annotating", disable=not progress))
        else:
            rows = [_analyze_task(task)
                    for task in tqdm(tasks, desc="Annotating", disable=not progress)]

        df = pd.DataFrame(rows)
        self.results = {'batch': df}
        return df

    def save_results(
        self,
        output_path: Union[str, Path],
        format: Optional[str] = None,
        include_metadata: bool = True
    ):
        """
        Save results to file.

        Batch results take precedence over the last single-sequence result.

        Parameters
        ----------
        output_path : str or Path
            Path for output file
        format : str, optional
            Output format. If None, uses config default
        include_metadata : bool
            Whether to include metadata in output. Only Excel (a 'Metadata'
            sheet) and JSON (a '_metadata' key) carry it; without it JSON is
            a plain list of records.
        """
        if not self.results:
            logger.warning("No results to save")
            return

        output_path = Path(output_path)
        format = format or self.config.output_format

        if 'batch' in self.results:
            df = self.results['batch']
        else:
            df = pd.DataFrame([self.results['sequence']])

        if format == 'excel' and include_metadata:
            with pd.ExcelWriter(output_path, engine='openpyxl') as writer:
                df.to_excel(writer, sheet_name='Annotation', index=False)
                metadata = dict(self.metadata, config=json.dumps(self.metadata['config']))
                pd.DataFrame([metadata]).to_excel(
                    writer, sheet_name='Metadata', index=False
                )
        elif format == 'json' and include_metadata:
            output_dict = {
                'results': df.to_dict(orient='records'),
                '_metadata': self.metadata,
            }
            with open(output_path, 'w') as f:
                json.dump(output_dict, f, indent=2, default=str)
        else:
            # Plain tables, no metadata
            write_results(df, output_path, format=format)

        logger.info(f"Results saved to {output_path}")

    def get_summary(self) -> Dict[str, Any]:
        """
        Get summary of the latest results.

        Returns
        -------
        dict
            Summary statistics and key metrics
        """
        summary = {
            'timestamp': self.metadata['timestamp'],
            'scheme': self.config.numbering_scheme,
            'n_sequences': 0,
        }

        if 'batch' in self.results:
            df = self.results['batch']
            summary['n_sequences'] = len(df)
            if 'Anchored' in df.columns:
                summary['n_anchored'] = int(df['Anchored'].fillna(False).astype(bool).sum())
            if 'Error' in df.columns:
                summary['n_failed'] = int(df['Error'].notna().sum())
            if 'Identity' in df.columns:
                summary['mean_identity'] = float(df['Identity'].mean())
        elif 'sequence' in self.results:
            row = self.results['sequence']
            summary['n_sequences'] = 1
            summary['n_anchored'] = int(bool(row['Anchored']))
            summary['confidence'] = row['Confidence']
            if 'Identity' in row:
                summary['identity'] = row['Identity']
                summary['is_human'] = row['Is_Human']

        return summary

    # Helper methods
    def _flatten_annotation(self, annotation: AnalysisResult) -> Dict[str, Any]:
        """Flatten an AnalysisResult for DataFrame."""
        flat = {
            'Scheme': annotation.scheme,
            'Length': len(annotation.sequence),
            'Confidence': annotation.score,
            'Anchored': annotation.is_anchored,
            'Reasoning': ' | '.join(annotation.reasoning),
        }
        sequences = annotation.region_sequences()
        for tag in REGION_ORDER:
            flat[f'{tag}_Seq'] = sequences[tag]
            flat[f'{tag}_Length'] = len(sequences[tag])
        return flat

    def _flatten_region_properties(self, annotation: AnalysisResult) -> Dict[str, Any]:
        """Flatten per-region hydrophobicity and charge."""
        flat = {}
        for _, row in annotation.region_dataframe().iterrows():
            flat[f"{row['Region']}_Hydrophobicity"] = row['Hydrophobicity']
            flat[f"{row['Region']}_Charge"] = row['Net_Charge']
        return flat

    def _flatten_humanness_results(self, humanness: Dict) -> Dict[str, Any]:
        """Flatten humanness results."""
        metrics = humanness['metrics']
        return {
            'Germline': metrics.germline,
            'Identity': metrics.identity,
            'T20': metrics.t20,
            'Avg_Hydrophobicity': metrics.avg_hydrophobicity,
            'Net_Charge': metrics.net_charge,
            'Is_Human': metrics.is_human,
            'Closest_Germline': humanness['closest_germline'],
            'Closest_Identity': humanness['closest_identity'],
        }


def _analyze_task(task: Tuple[Dict[str, Any], str, str]) -> Dict[str, Any]:
    """Analyze one batch item; module level so worker processes can unpickle it."""
    config_dict, seq_id, sequence = task
    config = Config.from_dict(dict(config_dict, verbose=False))
    try:
        annotator = AntibodyRegionAnnotator(config=config)
        return annotator.analyze(sequence, sequence_id=seq_id).iloc[0].to_dict()
    except Exception as e:
        logger.error(f"Failed to process {seq_id}: {e}")
        return {'SeqID': seq_id, 'Error': str(e)}
