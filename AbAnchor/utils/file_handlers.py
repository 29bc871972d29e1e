"""
File handling utilities for sequence input and result output.
"""

import json
import pandas as pd
from pathlib import Path
from typing import Dict, Union, Optional
from Bio import SeqIO
import logging

logger = logging.getLogger(__name__)

FORMAT_BY_SUFFIX = {
    '.fasta': 'fasta',
    '.fa': 'fasta',
    '.faa': 'fasta',
    '.csv': 'csv',
    '.tsv': 'csv',
    '.xlsx': 'excel',
    '.xls': 'excel',
    '.json': 'json',
    '.parquet': 'parquet',
}


def detect_file_format(file_path: Union[str, Path], default: str = 'fasta') -> str:
    """Guess a file format from its extension."""
    return FORMAT_BY_SUFFIX.get(Path(file_path).suffix.lower(), default)


def read_fasta(file_path: Union[str, Path]) -> Dict[str, str]:
    """
    Read all records of a FASTA file.

    Parameters
    ----------
    file_path : str or Path
        Path to FASTA file

    Returns
    -------
    dict
        {record id: upper-case sequence}, in file order
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    sequences = {}
    for record in SeqIO.parse(str(file_path), "fasta"):
        sequences[record.id] = str(record.seq).upper()
    logger.debug(f"Read {len(sequences)} sequences from {file_path}")
    return sequences


def load_sequence_table(
    file_path: Union[str, Path],
    format: Optional[str] = None,
    id_column: str = 'ID',
    sequence_column: str = 'Sequence'
) -> Dict[str, str]:
    """
    Load sequences for batch annotation.

    Parameters
    ----------
    file_path : str or Path
        FASTA, CSV/TSV, Excel or JSON file
    format : str, optional
        'fasta', 'csv', 'excel' or 'json'; detected from the extension if None
    id_column : str
        Identifier column for tabular input
    sequence_column : str
        Sequence column for tabular input

    Returns
    -------
    dict
        {identifier: sequence}. Rows without a sequence are skipped; rows
        without an identifier are named ``Seq_<n>``.

    Raises
    ------
    ValueError
        If the format is unsupported or the sequence column is missing
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    format = format or detect_file_format(file_path)

    if format == 'fasta':
        return read_fasta(file_path)

    if format == 'json':
        with open(file_path, 'r') as f:
            data = json.load(f)
        if isinstance(data, dict):
            return {str(k): str(v) for k, v in data.items()}
        df = pd.DataFrame(data)
        id_column, sequence_column = id_column.lower(), sequence_column.lower()
        df.columns = [str(c).lower() for c in df.columns]
    elif format == 'csv':
        delimiter = '\t' if file_path.suffix.lower() == '.tsv' else ','
        df = pd.read_csv(file_path, delimiter=delimiter)
    elif format == 'excel':
        df = pd.read_excel(file_path)
    else:
        raise ValueError(f"Unsupported input format: {format}")

    if sequence_column not in df.columns:
        raise ValueError(f"Column '{sequence_column}' not found. "
                         f"Available: {list(df.columns)}")

    sequences = {}
    for i, (_, row) in enumerate(df.iterrows(), start=1):
        seq = row[sequence_column]
        if pd.isna(seq):
            continue
        if id_column in df.columns and pd.notna(row[id_column]):
            seq_id = row[id_column]
        else:
            seq_id = f"Seq_{i}"
        sequences[str(seq_id)] = str(seq)

    logger.debug(f"Loaded {len(sequences)} sequences from {file_path}")
    return sequences


def write_results(
    df: pd.DataFrame,
    file_path: Union[str, Path],
    format: Optional[str] = None
) -> Path:
    """
    Write a results DataFrame.

    Parameters
    ----------
    df : pd.DataFrame
        Results table
    file_path : str or Path
        Output path
    format : str, optional
        'csv', 'json', 'excel' or 'parquet'; detected from the extension if None

    Returns
    -------
    Path
        Path to written file
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    format = format or detect_file_format(file_path, default='csv')

    if format == 'csv':
        df.to_csv(file_path, index=False)
    elif format == 'json':
        df.to_json(file_path, orient='records', indent=2)
    elif format == 'excel':
        df.to_excel(file_path, index=False, engine='openpyxl')
    elif format == 'parquet':
        df.to_parquet(file_path, index=False)
    else:
        raise ValueError(f"Unsupported format: {format}")

    logger.info(f"Wrote results to {file_path}")
    return file_path
