"""
Command-line interface for antibody region annotation.

This module provides CLI access to region annotation, humanness scoring
and batch processing of antibody variable-domain sequences.
"""

import click
from pathlib import Path
import json
import logging
from typing import Optional

from .core import AntibodyRegionAnnotator, Config, load_config
from .utils import numbering_to_region_string, numbering_to_string, sequence_to_fasta
from .__version__ import __version__

logger = logging.getLogger(__name__)

SCHEME_CHOICES = click.Choice(['imgt', 'kabat', 'chothia'], case_sensitive=False)


def setup_logging(verbose: bool = False, quiet: bool = False):
    """Configure logging based on verbosity settings."""
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


# Main CLI group
@click.group()
@click.version_option(version=__version__, prog_name='abanchor')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--quiet', '-q', is_flag=True, help='Suppress non-error output')
@click.pass_context
def cli(ctx, verbose, quiet):
    """
    AbAnchor - anchor-based antibody region annotation.

    Locate FR/CDR regions of antibody variable domains under the IMGT,
    Kabat or Chothia scheme and score their humanness.

    Examples:

        # Annotate a sequence
        abanchor annotate EVQLVESGGGLVQPGG... -s kabat

        # Score humanness against a germline
        abanchor humanness heavy.fasta -g IGHV1-69

        # Batch process a FASTA file
        abanchor batch sequences.fasta -o results.csv -j 4
    """
    setup_logging(verbose, quiet)
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    ctx.obj['quiet'] = quiet


@cli.command()
@click.argument('sequence')
@click.option('--scheme', '-s', type=SCHEME_CHOICES, help='Numbering scheme')
@click.option('--config', '-c', type=click.Path(exists=True),
              help='Configuration JSON file')
@click.option('--output', '-o', help='Output file')
@click.option('--format', '-f',
              type=click.Choice(['text', 'csv', 'json', 'fasta']),
              default='text', help='Output format')
@click.pass_context
def annotate(ctx, sequence, scheme, config, output, format):
    """
    Annotate FR/CDR regions of a sequence or FASTA file.

    The text format lists the regions with confidence and reasoning; csv
    gives the per-residue numbering table; json gives the full result;
    fasta writes one record per non-empty region.

    Example:
        abanchor annotate EVQLVESGGGLVQPGG... -s chothia
    """
    try:
        cfg = load_config(config)
        annotator = AntibodyRegionAnnotator(config=cfg)
        result = annotator.annotate(_parse_sequence_input(sequence), scheme=scheme)

        if format == 'text':
            text = _format_annotation_text(result)
        elif format == 'csv':
            text = result.numbering_dataframe().to_csv(index=False)
        elif format == 'fasta':
            text = _format_region_fasta(result)
        else:
            text = json.dumps(result.to_dict(), indent=2)

        _emit(text, output, ctx.obj['quiet'])

    except Exception as e:
        logger.error(f"Annotation failed: {e}")
        if ctx.obj['verbose']:
            raise
        else:
            raise click.ClickException(str(e))


@cli.command()
@click.argument('sequence')
@click.option('--germline', '-g',
              type=click.Choice(['IGHV1-69', 'IGHV3-23', 'IGHV4-34']),
              default='IGHV3-23', help='Reference germline')
@click.option('--output', '-o', help='Output file')
@click.option('--format', '-f',
              type=click.Choice(['text', 'json']),
              default='text', help='Output format')
@click.pass_context
def humanness(ctx, sequence, germline, output, format):
    """
    Score humanness and physicochemical properties of a VH sequence.

    Example:
        abanchor humanness EVQLVESGGGLVQPGG... -g IGHV3-23
    """
    from .sequence import HumannessAnalyzer

    try:
        analyzer = HumannessAnalyzer(germline=germline)
        results = analyzer.analyze(_parse_sequence_input(sequence))
        metrics = results['metrics']

        if format == 'json':
            payload = dict(results, metrics=metrics.to_dict())
            text = json.dumps(payload, indent=2)
        else:
            lines = [
                f"Germline:          {metrics.germline}",
                f"Identity:          {metrics.identity:.1f}%",
                f"T20:               {metrics.t20_label}",
                f"Avg hydrophobicity: {metrics.avg_hydrophobicity:.2f}",
                f"Net charge:        {metrics.net_charge:.2f}",
                f"Human:             {'yes' if metrics.is_human else 'no'}",
                f"Closest germline:  {results['closest_germline']} "
                f"({results['closest_identity']:.1f}%)",
                "",
                "Regions:",
            ]
            for key, value in results['regions'].items():
                lines.append(f"  {key.upper():<5} {value or '-'}")
            text = '\n'.join(lines)

        _emit(text, output, ctx.obj['quiet'])

    except Exception as e:
        logger.error(f"Humanness scoring failed: {e}")
        if ctx.obj['verbose']:
            raise
        else:
            raise click.ClickException(str(e))


# Batch processing command
@cli.command()
@click.argument('input_file', type=click.Path(exists=True))
@click.option('--output', '-o', default='batch_results.csv',
              help='Output file path')
@click.option('--format', '-f',
              type=click.Choice(['csv', 'excel', 'json', 'parquet']),
              default='csv', help='Output format')
@click.option('--input-format',
              type=click.Choice(['fasta', 'csv', 'json', 'excel']),
              help='Input file format (auto-detected if not specified)')
@click.option('--scheme', '-s', type=SCHEME_CHOICES, help='Numbering scheme')
@click.option('--config', '-c', type=click.Path(exists=True),
              help='Configuration JSON file')
@click.option('--parallel', '-j', type=int, default=1,
              help='Number of parallel jobs')
@click.option('--id-column', default='ID',
              help='Column name for sequence IDs (CSV/Excel/JSON input)')
@click.option('--sequence-column', default='Sequence',
              help='Column name for sequences (CSV/Excel/JSON input)')
@click.option('--progress/--no-progress', default=True,
              help='Show progress bar')
@click.pass_context
def batch(ctx, input_file, output, format, input_format, scheme, config, parallel,
          id_column, sequence_column, progress):
    """
    Batch annotate multiple antibody sequences.

    Supports FASTA files and CSV/Excel/JSON tables with an ID and a
    sequence column. Failed sequences are reported in an Error column.

    Examples:

        # Process FASTA file with multiple sequences
        abanchor batch sequences.fasta -o results.csv

        # Process CSV file with parallel jobs
        abanchor batch antibodies.csv -j 4 -o results.xlsx -f excel
    """
    from .utils import load_sequence_table

    try:
        config_dict = {}
        if config:
            with open(config, 'r') as f:
                config_dict.update(json.load(f))
        config_dict['n_jobs'] = parallel
        if scheme:
            config_dict['numbering_scheme'] = scheme

        sequences = load_sequence_table(
            input_file, input_format,
            id_column=id_column, sequence_column=sequence_column
        )

        if not sequences:
            raise click.ClickException("No valid sequences found in input file")

        if not ctx.obj['quiet']:
            click.echo(f"Processing {len(sequences)} sequences...")

        annotator = AntibodyRegionAnnotator(config=config_dict)
        df = annotator.analyze_batch(sequences, progress=progress and not ctx.obj['quiet'])
        annotator.save_results(output, format=format)

        if not ctx.obj['quiet']:
            summary = annotator.get_summary()
            failed = summary.get('n_failed', 0)
            click.echo("\nBatch processing complete:")
            click.echo(f"  Successful: {len(df) - failed}")
            click.echo(f"  Anchored:   {summary.get('n_anchored', 0)}")
            if failed > 0:
                click.echo(f"  Failed: {failed}")
            click.secho(f"\nResults saved to {output}", fg='green')

    except click.ClickException:
        raise
    except Exception as e:
        logger.error(f"Batch processing failed: {e}")
        if ctx.obj['verbose']:
            raise
        else:
            raise click.ClickException(str(e))


@cli.command()
def schemes():
    """List supported numbering schemes and their anchor offsets."""
    from .sequence.boundaries import SCHEME_OFFSETS, BOUNDARY_NAMES

    for scheme, offsets in SCHEME_OFFSETS.items():
        click.secho(scheme, bold=True)
        for name in BOUNDARY_NAMES:
            anchor, offset = offsets[name]
            click.echo(f"  {name:<9} = {anchor} {offset:+d}")


# Config management commands
@cli.group()
def config():
    """Manage configuration files."""
    pass


@config.command()
@click.option('--output', '-o', default='config.json',
              help='Output file path')
def create(output):
    """Create a default configuration file."""
    config = Config()
    config.save(output)
    click.secho(f"Default configuration saved to {output}", fg='green')

    # Show key settings
    click.echo("\nKey settings:")
    click.echo(f"  Numbering scheme: {config.numbering_scheme}")
    click.echo(f"  Reference germline: {config.reference_germline}")
    click.echo(f"  Output format: {config.output_format}")


@config.command()
@click.argument('config_file', type=click.Path(exists=True))
def show(config_file):
    """Display configuration file contents."""
    with open(config_file, 'r') as f:
        config_dict = json.load(f)

    click.echo(json.dumps(config_dict, indent=2))


# Helper functions
def _parse_sequence_input(input_str: str) -> str:
    """Parse sequence from direct input or file."""
    from .utils import parse_sequence
    return parse_sequence(input_str)


def _format_annotation_text(result) -> str:
    """Format an AnalysisResult as readable text."""
    lines = [
        f"Scheme:     {result.scheme}",
        f"Length:     {len(result.sequence)}",
        f"Confidence: {result.confidence:.2f}"
        f" ({'anchored' if result.is_anchored else 'fallback'})",
        "",
    ]
    for region in result.regions:
        lines.append(f"  {region.type:<5} {region.start + 1:>4}-{region.end:<4} "
                     f"{region.sequence or '-'}")
    lines.append("")

    # Residues over a region track (1..7 for FR1..FR4), 60 per row
    numbering = [(n.position, n.residue, n.region) for n in result.numbering]
    residues = numbering_to_string(numbering)
    track = numbering_to_region_string(numbering)
    for i in range(0, len(residues), 60):
        lines.append(f"  {i + 1:>4} {residues[i:i + 60]}")
        lines.append(f"       {track[i:i + 60]}")
    if residues:
        lines.append("")

    lines.append("Reasoning:")
    lines.extend(f"  - {reason}" for reason in result.reasoning)
    return "\n".join(lines)


def _format_region_fasta(result) -> str:
    """One FASTA record per non-empty region, named <scheme>_<region>."""
    records = [
        sequence_to_fasta(region.sequence, seq_id=f"{result.scheme}_{region.type}")
        for region in result.regions
        if region.sequence
    ]
    return "\n".join(records) + "\n"


def _emit(text: str, output: Optional[str], quiet: bool):
    """Write text to a file or echo it."""
    if output:
        Path(output).write_text(text)
        if not quiet:
            click.secho(f"Results saved to {output}", fg='green')
    else:
        click.echo(text)


# Entry point
if __name__ == '__main__':
    cli()
