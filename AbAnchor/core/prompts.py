"""
Prompt text for the external generative-language insight service.

Only the prompt strings are built here from already computed results; the
service call and its response handling belong to the caller.
"""

from textwrap import dedent
from typing import Dict, List, Optional

from ..sequence.humanness import HumannessMetrics
from ..sequence.numbering import AnalysisResult


def _region_or_na(result: AnalysisResult, region_type: str) -> str:
    region = result.get_region(region_type)
    return region.sequence if region and region.sequence else "N/A"


def build_liability_prompt(result: AnalysisResult) -> str:
    """Ask for species of origin, CDR liabilities and therapeutic similarity."""
    return dedent(f"""\
        You are an expert computational biologist specializing in antibody engineering.
        Analyze the following antibody sequence ({result.scheme} numbering):

        Full Sequence: {result.sequence}
        CDR1: {_region_or_na(result, 'CDR1')}
        CDR2: {_region_or_na(result, 'CDR2')}
        CDR3: {_region_or_na(result, 'CDR3')}

        Please provide a concise technical report covering:
        1. **Likely Species of Origin** (e.g., Human, Mouse, Camelid) based on framework homology.
        2. **Sequence Liabilities:** Identify specific chemical liability motifs (e.g., Deamidation [NG, NS], Oxidation [M, W], Isomerization [DG], Glycosylation [NxS/T]) specifically within the CDRs.
        3. **Therapeutic Similarity:** Does this sequence strongly resemble any FDA-approved antibodies (e.g., Trastuzumab, Adalimumab)?

        Format the output as a clean, bulleted list suitable for a dashboard. Keep it under 200 words.
        """)


def build_humanization_prompt(sequence: str) -> str:
    """Ask for three framework point mutations in a fixed format."""
    return dedent(f"""\
        You are an expert antibody engineer.
        Review the following antibody sequence: {sequence}

        Suggest 3 specific point mutations to improve its stability, solubility, or "humaneness" (reduce immunogenicity), focusing on the Framework Regions (FR).

        For each suggestion, strictly follow this format:
        - **Mutation:** [OriginalResidue][Pos][NewResidue] (e.g., A43S)
        - **Rationale:** Brief explanation of why this improves the molecule.
        """)


def build_developability_prompt(sequence: str,
                                metrics: HumannessMetrics,
                                regions: Dict[str, str]) -> str:
    """Ask for a short developability and immunogenicity assessment."""
    return dedent(f"""\
        Act as a senior computational immunologist. Analyze this antibody VH sequence:
        Sequence: {sequence}
        Metrics:
        - Humanness (T20): {metrics.t20_label}
        - Identity: {metrics.identity:.1f}%
        - CDR3: {regions.get('cdr3', '')}
        - Estimated Charge: {metrics.net_charge:.2f}

        Provide a sophisticated, concise (max 3 sentences) assessment of its therapeutic potential, focusing on developability risks (aggregation, viscosity) and immunogenicity. Do not use markdown headers.
        """)


def build_optimization_prompt(sequence: str) -> str:
    """Ask for two point mutations as a raw bulleted list."""
    return dedent(f"""\
        Suggest 2 specific point mutations for this antibody sequence to improve its humanness score or solubility without disrupting CDR binding.
        Sequence: {sequence}
        Format: Return ONLY a raw bulleted list of mutations (e.g. "- A40T: Reason"). Do not include introductory text.
        """)


def parse_mutation_suggestions(text: Optional[str]) -> List[str]:
    """
    Extract bulleted suggestions from a service response.

    Lines starting with '-' (after leading whitespace) are kept with the
    first '-' removed.
    """
    if not text:
        return []
    return [line.replace('-', '', 1).strip()
            for line in text.split('\n')
            if line.strip().startswith('-')]
