"""
Static residue property tables and reference sequences.

Hydrophobicity values follow the Kyte-Doolittle hydropathy scale. Charges are
the approximate side-chain charge at neutral pH (histidine counted as +0.5).
Masses are free amino-acid masses in Daltons, rounded to the nearest integer.

References
----------
.. [1] Kyte & Doolittle (1982) "A simple method for displaying the
       hydropathic character of a protein"
"""

from types import MappingProxyType

AMINO_ACID_PROPERTIES = MappingProxyType({
    'A': {'hydro': 1.8, 'charge': 0, 'mass': 89, 'category': 'Nonpolar'},
    'R': {'hydro': -4.5, 'charge': 1, 'mass': 174, 'category': 'Positive'},
    'N': {'hydro': -3.5, 'charge': 0, 'mass': 132, 'category': 'Polar'},
    'D': {'hydro': -3.5, 'charge': -1, 'mass': 133, 'category': 'Negative'},
    'C': {'hydro': 2.5, 'charge': 0, 'mass': 121, 'category': 'Polar'},
    'Q': {'hydro': -3.5, 'charge': 0, 'mass': 146, 'category': 'Polar'},
    'E': {'hydro': -3.5, 'charge': -1, 'mass': 147, 'category': 'Negative'},
    'G': {'hydro': -0.4, 'charge': 0, 'mass': 75, 'category': 'Nonpolar'},
    'H': {'hydro': -3.2, 'charge': 0.5, 'mass': 155, 'category': 'Positive'},
    'I': {'hydro': 4.5, 'charge': 0, 'mass': 131, 'category': 'Nonpolar'},
    'L': {'hydro': 3.8, 'charge': 0, 'mass': 131, 'category': 'Nonpolar'},
    'K': {'hydro': -3.9, 'charge': 1, 'mass': 146, 'category': 'Positive'},
    'M': {'hydro': 1.9, 'charge': 0, 'mass': 149, 'category': 'Nonpolar'},
    'F': {'hydro': 2.8, 'charge': 0, 'mass': 165, 'category': 'Nonpolar'},
    'P': {'hydro': -1.6, 'charge': 0, 'mass': 115, 'category': 'Nonpolar'},
    'S': {'hydro': -0.8, 'charge': 0, 'mass': 105, 'category': 'Polar'},
    'T': {'hydro': -0.7, 'charge': 0, 'mass': 119, 'category': 'Polar'},
    'W': {'hydro': -0.9, 'charge': 0, 'mass': 204, 'category': 'Nonpolar'},
    'Y': {'hydro': -1.3, 'charge': 0, 'mass': 181, 'category': 'Polar'},
    'V': {'hydro': 4.2, 'charge': 0, 'mass': 117, 'category': 'Nonpolar'},
})

# Simplified consensus sequences for common human VH germlines
HUMAN_GERMLINES = MappingProxyType({
    'IGHV1-69': (
        "QVQLVQSGAEVKKPGSSVKVSCKASGGTFSSYAISWVRQAPGQGLEWMG"
        "GIIPIFGTANYAQKFQGRVTITADESTSTAYMELSSLRSEDTAVYYCAR"
    ),
    'IGHV3-23': (
        "EVQLLESGGGLVQPGGSLRLSCAASGFTFSSYAMSWVRQAPGKGLEWVS"
        "AISGSGGSTYYADSVKGRFTISRDNSKNTLYLQMNSLRAEDTAVYYCAK"
    ),
    'IGHV4-34': (
        "QVQLQQWGAGLLKPSETLSLTCAVYGGSFSGYYWSWIRQPPGKGLEWIG"
        "EINHSGSTNYNPSLKSRVTISVDTSKNQFSLKLSSVTAADTAVYYCAR"
    ),
})

DEFAULT_GERMLINE = 'IGHV3-23'

# Adalimumab (Humira) VH, used as the default alignment subject
ADALIMUMAB_VH = (
    "EVQLVESGGGLVQPGGSLRLSCAASGFTFSSYAMSWVRQAPGKGLEWVS"
    "AISGSGGSTYYADSVKGRFTISRDNSKNTLYLQMNSLRAEDTAVYYCAR"
    "DYYGSSWYFDVWGQGTLVTVSS"
)


def get_property(residue: str, name: str) -> float:
    """
    Look up a single property for a residue letter.

    Unknown letters (e.g. 'X', 'B') contribute 0 to every numeric property.

    Parameters
    ----------
    residue : str
        One-letter amino acid code
    name : str
        Property name ('hydro', 'charge' or 'mass')

    Returns
    -------
    float
        Property value, or 0 for unknown residues
    """
    props = AMINO_ACID_PROPERTIES.get(residue)
    if props is None:
        return 0
    return props[name]


def residue_category(residue: str) -> str:
    """Return the residue class ('Nonpolar', 'Polar', ...) or 'Unknown'."""
    props = AMINO_ACID_PROPERTIES.get(residue)
    return props['category'] if props else 'Unknown'
