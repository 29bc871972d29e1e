"""
Pytest configuration for AbAnchor tests.
"""

import pytest

# Adalimumab VH; all four anchors present
SCENARIO_HEAVY = (
    "EVQLVESGGGLVQPGGSLRLSCAASGFTFSSYAMSWVRQAPGKGLEWVS"
    "AISGSGGSTYYADSVKGRFTISRDNSKNTLYLQMNSLRAEDTAVYYCAR"
    "DYYGSSWYFDVWGQGTLVTVSS"
)

TEST_HEAVY_SEQUENCE = (
    "QVQLVQSGAEVKKPGASVKVSCKASGGTFSSYAISWVRQAPGQGLEWMG"
    "GIIPIFGTANYAQKFQGRVTITADESTSTAYMELSSLRSEDTAVYYCAR"
    "SHYGLDYWGQGTLVTVSS"
)

TEST_LIGHT_SEQUENCE = (
    "DIQMTQSPSSLSASVGDRVTITCRASHSISSYLAWYQQKPGKAPKLLIY"
    "AASSLQSGVPSRFSGSGSGTDFTLTISSLQPEDFATYYCQQSYSTPLTF"
    "GGGTKVEIK"
)

# No cysteine or tryptophan
SHORT_NO_ANCHORS = "ADEFGHIKLM"

# Sequences covering anchored, fallback and degenerate inputs
PROPERTY_SEQUENCES = [
    SCENARIO_HEAVY,
    TEST_HEAVY_SEQUENCE,
    TEST_LIGHT_SEQUENCE,
    SHORT_NO_ANCHORS,
    "",
    "C",
    "CW",
    "WGQG",
    "CCCCCCCCCCCCCCCCCCCC",
    SCENARIO_HEAVY[:100],
    "A" * 31 + SCENARIO_HEAVY,
    SCENARIO_HEAVY[:22] + "XBZ" + SCENARIO_HEAVY[22:],
    "M" * 300,
]


@pytest.fixture
def heavy_sequence():
    """Adalimumab VH sequence."""
    return SCENARIO_HEAVY


@pytest.fixture
def test_sequences():
    """Provide test antibody sequences."""
    return {
        'adalimumab': SCENARIO_HEAVY,
        'heavy': TEST_HEAVY_SEQUENCE,
        'light': TEST_LIGHT_SEQUENCE,
    }


@pytest.fixture
def quiet_config():
    """Configuration that logs analysis errors instead of raising."""
    from AbAnchor import Config
    return Config.from_dict({'verbose': False})


@pytest.fixture
def annotator(quiet_config):
    """Provide configured annotator instance."""
    from AbAnchor import AntibodyRegionAnnotator
    return AntibodyRegionAnnotator(config=quiet_config)
