"""
Tests for humanness and physicochemical scoring.
"""

import json

import pandas as pd
import pytest

from AbAnchor.sequence.humanness import (
    HumannessAnalyzer,
    HumannessMetrics,
    alignment_blocks,
    closest_germline,
    germline_identities,
    parse_regions,
    percent_identity,
    reference_alignment,
    score_humanness,
)
from AbAnchor.sequence.properties import HUMAN_GERMLINES, get_property, residue_category
from .conftest import SCENARIO_HEAVY


class TestScoreHumanness:
    """Test identity, T20 and physicochemical metrics."""

    def test_germline_scores_itself_as_human(self):
        metrics = score_humanness(HUMAN_GERMLINES['IGHV3-23'])

        assert metrics.identity == 100.0
        assert metrics.is_human
        assert metrics.t20 == pytest.approx(1.5)
        assert metrics.t20_label == "1.50"
        assert metrics.germline == 'IGHV3-23'

    def test_other_germline_reference(self):
        metrics = score_humanness(HUMAN_GERMLINES['IGHV1-69'], germline='IGHV1-69')
        assert metrics.identity == 100.0

    def test_adalimumab(self):
        metrics = score_humanness(SCENARIO_HEAVY)

        # 96 of the first 98 residues match IGHV3-23
        assert metrics.identity == pytest.approx(96 / 98 * 100)
        assert metrics.t20_label == "1.30"
        assert metrics.is_human

    def test_partial_identity(self):
        reference = HUMAN_GERMLINES['IGHV3-23']
        # 85 of 98 positions identical
        assert percent_identity(reference[:85] + "X" * 13, reference) == pytest.approx(85 / 98 * 100)
        assert not score_humanness("XXXX").is_human

    def test_comparison_stops_at_shorter_sequence(self):
        reference = HUMAN_GERMLINES['IGHV3-23']
        assert percent_identity(reference[:10], reference) == 100.0
        assert percent_identity(reference + "AAAA", reference) == 100.0

    def test_empty_sequence(self):
        metrics = score_humanness("")

        assert metrics.identity == 0.0
        assert metrics.t20 == pytest.approx(-8.5)
        assert metrics.avg_hydrophobicity == 0.0
        assert metrics.net_charge == 0
        assert not metrics.is_human

    def test_hydrophobicity_and_charge(self):
        assert score_humanness("AAAA").avg_hydrophobicity == pytest.approx(1.8)
        assert score_humanness("KKDE").net_charge == 0
        assert score_humanness("HHHH").net_charge == pytest.approx(2.0)

    def test_unknown_residues_contribute_zero(self):
        metrics = score_humanness("XBZ")

        assert metrics.avg_hydrophobicity == 0.0
        assert metrics.net_charge == 0

    def test_input_cleaned(self):
        noisy = HUMAN_GERMLINES['IGHV3-23'].lower()[:40] + " 12 " + HUMAN_GERMLINES['IGHV3-23'][40:]
        assert score_humanness(noisy).identity == 100.0

    def test_unknown_germline(self):
        with pytest.raises(ValueError, match="Unknown germline"):
            score_humanness(SCENARIO_HEAVY, germline='IGHV9-99')

    def test_metrics_to_dict(self):
        payload = score_humanness(SCENARIO_HEAVY).to_dict()
        assert set(payload) == {'identity', 't20', 'avg_hydrophobicity',
                                'net_charge', 'is_human', 'germline'}
        json.dumps(payload)


class TestParseRegions:
    """Test the cysteine/'WG' region splitter."""

    def test_adalimumab_split(self):
        regions = parse_regions(SCENARIO_HEAVY)

        assert regions == {
            'fr1': "EVQLVESGGGLVQPGGSLRLSCAAS",
            'cdr1': "GFTFSSYA",
            'fr2': "MSWVRQAPGKGLEWVSA",
            'cdr2': "ISGSGGSTYYADS",
            'fr3': "VKGRFTISRDNSKNTLYLQMNSLRAEDTAVYYCAR",
            'cdr3': "DYYGSSWYFDV",
            'fr4': "WGQGTLVTVSS",
        }

    def test_missing_cysteines_use_fixed_offsets(self):
        regions = parse_regions("A" * 120)

        assert [len(regions[k]) for k in regions] == [25, 8, 17, 8, 37, 10, 15]

    def test_short_sequence_without_cysteines(self):
        regions = parse_regions("AAAAA")

        assert regions['fr1'] == "AAAAA"
        assert all(regions[k] == '' for k in regions if k != 'fr1')

    def test_single_cysteine_uses_fixed_offsets(self):
        regions = parse_regions("A" * 30 + "C" + "A" * 89)
        assert len(regions['fr1']) == 25

    def test_reversed_cdr2_window_swaps_ends(self):
        # cysteines at 0 and 10: cdr2 cut-points are 29 and -22
        regions = parse_regions("C" + "A" * 9 + "C" + "A" * 40)
        assert regions['cdr2'] == "C" + "A" * 9 + "C" + "A" * 18

    def test_wg_before_last_cysteine(self):
        # cys1 20, wg 51, cys2 95: cdr3 cut-points are 98 and 51
        sequence = "A" * 20 + "C" + "A" * 30 + "WGAA" + "A" * 40 + "C" + "AAAAA"
        regions = parse_regions(sequence)

        assert regions['cdr3'] == "WGAA" + "A" * 40 + "C" + "AA"
        assert regions['fr4'] == sequence[51:]

    def test_no_wg_reserves_ten_residues(self):
        sequence = SCENARIO_HEAVY.replace("WG", "AG")
        assert len(parse_regions(sequence)['fr4']) == 10

    def test_empty(self):
        assert parse_regions("") == {k: '' for k in
                                     ('fr1', 'cdr1', 'fr2', 'cdr2', 'fr3', 'cdr3', 'fr4')}


class TestGermlineComparison:
    """Test germline ranking and reference alignment."""

    def test_germline_identities_sorted(self):
        df = germline_identities(SCENARIO_HEAVY)

        assert list(df.columns) == ['Germline', 'Identity', 'Compared', 'Matches']
        assert df['Germline'].tolist() == ['IGHV3-23', 'IGHV1-69', 'IGHV4-34']
        assert df['Identity'].is_monotonic_decreasing
        assert df.loc[0, 'Matches'] == 96
        assert df.loc[0, 'Compared'] == 98

    def test_closest_germline(self):
        name, identity = closest_germline(HUMAN_GERMLINES['IGHV4-34'])

        assert name == 'IGHV4-34'
        assert identity == 100.0

    def test_reference_alignment_identical(self):
        df = reference_alignment(SCENARIO_HEAVY)

        assert len(df) == 120
        assert df['Match'].all()
        assert not df['Gap'].any()

    def test_reference_alignment_padding(self):
        df = reference_alignment("EVA", reference="EVQLV")

        assert ''.join(df['Query']) == "EVA--"
        assert df['Match'].tolist() == [True, True, False, False, False]
        assert df['Gap'].tolist() == [False, False, False, True, True]
        assert df['Position'].tolist() == [1, 2, 3, 4, 5]

    def test_alignment_blocks(self):
        blocks = alignment_blocks("ABC", reference="ABCDE", width=2)

        assert blocks == [(0, "AB", "AB"), (2, "C-", "CD"), (4, "--", "E-")]

    def test_alignment_blocks_default_width(self):
        blocks = alignment_blocks(SCENARIO_HEAVY)

        assert [start for start, _, _ in blocks] == [0, 40, 80]
        assert all(len(q) == 40 for _, q, _ in blocks)

    def test_alignment_blocks_invalid_width(self):
        with pytest.raises(ValueError):
            alignment_blocks(SCENARIO_HEAVY, width=0)


class TestHumannessAnalyzer:
    """Test the analyzer class."""

    def test_analyze(self):
        analyzer = HumannessAnalyzer()
        results = analyzer.analyze(SCENARIO_HEAVY.lower())

        assert results['sequence'] == SCENARIO_HEAVY
        assert isinstance(results['metrics'], HumannessMetrics)
        assert results['regions']['cdr3'] == "DYYGSSWYFDV"
        assert results['closest_germline'] == 'IGHV3-23'

    def test_invalid_germline(self):
        with pytest.raises(ValueError):
            HumannessAnalyzer(germline='IGKV1-39')

    def test_to_dataframe(self):
        analyzer = HumannessAnalyzer(germline='IGHV1-69')
        assert analyzer.to_dataframe().empty

        analyzer.analyze(SCENARIO_HEAVY)
        df = analyzer.to_dataframe()

        assert len(df) == 1
        assert df.loc[0, 'Germline'] == 'IGHV1-69'
        assert df.loc[0, 'CDR3'] == "DYYGSSWYFDV"
        assert df.loc[0, 'Closest_Germline'] == 'IGHV3-23'

    @pytest.mark.parametrize("format,suffix", [('csv', '.csv'), ('json', '.json'), ('excel', '.xlsx')])
    def test_save_results(self, tmp_path, format, suffix):
        analyzer = HumannessAnalyzer()
        analyzer.analyze(SCENARIO_HEAVY)

        output = tmp_path / f"humanness{suffix}"
        analyzer.save_results(output, format=format)

        assert output.exists()
        if format == 'csv':
            assert pd.read_csv(output).loc[0, 'Is_Human']
        elif format == 'json':
            with open(output) as f:
                assert json.load(f)['metrics']['is_human'] is True

    def test_save_without_results(self, tmp_path):
        with pytest.raises(ValueError, match="No results"):
            HumannessAnalyzer().save_results(tmp_path / "out.csv")

    def test_save_unsupported_format(self, tmp_path):
        analyzer = HumannessAnalyzer()
        analyzer.analyze(SCENARIO_HEAVY)
        with pytest.raises(ValueError, match="Unsupported format"):
            analyzer.save_results(tmp_path / "out.bin", format="pickle")


class TestPropertyTable:
    """Test the static residue property table."""

    def test_known_values(self):
        assert get_property('I', 'hydro') == 4.5
        assert get_property('R', 'charge') == 1
        assert get_property('W', 'mass') == 204

    def test_unknown_residue(self):
        assert get_property('X', 'hydro') == 0
        assert residue_category('B') == 'Unknown'
        assert residue_category('D') == 'Negative'

    def test_table_read_only(self):
        from AbAnchor.sequence.properties import AMINO_ACID_PROPERTIES

        with pytest.raises(TypeError):
            AMINO_ACID_PROPERTIES['X'] = {'hydro': 0}
