"""
Tests for validators, converters and file handlers.
"""

import logging

import pandas as pd
import pytest

from .conftest import SCENARIO_HEAVY


class TestValidators:
    """Test sequence and parameter validation."""

    def test_clean_sequence(self):
        from AbAnchor.utils import clean_sequence

        assert clean_sequence("ev1Ql- x\n") == "EVQLX"
        assert clean_sequence("") == ""

    def test_clean_sequence_type(self):
        from AbAnchor.utils import clean_sequence

        with pytest.raises(TypeError):
            clean_sequence(None)

    def test_sequence_validation(self):
        from AbAnchor.utils import validate_sequence

        assert validate_sequence(SCENARIO_HEAVY) == (True, "")
        assert validate_sequence("") == (False, "Empty sequence")

        is_valid, message = validate_sequence("ACDXB")
        assert not is_valid
        assert "B" in message and "X" in message

        assert validate_sequence("ACDX", allow_x=True)[0]
        assert not validate_sequence("ACD", min_length=5)[0]

    @pytest.mark.parametrize("name,expected", [
        ('imgt', 'IMGT'), ('IMGT', 'IMGT'), ('kabat', 'Kabat'), ('CHOTHIA', 'Chothia'),
    ])
    def test_numbering_scheme(self, name, expected):
        from AbAnchor.utils import validate_numbering_scheme

        assert validate_numbering_scheme(name) == expected

    def test_unknown_numbering_scheme(self):
        from AbAnchor.utils import validate_numbering_scheme

        with pytest.raises(ValueError, match="Unknown scheme"):
            validate_numbering_scheme('martin')


class TestConverters:
    """Test format conversion helpers."""

    def test_sequence_to_fasta(self):
        from AbAnchor.utils import sequence_to_fasta

        fasta = sequence_to_fasta(SCENARIO_HEAVY, seq_id="mAb1", line_length=60)
        assert fasta.split('\n') == [">mAb1", SCENARIO_HEAVY[:60], SCENARIO_HEAVY[60:]]

    def test_fasta_to_dict(self):
        from AbAnchor.utils import fasta_to_dict

        text = ">a desc\nEVQL\nVESG\n>b\nDIQM\n"
        assert fasta_to_dict(text) == {'a': "EVQLVESG", 'b': "DIQM"}

    def test_numbering_strings(self):
        from AbAnchor.sequence import annotate_regions
        from AbAnchor.utils import numbering_to_string, numbering_to_region_string

        numbering = annotate_regions(SCENARIO_HEAVY)

        assert numbering_to_string(numbering) == SCENARIO_HEAVY
        assert numbering_to_string(numbering, 'CDR3') == "ARDYYGSSWYFDV"
        track = numbering_to_region_string(numbering)
        assert len(track) == 120
        assert track.startswith('1' * 25 + '2' * 8)
        assert track.endswith('7' * 11)


class TestFileHandlers:
    """Test sequence input and result output."""

    def test_read_fasta(self, tmp_path):
        from AbAnchor.utils import read_fasta, sequence_to_fasta

        path = tmp_path / "out.fasta"
        path.write_text(sequence_to_fasta(SCENARIO_HEAVY, seq_id="mAb1") + "\n>mAb2 light\ndiqmtq\n")
        assert read_fasta(path) == {'mAb1': SCENARIO_HEAVY, 'mAb2': "DIQMTQ"}

    def test_read_missing_fasta(self, tmp_path):
        from AbAnchor.utils import read_fasta

        with pytest.raises(FileNotFoundError):
            read_fasta(tmp_path / "missing.fasta")

    def test_detect_file_format(self):
        from AbAnchor.utils import detect_file_format

        assert detect_file_format("a.fa") == 'fasta'
        assert detect_file_format("a.XLSX") == 'excel'
        assert detect_file_format("a.unknown") == 'fasta'
        assert detect_file_format("a.unknown", default='csv') == 'csv'

    def test_load_csv_table(self, tmp_path):
        from AbAnchor.utils import load_sequence_table

        path = tmp_path / "table.csv"
        pd.DataFrame({
            'ID': ['x', None, 'z'],
            'Sequence': ['EVQL', 'DIQM', None],
        }).to_csv(path, index=False)

        assert load_sequence_table(path) == {'x': 'EVQL', 'Seq_2': 'DIQM'}

    def test_load_json_records(self, tmp_path):
        from AbAnchor.utils import load_sequence_table

        path = tmp_path / "table.json"
        path.write_text('[{"id": "a", "sequence": "EVQL"}, {"id": "b", "sequence": "DIQM"}]')

        assert load_sequence_table(path) == {'a': 'EVQL', 'b': 'DIQM'}

    def test_load_json_mapping(self, tmp_path):
        from AbAnchor.utils import load_sequence_table

        path = tmp_path / "table.json"
        path.write_text('{"a": "EVQL"}')

        assert load_sequence_table(path) == {'a': 'EVQL'}

    def test_load_custom_columns(self, tmp_path):
        from AbAnchor.utils import load_sequence_table

        path = tmp_path / "table.tsv"
        pd.DataFrame({'Name': ['x'], 'VH': ['EVQL']}).to_csv(path, sep='\t', index=False)

        assert load_sequence_table(path, id_column='Name', sequence_column='VH') == {'x': 'EVQL'}

    def test_load_missing_column(self, tmp_path):
        from AbAnchor.utils import load_sequence_table

        path = tmp_path / "table.csv"
        pd.DataFrame({'ID': ['x'], 'Seq': ['EVQL']}).to_csv(path, index=False)

        with pytest.raises(ValueError, match="not found"):
            load_sequence_table(path)

    @pytest.mark.parametrize("suffix", ['.csv', '.json', '.xlsx', '.parquet'])
    def test_write_results(self, tmp_path, suffix):
        from AbAnchor.utils import write_results

        df = pd.DataFrame({'SeqID': ['a'], 'Confidence': [0.95]})
        path = write_results(df, tmp_path / f"results{suffix}")

        assert path.exists()

    def test_write_results_bad_format(self, tmp_path):
        from AbAnchor.utils import write_results

        with pytest.raises(ValueError):
            write_results(pd.DataFrame(), tmp_path / "x.out", format='xml')


class TestParseSequence:
    """Test sequence input parsing."""

    def test_raw_string(self):
        from AbAnchor.utils import parse_sequence

        assert parse_sequence("evql vesg 12") == "EVQLVESG"

    def test_fasta_file(self, tmp_path):
        from AbAnchor.utils import parse_sequence

        path = tmp_path / "seq.fasta"
        path.write_text(f">first\n{SCENARIO_HEAVY}\n>second\nDIQM\n")
        assert parse_sequence(str(path)) == SCENARIO_HEAVY

    def test_text_file(self, tmp_path):
        from AbAnchor.utils import parse_sequence

        path = tmp_path / "seq.txt"
        path.write_text("evql\nvesg\n")
        assert parse_sequence(path) == "EVQLVESG"

    def test_invalid_type(self):
        from AbAnchor.utils import parse_sequence

        with pytest.raises(TypeError):
            parse_sequence(42)

    def test_non_standard_residues_warn(self, caplog):
        from AbAnchor.utils import parse_sequence

        with caplog.at_level(logging.WARNING, logger='AbAnchor.utils'):
            assert parse_sequence("EVQLBX") == "EVQLBX"
        assert "Invalid characters found: B, X" in caplog.text

    def test_standard_residues_do_not_warn(self, caplog):
        from AbAnchor.utils import parse_sequence

        with caplog.at_level(logging.WARNING, logger='AbAnchor.utils'):
            parse_sequence(SCENARIO_HEAVY)
        assert caplog.records == []
