import pytest

from secstruct.common import UnmatchedOpeningBracket
from secstruct.rfam_reader import (
    parse_rfam_stockholm,
    read_rfam_stockholm,
    wuss_to_dot_bracket,
)


def test_wuss_to_dot_bracket():
    assert wuss_to_dot_bracket("<<<____>>>::,,--~~") == "<<<....>>>........"


def test_read_rfam_stockholm():
    records = read_rfam_stockholm("tests/RF_mini.sto")
    assert [record.name for record in records] == ["RF99991", "RF99992"]

    hairpin = records[0]
    assert hairpin.sequence == "GGGAAAACCCAA"
    assert hairpin.dot_bracket() == "(((....))).."
    assert not hairpin.is_pseudoknotted()

    # interleaved blocks are joined
    pseudoknot = records[1]
    assert pseudoknot.sequence == "GCAAGGAUUGCCAUUC"
    assert pseudoknot.paired == [9, 8, 0, 0, 12, 11, 0, 2, 1, 0, 6, 5, 0, 0, 0, 0]
    assert pseudoknot.is_pseudoknotted()


def test_read_rfam_stockholm_gz():
    assert read_rfam_stockholm("tests/RF_mini.sto.gz") == read_rfam_stockholm(
        "tests/RF_mini.sto"
    )


def test_read_rfam_stockholm_strict():
    with pytest.raises(UnmatchedOpeningBracket) as excinfo:
        read_rfam_stockholm("tests/RF_mini.sto", strict=True)
    assert excinfo.value.position == 1


def test_parse_incomplete_record():
    lines = ["# STOCKHOLM 1.0", "#=GF AC   RF00001", "#=GC SS_cons  <<..>>", "//"]
    assert parse_rfam_stockholm(lines) == []
