import gzip

import pytest

from secstruct.common import InvalidPairedSites, UnmatchedOpeningBracket, decode
from secstruct.parser import (
    ct_string,
    make_dbn_record,
    parse_ct_string,
    parse_dbn_string,
    read_ct_file,
    read_dbn_file,
    read_structures,
    write_ct_file,
    write_dbn_file,
)
from secstruct.secondary import SecondaryStructureRecord


def test_ct_string():
    record = SecondaryStructureRecord.from_dot_bracket("((..)..)", "example")
    record.set_sequence("CGAACAAG")
    expected = (
        ">example\n"
        "1\tC\t0\t2\t8\t1\n"
        "2\tG\t1\t3\t5\t2\n"
        "3\tA\t2\t4\t0\t3\n"
        "4\tA\t3\t5\t0\t4\n"
        "5\tC\t4\t6\t2\t5\n"
        "6\tA\t5\t7\t0\t6\n"
        "7\tA\t6\t8\t0\t7\n"
        "8\tG\t7\t9\t1\t8\n"
    )
    assert ct_string(record) == expected

    parsed = parse_ct_string(expected)
    assert len(parsed) == 1
    assert parsed[0] == record


def test_read_ct_file():
    records = read_ct_file("tests/example.ct")
    assert [record.name for record in records] == ["example1", "example2", "example3"]
    assert records[0].sequence == "ATAGCATCTCGGA"
    assert records[0].paired == decode(".(((...))...)")
    assert records[1].sequence == "CCCCAAAAAAAAAAA"
    assert records[1].paired == decode("...............")
    assert records[2].sequence == "CCAAAAGG"
    assert records[2].paired == decode("((....))")


def test_read_classic_ct_file():
    records = read_ct_file("tests/classic.ct")
    assert len(records) == 1
    assert records[0].name == "ENERGY = -1.2  hairpin"
    assert records[0].dot_bracket() == "((..)..)"


def test_read_classic_ct_file_strict():
    with pytest.raises(InvalidPairedSites):
        read_ct_file("tests/classic.ct", strict=True)


def test_write_ct_file(tmp_path):
    records = [
        SecondaryStructureRecord.from_dot_bracket("<((..)..).A>..a", "pk"),
        SecondaryStructureRecord.from_dot_bracket("((((....))))", "hairpin"),
    ]
    path = tmp_path / "multiple.ct"
    write_ct_file(str(path), records)
    assert read_ct_file(str(path)) == records


def test_read_dbn_file():
    records = read_dbn_file("tests/example.dbn")
    assert [record.name for record in records] == ["nested", "pseudoknot", "rnafold"]
    assert records[0].sequence == "GGGAAACCCAAA"
    assert records[1].is_pseudoknotted()
    assert records[2].dot_bracket() == "((((....))))"


def test_read_dbn_file_strict():
    with pytest.raises(UnmatchedOpeningBracket):
        read_dbn_file("tests/example.dbn", strict=True)


def test_write_dbn_file(tmp_path):
    records = read_dbn_file("tests/example.dbn")
    path = tmp_path / "out.dbn"
    write_dbn_file(str(path), records)
    assert path.read_text().startswith(">nested\nGGGAAACCCAAA\n(((...)))...\n")
    assert read_dbn_file(str(path)) == records


def test_parse_dbn_without_headers():
    records = parse_dbn_string("GGGAAACCC\n(((...)))\n\nAAAA\n....\n")
    assert len(records) == 2
    assert records[0].name == ""
    assert records[0].sequence == "GGGAAACCC"
    assert records[1].paired == [0, 0, 0, 0]


def test_parse_dbn_structure_only():
    records = parse_dbn_string(">only\n((..))\n")
    assert records[0].sequence == "NNNNNN"
    assert records[0].paired == [6, 5, 0, 0, 2, 1]


def test_parse_dbn_length_mismatch():
    text = ">bad\nGGGAAACC\n(((...)))\n>good\nGC\n()\n"
    records = parse_dbn_string(text)
    assert [record.name for record in records] == ["good"]
    with pytest.raises(ValueError):
        parse_dbn_string(text, strict=True)


def test_read_gzipped(tmp_path):
    path = tmp_path / "example.dbn.gz"
    with open("tests/example.dbn") as f, gzip.open(path, "wt") as g:
        g.write(f.read())
    assert read_structures(str(path)) == read_dbn_file("tests/example.dbn")


def test_read_structures_by_extension():
    assert read_structures("tests/example.ct") == read_ct_file("tests/example.ct")
    assert read_structures("tests/example.dbn") == read_dbn_file("tests/example.dbn")


def test_parse_dbn_record_ends_after_structure():
    records = parse_dbn_string(">a\nGGAA\n(..)\nCCCC\n....\n", strict=True)
    assert len(records) == 2
    assert records[0].name == "a"
    assert records[0].sequence == "GGAA"
    assert records[0].paired == [4, 0, 0, 1]
    assert records[1].name == ""
    assert records[1].sequence == "CCCC"
    assert records[1].paired == [0, 0, 0, 0]


def test_make_dbn_record_too_many_lines():
    with pytest.raises(ValueError):
        make_dbn_record("a", ["GGAA", "CCCC", "(..)"])


def test_ct_string_length_mismatch(tmp_path):
    record = SecondaryStructureRecord("short", "GGA", [4, 0, 0, 1])
    with pytest.raises(ValueError):
        ct_string(record)
    with pytest.raises(ValueError):
        write_ct_file(str(tmp_path / "short.ct"), [record])
