import sys

import orjson
import pytest

from secstruct import converter
from secstruct.parser import read_ct_file, read_dbn_file
from secstruct.secondary import SecondaryStructureRecord


def test_summarize():
    record = SecondaryStructureRecord.from_dot_bracket("((..[[..))..]]", "kissing")
    summary = converter.summarize(record)
    assert summary["name"] == "kissing"
    assert summary["dotBracket"] == "((..<<..))..>>"
    assert summary["isPseudoknotted"] is True
    assert summary["pseudoknotOrder"] == 2


def test_main(tmp_path, monkeypatch, capsys):
    ct = tmp_path / "out.ct"
    dbn = tmp_path / "out.dbn"
    json = tmp_path / "out.json"
    monkeypatch.setattr(
        sys,
        "argv",
        ["ss-convert", "tests/example.dbn", "--ct", str(ct), "--dbn", str(dbn), "-j", str(json)],
    )
    converter.main()
    out = capsys.readouterr().out
    assert ">pseudoknot\nGCAAGGAUUGCCAUUC\n(((..)..).<)..>." in out

    expected = read_dbn_file("tests/example.dbn")
    assert read_ct_file(str(ct)) == expected
    assert read_dbn_file(str(dbn)) == expected
    summaries = orjson.loads(json.read_bytes())
    assert [s["isPseudoknotted"] for s in summaries] == [False, True, False]


def test_main_strict(monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["ss-convert", "tests/example.dbn", "--strict"])
    with pytest.raises(SystemExit) as excinfo:
        converter.main()
    assert excinfo.value.code == 1
    assert "Missing right bracket" in capsys.readouterr().err
