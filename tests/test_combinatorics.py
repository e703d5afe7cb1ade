import sys

import pytest

from secstruct.combinatorics import count_structures, main


def test_count_structures_motzkin():
    assert [count_structures(n, 0) for n in range(0, 8)] == [1, 1, 2, 4, 9, 21, 51, 127]


def test_count_structures_mingap():
    assert [count_structures(n, 1) for n in range(1, 8)] == [1, 1, 2, 4, 8, 17, 37]
    assert count_structures(4, 3) == 1
    assert count_structures(5, 3) == 2


def test_count_structures_large():
    # exceeds 64-bit integers
    assert count_structures(200, 3) > 2**64


def test_count_structures_negative():
    with pytest.raises(ValueError):
        count_structures(-1, 3)


def test_count_structures_default_mingap():
    assert count_structures(5) == count_structures(5, 3) == 2


def test_main_default_mingap(monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["count-structures", "5"])
    main()
    assert capsys.readouterr().out.strip() == "2"
