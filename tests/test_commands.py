import io
import os
import sys

import pytest

from teachos.commands import (
    DIRSIZ,
    Counts,
    cat_main,
    echo_line,
    echo_main,
    fmtname,
    ln_main,
    mkdir_main,
    rm_main,
    wc_main,
    word_count,
)


@pytest.mark.parametrize(
    "data",
    [b"", b"hello world\n", b"  a\tb\r\nc  d\n\n", b"one\vtwo three"],
)
def test_word_count_invariants(data):
    counts = word_count(data)
    assert counts.chars == len(data)
    assert counts.lines == data.count(b"\n")
    assert counts.words == len(data.split())


def test_word_count_nul_separates_words():
    assert word_count(b"a\0b").words == 2


def test_word_count_accepts_text():
    assert word_count("x y\n") == word_count(b"x y\n")


def test_echo_line_joins_with_spaces():
    assert echo_line(["hello", "world"]) == "hello world\n"


def test_echo_line_empty():
    assert echo_line([]) == ""


def test_echo_main(capsys):
    assert echo_main(["a", "b"]) == 0
    assert capsys.readouterr().out == "a b\n"


def test_fmtname_pads_last_component():
    name = fmtname("user/dir/cat")
    assert len(name) == DIRSIZ
    assert name.rstrip() == "cat"


def test_fmtname_without_slash():
    assert fmtname("README").rstrip() == "README"


def test_fmtname_long_name_unchanged():
    assert fmtname("dir/12345678901234") == "12345678901234"


def test_cat_files(tmp_path, capsysbinary):
    a = tmp_path / "a"
    b = tmp_path / "b"
    a.write_bytes(b"first\n")
    b.write_bytes(b"second\x00\n")
    assert cat_main([str(a), str(b)]) == 0
    assert capsysbinary.readouterr().out == b"first\nsecond\x00\n"


def test_cat_stdin(monkeypatch, capsysbinary):
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"piped data")))
    assert cat_main([]) == 0
    assert capsysbinary.readouterr().out == b"piped data"


def test_cat_missing_file(tmp_path, capsysbinary):
    missing = tmp_path / "nope"
    assert cat_main([str(missing)]) == 1
    assert capsysbinary.readouterr().err == f"cat: cannot open {missing}\n".encode()


def test_wc_file(tmp_path, capsys):
    f = tmp_path / "f"
    data = b"one two\nthree\n"
    f.write_bytes(data)
    assert wc_main([str(f)]) == 0
    c = word_count(data)
    assert capsys.readouterr().out == f"{c.lines} {c.words} {c.chars} {f}\n"


def test_wc_stdin(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"x y\n")))
    assert wc_main([]) == 0
    c = word_count(b"x y\n")
    assert capsys.readouterr().out == f"{c.lines} {c.words} {c.chars} \n"


def test_wc_missing(tmp_path, capsys):
    missing = tmp_path / "gone"
    assert wc_main([str(missing)]) == 1
    assert capsys.readouterr().out == f"wc: cannot open {missing}\n"


def test_ln_creates_link(tmp_path):
    old = tmp_path / "old"
    old.write_text("data")
    new = tmp_path / "new"
    assert ln_main([str(old), str(new)]) == 0
    assert os.path.samefile(old, new)


def test_ln_usage(capsys):
    assert ln_main(["only"]) == 1
    assert capsys.readouterr().err == "Usage: ln old new\n"


def test_ln_failure_reports(tmp_path, capsys):
    old = tmp_path / "missing"
    new = tmp_path / "new"
    assert ln_main([str(old), str(new)]) == 0
    assert capsys.readouterr().err == f"link {old} {new}: failed\n"
    assert not new.exists()


def test_rm_removes_file_and_empty_dir(tmp_path):
    f = tmp_path / "f"
    f.write_text("x")
    d = tmp_path / "d"
    d.mkdir()
    assert rm_main([str(f), str(d)]) == 0
    assert not f.exists()
    assert not d.exists()


def test_rm_stops_at_failure(tmp_path, capsys):
    missing = tmp_path / "missing"
    later = tmp_path / "later"
    later.write_text("x")
    assert rm_main([str(missing), str(later)]) == 0
    assert capsys.readouterr().err == f"rm: {missing} failed to delete\n"
    assert later.exists()


def test_rm_usage(capsys):
    assert rm_main([]) == 1
    assert capsys.readouterr().err == "Usage: rm files...\n"


def test_mkdir_creates(tmp_path):
    d = tmp_path / "new"
    assert mkdir_main([str(d)]) == 0
    assert d.is_dir()


def test_mkdir_stops_at_failure(tmp_path, capsys):
    existing = tmp_path / "exists"
    existing.mkdir()
    later = tmp_path / "later"
    assert mkdir_main([str(existing), str(later)]) == 0
    assert capsys.readouterr().err == f"mkdir: {existing} failed to create\n"
    assert not later.exists()


def test_mkdir_usage(capsys):
    assert mkdir_main([]) == 1
    assert capsys.readouterr().err == "Usage: mkdir files...\n"


def test_counts_defaults():
    assert Counts() == word_count(b"")