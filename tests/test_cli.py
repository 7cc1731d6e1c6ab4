"""CLI tests for discovery from directories and packages."""

from __future__ import annotations

from pathlib import Path

import pytest

from batchfind.cli import main


def _make_tree(root: Path) -> None:
    """Create a minimal tests tree below `root/suite`."""
    suite = root / "suite"
    (suite / "shouldBeIgnored").mkdir(parents=True)
    (suite / "shouldBeFound").mkdir()
    (suite / "__init__.py").write_text("")
    (suite / "ParserTest.py").write_text("")
    (suite / "Helper.py").write_text("")
    (suite / "AllSuite.py").write_text("")
    (suite / "shouldBeIgnored" / "__init__.py").write_text("")
    (suite / "shouldBeIgnored" / "BrokenTest.py").write_text("")
    (suite / "shouldBeFound" / "__init__.py").write_text("")
    (suite / "shouldBeFound" / "FoundTest.py").write_text("")
    (suite / "shouldBeFound" / "ExcludeTest.py").write_text("")


def _lines(out: str) -> list[str]:
    return [line for line in out.strip().split("\n") if line]


def _run(capsys: pytest.CaptureFixture[str], *args: str) -> list[str]:
    assert main(list(args)) == 0
    return _lines(capsys.readouterr().out)


def test_default_include(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _make_tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    assert _run(capsys, "--dir", ".", "suite") == [
        "suite.ParserTest",
        "suite.shouldBeFound.ExcludeTest",
        "suite.shouldBeFound.FoundTest",
        "suite.shouldBeIgnored.BrokenTest",
    ]


def test_include_pattern(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _make_tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    assert _run(capsys, "--dir", ".", "--include", "**.*Suite", "suite") == ["suite.AllSuite"]


def test_include_package(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _make_tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    names = _run(capsys, "--dir", ".", "--include", "**.shouldBeFound.**", "suite")
    assert names == ["suite.shouldBeFound.ExcludeTest", "suite.shouldBeFound.FoundTest"]


def test_exclude_package(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _make_tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    names = _run(capsys, "--dir", ".", "--exclude", "**.shouldBeIgnored.**", "suite")
    assert "suite.shouldBeIgnored.BrokenTest" not in names
    assert "suite.ParserTest" in names


def test_exclude_class(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _make_tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    names = _run(capsys, "--dir", ".", "--exclude", "**.*ExcludeTest", "suite")
    assert "suite.shouldBeFound.ExcludeTest" not in names
    assert "suite.shouldBeFound.FoundTest" in names


def test_top_level_root(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _make_tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    names = _run(capsys, "--dir", "suite", "--include", "*.*Test", ".")
    assert names == [
        "shouldBeFound.ExcludeTest",
        "shouldBeFound.FoundTest",
        "shouldBeIgnored.BrokenTest",
    ]


def test_sort_flag(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    base_a = tmp_path / "a" / "pkg"
    base_b = tmp_path / "b" / "pkg"
    base_a.mkdir(parents=True)
    base_b.mkdir(parents=True)
    (base_a / "ZTest.py").write_text("")
    (base_b / "ATest.py").write_text("")
    monkeypatch.chdir(tmp_path)
    assert _run(capsys, "--dir", "a", "--dir", "b", "pkg") == ["pkg.ZTest", "pkg.ATest"]
    assert _run(capsys, "--dir", "a", "--dir", "b", "--sort", "pkg") == ["pkg.ATest", "pkg.ZTest"]


def test_suffix_flag(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    pkg = tmp_path / "pkg"
    pkg.mkdir()
    (pkg / "FooTest.class").write_text("")
    (pkg / "BarTest.py").write_text("")
    monkeypatch.chdir(tmp_path)
    assert _run(capsys, "--dir", ".", "--suffix", ".class", "pkg") == ["pkg.FooTest"]


def test_no_respect_gitignore(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _make_tree(tmp_path)
    (tmp_path / "suite" / ".gitignore").write_text("shouldBeIgnored/\n")
    monkeypatch.chdir(tmp_path)
    names = _run(capsys, "--dir", ".", "suite")
    assert "suite.shouldBeIgnored.BrokenTest" not in names
    names = _run(capsys, "--dir", ".", "--no-respect-gitignore", "suite")
    assert "suite.shouldBeIgnored.BrokenTest" in names


def test_config_file_sets_patterns(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _make_tree(tmp_path)
    (tmp_path / "batchfind.toml").write_text(
        'include = "**.*Test"\nexclude = "**.shouldBeIgnored.**"\n'
    )
    monkeypatch.chdir(tmp_path)
    names = _run(capsys, "--dir", ".", "suite")
    assert "suite.shouldBeIgnored.BrokenTest" not in names

    # Explicit flags win over the config file
    names = _run(capsys, "--dir", ".", "--exclude", "**.*ExcludeTest", "suite")
    assert "suite.shouldBeIgnored.BrokenTest" in names
    assert "suite.shouldBeFound.ExcludeTest" not in names


def test_package_mode(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _make_tree(tmp_path)
    (tmp_path / "suite").rename(tmp_path / "bf_cli_suite")
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.chdir(tmp_path)
    names = _run(capsys, "--exclude", "**.shouldBeIgnored.**", "bf_cli_suite")
    assert names == [
        "bf_cli_suite.ParserTest",
        "bf_cli_suite.shouldBeFound.ExcludeTest",
        "bf_cli_suite.shouldBeFound.FoundTest",
    ]


def test_missing_root_is_an_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    assert main(["--dir", ".", "no.such.pkg"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Error:" in captured.err
    assert "no.such.pkg" in captured.err


def test_undecodable_gitignore_is_an_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _make_tree(tmp_path)
    (tmp_path / "suite" / ".gitignore").write_bytes(b"\xff\xfe bad\n")
    monkeypatch.chdir(tmp_path)
    assert main(["--dir", ".", "suite"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "unreadable .gitignore" in captured.err


def test_root_required_without_dir(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 2
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "ROOT is required" in captured.err


def test_root_defaults_to_top_level_with_dir(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _make_tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    names = _run(capsys, "--dir", "suite", "--include", "*.*Test")
    assert names == [
        "shouldBeFound.ExcludeTest",
        "shouldBeFound.FoundTest",
        "shouldBeIgnored.BrokenTest",
    ]


def test_help(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["--help"])
    assert exc.value.code == 0
    out = capsys.readouterr().out
    assert "Discover named units below a namespace" in out
    assert "Common usage:" in out
    assert "--include PATTERN" in out


def test_version(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--version"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("v") or out.startswith("unknown")
