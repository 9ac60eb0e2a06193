"""Smoke tests for the trio-binning CLI."""

from __future__ import annotations

import csv
import json
import os
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
PKG_ROOT = ROOT


def _run_cli(args: list[str], cwd: Path | None = None, stdin: str | None = None) -> subprocess.CompletedProcess[str]:
    env = os.environ.copy()
    env["PYTHONPATH"] = f"{PKG_ROOT}{os.pathsep}{env.get('PYTHONPATH', '')}"
    return subprocess.run(
        [sys.executable, "-m", "trio_binning.cli", *args],
        cwd=cwd or ROOT,
        env=env,
        check=False,
        text=True,
        capture_output=True,
        input=stdin,
    )


def _write_fasta(path: Path, content: str = ">SEQ1 sample\nACGT\nAC\n>SEQ2\nGGNN\n") -> Path:
    path.write_text(content, encoding="utf-8")
    return path


def test_help_runs() -> None:
    proc = _run_cli(["--help"])
    assert proc.returncode == 0, proc.stderr
    assert "usage" in proc.stdout.lower()


def test_records_lists_ids_and_lengths(tmp_path: Path) -> None:
    fasta = _write_fasta(tmp_path / "seqs.fasta")
    proc = _run_cli(["records", "--in-fasta", str(fasta)], cwd=tmp_path)
    assert proc.returncode == 0, proc.stderr
    assert proc.stdout.splitlines() == ["SEQ1\t6", "SEQ2\t4"]


def test_records_reads_stdin(tmp_path: Path) -> None:
    proc = _run_cli(["records", "--in-fasta", "-"], cwd=tmp_path, stdin=">a\nAC\n>b\nG\n")
    assert proc.returncode == 0, proc.stderr
    assert proc.stdout.splitlines() == ["a\t2", "b\t1"]


def test_records_strict_preamble_aborts(tmp_path: Path) -> None:
    fasta = _write_fasta(tmp_path / "bad.fasta", "ACGT\n>a\nAC\n")
    proc = _run_cli(["records", "--in-fasta", str(fasta), "--strict-preamble"], cwd=tmp_path)
    assert proc.returncode == 1
    assert proc.stdout == ""
    assert "line 1" in proc.stderr


def test_records_strict_preamble_can_skip(tmp_path: Path) -> None:
    fasta = _write_fasta(tmp_path / "bad.fasta", "ACGT\n>a\nAC\n")
    proc = _run_cli(
        ["records", "--in-fasta", str(fasta), "--strict-preamble", "--on-error", "skip"],
        cwd=tmp_path,
    )
    assert proc.returncode == 0, proc.stderr
    assert proc.stdout.splitlines() == ["a\t2"]


def test_records_missing_input(tmp_path: Path) -> None:
    proc = _run_cli(["records", "--in-fasta", str(tmp_path / "missing.fasta")], cwd=tmp_path)
    assert proc.returncode == 1
    assert "not found" in proc.stderr


def test_summary_writes_outputs(tmp_path: Path) -> None:
    fasta = _write_fasta(tmp_path / "seqs.fasta")
    out_dir = tmp_path / "summary"
    proc = _run_cli(["summary", "--in-fasta", str(fasta), "--out-dir", str(out_dir)], cwd=tmp_path)
    assert proc.returncode == 0, proc.stderr

    rows = list(csv.DictReader((out_dir / "records.csv").open("r", encoding="utf-8", newline="")))
    assert [row["record_id"] for row in rows] == ["SEQ1", "SEQ2"]
    assert rows[1]["n_count"] == "2"

    summary = json.loads((out_dir / "summary.json").read_text(encoding="utf-8"))
    assert summary["total_records"] == 2
    assert summary["total_errors"] == 0


def test_kmer_round_trip() -> None:
    proc = _run_cli(["kmer"])
    assert proc.returncode == 0, proc.stderr
    assert proc.stdout.splitlines() == ["Kmer: ACTGACTGAC", "Bits: 123361", "Kmer: ACTGACTGAC"]


def test_kmer_decode_only() -> None:
    proc = _run_cli(["kmer", "--bits", "27", "--k", "4"])
    assert proc.returncode == 0, proc.stderr
    assert proc.stdout.splitlines() == ["Kmer: ACGT"]


def test_kmer_invalid_base_fails() -> None:
    proc = _run_cli(["kmer", "--kmer", "ACGN"])
    assert proc.returncode == 1
    assert "Invalid base" in proc.stderr
