"""Per-record sequence metrics and tabular summaries."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable

import pandas as pd

from .fasta import ReadResult, Record
from .io.paths import ensure_dir, now_iso, write_json

logger = logging.getLogger("trio_binning.summary")

SUMMARY_COLUMNS = ["record_id", "length", "n_count", "n_frac", "gc_percent"]


@dataclass(slots=True)
class SummaryResult:
    records_csv: Path
    summary_json: Path
    total_records: int
    total_errors: int


def record_metrics(record: Record) -> Dict[str, Any]:
    """Length, ambiguous base and GC content metrics for one record."""

    seq = record.seq.upper()
    length = len(seq)
    n_count = seq.count("N")
    gc_count = seq.count("G") + seq.count("C")
    denom = length - n_count if length - n_count > 0 else length
    gc_percent = (gc_count / denom * 100) if denom else 0.0
    n_frac = (n_count / length) if length else 0.0
    return {
        "record_id": record.id,
        "length": length,
        "n_count": n_count,
        "n_frac": n_frac,
        "gc_percent": gc_percent,
    }


def summarize_records(records: Iterable[Record]) -> pd.DataFrame:
    rows = [record_metrics(record) for record in records]
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def write_summary(results: Iterable[ReadResult], out_dir: Path, source: str) -> SummaryResult:
    """Consume reader results, writing ``records.csv`` and ``summary.json``.

    Failed items are counted and logged; the table only holds parsed records.
    """

    out_dir = ensure_dir(out_dir)
    records_csv = out_dir / "records.csv"
    summary_json = out_dir / "summary.json"

    records = []
    errors = []
    for result in results:
        if result.ok:
            records.append(result.unwrap())
        else:
            logger.warning("Skipping failed item: %s", result.error)
            errors.append(str(result.error))

    frame = summarize_records(records)
    frame.to_csv(records_csv, index=False)

    write_json(
        summary_json,
        {
            "timestamp": now_iso(),
            "source": source,
            "total_records": int(len(frame)),
            "total_errors": len(errors),
            "errors": errors,
            "total_bases": int(frame["length"].sum()) if len(frame) else 0,
        },
    )
    logger.info("Summarized %s records (%s errors)", len(frame), len(errors))
    logger.info("Records CSV -> %s", records_csv)
    logger.info("Summary -> %s", summary_json)
    return SummaryResult(
        records_csv=records_csv,
        summary_json=summary_json,
        total_records=int(len(frame)),
        total_errors=len(errors),
    )


__all__ = ["SummaryResult", "record_metrics", "summarize_records", "write_summary"]
