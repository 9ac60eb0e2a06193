"""Streaming FASTA parsing utilities."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Union

MARKER = ">"
ORPHAN_LINE_MODES = ("skip", "error")

logger = logging.getLogger("trio_binning.fasta")

Line = Union[str, bytes]


class FastaError(Exception):
    """Base class for failures surfaced while reading FASTA data."""


class FastaParseError(FastaError, ValueError):
    """Raised when a line does not have the expected FASTA structure."""

    def __init__(self, message: str, line_no: Optional[int] = None) -> None:
        if line_no is not None:
            message = f"line {line_no}: {message}"
        super().__init__(message)
        self.line_no = line_no


class FastaIoError(FastaError):
    """Raised when the underlying stream fails while producing the next line."""

    def __init__(self, cause: BaseException, line_no: Optional[int] = None) -> None:
        where = f" after line {line_no}" if line_no else ""
        super().__init__(f"Failed to read FASTA input{where}: {cause}")
        self.cause = cause
        self.line_no = line_no
        self.__cause__ = cause


def get_id_from_defline(defline: str, marker: str = MARKER) -> str:
    """Return the identifier of a defline, e.g. ``">seq1 desc"`` -> ``"seq1"``.

    The first whitespace-delimited word is taken and every leading marker
    character is removed, so a bare ``">"`` gives an empty identifier. Lines
    without any word (empty or whitespace only) raise :class:`FastaParseError`.
    """

    words = defline.split(maxsplit=1)
    if not words:
        raise FastaParseError(f"Can't parse defline {defline!r}")
    return words[0].lstrip(marker)


@dataclass(frozen=True)
class Record:
    """One FASTA entry: identifier, assembled sequence and raw entry text."""

    id: str
    seq: str
    entry_string: str

    @classmethod
    def from_entry_string(cls, entry_string: str) -> "Record":
        """Build a record from a complete entry joined with ``"\\n"``.

        Body lines are concatenated verbatim, without trimming.
        """

        first, *body = entry_string.split("\n")
        return cls(
            id=get_id_from_defline(first),
            seq="".join(body),
            entry_string=entry_string,
        )

    def is_empty(self) -> bool:
        return not self.entry_string

    def __str__(self) -> str:
        return self.entry_string


@dataclass(frozen=True)
class ReadResult:
    """Item produced by :class:`FastaReader`: either a record or an error."""

    record: Optional[Record] = None
    error: Optional[FastaError] = None

    def __post_init__(self) -> None:
        if (self.record is None) == (self.error is None):
            raise ValueError("ReadResult needs exactly one of record or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Record:
        """Return the record, raising the carried error for failed items."""

        if self.error is not None:
            raise self.error
        return self.record


class _EntryBuffer:
    """Mutable accumulator for the entry currently being read."""

    __slots__ = ("id", "seq_parts", "entry_parts")

    def __init__(self, record_id: str = "", defline: Optional[str] = None) -> None:
        self.id = record_id
        self.seq_parts: List[str] = []
        self.entry_parts: List[str] = [defline] if defline else []

    def is_empty(self) -> bool:
        return not self.entry_parts

    def start(self, record_id: str, defline: str) -> None:
        self.id = record_id
        self.entry_parts.append(defline)

    def add_body_line(self, line: str) -> None:
        self.entry_parts.append(line)
        self.seq_parts.append(line.strip())

    def freeze(self) -> Record:
        return Record(
            id=self.id,
            seq="".join(self.seq_parts),
            entry_string="".join(self.entry_parts),
        )


class FastaReader(Iterator[ReadResult]):
    """Lazy, forward-only iterator of :class:`ReadResult` over FASTA lines.

    ``stream`` is any iterable of ``str`` or ``bytes`` lines: an open text or
    binary file, ``io.BytesIO``/``io.StringIO`` or an HTTP line iterator.
    Only the record in progress is kept in memory. A record is handed out as
    soon as the next defline is seen, the last one when the input runs out.

    Parse and I/O failures are yielded as failed items rather than raised, so
    callers can decide whether to stop or keep going. After an I/O failure the
    reader is exhausted.

    ``orphan_lines`` controls sequence lines that appear before the first
    defline: ``"skip"`` drops them with a warning, ``"error"`` yields one
    :class:`FastaParseError` per run of such lines.
    """

    def __init__(
        self,
        stream: Iterable[Line],
        *,
        encoding: str = "utf-8",
        orphan_lines: str = "skip",
        marker: str = MARKER,
    ) -> None:
        if isinstance(stream, (str, bytes)):
            raise TypeError(
                "FastaReader expects an iterable of lines, not a whole document; "
                "use parse_fasta_string for in-memory text"
            )
        if orphan_lines not in ORPHAN_LINE_MODES:
            raise ValueError(f"Unsupported orphan_lines mode: {orphan_lines}")
        self._lines = iter(stream)
        self._encoding = encoding
        self._orphan_lines = orphan_lines
        self._marker = marker
        self._current = _EntryBuffer()
        self._line_no = 0
        self._in_orphan_run = False
        self._discarding = False
        self._done = False

    @property
    def line_no(self) -> int:
        """Number of lines consumed so far."""

        return self._line_no

    def __iter__(self) -> "FastaReader":
        return self

    def __next__(self) -> ReadResult:
        if self._done:
            raise StopIteration

        while True:
            try:
                line = self._read_line()
            except StopIteration:
                break
            except (OSError, ValueError) as exc:
                # ValueError covers decode failures and reads from a closed handle
                logger.warning("Stream failed after line %s: %s", self._line_no, exc)
                self._done = True
                self._current = _EntryBuffer()
                return ReadResult(error=FastaIoError(exc, self._line_no))

            if line.startswith(self._marker):
                self._in_orphan_run = False
                try:
                    record_id = get_id_from_defline(line, self._marker)
                except FastaParseError as exc:
                    # keep the finished entry; drop the body of the unreadable one
                    self._discarding = True
                    return ReadResult(error=FastaParseError(str(exc), self._line_no))

                self._discarding = False
                if self._current.is_empty():
                    self._current.start(record_id, line)
                    continue

                finished = self._current.freeze()
                self._current = _EntryBuffer(record_id, line)
                logger.debug("Record %r complete at line %s", finished.id, self._line_no)
                return ReadResult(record=finished)

            if self._discarding:
                continue

            if self._current.is_empty():
                error = self._handle_orphan_line(line)
                if error is not None:
                    return ReadResult(error=error)
                continue

            self._current.add_body_line(line)

        self._done = True
        if self._current.is_empty():
            raise StopIteration
        finished = self._current.freeze()
        self._current = _EntryBuffer()
        logger.debug("Record %r complete at end of input", finished.id)
        return ReadResult(record=finished)

    def _read_line(self) -> str:
        raw = next(self._lines)
        self._line_no += 1
        if isinstance(raw, bytes):
            raw = raw.decode(self._encoding)
        if raw.endswith("\n"):
            raw = raw[:-1]
        if raw.endswith("\r"):
            raw = raw[:-1]
        return raw

    def _handle_orphan_line(self, line: str) -> Optional[FastaParseError]:
        if not line.strip():
            return None
        if self._in_orphan_run:
            return None
        self._in_orphan_run = True
        if self._orphan_lines == "error":
            return FastaParseError("sequence data before the first defline", self._line_no)
        logger.warning("Skipping sequence data before the first defline (line %s)", self._line_no)
        return None


def read_records(
    stream: Iterable[Line],
    on_error: str = "raise",
    **reader_options,
) -> Iterator[Record]:
    """Yield bare records, raising or skipping failed items.

    With ``on_error="skip"`` parse failures are logged and reading continues;
    an I/O failure still ends the stream since the reader cannot go on.
    """

    if on_error not in {"raise", "skip"}:
        raise ValueError(f"Unsupported on_error mode: {on_error}")
    for result in FastaReader(stream, **reader_options):
        if result.ok:
            yield result.unwrap()
        elif on_error == "raise":
            raise result.error
        else:
            logger.warning("Skipping failed FASTA item: %s", result.error)


def parse_fasta_string(text: str, **reader_options) -> List[ReadResult]:
    """Parse an in-memory FASTA document into a list of results."""

    return list(FastaReader(io.StringIO(text), **reader_options))


__all__ = [
    "MARKER",
    "FastaError",
    "FastaIoError",
    "FastaParseError",
    "FastaReader",
    "ReadResult",
    "Record",
    "get_id_from_defline",
    "parse_fasta_string",
    "read_records",
]
