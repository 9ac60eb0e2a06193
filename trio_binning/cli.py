"""Command-line interface for trio-binning."""

from __future__ import annotations

import argparse
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterable, Iterator, Tuple

import requests

from . import __version__
from .config import DEFAULT_SUMMARY_DIR, FETCH_DEFAULTS, KMER_DEFAULTS, RuntimeConfig, collect_runtime_config
from .fasta import FastaError, FastaIoError, FastaReader
from .fetch.ncbi import EfetchRequest, FetchError, open_efetch_response
from .io import require_input
from .kmer import KmerError, bits_to_kmer, kmer_to_bits
from .logging_utils import configure_logging, get_logger
from .summary import write_summary

Handler = Callable[[argparse.Namespace], int]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trio-binning",
        description="Streaming FASTA reader and k-mer encoding toolkit.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    _add_records_parser(subparsers)
    _add_summary_parser(subparsers)
    _add_kmer_parser(subparsers)
    return parser


def _add_source_arguments(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--in-fasta",
        type=Path,
        help="Input FASTA file path ('-' reads standard input).",
    )
    source.add_argument(
        "--accession",
        action="append",
        help="Stream this NCBI accession/UID instead of a file (repeatable).",
    )
    parser.add_argument("--db", default=FETCH_DEFAULTS.db, help="NCBI database for --accession (default: nuccore).")
    parser.add_argument(
        "--timeout",
        type=int,
        default=FETCH_DEFAULTS.timeout,
        help="HTTP timeout in seconds.",
    )
    parser.add_argument(
        "--retries",
        type=int,
        default=FETCH_DEFAULTS.retries,
        help="Number of retries when opening the NCBI stream.",
    )
    parser.add_argument(
        "--strict-preamble",
        action="store_true",
        help="Report sequence lines found before the first defline as errors instead of skipping them.",
    )


def _add_records_parser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("records", help="List record identifiers and sequence lengths.")
    _add_source_arguments(parser)
    parser.add_argument(
        "--on-error",
        choices=["abort", "skip"],
        default="abort",
        help="Stop at the first malformed item or skip it (default: abort).",
    )
    parser.set_defaults(handler=_handle_records)


def _add_summary_parser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("summary", help="Write per-record metrics as CSV plus a JSON summary.")
    _add_source_arguments(parser)
    parser.add_argument(
        "--out-dir",
        type=Path,
        default=DEFAULT_SUMMARY_DIR,
        help="Directory for summary outputs.",
    )
    parser.set_defaults(handler=_handle_summary)


def _add_kmer_parser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("kmer", help="Encode a k-mer to its integer form and back.")
    parser.add_argument(
        "--kmer",
        default=KMER_DEFAULTS.kmer,
        help=f"k-mer to encode (default: {KMER_DEFAULTS.kmer}).",
    )
    parser.add_argument("--bits", type=int, help="Decode this integer instead of encoding --kmer.")
    parser.add_argument("--k", type=int, help="k-mer length used with --bits.")
    parser.set_defaults(handler=_handle_kmer)


@contextmanager
def _open_source(args: argparse.Namespace, config: RuntimeConfig) -> Iterator[Tuple[Iterable[bytes], str]]:
    if args.accession:
        request = EfetchRequest(
            ids=list(args.accession),
            db=args.db,
            email=config.ncbi_email,
            tool=config.ncbi_tool or FETCH_DEFAULTS.tool,
            api_key=config.ncbi_api_key,
            timeout=args.timeout,
            retries=args.retries,
        )
        label = f"ncbi:{args.db}:{','.join(request.ids)}"
        with requests.Session() as session:
            with open_efetch_response(request, get_logger("fetch"), session=session) as response:
                yield response.iter_lines(), label
        return
    if str(args.in_fasta) == "-":
        yield sys.stdin.buffer, "<stdin>"
        return
    require_input(args.in_fasta)
    with Path(args.in_fasta).open("rb") as handle:
        yield handle, str(args.in_fasta)


def _make_reader(stream: Iterable[bytes], args: argparse.Namespace) -> FastaReader:
    return FastaReader(stream, orphan_lines="error" if args.strict_preamble else "skip")


def _handle_records(args: argparse.Namespace) -> int:
    logger = get_logger()
    with _open_source(args, args.config) as (stream, label):
        logger.debug("Reading records from %s", label)
        for result in _make_reader(stream, args):
            if result.ok:
                record = result.unwrap()
                sys.stdout.write(f"{record.id}\t{len(record.seq)}\n")
                continue
            if isinstance(result.error, FastaIoError) or args.on_error == "abort":
                logger.error(str(result.error))
                return 1
            logger.warning("Skipping malformed item: %s", result.error)
    return 0


def _handle_summary(args: argparse.Namespace) -> int:
    with _open_source(args, args.config) as (stream, label):
        result = write_summary(_make_reader(stream, args), args.out_dir, label)
    get_logger().info("Summary written for %s records", result.total_records)
    return 0


def _handle_kmer(args: argparse.Namespace) -> int:
    if args.bits is not None:
        if args.k is None:
            raise KmerError("--k is required together with --bits")
        sys.stdout.write(f"Kmer: {bits_to_kmer(args.bits, args.k)}\n")
        return 0
    kmer = args.kmer
    sys.stdout.write(f"Kmer: {kmer}\n")
    bits = kmer_to_bits(kmer)
    sys.stdout.write(f"Bits: {bits}\n")
    sys.stdout.write(f"Kmer: {bits_to_kmer(bits, len(kmer))}\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    args.config = collect_runtime_config()
    configure_logging(verbose=args.verbose, level_name=args.config.log_level)
    logger = get_logger()
    handler: Handler = args.handler

    try:
        return handler(args)
    except (FileNotFoundError, FastaError, KmerError, FetchError) as exc:
        logger.error(str(exc))
        return 1
    except Exception:  # pragma: no cover - safety net
        logger.exception("Unexpected error")
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
