"""Streaming FASTA reader and k-mer encoding toolkit."""

from .fasta import (
    FastaError,
    FastaIoError,
    FastaParseError,
    FastaReader,
    ReadResult,
    Record,
    get_id_from_defline,
    parse_fasta_string,
    read_records,
)
from .kmer import KmerError, bits_to_kmer, kmer_to_bits

__version__ = "0.1.0"

__all__ = [
    "FastaError",
    "FastaIoError",
    "FastaParseError",
    "FastaReader",
    "KmerError",
    "ReadResult",
    "Record",
    "bits_to_kmer",
    "get_id_from_defline",
    "kmer_to_bits",
    "parse_fasta_string",
    "read_records",
]
