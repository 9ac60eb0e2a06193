"""Two-bit integer encoding of short DNA k-mers."""

from __future__ import annotations

from typing import Iterator, Tuple

BITS_PER_BASE = 2
MAX_KMER_LEN = 32  # fits in an unsigned 64-bit integer

BASE_TO_BITS = {"A": 0b00, "C": 0b01, "G": 0b10, "T": 0b11}
BITS_TO_BASE = "ACGT"


class KmerError(ValueError):
    """Raised when a k-mer cannot be encoded or decoded."""


def kmer_to_bits(kmer: str) -> int:
    """Encode a k-mer as an integer, first base in the most significant bits."""

    if not kmer:
        raise KmerError("Cannot encode an empty k-mer")
    if len(kmer) > MAX_KMER_LEN:
        raise KmerError(f"k-mer of length {len(kmer)} exceeds the maximum of {MAX_KMER_LEN}")
    bits = 0
    for idx, base in enumerate(kmer):
        code = BASE_TO_BITS.get(base.upper())
        if code is None:
            raise KmerError(f"Invalid base {base!r} at position {idx} in {kmer!r}")
        bits = (bits << BITS_PER_BASE) | code
    return bits


def bits_to_kmer(bits: int, k: int) -> str:
    """Decode an integer produced by :func:`kmer_to_bits` back into a k-mer of length ``k``."""

    if not 1 <= k <= MAX_KMER_LEN:
        raise KmerError(f"k must be between 1 and {MAX_KMER_LEN}, got {k}")
    if bits < 0 or bits >> (BITS_PER_BASE * k):
        raise KmerError(f"Value {bits} does not encode a k-mer of length {k}")
    bases = []
    for _ in range(k):
        bases.append(BITS_TO_BASE[bits & 0b11])
        bits >>= BITS_PER_BASE
    return "".join(reversed(bases))


def iter_kmer_bits(sequence: str, k: int) -> Iterator[Tuple[int, int]]:
    """Yield ``(position, bits)`` for each k-mer window of ``sequence``.

    Windows that contain a base outside ACGT (``N``, IUPAC codes, gaps) are
    skipped. The encoding is rolled forward one base at a time.
    """

    if not 1 <= k <= MAX_KMER_LEN:
        raise KmerError(f"k must be between 1 and {MAX_KMER_LEN}, got {k}")
    mask = (1 << (BITS_PER_BASE * k)) - 1
    bits = 0
    valid = 0  # length of the current run of encodable bases
    for idx, base in enumerate(sequence):
        code = BASE_TO_BITS.get(base.upper())
        if code is None:
            valid = 0
            bits = 0
            continue
        bits = ((bits << BITS_PER_BASE) | code) & mask
        valid += 1
        if valid >= k:
            yield idx - k + 1, bits


__all__ = [
    "MAX_KMER_LEN",
    "KmerError",
    "bits_to_kmer",
    "iter_kmer_bits",
    "kmer_to_bits",
]
