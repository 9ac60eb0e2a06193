"""Tests for the two-bit k-mer encoder."""

from __future__ import annotations

import pytest

from trio_binning.fasta import Record
from trio_binning.kmer import MAX_KMER_LEN, KmerError, bits_to_kmer, iter_kmer_bits, kmer_to_bits


def test_kmer_to_bits_single_bases() -> None:
    assert [kmer_to_bits(base) for base in "ACGT"] == [0, 1, 2, 3]


def test_kmer_to_bits_first_base_is_most_significant() -> None:
    assert kmer_to_bits("AC") == 1
    assert kmer_to_bits("CA") == 4
    assert kmer_to_bits("ACTGACTGAC") == 123361


def test_kmer_to_bits_is_case_insensitive() -> None:
    assert kmer_to_bits("acgt") == kmer_to_bits("ACGT") == 27


def test_kmer_to_bits_uses_full_64_bit_range() -> None:
    assert kmer_to_bits("T" * MAX_KMER_LEN) == 2**64 - 1


@pytest.mark.parametrize("kmer", ["", "ACN", "AC-T", "A" * (MAX_KMER_LEN + 1)])
def test_kmer_to_bits_rejects_invalid_input(kmer: str) -> None:
    with pytest.raises(KmerError):
        kmer_to_bits(kmer)


def test_kmer_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        kmer_to_bits("XYZ")


def test_bits_to_kmer_decodes() -> None:
    assert bits_to_kmer(123361, 10) == "ACTGACTGAC"
    assert bits_to_kmer(0, 3) == "AAA"
    assert bits_to_kmer(kmer_to_bits("gattaca"), 7) == "GATTACA"


@pytest.mark.parametrize("bits,k", [(64, 3), (-1, 3), (0, 0), (0, MAX_KMER_LEN + 1)])
def test_bits_to_kmer_rejects_invalid_input(bits: int, k: int) -> None:
    with pytest.raises(KmerError):
        bits_to_kmer(bits, k)


def test_iter_kmer_bits_skips_ambiguous_windows() -> None:
    assert list(iter_kmer_bits("ACGNTT", 2)) == [(0, 1), (1, 6), (4, 15)]


def test_iter_kmer_bits_matches_direct_encoding() -> None:
    record = Record.from_entry_string(">r1\nACGTTGCA\nNNACGTAC")
    k = 4
    for pos, bits in iter_kmer_bits(record.seq, k):
        assert bits == kmer_to_bits(record.seq[pos : pos + k])


def test_iter_kmer_bits_short_sequence_yields_nothing() -> None:
    assert list(iter_kmer_bits("ACG", 4)) == []


def test_iter_kmer_bits_rejects_bad_k() -> None:
    with pytest.raises(KmerError):
        list(iter_kmer_bits("ACGT", 0))
