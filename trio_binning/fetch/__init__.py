"""Remote FASTA sources."""

from .ncbi import EfetchRequest, FetchError, open_efetch_response

__all__ = ["EfetchRequest", "FetchError", "open_efetch_response"]
