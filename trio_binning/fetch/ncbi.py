"""Stream FASTA records from NCBI Entrez efetch."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

import requests

from ..config import FETCH_DEFAULTS

ENTREZ_BASE = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils"
EFETCH_ENDPOINT = f"{ENTREZ_BASE}/efetch.fcgi"


class FetchError(RuntimeError):
    """Raised when NCBI cannot be reached after all retries."""


@dataclass(slots=True)
class EfetchRequest:
    """Parameters for a single efetch call."""

    ids: list[str] = field(default_factory=list)
    db: str = FETCH_DEFAULTS.db
    rettype: str = FETCH_DEFAULTS.rettype
    retmode: str = FETCH_DEFAULTS.retmode
    email: str | None = None
    tool: str = FETCH_DEFAULTS.tool
    api_key: str | None = None
    timeout: int = FETCH_DEFAULTS.timeout
    retries: int = FETCH_DEFAULTS.retries


def build_params(request: EfetchRequest) -> dict[str, Any]:
    params: dict[str, Any] = {
        "db": request.db,
        "id": ",".join(request.ids),
        "rettype": request.rettype,
        "retmode": request.retmode,
        "tool": request.tool,
    }
    if request.email:
        params["email"] = request.email
    if request.api_key:
        params["api_key"] = request.api_key
    return params


def open_efetch_response(
    request: EfetchRequest,
    logger,
    session: requests.Session | None = None,
) -> requests.Response:
    """Start a streaming efetch and return the open response.

    The caller owns the response and must close it, usually with
    ``with response:``; its ``iter_lines()`` feeds the FASTA reader.
    Only opening the connection is retried. Failures while the body is being
    consumed propagate as ``requests.RequestException`` (an ``OSError``), which
    :class:`~trio_binning.fasta.FastaReader` reports as an I/O error item.
    """

    if not request.ids:
        raise ValueError("At least one accession or UID is required")
    session = session or requests.Session()
    params = build_params(request)
    last_exc: Exception | None = None
    for attempt in range(1, request.retries + 1):
        response = None
        try:
            response = session.get(EFETCH_ENDPOINT, params=params, timeout=request.timeout, stream=True)
            response.raise_for_status()
            logger.info("Streaming %s record(s) from %s", len(request.ids), request.db)
            return response
        except requests.RequestException as exc:
            if response is not None:
                response.close()
            last_exc = exc
            logger.warning(
                "Request to %s failed (attempt %s/%s): %s",
                EFETCH_ENDPOINT,
                attempt,
                request.retries,
                exc,
            )
            if attempt == request.retries:
                break
            time.sleep(2 ** (attempt - 1))
    raise FetchError(f"Failed to call {EFETCH_ENDPOINT}: {last_exc}") from last_exc


__all__ = ["EfetchRequest", "FetchError", "build_params", "open_efetch_response"]
