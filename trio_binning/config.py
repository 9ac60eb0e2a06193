"""Central location for default settings and environment configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, Optional, Union

from dotenv import load_dotenv

DEFAULT_SUMMARY_DIR = Path("data") / "summary"

ENVIRONMENT_VARIABLES = (
    "NCBI_EMAIL",
    "NCBI_TOOL",
    "NCBI_API_KEY",
    "TRIO_BINNING_LOG_LEVEL",
)

PathLike = Union[str, Path]


@dataclass(slots=True)
class FetchDefaults:
    """Options surfaced on the CLI when streaming records from NCBI."""

    db: str = "nuccore"
    rettype: str = "fasta"
    retmode: str = "text"
    tool: str = "trio_binning"
    timeout: int = 30
    retries: int = 3


@dataclass(slots=True)
class KmerDefaults:
    """Values used by the k-mer demo command."""

    kmer: str = "ACTGACTGAC"


FETCH_DEFAULTS = FetchDefaults()
KMER_DEFAULTS = KmerDefaults()


@dataclass
class RuntimeConfig:
    """Structured access to settings read from the environment."""

    ncbi_email: Optional[str]
    ncbi_tool: Optional[str]
    ncbi_api_key: Optional[str]
    log_level: Optional[str]

    def as_dict(self) -> Dict[str, Optional[str]]:
        return {
            "NCBI_EMAIL": self.ncbi_email,
            "NCBI_TOOL": self.ncbi_tool,
            "NCBI_API_KEY": self.ncbi_api_key,
            "TRIO_BINNING_LOG_LEVEL": self.log_level,
        }

    def missing_keys(self) -> Iterator[str]:
        for key, value in self.as_dict().items():
            if not value:
                yield key


def find_env_file(start_path: Optional[PathLike] = None) -> Optional[Path]:
    """Search for the closest .env file starting from start_path or CWD."""
    search_root = Path(start_path).resolve() if start_path else Path.cwd().resolve()
    for candidate_dir in _walk_upwards(search_root):
        candidate = candidate_dir / ".env"
        if candidate.is_file():
            return candidate
    return None


def load_env_file(start_path: Optional[PathLike] = None) -> Optional[Path]:
    """Load the closest .env into os.environ without overriding existing values."""
    env_path = find_env_file(start_path)
    if env_path is None:
        return None
    load_dotenv(env_path, override=False)
    return env_path


def collect_runtime_config(start_path: Optional[PathLike] = None) -> RuntimeConfig:
    """Ensure the .env file is sourced and expose the values as a dataclass."""
    load_env_file(start_path)
    env = os.environ
    return RuntimeConfig(
        ncbi_email=env.get("NCBI_EMAIL"),
        ncbi_tool=env.get("NCBI_TOOL"),
        ncbi_api_key=env.get("NCBI_API_KEY"),
        log_level=env.get("TRIO_BINNING_LOG_LEVEL"),
    )


def _walk_upwards(start: Path) -> Iterable[Path]:
    current = start
    last = None
    while last != current:
        yield current
        last = current
        current = current.parent
