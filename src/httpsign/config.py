"""Loading the secret store from a JSON secrets file.

File format::

    {
        "read": {"key": "k1", "algorithm": "hmac-sha256"},
        "write": {"key": "k2"}
    }
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator

from httpsign.constants import SECRETS_FILE_ENV
from httpsign.crypto import ALGORITHMS, get_algorithm
from httpsign.store import Secret, SecretStore

logger = logging.getLogger(__name__)


class SecretEntry(BaseModel):
    """One key id's entry in the secrets file."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    key: str = Field(min_length=1)
    algorithm: str = "hmac-sha256"

    @field_validator("algorithm")
    @classmethod
    def _known_algorithm(cls, value: str) -> str:
        name = value.lower()
        if name not in ALGORITHMS:
            raise ValueError(f"unknown algorithm {value!r}, expected one of {sorted(ALGORITHMS)}")
        return name

    def to_secret(self) -> Secret:
        return Secret(key=self.key, algorithm=get_algorithm(self.algorithm))


class SecretsFile(RootModel[dict[str, SecretEntry]]):
    """Whole secrets file: key id to entry."""

    @field_validator("root")
    @classmethod
    def _non_empty_ids(cls, value: dict[str, SecretEntry]) -> dict[str, SecretEntry]:
        if any(not key_id for key_id in value):
            raise ValueError("key ids must not be empty")
        return value

    def to_store(self) -> SecretStore:
        return SecretStore({key_id: entry.to_secret() for key_id, entry in self.root.items()})


def load_secret_store(path: Path) -> SecretStore:
    """Read and validate a secrets file.

    Raises:
        OSError: The file cannot be read.
        ValueError: The file is not valid JSON or fails validation
            (``pydantic.ValidationError`` is a ``ValueError``).
    """
    store = SecretsFile.model_validate_json(Path(path).read_text()).to_store()
    logger.info("Loaded %d secret(s) from '%s'", len(store), path)
    return store


def resolve_secrets_path(explicit: Path | None = None) -> Path | None:
    """Return ``explicit`` or, failing that, the path named by ``HTTPSIGN_SECRETS_FILE``."""
    if explicit is not None:
        return explicit
    from_env = os.environ.get(SECRETS_FILE_ENV)
    return Path(from_env) if from_env else None
