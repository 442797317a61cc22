"""Shared secrets keyed by key id."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from httpsign.crypto import Algorithm
from httpsign.errors import AlgorithmMismatchError, UnknownKeyError

KeyID = str


@dataclass(frozen=True)
class Secret:
    """Secret key material and the algorithm it signs with.

    Attributes:
        key: Shared secret.
        algorithm: Algorithm used to sign with ``key``.
    """

    key: str | bytes
    algorithm: Algorithm

    def __post_init__(self) -> None:
        if self.algorithm is None:
            raise ValueError("Secret algorithm must not be None")

    def __repr__(self) -> str:
        return f"Secret(key=<redacted>, algorithm={self.algorithm.name!r})"


class SecretStore(Mapping[KeyID, Secret]):
    """Read-only mapping from key id to ``Secret``.

    Built once at configuration time and shared by every request.
    """

    def __init__(self, secrets: Mapping[KeyID, Secret] | None = None) -> None:
        entries = dict(secrets or {})
        for key_id, secret in entries.items():
            if not key_id:
                raise ValueError("Key id must not be empty")
            if not isinstance(secret, Secret):
                raise TypeError(f"Expected Secret for key id {key_id!r}, got {type(secret).__name__}")
        self._secrets = MappingProxyType(entries)

    def __getitem__(self, key_id: KeyID) -> Secret:
        return self._secrets[key_id]

    def __iter__(self) -> Iterator[KeyID]:
        return iter(self._secrets)

    def __len__(self) -> int:
        return len(self._secrets)

    def resolve(self, key_id: KeyID, algorithm: str = "") -> Secret:
        """Look up the secret for ``key_id``.

        An empty ``algorithm`` trusts the registered algorithm; a non-empty one
        must match it exactly.

        Raises:
            UnknownKeyError: ``key_id`` is not registered.
            AlgorithmMismatchError: ``algorithm`` differs from the registered name.
        """
        secret = self._secrets.get(key_id)
        if secret is None:
            raise UnknownKeyError(key_id)

        if algorithm and algorithm != secret.algorithm.name:
            raise AlgorithmMismatchError(algorithm, secret.algorithm.name)
        return secret

    def __repr__(self) -> str:
        return f"SecretStore(key_ids={sorted(self._secrets)!r})"
