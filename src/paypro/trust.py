"""
TrustStore - immutable table of trusted response signers
"""

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterator, Mapping

from pydantic import ValidationError

from paypro.config import load_trusted_keys
from paypro.exceptions import ConfigurationError
from paypro.types import TrustedKey

logger = logging.getLogger(__name__)


class TrustStore:
    """
    Immutable mapping from signer identity to TrustedKey.

    Built once from caller-supplied configuration and never mutated. Key
    rotation means building a new store (and a new client).
    """

    def __init__(self, trusted_keys: Mapping[str, TrustedKey | Mapping[str, Any]] | None) -> None:
        """
        Initialize trust store.

        Args:
            trusted_keys: identity -> TrustedKey, or identity -> dict with
                ``publicKey`` and ``domains``

        Raises:
            ConfigurationError: If no trusted keys are supplied or an entry is invalid
        """
        if not trusted_keys:
            raise ConfigurationError("Invalid constructor, no trusted keys added to agent")
        if not isinstance(trusted_keys, Mapping):
            raise ConfigurationError("Trusted keys must be a mapping of identity to key data")

        keys: dict[str, TrustedKey] = {}
        for identity, entry in trusted_keys.items():
            if not isinstance(identity, str) or not identity:
                raise ConfigurationError(f"Invalid trusted key identity: {identity!r}")
            keys[identity] = self._coerce(identity, entry)
            if not keys[identity].domains:
                logger.warning(f"Trusted key '{identity}' has no domains and will never match")

        self._keys: Mapping[str, TrustedKey] = MappingProxyType(keys)
        logger.debug(f"TrustStore initialized with {len(keys)} identities")

    @staticmethod
    def _coerce(identity: str, entry: TrustedKey | Mapping[str, Any]) -> TrustedKey:
        if isinstance(entry, TrustedKey):
            return entry
        if not isinstance(entry, Mapping):
            raise ConfigurationError(f"Trusted key '{identity}' must be a mapping")
        try:
            return TrustedKey.model_validate(dict(entry))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid trusted key '{identity}': {e}") from e

    @classmethod
    def from_config(cls, config: Mapping[str, Any] | None) -> "TrustStore":
        """Create trust store from a configuration mapping"""
        return cls(config)

    @classmethod
    def from_file(cls, path: str | Path) -> "TrustStore":
        """Create trust store from a JSON trust configuration file"""
        return cls(load_trusted_keys(path))

    def lookup(self, identity: str) -> TrustedKey | None:
        """Return the key record for identity, or None if it is not trusted"""
        return self._keys.get(identity)

    def identities(self) -> list[str]:
        return list(self._keys)

    def __contains__(self, identity: object) -> bool:
        return identity in self._keys

    def __iter__(self) -> Iterator[str]:
        return iter(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def __repr__(self) -> str:
        return f"TrustStore(identities={self.identities()!r})"
