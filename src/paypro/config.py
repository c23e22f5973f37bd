"""
Payment protocol configuration
Protocol constants and trust configuration loading
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

from paypro.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

TRUSTED_KEYS_FILE_ENV = "PAYPRO_TRUSTED_KEYS_FILE"


class ProtocolConfig:
    """Wire-level constants of payment protocol v2"""

    VERSION = 2

    # Request headers
    VERSION_HEADER = "x-paypro-version"

    # Response headers used for signature verification
    DIGEST_HEADER = "digest"
    SIGNATURE_HEADER = "signature"
    SIGNATURE_TYPE_HEADER = "x-signature-type"
    IDENTITY_HEADER = "x-identity"

    SIGNATURE_TYPE_ECC = "ecc"
    DIGEST_ALGORITHM = "sha-256"

    # Content types for each protocol step
    PAYMENT_OPTIONS = "application/payment-options"
    PAYMENT_REQUEST = "application/payment-request"
    PAYMENT_VERIFICATION = "application/payment-verification"
    PAYMENT = "application/payment"

    DEFAULT_TIMEOUT = 30.0

    @classmethod
    def base_headers(cls) -> Dict[str, str]:
        """Headers every protocol request carries"""
        return {cls.VERSION_HEADER: str(cls.VERSION)}


def load_trusted_keys(path: str | Path) -> dict[str, Any]:
    """Load a trust configuration file.

    The file is a JSON object mapping identity to
    ``{"publicKey": "<hex>", "domains": ["host", ...]}``.

    Args:
        path: Path to the JSON file

    Returns:
        The raw identity -> key entry mapping

    Raises:
        ConfigurationError: If the file cannot be read or is not a JSON object
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError(f"Cannot read trusted keys file {path}: {e}") from e
    except ValueError as e:
        raise ConfigurationError(f"Trusted keys file {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Trusted keys file {path} must contain a JSON object")

    logger.debug(f"Loaded {len(data)} trusted key entries from {path}")
    return data


def trusted_keys_path_from_env() -> Path | None:
    """Path of the trust configuration file named by PAYPRO_TRUSTED_KEYS_FILE, if set"""
    value = os.getenv(TRUSTED_KEYS_FILE_ENV)
    return Path(value) if value else None
