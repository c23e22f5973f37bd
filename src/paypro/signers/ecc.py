"""
EccSignatureVerifier - secp256k1 ECDSA verifier for the "ecc" signature type
"""

import logging

from eth_keys import keys
from eth_keys.constants import SECPK1_N
from eth_keys.exceptions import BadSignature, ValidationError

from paypro.config import ProtocolConfig
from paypro.signers.base import SignatureVerifier

logger = logging.getLogger(__name__)

COMPACT_SIGNATURE_LENGTH = 64
COMPRESSED_PUBLIC_KEY_LENGTH = 33
UNCOMPRESSED_PUBLIC_KEY_LENGTH = 65
RAW_PUBLIC_KEY_LENGTH = 64
MESSAGE_HASH_LENGTH = 32


class EccSignatureVerifier(SignatureVerifier):
    """secp256k1 verifier using eth_keys.

    Signatures must be compact ``r || s`` (exactly 64 bytes). High-S signatures
    are rejected, matching libsecp256k1.
    """

    def signature_type(self) -> str:
        return ProtocolConfig.SIGNATURE_TYPE_ECC

    def verify(self, message_hash: bytes, signature: bytes, public_key: bytes) -> bool:
        if len(message_hash) != MESSAGE_HASH_LENGTH:
            logger.debug("Rejecting message hash", extra={"length": len(message_hash)})
            return False

        try:
            pub = self._load_public_key(public_key)
            sig = self._load_signature(signature)
        except (ValueError, ValidationError, BadSignature) as e:
            logger.debug("Malformed signature input", extra={"error": str(e)})
            return False

        if pub is None or sig is None:
            return False

        if sig.s > SECPK1_N // 2:
            logger.debug("Rejecting high-S signature")
            return False

        try:
            return pub.verify_msg_hash(message_hash, sig)
        except (ValueError, ValidationError, BadSignature) as e:
            logger.debug("Signature verification raised", extra={"error": str(e)})
            return False

    @staticmethod
    def _load_public_key(public_key: bytes) -> keys.PublicKey | None:
        if len(public_key) == COMPRESSED_PUBLIC_KEY_LENGTH:
            return keys.PublicKey.from_compressed_bytes(public_key)
        if len(public_key) == UNCOMPRESSED_PUBLIC_KEY_LENGTH and public_key[0] == 0x04:
            return keys.PublicKey(public_key[1:])
        if len(public_key) == RAW_PUBLIC_KEY_LENGTH:
            return keys.PublicKey(public_key)
        logger.debug("Unsupported public key length", extra={"length": len(public_key)})
        return None

    @staticmethod
    def _load_signature(signature: bytes) -> keys.NonRecoverableSignature | None:
        if len(signature) != COMPACT_SIGNATURE_LENGTH:
            logger.debug("Unsupported signature length", extra={"length": len(signature)})
            return None
        return keys.NonRecoverableSignature(signature_bytes=signature)
