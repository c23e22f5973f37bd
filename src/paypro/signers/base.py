"""
Signature verifier base interface
"""

from abc import ABC, abstractmethod


class SignatureVerifier(ABC):
    """
    Abstract base class for response signature verifiers.

    Checks a signature over a message hash against a raw public key. No I/O.
    """

    @abstractmethod
    def signature_type(self) -> str:
        """Value of the x-signature-type header this verifier handles"""
        pass

    @abstractmethod
    def verify(self, message_hash: bytes, signature: bytes, public_key: bytes) -> bool:
        """
        Verify a signature over a message hash.

        Args:
            message_hash: The signed hash (the message itself, not hashed again)
            signature: Raw signature bytes
            public_key: Raw public key bytes

        Returns:
            True if the signature is valid. Malformed input returns False.
        """
        pass
