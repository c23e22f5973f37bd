"""
Response signature verifiers
"""

from paypro.signers.base import SignatureVerifier
from paypro.signers.ecc import EccSignatureVerifier

__all__ = ["SignatureVerifier", "EccSignatureVerifier"]
