"""
paypro - Payment Protocol client for Python

Negotiates payments with merchant endpoints and verifies that every response
is signed by a trusted key authorized for the merchant's domain.
"""

__version__ = "0.1.0"

from paypro.clients import PaymentProtocolClient, resolve_payment_url
from paypro.config import ProtocolConfig, load_trusted_keys
from paypro.exceptions import (
    ConfigurationError,
    DigestMismatch,
    DomainNotAuthorized,
    InvalidArgument,
    InvalidDigestHeader,
    InvalidIdentityHeader,
    InvalidPaymentUrl,
    InvalidRequestUrl,
    InvalidSignatureHeader,
    MalformedResponseBody,
    MissingDigest,
    MissingIdentity,
    MissingSignature,
    MissingSignatureType,
    PayProError,
    SignatureInvalid,
    TransportError,
    UnknownSigner,
    UnsupportedSignatureType,
    VerificationError,
)
from paypro.signers import EccSignatureVerifier, SignatureVerifier
from paypro.trust import TrustStore
from paypro.types import TrustedKey, VerifiedResponse
from paypro.verification import ResponseVerifier, verify_response

__all__ = [
    "__version__",
    # Client
    "PaymentProtocolClient",
    "resolve_payment_url",
    # Trust and verification
    "TrustStore",
    "ResponseVerifier",
    "verify_response",
    "SignatureVerifier",
    "EccSignatureVerifier",
    # Types
    "TrustedKey",
    "VerifiedResponse",
    # Config
    "ProtocolConfig",
    "load_trusted_keys",
    # Exceptions
    "PayProError",
    "ConfigurationError",
    "TransportError",
    "InvalidArgument",
    "InvalidPaymentUrl",
    "VerificationError",
    "MalformedResponseBody",
    "InvalidRequestUrl",
    "MissingSignatureType",
    "UnsupportedSignatureType",
    "MissingSignature",
    "InvalidSignatureHeader",
    "MissingIdentity",
    "InvalidIdentityHeader",
    "UnknownSigner",
    "DigestMismatch",
    "MissingDigest",
    "InvalidDigestHeader",
    "DomainNotAuthorized",
    "SignatureInvalid",
]
