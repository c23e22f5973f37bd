"""
ResponseVerifier - signed-response trust protocol

Turns a raw merchant response (body + headers) into a VerifiedResponse, or
raises the VerificationError for the first check that fails.
"""

import hmac
import logging
from dataclasses import dataclass, replace
from typing import Any, Mapping
from urllib.parse import urlsplit

import httpx

from paypro.config import ProtocolConfig
from paypro.encoding import decode_json_body, hex_to_bytes, sha256_hex
from paypro.exceptions import (
    DigestMismatch,
    DomainNotAuthorized,
    InvalidArgument,
    InvalidDigestHeader,
    InvalidIdentityHeader,
    InvalidRequestUrl,
    InvalidSignatureHeader,
    MalformedResponseBody,
    MissingDigest,
    MissingIdentity,
    MissingSignature,
    MissingSignatureType,
    SignatureInvalid,
    UnknownSigner,
    UnsupportedSignatureType,
    VerificationError,
)
from paypro.signers import EccSignatureVerifier, SignatureVerifier
from paypro.trust import TrustStore
from paypro.types import VerifiedResponse

logger = logging.getLogger(__name__)

HeadersLike = httpx.Headers | Mapping[str, Any]


@dataclass(frozen=True)
class SignatureEnvelope:
    """Signature material extracted from one response's headers"""

    signature_type: str
    signature: str
    identity: str
    digest_hash: str = ""


def header_values(headers: HeadersLike, name: str) -> list[Any]:
    """All values of a header, matched case-insensitively.

    Repeated header lines and list values are returned as separate entries so
    callers can reject multi-valued security headers.
    """
    if isinstance(headers, httpx.Headers):
        return headers.get_list(name)

    values: list[Any] = []
    for key, value in headers.items():
        if key.lower() != name:
            continue
        if isinstance(value, (list, tuple)):
            values.extend(value)
        else:
            values.append(value)
    return values


def _single_header(
    headers: HeadersLike,
    name: str,
    missing: type[VerificationError],
    invalid: type[VerificationError],
) -> str:
    values = header_values(headers, name)
    if not values or (len(values) == 1 and not values[0]):
        raise missing(f"Response missing {name} header")
    if len(values) != 1 or not isinstance(values[0], str):
        raise invalid(f"Invalid {name} header")
    return values[0]


def request_hostname(request_url: str) -> str:
    """Hostname of the request URL. Raises InvalidRequestUrl if there is none."""
    try:
        host = urlsplit(request_url).hostname
    except ValueError as e:
        raise InvalidRequestUrl(f"Invalid requestUrl: {request_url}") from e
    if not host:
        raise InvalidRequestUrl(f"Invalid requestUrl: {request_url}")
    return host


class ResponseVerifier:
    """
    Verifies merchant responses against a TrustStore.

    Stateless apart from the immutable trust store, so one instance can serve
    any number of concurrent requests.
    """

    def __init__(
        self,
        trust_store: TrustStore,
        signature_verifier: SignatureVerifier | None = None,
    ) -> None:
        self._trust_store = trust_store
        self._signature_verifier = signature_verifier or EccSignatureVerifier()

    @property
    def trust_store(self) -> TrustStore:
        return self._trust_store

    def verify(
        self,
        request_url: str,
        raw_body: str | bytes,
        headers: HeadersLike,
        unsafe_bypass_validation: bool = False,
    ) -> VerifiedResponse:
        """
        Verify the signature on a response from the payment requestor.

        Args:
            request_url: URL the request was made to
            raw_body: Response body exactly as received
            headers: Response headers
            unsafe_bypass_validation: Skip every trust check (DO NOT USE IN PRODUCTION)

        Returns:
            VerifiedResponse; key_data is set only when verification ran

        Raises:
            InvalidArgument: If request_url, raw_body or headers is empty
            VerificationError: The first trust check that failed
        """
        if not request_url:
            raise InvalidArgument("Parameter requestUrl is required")
        if not raw_body:
            raise InvalidArgument("Parameter rawBody is required")
        if not headers:
            raise InvalidArgument("Parameter headers is required")

        try:
            return self._verify(request_url, raw_body, headers, unsafe_bypass_validation)
        except VerificationError as e:
            logger.warning(
                f"Response verification failed: {e}",
                extra={"request_url": request_url, "reason": e.reason},
            )
            raise

    def _verify(
        self,
        request_url: str,
        raw_body: str | bytes,
        headers: HeadersLike,
        unsafe_bypass_validation: bool,
    ) -> VerifiedResponse:
        try:
            response_data = decode_json_body(raw_body)
        except ValueError as e:
            raise MalformedResponseBody("Invalid JSON in response body") from e

        if unsafe_bypass_validation:
            logger.warning(f"Signature verification bypassed for {request_url}")
            return VerifiedResponse(request_url=request_url, response_data=response_data)

        host = request_hostname(request_url)
        envelope = self._signature_headers(headers)

        key_data = self._trust_store.lookup(envelope.identity)
        if key_data is None:
            raise UnknownSigner(envelope.identity)

        actual_hash = sha256_hex(raw_body)
        envelope = replace(envelope, digest_hash=self._digest_hash(headers, actual_hash))
        if not hmac.compare_digest(
            envelope.digest_hash.lower().encode("utf-8"), actual_hash.encode("utf-8")
        ):
            raise DigestMismatch(envelope.digest_hash, actual_hash)

        if not key_data.allows(host):
            raise DomainNotAuthorized(envelope.identity, host)

        try:
            signature_bytes = hex_to_bytes(envelope.signature)
            public_key = hex_to_bytes(key_data.public_key)
        except ValueError as e:
            raise SignatureInvalid("Response signature invalid") from e

        message_hash = bytes.fromhex(actual_hash)
        if not self._signature_verifier.verify(message_hash, signature_bytes, public_key):
            raise SignatureInvalid("Response signature invalid")

        logger.debug(
            f"Response verified for {host}",
            extra={
                "identity": envelope.identity,
                "signature_type": envelope.signature_type,
                "request_url": request_url,
            },
        )
        return VerifiedResponse(
            request_url=request_url,
            response_data=response_data,
            key_data=key_data,
        )

    def _signature_headers(self, headers: HeadersLike) -> SignatureEnvelope:
        """Signature type, signature and identity headers, in that order.

        The digest is read later, once the signer is known to be trusted.
        """
        signature_type = _single_header(
            headers,
            ProtocolConfig.SIGNATURE_TYPE_HEADER,
            MissingSignatureType,
            UnsupportedSignatureType,
        )
        if signature_type != self._signature_verifier.signature_type():
            raise UnsupportedSignatureType(f"Unknown signature type {signature_type}")

        signature = _single_header(
            headers,
            ProtocolConfig.SIGNATURE_HEADER,
            MissingSignature,
            InvalidSignatureHeader,
        )
        identity = _single_header(
            headers,
            ProtocolConfig.IDENTITY_HEADER,
            MissingIdentity,
            InvalidIdentityHeader,
        )
        return SignatureEnvelope(
            signature_type=signature_type,
            signature=signature,
            identity=identity,
        )

    @staticmethod
    def _digest_hash(headers: HeadersLike, actual_hash: str) -> str:
        # Only the part after the first "=" is compared; the algorithm label is not enforced.
        values = header_values(headers, ProtocolConfig.DIGEST_HEADER)
        if not values or (len(values) == 1 and not values[0]):
            raise MissingDigest(actual_hash)
        if len(values) != 1 or not isinstance(values[0], str) or "=" not in values[0]:
            raise InvalidDigestHeader(values if len(values) != 1 else values[0], actual_hash)

        algorithm, _, digest_hash = values[0].partition("=")
        if algorithm.strip().lower() != ProtocolConfig.DIGEST_ALGORITHM:
            logger.debug(f"Digest header uses algorithm label '{algorithm}'")
        return digest_hash.strip()


def verify_response(
    trust_store: TrustStore,
    request_url: str,
    raw_body: str | bytes,
    headers: HeadersLike,
    unsafe_bypass_validation: bool = False,
) -> VerifiedResponse:
    """Verify one response with the default ecc verifier"""
    return ResponseVerifier(trust_store).verify(
        request_url, raw_body, headers, unsafe_bypass_validation
    )
