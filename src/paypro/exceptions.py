"""
paypro custom exception hierarchy
"""


class PayProError(Exception):
    """paypro base exception"""

    pass


class ConfigurationError(PayProError):
    """Configuration-related error (trust store missing, empty or invalid)"""

    pass


class InvalidArgument(PayProError):
    """A required argument was missing or empty"""

    pass


class InvalidPaymentUrl(PayProError):
    """Payment URI does not carry a payment protocol URL"""

    def __init__(self, payment_url: str, message: str | None = None):
        self.payment_url = payment_url
        super().__init__(message or f"Invalid payment protocol url: {payment_url}")


class TransportError(PayProError):
    """Non-200 response or network failure while talking to the merchant"""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
    ):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class VerificationError(PayProError):
    """Response verification failed"""

    reason = "verification_failed"


class MalformedResponseBody(VerificationError):
    """Response body is not valid JSON"""

    reason = "malformed_response_body"


class InvalidRequestUrl(VerificationError):
    """Request URL has no usable hostname"""

    reason = "invalid_request_url"


class MissingSignatureType(VerificationError):
    """Response missing x-signature-type header"""

    reason = "missing_signature_type"


class UnsupportedSignatureType(VerificationError):
    """x-signature-type header is not a single supported value"""

    reason = "unsupported_signature_type"


class MissingSignature(VerificationError):
    """Response missing signature header"""

    reason = "missing_signature"


class InvalidSignatureHeader(VerificationError):
    """signature header is not a single string"""

    reason = "invalid_signature_header"


class MissingIdentity(VerificationError):
    """Response missing x-identity header"""

    reason = "missing_identity"


class InvalidIdentityHeader(VerificationError):
    """x-identity header is not a single string"""

    reason = "invalid_identity_header"


class UnknownSigner(VerificationError):
    """Response signed by an identity that is not in the trust store"""

    reason = "unknown_signer"

    def __init__(self, identity: str):
        self.identity = identity
        super().__init__(f"Response signed by unknown key ({identity}), unable to validate")


class DigestMismatch(VerificationError):
    """Response body hash does not match the digest header"""

    reason = "digest_mismatch"

    def __init__(self, expected: str | None, actual: str | None, message: str | None = None):
        self.expected = expected
        self.actual = actual
        super().__init__(
            message
            or (
                "Response body hash does not match digest header. "
                f"Actual: {actual} Expected: {expected}"
            )
        )


class MissingDigest(DigestMismatch):
    """Response missing digest header"""

    reason = "missing_digest"

    def __init__(self, actual: str | None = None):
        super().__init__(None, actual, "Response missing digest header")


class InvalidDigestHeader(DigestMismatch):
    """digest header is not a single <algorithm>=<hash> value"""

    reason = "invalid_digest_header"

    def __init__(self, value: object, actual: str | None = None):
        self.value = value
        super().__init__(None, actual, f"Invalid digest header: {value!r}")


class DomainNotAuthorized(VerificationError):
    """Signing key is trusted but not for the request's domain"""

    reason = "domain_not_authorized"

    def __init__(self, identity: str, host: str):
        self.identity = identity
        self.host = host
        super().__init__(f"The key on the response ({identity}) is not trusted for domain {host}")


class SignatureInvalid(VerificationError):
    """Signature does not verify against the trusted public key"""

    reason = "signature_invalid"
