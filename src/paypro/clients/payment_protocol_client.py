"""
PaymentProtocolClient - four-step payment protocol negotiation over HTTP
"""

import logging
from typing import Any, Mapping

import httpx

from paypro.clients.payment_url import resolve_payment_url
from paypro.config import ProtocolConfig
from paypro.encoding import encode_json_body
from paypro.exceptions import TransportError
from paypro.signers import SignatureVerifier
from paypro.trust import TrustStore
from paypro.types import (
    PaymentOptionSelection,
    PaymentTransactions,
    TrustedKey,
    VerifiedResponse,
)
from paypro.verification import ResponseVerifier

logger = logging.getLogger(__name__)


class PaymentProtocolClient:
    """
    Client for the payment protocol.

    Each step makes exactly one request and passes the response through the
    ResponseVerifier. There is no state between calls beyond the immutable
    trust store, so concurrent calls on one instance are safe.
    """

    def __init__(
        self,
        trusted_keys: TrustStore | Mapping[str, TrustedKey | Mapping[str, Any]] | None,
        http_client: httpx.AsyncClient | None = None,
        headers: dict[str, str] | None = None,
        timeout: float = ProtocolConfig.DEFAULT_TIMEOUT,
        signature_verifier: SignatureVerifier | None = None,
    ) -> None:
        """
        Initialize payment protocol client.

        Args:
            trusted_keys: TrustStore, or identity -> key data mapping to build one from
            http_client: httpx.AsyncClient to use (optional, owned by the caller)
            headers: Extra headers sent with every request
            timeout: Request timeout in seconds when the client creates its own transport
            signature_verifier: Verifier for the ecc signature type (optional)

        Raises:
            ConfigurationError: If no trusted keys are supplied
        """
        if isinstance(trusted_keys, TrustStore):
            self._trust_store = trusted_keys
        else:
            self._trust_store = TrustStore(trusted_keys)
        self._verifier = ResponseVerifier(self._trust_store, signature_verifier)
        self._headers = dict(headers or {})
        self._timeout = timeout
        self._http_client = http_client
        self._owns_http_client = http_client is None
        self._unsafe_bypass_validation = False

    @classmethod
    def unsafe_bypass(
        cls,
        trusted_keys: TrustStore | Mapping[str, TrustedKey | Mapping[str, Any]] | None,
        **kwargs: Any,
    ) -> "PaymentProtocolClient":
        """
        Client that skips signature verification on every call.

        For testing against merchants without signing keys only. Responses carry
        no key_data. DO NOT USE IN PRODUCTION.
        """
        client = cls(trusted_keys, **kwargs)
        client._unsafe_bypass_validation = True
        logger.warning("Created payment protocol client with signature verification disabled")
        return client

    @property
    def trust_store(self) -> TrustStore:
        return self._trust_store

    @property
    def bypasses_validation(self) -> bool:
        return self._unsafe_bypass_validation

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self._timeout)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client if this instance created it"""
        if self._http_client is not None and self._owns_http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> "PaymentProtocolClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def get_payment_options(
        self,
        payment_url: str,
        *,
        unsafe_bypass_validation: bool = False,
    ) -> VerifiedResponse:
        """
        Fetch the payment options offered by the merchant.

        Args:
            payment_url: Payment protocol URL, or a payment URI carrying one in ``r``
            unsafe_bypass_validation: Skip signature verification (DO NOT USE IN PRODUCTION)

        Raises:
            InvalidPaymentUrl: If a payment URI has no ``r`` parameter (no request is made)
        """
        payment_url = resolve_payment_url(payment_url)
        return await self._exchange(
            "GET",
            payment_url,
            {"Accept": ProtocolConfig.PAYMENT_OPTIONS},
            None,
            unsafe_bypass_validation,
        )

    async def select_payment_option(
        self,
        payment_url: str,
        chain: str,
        currency: str,
        *,
        unsafe_bypass_validation: bool = False,
    ) -> VerifiedResponse:
        """
        Select which chain and currency will be used for payment.

        Args:
            payment_url: Payment protocol URL
            chain: Chain of the payment (BTC, BCH, ETH, ...)
            currency: Token on top of the chain (e.g. GUSD on ETH), blank for none
            unsafe_bypass_validation: Skip signature verification (DO NOT USE IN PRODUCTION)
        """
        body = PaymentOptionSelection(chain=chain, currency=currency)
        return await self._exchange(
            "POST",
            payment_url,
            {"Content-Type": ProtocolConfig.PAYMENT_REQUEST},
            body,
            unsafe_bypass_validation,
        )

    async def verify_unsigned_payment(
        self,
        payment_url: str,
        chain: str,
        currency: str,
        unsigned_transactions: list[Any],
        *,
        unsafe_bypass_validation: bool = False,
    ) -> VerifiedResponse:
        """
        Send unsigned transactions so the merchant can check outputs and fee.

        Args:
            payment_url: Payment protocol URL
            chain: Chain of the payment
            currency: Token on top of the chain, blank for none
            unsigned_transactions: Unsigned transactions, e.g. ``[{"tx": hex, "weightedSize": n}]``
            unsafe_bypass_validation: Skip signature verification (DO NOT USE IN PRODUCTION)
        """
        body = PaymentTransactions(
            chain=chain, currency=currency, transactions=unsigned_transactions
        )
        return await self._exchange(
            "POST",
            payment_url,
            {"Content-Type": ProtocolConfig.PAYMENT_VERIFICATION},
            body,
            unsafe_bypass_validation,
        )

    async def send_signed_payment(
        self,
        payment_url: str,
        chain: str,
        currency: str,
        signed_transactions: list[Any],
        *,
        unsafe_bypass_validation: bool = False,
    ) -> VerifiedResponse:
        """
        Send signed transactions as the final step of payment.

        Args:
            payment_url: Payment protocol URL
            chain: Chain of the payment
            currency: Token on top of the chain, blank for none
            signed_transactions: Signed transactions
            unsafe_bypass_validation: Skip signature verification (DO NOT USE IN PRODUCTION)
        """
        body = PaymentTransactions(chain=chain, currency=currency, transactions=signed_transactions)
        return await self._exchange(
            "POST",
            payment_url,
            {"Content-Type": ProtocolConfig.PAYMENT},
            body,
            unsafe_bypass_validation,
        )

    async def _exchange(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: Any,
        unsafe_bypass_validation: bool,
    ) -> VerifiedResponse:
        response = await self._request(method, url, headers, body)
        return self._verifier.verify(
            url,
            response.content,
            response.headers,
            unsafe_bypass_validation or self._unsafe_bypass_validation,
        )

    async def _request(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: Any,
    ) -> httpx.Response:
        # Protocol headers replace caller defaults regardless of name casing
        request_headers = httpx.Headers(self._headers)
        request_headers.update(headers)
        request_headers.update(ProtocolConfig.base_headers())
        content = encode_json_body(body) if body is not None else None

        client = await self._get_client()
        logger.info(f"Making {method} request to {url}")
        try:
            response = await client.request(method, url, headers=request_headers, content=content)
        except httpx.HTTPError as e:
            logger.error(f"Request to {url} failed: {e}")
            raise TransportError(f"Request to {url} failed: {e}") from e
        logger.info(f"Received response: status={response.status_code}")

        if response.status_code != 200:
            logger.error(f"Unexpected status {response.status_code} from {url}")
            raise TransportError(
                f"Unexpected status {response.status_code} from {url}: {response.text[:500]}",
                status_code=response.status_code,
                body=response.text,
            )
        return response
