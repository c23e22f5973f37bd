"""
Payment URL resolution
"""

import logging
from urllib.parse import parse_qs, urlsplit

from paypro.exceptions import InvalidPaymentUrl

logger = logging.getLogger(__name__)

HTTP_SCHEMES = ("http", "https")


def resolve_payment_url(payment_url: str) -> str:
    """
    Resolve the payment protocol URL to request.

    http(s) URLs are used as-is. Anything else (``bitcoin:``, ``bitcoincash:``,
    ...) is a payment URI whose ``r`` query parameter holds the URL.

    Raises:
        InvalidPaymentUrl: If a payment URI has no ``r`` parameter
    """
    try:
        parts = urlsplit(payment_url)
    except ValueError as e:
        raise InvalidPaymentUrl(payment_url) from e
    if parts.scheme in HTTP_SCHEMES:
        return payment_url

    redirect = parse_qs(parts.query).get("r")
    if not redirect or not redirect[0]:
        raise InvalidPaymentUrl(payment_url)

    logger.debug(f"Resolved payment URI to {redirect[0]}")
    return redirect[0]
