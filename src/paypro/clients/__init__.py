"""
Payment protocol client SDK
"""

from paypro.clients.payment_protocol_client import PaymentProtocolClient
from paypro.clients.payment_url import resolve_payment_url

__all__ = [
    "PaymentProtocolClient",
    "resolve_payment_url",
]
