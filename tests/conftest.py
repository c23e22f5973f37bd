"""
Pytest configuration and fixtures
"""

import hashlib

import pytest
from eth_keys import keys

MERCHANT_HOST = "merchant.example.com"
OTHER_HOST = "other.example.com"
PAYMENT_URL = f"https://{MERCHANT_HOST}/i/Ld2bwGjwpHJhGvgCZSaMTj"


def sign_response(body: bytes, private_key: keys.PrivateKey, identity: str) -> dict[str, str]:
    """Headers a merchant sends with a signed response body"""
    digest = hashlib.sha256(body).hexdigest()
    signature = private_key.sign_msg_hash(bytes.fromhex(digest))
    compact = signature.r.to_bytes(32, "big") + signature.s.to_bytes(32, "big")
    return {
        "digest": f"SHA-256={digest}",
        "signature": compact.hex(),
        "x-signature-type": "ecc",
        "x-identity": identity,
    }


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def merchant_key():
    """Signing key of the test merchant"""
    return keys.PrivateKey(
        bytes.fromhex("0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef")
    )


@pytest.fixture
def other_key():
    """Signing key of a second, unrelated merchant"""
    return keys.PrivateKey(
        bytes.fromhex("fedcba9876543210fedcba9876543210fedcba9876543210fedcba9876543210")
    )


@pytest.fixture
def trusted_keys(merchant_key, other_key):
    """Trust configuration in the documented file format"""
    return {
        "merchant-signer": {
            "publicKey": merchant_key.public_key.to_compressed_bytes().hex(),
            "domains": [MERCHANT_HOST],
        },
        "other-signer": {
            "publicKey": other_key.public_key.to_compressed_bytes().hex(),
            "domains": [OTHER_HOST],
        },
    }


@pytest.fixture
def trust_store(trusted_keys):
    from paypro.trust import TrustStore

    return TrustStore(trusted_keys)


@pytest.fixture
def sign():
    """Callable producing signed response headers"""
    return sign_response
