"""
Type definitions for the payment protocol client
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class TrustedKey(BaseModel):
    """Trusted signing key and the domains it may sign for"""

    public_key: str = Field(alias="publicKey")
    domains: frozenset[str] = frozenset()

    class Config:
        populate_by_name = True
        frozen = True

    @field_validator("public_key")
    @classmethod
    def _check_hex(cls, value: str) -> str:
        raw = value[2:] if value.startswith("0x") else value
        if not raw:
            raise ValueError("publicKey must not be empty")
        try:
            bytes.fromhex(raw)
        except ValueError:
            raise ValueError(f"publicKey is not valid hex: {value!r}") from None
        return value

    @field_validator("domains")
    @classmethod
    def _lower_domains(cls, value: frozenset[str]) -> frozenset[str]:
        return frozenset(domain.lower() for domain in value)

    def allows(self, host: str) -> bool:
        """Whether this key is authorized for the given hostname"""
        return host in self.domains


class VerifiedResponse(BaseModel):
    """Decoded merchant response, with the key that signed it when verified"""

    request_url: str = Field(alias="requestUrl")
    response_data: Any = Field(alias="responseData")
    key_data: Optional[TrustedKey] = Field(None, alias="keyData")

    class Config:
        populate_by_name = True
        frozen = True

    @property
    def is_verified(self) -> bool:
        return self.key_data is not None


class PaymentOptionSelection(BaseModel):
    """Body of a payment-request (option selection) POST"""

    chain: str
    currency: str


class PaymentTransactions(BaseModel):
    """Body of a payment-verification or payment POST"""

    chain: str
    currency: str
    transactions: list[Any]
