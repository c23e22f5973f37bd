"""
End-to-end negotiation against an in-process signing merchant (FastAPI over ASGI)
"""

import json

import httpx
import pytest
from fastapi import FastAPI, Request, Response

from paypro.clients import PaymentProtocolClient
from paypro.exceptions import DomainNotAuthorized, SignatureInvalid, UnknownSigner

MERCHANT_URL = "https://merchant.example.com/i/Ld2bwGjwpHJhGvgCZSaMTj"


def create_merchant_app(sign, private_key, identity: str) -> FastAPI:
    """Merchant endpoint that signs every response it sends"""
    app = FastAPI()
    received: list[dict] = []
    app.state.received = received

    def signed(payload: dict) -> Response:
        body = json.dumps(payload).encode("utf-8")
        return Response(
            content=body,
            media_type="application/json",
            headers=sign(body, private_key, identity),
        )

    @app.get("/i/{invoice_id}")
    async def payment_options(invoice_id: str, request: Request):
        received.append({"step": "options", "accept": request.headers.get("accept")})
        return signed(
            {
                "time": "2026-10-16T12:00:00.000Z",
                "expires": "2026-10-16T12:15:00.000Z",
                "memo": f"Payment request for invoice {invoice_id}",
                "paymentUrl": str(request.url),
                "paymentId": invoice_id,
                "paymentOptions": [
                    {"chain": "BTC", "currency": "BTC", "network": "main", "estimatedAmount": 10800},
                    {"chain": "ETH", "currency": "GUSD", "network": "main", "estimatedAmount": 1000},
                ],
            }
        )

    @app.post("/i/{invoice_id}")
    async def payment_step(invoice_id: str, request: Request):
        content_type = request.headers.get("content-type")
        body = json.loads(await request.body())
        received.append({"step": content_type, "body": body})

        if content_type == "application/payment-request":
            return signed(
                {
                    "time": "2026-10-16T12:00:05.000Z",
                    "expires": "2026-10-16T12:15:00.000Z",
                    "paymentId": invoice_id,
                    "chain": body["chain"],
                    "instructions": [
                        {"type": "transaction", "requiredFeeRate": 2, "outputs": []},
                    ],
                }
            )
        if content_type == "application/payment-verification":
            return signed({"payment": body, "memo": "Payment appears valid"})
        if content_type == "application/payment":
            return signed({"payment": body, "memo": "Transaction received by merchant"})
        return Response(status_code=415, content=b"unsupported content type")

    return app


def _client(trust_store, app) -> PaymentProtocolClient:
    http_client = httpx.AsyncClient(transport=httpx.ASGITransport(app=app))
    return PaymentProtocolClient(trust_store, http_client=http_client)


@pytest.mark.anyio
async def test_full_negotiation(trust_store, sign, merchant_key):
    app = create_merchant_app(sign, merchant_key, "merchant-signer")
    client = _client(trust_store, app)
    key_data = trust_store.lookup("merchant-signer")

    options = await client.get_payment_options(f"bitcoin:?r={MERCHANT_URL}")
    assert options.key_data is key_data
    assert [o["chain"] for o in options.response_data["paymentOptions"]] == ["BTC", "ETH"]

    selection = await client.select_payment_option(options.request_url, "BTC", "")
    assert selection.key_data is key_data
    assert selection.response_data["chain"] == "BTC"

    unsigned = [{"tx": "0200000001abcdef", "weightedSize": 225}]
    preview = await client.verify_unsigned_payment(options.request_url, "BTC", "", unsigned)
    assert preview.response_data["payment"]["transactions"] == unsigned

    signed_txs = [{"tx": "0200000001deadbeef", "weightedSize": 226}]
    receipt = await client.send_signed_payment(options.request_url, "BTC", "", signed_txs)
    assert receipt.key_data is key_data
    assert receipt.response_data["memo"] == "Transaction received by merchant"

    steps = [entry["step"] for entry in app.state.received]
    assert steps == [
        "options",
        "application/payment-request",
        "application/payment-verification",
        "application/payment",
    ]
    assert app.state.received[0]["accept"] == "application/payment-options"


@pytest.mark.anyio
async def test_merchant_signing_for_another_domain(trust_store, sign, other_key):
    """A trusted key serving a domain outside its allow-list is rejected"""
    app = create_merchant_app(sign, other_key, "other-signer")
    client = _client(trust_store, app)

    with pytest.raises(DomainNotAuthorized):
        await client.get_payment_options(MERCHANT_URL)


@pytest.mark.anyio
async def test_merchant_claiming_foreign_identity(trust_store, sign, other_key):
    """Signing with one key while claiming another identity fails the signature check"""
    app = create_merchant_app(sign, other_key, "merchant-signer")
    client = _client(trust_store, app)

    with pytest.raises(SignatureInvalid):
        await client.select_payment_option(MERCHANT_URL, "BTC", "")


@pytest.mark.anyio
async def test_untrusted_merchant(trust_store, sign, merchant_key):
    app = create_merchant_app(sign, merchant_key, "unlisted-signer")
    client = _client(trust_store, app)

    with pytest.raises(UnknownSigner):
        await client.get_payment_options(MERCHANT_URL)
