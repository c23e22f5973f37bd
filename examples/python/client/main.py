import asyncio
import json
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from paypro import PaymentProtocolClient, PayProError, TrustStore
from paypro.config import trusted_keys_path_from_env
from paypro.logging_config import setup_logging

setup_logging(logging.DEBUG if os.getenv("PAYPRO_DEBUG") else logging.INFO)
logger = logging.getLogger("paypro.example")

load_dotenv(Path(__file__).parent.parent.parent.parent / ".env")

PAYMENT_URL = os.getenv("PAYPRO_PAYMENT_URL", "")
CHAIN = os.getenv("PAYPRO_CHAIN", "BTC")
CURRENCY = os.getenv("PAYPRO_CURRENCY", "")
# Hex transactions produced by your wallet; the preview and submit steps are skipped when unset
UNSIGNED_TX = os.getenv("PAYPRO_UNSIGNED_TX", "")
SIGNED_TX = os.getenv("PAYPRO_SIGNED_TX", "")
WEIGHTED_SIZE = int(os.getenv("PAYPRO_WEIGHTED_SIZE", "0"))


async def main() -> int:
    keys_path = trusted_keys_path_from_env()
    if not PAYMENT_URL or keys_path is None:
        print("Set PAYPRO_PAYMENT_URL and PAYPRO_TRUSTED_KEYS_FILE in .env")
        return 1

    trust_store = TrustStore.from_file(keys_path)
    print(f"Trusted identities: {', '.join(trust_store.identities())}")

    async with PaymentProtocolClient(trust_store) as client:
        try:
            options = await client.get_payment_options(PAYMENT_URL)
            print(f"\nSigned by: {options.key_data}")
            print(json.dumps(options.response_data, indent=2))

            url = options.request_url
            selection = await client.select_payment_option(url, CHAIN, CURRENCY)
            print(f"\nInstructions for {CHAIN}/{CURRENCY or CHAIN}:")
            print(json.dumps(selection.response_data, indent=2))

            if UNSIGNED_TX:
                preview = await client.verify_unsigned_payment(
                    url,
                    CHAIN,
                    CURRENCY,
                    [{"tx": UNSIGNED_TX, "weightedSize": WEIGHTED_SIZE}],
                )
                print(f"\nPreview: {preview.response_data}")

            if SIGNED_TX:
                receipt = await client.send_signed_payment(
                    url,
                    CHAIN,
                    CURRENCY,
                    [{"tx": SIGNED_TX, "weightedSize": WEIGHTED_SIZE}],
                )
                print(f"\nPayment accepted: {receipt.response_data}")
        except PayProError as e:
            logger.error(f"Payment negotiation failed: {e}")
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
