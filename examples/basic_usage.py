"""Basic usage example for the Cosmos adapter SDK.

Reads credentials from COSMOS_* environment variables (or a .env file).
"""

import asyncio
import logging

from cosmos_adapter import Credentials, Dispatcher, EventSubscription, Resource, Wallet
from cosmos_adapter.queries import EventCategory

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


async def main():
    """Main example function."""
    credentials = Credentials.from_env()

    # 1. Derive the signing address when a mnemonic is configured
    if credentials.mnemonic:
        wallet = Wallet.from_mnemonic(
            credentials.mnemonic, hd_path=credentials.hd_path, prefix=credentials.profile.prefix
        )
        print(f"Wallet address: {wallet.address}")
    else:
        print(f"Generated mnemonic: {Wallet.generate_mnemonic()}")

    async with Dispatcher(credentials) as dispatcher:
        # 2. Node status over JSON-RPC
        [status] = await dispatcher.execute(Resource.TENDERMINT, "getStatus", [{}])
        print(f"Connected to chain: {status['node_info']['network']}")

        # 3. Bonded validators over the REST gateway
        [validators] = await dispatcher.execute(Resource.STAKING, "getValidators", [{}])
        print(f"Bonded validators: {len(validators['validators'])}")

        # 4. Known IBC destinations
        [destinations] = await dispatcher.execute(
            Resource.IBC_TRANSFER, "getAvailableDestinations", [{}]
        )
        print(f"IBC destinations: {destinations['count']}")

    # 5. Watch a few new blocks
    received = asyncio.Event()

    def on_block(event):
        print(f"{event.timestamp} {event.type}")
        received.set()

    async with EventSubscription.from_credentials(credentials, EventCategory.NEW_BLOCK, on_block):
        await asyncio.wait_for(received.wait(), timeout=60)


if __name__ == "__main__":
    asyncio.run(main())
