"""Artfi whitelist against a running node.

This example signs a fraction with the whitelister key, checks it with the
contract's ``verify1`` and redeems it with ``doWhitelist``.

Prerequisites:
1. pip install artfi-whitelist-sdk
2. Deploy MockToken, ArtfiNFT and ArtfiWhitelist (whitelister = deployer)
3. Mint tokens to the buyer and approve the whitelist contract
4. Set environment variables (or a .env file):
   PRIVATE_KEY, BUYER_PRIVATE_KEY, ARTFI_WHITELIST_ADDRESS, ARTFI_TOKEN_ADDRESS,
   optionally ARTFI_NETWORK (default: hardhat)

Usage:
    python whitelist_on_hardhat.py
"""

import asyncio
import logging
import os

from dotenv import load_dotenv

load_dotenv()


async def main():
    from eth_account import Account

    from artfi_whitelist_sdk import (
        WhitelistClient,
        configure_logging,
        create_fraction,
        format_units,
        load_config_from_env,
        load_private_key_from_env,
        parse_units,
        sign_fraction,
    )

    configure_logging(logging.INFO)

    required = [
        "PRIVATE_KEY",
        "BUYER_PRIVATE_KEY",
        "ARTFI_WHITELIST_ADDRESS",
        "ARTFI_TOKEN_ADDRESS",
    ]
    missing = [var for var in required if not os.environ.get(var)]
    if missing:
        print(f"Missing required environment variables: {', '.join(missing)}")
        return

    owner_key = load_private_key_from_env()
    buyer_key = load_private_key_from_env("BUYER_PRIVATE_KEY")
    token = os.environ["ARTFI_TOKEN_ADDRESS"]
    buyer = Account.from_key(buyer_key).address

    client = WhitelistClient(load_config_from_env())
    config = client.get_config()

    print("=" * 60)
    print("  ARTFI WHITELIST")
    print("=" * 60)

    try:
        chain_id = await client.chain_id()
        if chain_id != config.chain_id:
            raise RuntimeError(
                f"Node reports chain {chain_id}, expected {config.chain_id} ({config.network})"
            )

        print("\n[1] Accepting payment token...")
        tx_hash = await client.update_token(owner_key, token, True)
        await client.wait_for_receipt(tx_hash)
        print(f"    Token: {token}")

        print("\n[2] Signing fraction as whitelister...")
        price = parse_units("100")
        fraction = create_fraction(buyer, "1,3,5", price)
        signed = sign_fraction(
            private_key=owner_key,
            whitelist_address=client.whitelist_address,
            fraction=fraction,
            chain_id=config.chain_id,
        )
        print(f"    Buyer: {buyer}")
        print(f"    Price: {format_units(price)}")

        print("\n[3] Checking signature on-chain...")
        recovered = await client.verify(buyer, price, "1,3,5", signed.signature)
        whitelister = await client.whitelister()
        if recovered != whitelister:
            raise RuntimeError(f"verify1 returned {recovered}, whitelister is {whitelister}")
        print(f"    Whitelister: {whitelister}")

        print("\n[4] Redeeming fraction slot 1...")
        tx_hash = await client.do_whitelist(
            private_key=buyer_key,
            token=token,
            amount=price,
            fraction_id=1,
            fraction_info="1,3,5",
            signature=signed.signature,
        )
        receipt = await client.wait_for_receipt(tx_hash)
        print(f"    Mined in block {int(receipt['blockNumber'], 16)}")

    except Exception as e:
        print(f"\nError: {e}")
        raise

    finally:
        await client.close()


if __name__ == "__main__":
    asyncio.run(main())
