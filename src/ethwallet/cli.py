"""Command line interface for the wallet.

Usage:
    ethwallet keygen                 # print a new MASTER_KEY
    ethwallet generate --save        # create and store a new wallet
    ethwallet import --save          # prompts for the seed phrase
    ethwallet balance [ADDRESS]      # defaults to the stored wallet
    ethwallet checksum ADDRESS
    ethwallet show
    ethwallet forget
"""

import argparse
import asyncio
import logging
import sys
from getpass import getpass
from typing import Optional

from ethwallet.config import get_settings
from ethwallet.crypto import generate_master_key
from ethwallet.hdwallet import eth
from ethwallet.hdwallet.base import InvalidMnemonicError, WalletRecord
from ethwallet.services.balance_resolver import get_balance_resolver
from ethwallet.services.wallet_service import WalletService
from ethwallet.storage import StorageError, get_wallet_storage


def _print_wallet(wallet: WalletRecord, reveal: bool) -> None:
    print("=" * 60)
    print(f"Address:     {wallet.address}")
    print(f"Path:        {eth.get_derivation_path()}")
    if reveal:
        print(f"Mnemonic:    {wallet.mnemonic}")
        print(f"Private key: {wallet.private_key}")
        print("=" * 60)
        print("Write the mnemonic down and keep it offline.")
    else:
        print("=" * 60)


def _open_service() -> Optional[WalletService]:
    try:
        return WalletService(get_wallet_storage())
    except StorageError as e:
        print(f"Error: {e}")
        return None


def cmd_keygen(args: argparse.Namespace) -> int:
    print("Add this to your .env file:")
    print(f"MASTER_KEY={generate_master_key()}")
    return 0


def cmd_generate(args: argparse.Namespace) -> int:
    if args.save:
        service = _open_service()
        if service is None:
            return 1
        try:
            wallet = service.create_wallet(args.words)
        except StorageError as e:
            print(f"Error: {e}")
            return 1
    else:
        wallet = eth.generate_wallet(args.words)

    _print_wallet(wallet, reveal=True)
    return 0


def cmd_import(args: argparse.Namespace) -> int:
    if args.phrase:
        phrase = " ".join(args.phrase)
    else:
        print("Enter your seed phrase (12 or 24 words):")
        phrase = getpass("Seed phrase: ")

    try:
        if args.save:
            service = _open_service()
            if service is None:
                return 1
            wallet = service.import_wallet(phrase)
        else:
            wallet = eth.import_wallet(phrase)
    except (InvalidMnemonicError, StorageError) as e:
        print(f"Error: {e}")
        return 1

    _print_wallet(wallet, reveal=False)
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    service = _open_service()
    if service is None:
        return 1
    wallet = service.load()
    if wallet is None:
        print("No wallet stored. Run `ethwallet generate --save` or `ethwallet import --save`.")
        return 1
    _print_wallet(wallet, reveal=args.reveal)
    return 0


def cmd_forget(args: argparse.Namespace) -> int:
    service = _open_service()
    if service is None:
        return 1
    service.clear_wallet()
    service.storage.reset_onboarding()
    print("Wallet removed from local storage.")
    return 0


def cmd_checksum(args: argparse.Namespace) -> int:
    try:
        print(eth.to_checksum_address(args.address))
    except ValueError as e:
        print(f"Error: {e}")
        return 1
    return 0


def cmd_balance(args: argparse.Namespace) -> int:
    if args.address:
        address = args.address
        result = asyncio.run(get_balance_resolver().get_balance(address))
    else:
        service = _open_service()
        if service is None or service.load() is None:
            print("Error: no address given and no wallet stored")
            return 1
        address = service.wallet.address
        result = asyncio.run(service.refresh_balance())

    if not result.success:
        print(f"Error ({result.error_kind.value}): {result.error}")
        return 1

    print(f"{address}: {result.display}")
    print(f"  {result.raw_balance_wei} wei via {result.succeeded_endpoint}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ethwallet", description="Lightweight Ethereum wallet")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("keygen", help="Generate a master key for the wallet store")
    p.set_defaults(func=cmd_keygen)

    p = sub.add_parser("generate", help="Create a new wallet")
    p.add_argument("--words", type=int, choices=[12, 24], default=12,
                   help="Mnemonic length")
    p.add_argument("--save", action="store_true", help="Store the wallet")
    p.set_defaults(func=cmd_generate)

    p = sub.add_parser("import", help="Restore a wallet from its seed phrase")
    p.add_argument("phrase", nargs="*", help="Seed phrase (prompted if omitted)")
    p.add_argument("--save", action="store_true", help="Store the wallet")
    p.set_defaults(func=cmd_import)

    p = sub.add_parser("show", help="Show the stored wallet")
    p.add_argument("--reveal", action="store_true",
                   help="Also print mnemonic and private key")
    p.set_defaults(func=cmd_show)

    p = sub.add_parser("forget", help="Delete the stored wallet")
    p.set_defaults(func=cmd_forget)

    p = sub.add_parser("checksum", help="Print the EIP-55 form of an address")
    p.add_argument("address")
    p.set_defaults(func=cmd_checksum)

    p = sub.add_parser("balance", help="Fetch the ETH balance of an address")
    p.add_argument("address", nargs="?", help="Address (default: stored wallet)")
    p.set_defaults(func=cmd_balance)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    settings = get_settings()
    log_level = logging.DEBUG if (args.verbose or settings.debug) else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
