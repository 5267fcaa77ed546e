#!/usr/bin/env python3
"""
Command-line interface for the short-link registry.

Usage:
    python shortlink_cli.py shorten <url> [--custom-code CODE] [--validity MINUTES]
    python shortlink_cli.py resolve <code>
    python shortlink_cli.py info <code>
    python shortlink_cli.py delete <code>
    python shortlink_cli.py list [--limit N]
    python shortlink_cli.py health

The CLI builds its own registry over the store, so it needs a shared store
(postgresql:// or redis://); memory:// only lives as long as one command.
Store writes are conditional, so it is safe to run next to the server.
"""

import argparse
import asyncio
import json
import sys
import os
from typing import Optional

# Add parent directories to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from app import build_registry
from config import load_config
from shortlink.errors import ErrorKind, RegistryError
from shortlink.common.logging_config import setup_logging


class ShortLinkCLI:
    """Command-line interface for the short-link registry."""

    def __init__(self, store_url: str, verbose: bool = False):
        """Initialize CLI."""
        self.config = load_config().model_copy(update={"store_url": store_url})
        self.logger = setup_logging(level="DEBUG" if verbose else "ERROR")
        self.registry = None

    async def initialize(self):
        """Open the store and build the registry."""
        self.registry = build_registry(self.config, self.logger)
        await self.registry.store.initialize()

    async def cleanup(self):
        """Cleanup resources."""
        if self.registry:
            await self.registry.close()

    @staticmethod
    def _emit(payload: dict, ok: bool = True) -> int:
        stream = sys.stdout if ok else sys.stderr
        print(json.dumps({"success": ok, **payload}, indent=2), file=stream)
        return 0 if ok else 1

    def _fail(self, error: RegistryError) -> int:
        return self._emit({"error": error.kind.value, "message": error.message}, ok=False)

    def _record_payload(self, record) -> dict:
        return {
            **record.to_dict(),
            "expired": self.registry.is_expired(record),
        }

    async def shorten(self, url: str, custom_code: Optional[str], validity: Optional[int] = None) -> int:
        if validity is None:
            validity = self.config.default_validity_minutes
        result = await self.registry.create(url, custom_code=custom_code, validity_minutes=validity)
        if isinstance(result, RegistryError):
            return self._fail(result)
        return self._emit(self._record_payload(result))

    async def resolve(self, code: str) -> int:
        """Resolve a code the way a visitor would (counts a click)."""
        result = await self.registry.resolve(code)
        if isinstance(result, RegistryError):
            return self._fail(result)
        return self._emit({"code": code, "original_url": result.url, "clicks": result.clicks})

    async def info(self, code: str) -> int:
        record = await self.registry.get(code)
        if record is None:
            return self._fail(RegistryError(ErrorKind.NOT_FOUND, f"Short code '{code}' not found"))
        return self._emit(self._record_payload(record))

    async def delete(self, code: str) -> int:
        result = await self.registry.delete(code)
        if isinstance(result, RegistryError):
            return self._fail(result)
        return self._emit({"deleted": result.code})

    async def list_links(self, limit: int) -> int:
        records = await self.registry.list(limit=limit)
        return self._emit({
            "count": len(records),
            "links": [self._record_payload(record) for record in records],
        })

    async def health(self) -> int:
        health_status = await self.registry.health_check()
        return self._emit({"health": health_status}, ok=health_status["overall"])


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Short-link registry CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL for one hour
  %(prog)s shorten https://example.com/long/url --validity 60

  # Shorten with custom code
  %(prog)s shorten https://example.com/long/url --custom-code my-link

  # Follow a code (counts a click)
  %(prog)s resolve my-link

  # List recent links
  %(prog)s list --limit 10
        """
    )

    parser.add_argument(
        "--store-url",
        default=os.getenv("STORE_URL", "memory://"),
        help="Link store URL (default: from STORE_URL env or memory://)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")
    shorten_parser.add_argument("--custom-code", help="Custom short code")
    shorten_parser.add_argument(
        "--validity",
        type=int,
        default=None,
        help="Validity in minutes, 1-1440 (default: DEFAULT_VALIDITY_MINUTES setting)"
    )

    resolve_parser = subparsers.add_parser("resolve", help="Resolve a code and count a click")
    resolve_parser.add_argument("code", help="Short code to resolve")

    info_parser = subparsers.add_parser("info", help="Show a link without counting a click")
    info_parser.add_argument("code", help="Short code to inspect")

    delete_parser = subparsers.add_parser("delete", help="Delete a link")
    delete_parser.add_argument("code", help="Short code to delete")

    list_parser = subparsers.add_parser("list", help="List links, newest first")
    list_parser.add_argument("--limit", type=int, default=100, help="Maximum number to return")

    subparsers.add_parser("health", help="Check store health")

    return parser


async def main(argv=None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    cli = ShortLinkCLI(store_url=args.store_url, verbose=args.verbose)

    try:
        await cli.initialize()

        if args.command == "shorten":
            return await cli.shorten(args.url, args.custom_code, args.validity)
        elif args.command == "resolve":
            return await cli.resolve(args.code)
        elif args.command == "info":
            return await cli.info(args.code)
        elif args.command == "delete":
            return await cli.delete(args.code)
        elif args.command == "list":
            return await cli.list_links(args.limit)
        elif args.command == "health":
            return await cli.health()
        else:
            parser.print_help()
            return 1

    except Exception as e:
        return cli._emit({"error": "unexpected", "message": str(e)}, ok=False)

    finally:
        await cli.cleanup()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
