"""
Nominatim client - command line access to a Nominatim geocoding server.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import Any, List, Optional

from internal.config.manager import ConfigManager
from lib.logging_utils import initLogging
from lib.nominatim import IdentificationMethod, NominatimClient, NominatimError
from lib.utils import jsonDumps

# Configure basic logging first
logging.basicConfig(format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=logging.WARNING)
logger = logging.getLogger(__name__)


def parseArguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Query a Nominatim (OpenStreetMap) geocoding server, dood!",
    )
    parser.add_argument(
        "-c",
        "--config",
        default="nominatim.toml",
        help="Path to configuration file (default: nominatim.toml)",
    )
    parser.add_argument(
        "--config-dir",
        action="append",
        help="Directory to search for .toml config files recursively (can be specified multiple times)",
    )
    identGroup = parser.add_mutually_exclusive_group()
    identGroup.add_argument("--user-agent", help="Identify with this application name (User-Agent header)")
    identGroup.add_argument("--referer", help="Identify with this URL (Referer header)")
    parser.add_argument("--base-url", help="Nominatim server base URL (default: public OSM instance)")
    parser.add_argument("--timeout", type=float, help="Request timeout in seconds (default: 10)")
    parser.add_argument(
        "--print-config",
        action="store_true",
        help="Pretty-print loaded configuration and exit",
    )

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("status", help="Show server status")

    searchParser = subparsers.add_parser("search", help="Find places by free-form query")
    searchParser.add_argument("query", nargs="+", help="Search query, e.g. statue of liberty")

    reverseParser = subparsers.add_parser("reverse", help="Find place at coordinates")
    reverseParser.add_argument("lat", help="Latitude, e.g. 40.689249")
    reverseParser.add_argument("lon", help="Longitude, e.g. -74.044500")
    reverseParser.add_argument("--zoom", type=int, help="Address detail level (0-18)")

    lookupParser = subparsers.add_parser("lookup", help="Find places by OSM IDs")
    lookupParser.add_argument("osmIds", nargs="+", metavar="OSM_ID", help="OSM ID with type prefix, e.g. R146656")

    args = parser.parse_args(argv)
    if args.command is None and not args.print_config:
        parser.error("command is required")
    return args


def createClient(configManager: ConfigManager, args: argparse.Namespace) -> NominatimClient:
    """Create client from configuration, command line options win."""
    if args.user_agent is not None:
        ident = IdentificationMethod.fromUserAgent(args.user_agent)
    elif args.referer is not None:
        ident = IdentificationMethod.fromReferer(args.referer)
    else:
        ident = configManager.getIdentificationMethod()

    return NominatimClient(
        ident,
        baseUrl=args.base_url or configManager.getBaseUrl(),
        timeout=args.timeout if args.timeout is not None else configManager.getTimeout(),
    )


async def runCommand(client: NominatimClient, args: argparse.Namespace) -> Any:
    """Run requested command and return JSON-serializable result."""
    async with client:
        match args.command:
            case "status":
                return (await client.status()).to_dict()
            case "search":
                return [place.to_dict() for place in await client.search(" ".join(args.query))]
            case "reverse":
                return (await client.reverse(args.lat, args.lon, args.zoom)).to_dict()
            case "lookup":
                return [place.to_dict() for place in await client.lookup(args.osmIds)]
            case _:
                raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point, returns process exit code."""
    args = parseArguments(argv)

    configDirs = [os.path.abspath(d) for d in args.config_dir] if args.config_dir else None
    configManager = ConfigManager(
        os.path.abspath(args.config),
        configDirs,
        # Identification from command line is enough to run without config
        required=args.user_agent is None and args.referer is None,
    )
    initLogging(configManager.getLoggingConfig())

    if args.print_config:
        print(jsonDumps(configManager.config))
        return 0

    try:
        client = createClient(configManager, args)
        result = asyncio.run(runCommand(client, args))
    except NominatimError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    print(jsonDumps(result))
    return 0


def run() -> None:
    """Console script entry point"""
    sys.exit(main())


if __name__ == "__main__":
    run()
