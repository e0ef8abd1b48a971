#!/usr/bin/python3

import argparse
import asyncio
import os
import sys
from typing import List, Optional

from debinstall import bus as dbus_util
from debinstall import config, debinstall_logging, packagekit
from debinstall.common.exception import DebinstallException, PackageQueryError, describe_error
from debinstall.installer import grant_permissions
from debinstall.package import Package, TransactionDetails

logger = debinstall_logging.init_logging("install")

EXIT_INSTALLED = 0
EXIT_NOT_INSTALLED = 1
EXIT_ERROR = 2
EXIT_NO_FILE = 3


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Install a local Debian package after polkit authorization")
    parser.add_argument("path", help="Package file to install", action="store")
    parser.add_argument(
        "-n",
        "--no-details",
        help="Do not query PackageKit for package details",
        action="store_true",
        default=False,
    )
    return parser.parse_args(argv)


async def run(path: str, query_details: bool) -> bool:
    bus = await dbus_util.connect_system_bus()
    try:
        details = TransactionDetails()
        if query_details:
            try:
                details = await packagekit.get_details_local(bus, path)
            except PackageQueryError as e:
                logger.warning("%s", describe_error(e))

        package = Package.from_details(path, details)
        if package.id:
            logger.info("Installing %s %s (%s) from %s", package.name, package.version, package.architecture, path)
        else:
            logger.info("Installing %s", path)

        return await grant_permissions(package, bus=bus)
    finally:
        bus.disconnect()


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    path = os.path.abspath(args.path)

    if not os.path.isfile(path):
        print(f"No such package file: {path}", file=sys.stderr)
        return EXIT_NO_FILE

    query_details = not args.no_details and config.getboolean("installer", "query_details", fallback=True)

    try:
        installed = asyncio.run(run(path, query_details))
    except DebinstallException as e:
        print(describe_error(e), file=sys.stderr)
        return EXIT_ERROR

    if not installed:
        print(f"{path} was not installed: installation did not start", file=sys.stderr)
        return EXIT_NOT_INSTALLED

    print(f"Installed {path}")
    return EXIT_INSTALLED


if __name__ == "__main__":
    try:
        sys.exit(main())
    except Exception as e:
        logger.exception(e)
        sys.exit(-1)
