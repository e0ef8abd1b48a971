"""Installation driver for aptdaemon.

Opens an install transaction for a local package file and runs it. Failures
before the transaction is running are reported as ``False`` ("never got to
try"); a failing ``Run`` raises ``TransactionRunError`` ("tried and it
broke").
"""

import enum
from typing import Any

from debinstall import bus as dbus_util
from debinstall import debinstall_logging, introspection
from debinstall.common.exception import TransactionRunError
from debinstall.package import Package

logger = debinstall_logging.init_logging("aptdaemon")

APTDAEMON_BUS_NAME = "org.debian.apt"
APTDAEMON_PATH = "/org/debian/apt"
APTDAEMON_INTERFACE = "org.debian.apt"
APTDAEMON_TRANSACTION_INTERFACE = "org.debian.apt.transaction"


class TransactionState(enum.Enum):
    CREATED = "created"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def get_daemon(bus: Any) -> dbus_util.ProxyResult:
    return dbus_util.get_interface(
        bus, APTDAEMON_BUS_NAME, APTDAEMON_PATH, APTDAEMON_INTERFACE, introspection.APTDAEMON
    )


def get_transaction(bus: Any, transaction_path: str) -> dbus_util.ProxyResult:
    return dbus_util.get_interface(
        bus,
        APTDAEMON_BUS_NAME,
        transaction_path,
        APTDAEMON_TRANSACTION_INTERFACE,
        introspection.APTDAEMON_TRANSACTION,
    )


async def install_file(bus: Any, package: Package) -> bool:
    """Install ``package`` through aptdaemon.

    Must only be called once the caller has been authorized.

    Returns:
        True when the transaction ran successfully, False when the daemon or
        the transaction could not be reached

    Raises:
        TransactionRunError: If the transaction was started and failed
    """
    daemon = get_daemon(bus)
    if isinstance(daemon, dbus_util.Unavailable):
        logger.warning("aptdaemon is unavailable, %s was not installed", package.path)
        return False

    try:
        transaction_path = await daemon.interface.call_install_file(package.path, False)
    except Exception as e:
        logger.warning("aptdaemon refused to create a transaction for %s: %s", package.path, e)
        return False

    transaction = get_transaction(bus, transaction_path)
    if isinstance(transaction, dbus_util.Unavailable):
        logger.warning("Transaction %s for %s is unavailable", transaction_path, package.path)
        return False

    logger.info("Transaction %s %s for %s", transaction_path, TransactionState.CREATED.value, package.path)

    logger.debug("Transaction %s %s", transaction_path, TransactionState.RUNNING.value)
    try:
        await transaction.interface.call_run()
    except Exception as e:
        logger.error("Transaction %s %s: %s", transaction_path, TransactionState.FAILED.value, e)
        raise TransactionRunError() from e

    logger.info("Transaction %s %s", transaction_path, TransactionState.SUCCEEDED.value)
    return True
