"""Package metadata lookup through PackageKit.

Produces the ``TransactionDetails`` record a ``Package`` is built from by
running a ``GetDetailsLocal`` transaction for a local package file.
"""

import asyncio
from typing import Any, Dict, List, Tuple

from debinstall import bus as dbus_util
from debinstall import debinstall_logging, introspection
from debinstall.common.exception import PackageQueryError
from debinstall.package import TransactionDetails

logger = debinstall_logging.init_logging("packagekit")

PACKAGEKIT_BUS_NAME = "org.freedesktop.PackageKit"
PACKAGEKIT_PATH = "/org/freedesktop/PackageKit"
PACKAGEKIT_INTERFACE = "org.freedesktop.PackageKit"
PACKAGEKIT_TRANSACTION_INTERFACE = "org.freedesktop.PackageKit.Transaction"

# PkExitEnum
EXIT_SUCCESS = 1


def _unwrap(value: Any) -> Any:
    # Signal arguments of type v arrive as Variant objects
    return getattr(value, "value", value)


def details_from_signal(data: Dict[str, Any]) -> TransactionDetails:
    """Convert the a{sv} map of a Details signal, missing keys become empty strings"""

    def text(key: str) -> str:
        value = _unwrap(data.get(key, ""))
        return "" if value is None else str(value)

    return TransactionDetails(
        package_id=text("package-id"),
        summary=text("summary"),
        description=text("description"),
        url=text("url"),
        license=text("license"),
        size=text("size"),
    )


async def get_details_local(bus: Any, path: str) -> TransactionDetails:
    """Query PackageKit for the details of the package file at ``path``.

    Raises:
        PackageQueryError: If PackageKit is unavailable, reports an error, or
            finishes without details
    """
    daemon = dbus_util.get_interface(
        bus, PACKAGEKIT_BUS_NAME, PACKAGEKIT_PATH, PACKAGEKIT_INTERFACE, introspection.PACKAGEKIT
    )
    if isinstance(daemon, dbus_util.Unavailable):
        raise PackageQueryError(f"PackageKit is unavailable: {daemon.reason}") from daemon.error

    try:
        transaction_path = await daemon.interface.call_create_transaction()
    except Exception as e:
        raise PackageQueryError("Could not create PackageKit transaction") from e

    transaction = dbus_util.get_interface(
        bus,
        PACKAGEKIT_BUS_NAME,
        transaction_path,
        PACKAGEKIT_TRANSACTION_INTERFACE,
        introspection.PACKAGEKIT_TRANSACTION,
    )
    if isinstance(transaction, dbus_util.Unavailable):
        raise PackageQueryError(
            f"PackageKit transaction {transaction_path} is unavailable: {transaction.reason}"
        ) from transaction.error

    iface = transaction.interface
    finished: "asyncio.Future[int]" = asyncio.get_running_loop().create_future()
    details: List[TransactionDetails] = []
    errors: List[Tuple[int, str]] = []

    def on_details(data: Dict[str, Any]) -> None:
        details.append(details_from_signal(data))

    def on_error_code(code: int, message: str) -> None:
        errors.append((code, message))

    def on_finished(exit_code: int, _runtime: int) -> None:
        if not finished.done():
            finished.set_result(exit_code)

    iface.on_details(on_details)
    iface.on_error_code(on_error_code)
    iface.on_finished(on_finished)

    try:
        try:
            await iface.call_get_details_local([path])
        except Exception as e:
            raise PackageQueryError(f"Could not get details of {path}") from e

        exit_code = await finished
    finally:
        iface.off_details(on_details)
        iface.off_error_code(on_error_code)
        iface.off_finished(on_finished)

    if errors:
        code, message = errors[0]
        raise PackageQueryError(f"PackageKit error {code} for {path}: {message}")
    if exit_code != EXIT_SUCCESS:
        raise PackageQueryError(f"PackageKit transaction for {path} finished with exit code {exit_code}")
    if not details:
        raise PackageQueryError(f"PackageKit returned no details for {path}")

    logger.debug("PackageKit details for %s: %s", path, details[0].package_id)
    return details[0]
