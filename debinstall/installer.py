import os
from typing import Any, Optional

from debinstall import aptdaemon, debinstall_logging, polkit
from debinstall import bus as dbus_util
from debinstall.common.exception import PermissionDenied
from debinstall.package import Package

logger = debinstall_logging.init_logging("installer")


async def grant_permissions(package: Package, pid: Optional[int] = None, bus: Optional[Any] = None) -> bool:
    """Authorize the calling process and install ``package``.

    The installation only runs after polkit granted the install-file action
    for ``pid`` (the current process when not given). When no ``bus`` is
    supplied a system bus connection is opened for this attempt and closed
    afterwards. Records logged during the attempt carry its attempt id.

    Returns:
        The installation result: True if installed, False if the package
        daemon could not be reached

    Raises:
        BusConnectionError: If the system bus cannot be reached
        SubjectConstructionError, AuthorizationCheckError: If polkit could not decide
        PermissionDenied: If polkit denied the action
        TransactionRunError: If the install transaction failed
    """
    if pid is None:
        pid = os.getpid()

    with debinstall_logging.attempt():
        logger.info("Installing %s for pid %d", package.path, pid)

        owns_bus = bus is None
        if bus is None:
            bus = await dbus_util.connect_system_bus()

        try:
            permitted = await polkit.check_permission(bus, pid, polkit.INSTALL_FILE_ACTION)
            if not permitted:
                raise PermissionDenied()

            return await aptdaemon.install_file(bus, package)
        finally:
            if owns_bus:
                bus.disconnect()
