"""System bus connection and proxy acquisition.

All proxies of one installation attempt share a single system bus connection.
Acquiring a proxy never raises: it returns either ``Connected`` carrying the
bound interface or ``Unavailable`` carrying the error, so callers decide
explicitly whether an unreachable service is a soft or a hard failure.
"""

from dataclasses import dataclass
from typing import Any, Union

from dbus_fast import BusType
from dbus_fast.aio import MessageBus, ProxyInterface

from debinstall import debinstall_logging
from debinstall.common.exception import BusConnectionError

logger = debinstall_logging.init_logging("bus")


@dataclass(frozen=True)
class Connected:
    interface: ProxyInterface


@dataclass(frozen=True)
class Unavailable:
    error: Exception

    @property
    def reason(self) -> str:
        return str(self.error) or type(self.error).__name__


ProxyResult = Union[Connected, Unavailable]


async def connect_system_bus() -> MessageBus:
    """Connect to the system bus.

    Raises:
        BusConnectionError: if the bus cannot be reached; this is not retried
    """
    try:
        bus = await MessageBus(bus_type=BusType.SYSTEM).connect()
    except Exception as e:
        logger.error("Could not connect to the system bus: %s", e)
        raise BusConnectionError() from e

    logger.debug("Connected to the system bus as %s", bus.unique_name)
    return bus


def get_interface(bus: Any, bus_name: str, object_path: str, interface_name: str, introspection: str) -> ProxyResult:
    """Bind a proxy to ``interface_name`` of the object at ``object_path``.

    The proxy is built from the static ``introspection`` XML, so nothing is
    sent on the bus; a service that is missing or hung only shows up when a
    method is called. An invalid name or path, or an interface missing from
    ``introspection``, results in ``Unavailable``.
    """
    try:
        proxy_object = bus.get_proxy_object(bus_name, object_path, introspection)
        interface = proxy_object.get_interface(interface_name)
    except Exception as e:
        logger.warning("Interface %s on %s%s is unavailable: %s", interface_name, bus_name, object_path, e)
        return Unavailable(e)

    return Connected(interface)
