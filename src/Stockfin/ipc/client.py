"""Client side of the status service, used to reach a running instance."""

from __future__ import annotations

import logging

from dbus_fast import BusType
from dbus_fast.aio import MessageBus, ProxyInterface

from Stockfin.ipc.publisher import BUS_NAME, INTERFACE_NAME, OBJECT_PATH

logger = logging.getLogger(__name__)


async def _connect_interface(bus: MessageBus, bus_name: str) -> ProxyInterface:
    introspection = await bus.introspect(bus_name, OBJECT_PATH)
    proxy = bus.get_proxy_object(bus_name, OBJECT_PATH, introspection)
    return proxy.get_interface(INTERFACE_NAME)


async def request_activate(bus_name: str = BUS_NAME) -> bool:
    """Ask a running instance to raise its window.

    Returns False when no instance owns *bus_name* or the bus is unreachable.
    """
    try:
        bus = await MessageBus(bus_type=BusType.SESSION).connect()
    except Exception as exc:  # noqa: BLE001
        logger.debug("Session bus unavailable: %s", exc)
        return False

    try:
        interface = await _connect_interface(bus, bus_name)
        await interface.call_activate()  # type: ignore[attr-defined]
    except Exception as exc:  # noqa: BLE001
        logger.debug("No running instance at %s: %s", bus_name, exc)
        return False
    finally:
        bus.disconnect()
    return True


async def fetch_status(bus_name: str = BUS_NAME) -> str | None:
    """Read the status JSON from a running instance, or None if there is none."""
    try:
        bus = await MessageBus(bus_type=BusType.SESSION).connect()
    except Exception as exc:  # noqa: BLE001
        logger.debug("Session bus unavailable: %s", exc)
        return None

    try:
        interface = await _connect_interface(bus, bus_name)
        status: str = await interface.get_status_json()  # type: ignore[attr-defined]
    except Exception as exc:  # noqa: BLE001
        logger.debug("No running instance at %s: %s", bus_name, exc)
        return None
    finally:
        bus.disconnect()
    return status
