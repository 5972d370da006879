"""D-Bus service publishing the aggregate daily change to other processes.

Status-bar widgets poll the ``StatusJson`` property (or call ``Status``) and
get the four-field JSON payload; ``Activate`` asks the host to raise its
window. The well-known name doubles as a single-instance lock: if another
process already owns it, this one keeps running without serving.

This module deliberately avoids ``from __future__ import annotations``:
dbus-fast reads D-Bus type signatures from the evaluated annotations.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Final

from dbus_fast import BusType, NameFlag, RequestNameReply
from dbus_fast.aio import MessageBus
from dbus_fast.service import PropertyAccess, ServiceInterface, dbus_property, method

from Stockfin.core.aggregate import AggregateChange, build_status

logger = logging.getLogger(__name__)

BUS_NAME: Final[str] = "org.stockfin.Waybar"
OBJECT_PATH: Final[str] = "/org/stockfin"
INTERFACE_NAME: Final[str] = "org.stockfin"

ActivateCallback = Callable[[], None]


class StatusInterface(ServiceInterface):
    """The ``org.stockfin`` interface: one read-only property, two methods."""

    def __init__(self, aggregate: AggregateChange, on_activate: ActivateCallback | None) -> None:
        super().__init__(INTERFACE_NAME)
        self._aggregate = aggregate
        self._on_activate = on_activate

    def status_json(self) -> str:
        """Current payload; reads the aggregate once, no side effects."""
        return build_status(self._aggregate.get()).to_json()

    @dbus_property(access=PropertyAccess.READ, name="StatusJson")
    def status_json_property(self) -> "s":  # type: ignore[name-defined]  # noqa: F821
        return self.status_json()

    @method(name="Status")
    def status(self) -> "s":  # type: ignore[name-defined]  # noqa: F821
        return self.status_json()

    @method(name="Activate")
    def activate(self):  # type: ignore[no-untyped-def]
        logger.info("Activation requested over D-Bus")
        if self._on_activate is None:
            return
        # Run after the reply is sent, on the event loop that owns the UI
        asyncio.get_running_loop().call_soon(self._on_activate)


class StatusPublisher:
    """Owns the session-bus connection and the exported interface.

    Usage::

        publisher = StatusPublisher(aggregate, on_activate=window.present)
        if not await publisher.start():
            logger.info("Another instance is serving status")
        ...
        await publisher.stop()
    """

    def __init__(
        self,
        aggregate: AggregateChange,
        on_activate: ActivateCallback | None = None,
        *,
        bus_name: str = BUS_NAME,
        object_path: str = OBJECT_PATH,
    ) -> None:
        self._aggregate = aggregate
        self._bus_name = bus_name
        self._object_path = object_path
        self.interface = StatusInterface(aggregate, on_activate)
        self._bus: MessageBus | None = None

    @property
    def serving(self) -> bool:
        return self._bus is not None

    async def start(self) -> bool:
        """Claim the well-known name and export the interface.

        Returns False, without raising, when the session bus is unreachable
        or another process already owns the name.
        """
        if self._bus is not None:
            return True

        try:
            bus = await MessageBus(bus_type=BusType.SESSION).connect()
        except Exception as exc:  # noqa: BLE001
            logger.warning("Session bus unavailable, not serving status: %s", exc)
            return False

        try:
            reply = await bus.request_name(self._bus_name, NameFlag.DO_NOT_QUEUE)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Could not request %s, not serving status: %s", self._bus_name, exc)
            bus.disconnect()
            return False

        if reply not in (RequestNameReply.PRIMARY_OWNER, RequestNameReply.ALREADY_OWNER):
            logger.info("%s is owned by another instance, not serving status", self._bus_name)
            bus.disconnect()
            return False

        bus.export(self._object_path, self.interface)
        self._bus = bus
        logger.info("Serving %s at %s", self._bus_name, self._object_path)
        return True

    async def stop(self) -> None:
        if self._bus is None:
            return
        bus, self._bus = self._bus, None
        bus.unexport(self._object_path, self.interface)
        bus.disconnect()
        await bus.wait_for_disconnect()
        logger.info("Stopped serving %s", self._bus_name)
