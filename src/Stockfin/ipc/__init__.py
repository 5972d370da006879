"""Session-bus status service and client helpers.

Re-exports the public IPC surface:
    from Stockfin.ipc import StatusPublisher, request_activate, fetch_status
"""

from Stockfin.ipc.client import fetch_status, request_activate
from Stockfin.ipc.publisher import (
    BUS_NAME,
    INTERFACE_NAME,
    OBJECT_PATH,
    StatusInterface,
    StatusPublisher,
)

__all__ = [
    "BUS_NAME",
    "INTERFACE_NAME",
    "OBJECT_PATH",
    "StatusInterface",
    "StatusPublisher",
    "fetch_status",
    "request_activate",
]
