"""Status payload consumed by status-bar widgets (e.g. Waybar custom modules)."""

from pydantic import BaseModel, ConfigDict, Field

from Stockfin.models.enums import SignalDirection


class StatusPayload(BaseModel):
    """The four-field JSON object served over the IPC interface.

    ``class`` is a Python keyword, so the field is ``class_`` with an alias.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    text: str
    alt: SignalDirection
    class_: SignalDirection = Field(alias="class")
    tooltip: str

    def to_json(self) -> str:
        """Serialize with the exact wire keys: text, alt, class, tooltip."""
        return self.model_dump_json(by_alias=True)
