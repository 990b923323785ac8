"""Decoder for inspect events carried over the page console.

The inspect script reports clicks by logging a line made of a fixed prefix
followed by a JSON object ``{"type": ..., "data": ...}``. Every other console
line belongs to the page and is ignored. Lines that carry the prefix but do
not decode are dropped: the channel is best-effort and never raises.
"""

import json
from dataclasses import dataclass, field

import structlog

from ..models import ScrapedElement
from ..scripts import CSS_INSPECT_PREFIX

logger = structlog.get_logger()


@dataclass
class InspectMessage:
    """One decoded event from the inspected page."""

    type: str
    data: dict = field(default_factory=dict)


class InspectChannel:
    """Parses prefixed console lines into inspect messages."""

    CLICK = "inspect-click"
    CANCEL = "inspect-cancel"

    def __init__(self, prefix: str = CSS_INSPECT_PREFIX):
        self.prefix = prefix

    def decode(self, text: str) -> InspectMessage | None:
        """Return the message carried by ``text``, or None if it is not one."""
        if not isinstance(text, str) or not text.startswith(self.prefix):
            return None

        try:
            payload = json.loads(text[len(self.prefix):])
        except ValueError:
            logger.debug("Dropped malformed inspect message")
            return None

        if not isinstance(payload, dict) or not isinstance(payload.get("type"), str):
            logger.debug("Dropped inspect message without type")
            return None

        data = payload.get("data")
        return InspectMessage(type=payload["type"], data=data if isinstance(data, dict) else {})

    def decode_click(self, message: InspectMessage) -> ScrapedElement | None:
        """Extract the clicked element from an ``inspect-click`` message."""
        if message.type != self.CLICK:
            return None
        try:
            return ScrapedElement.from_dict(message.data)
        except ValueError as e:
            logger.debug("Dropped inspect click with invalid element", error=str(e))
            return None
