"""
Outbound message description and the transport boundary used by core services.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence, Union


@dataclass(frozen=True)
class Action:
    """A labeled button: either a callback token or a URL."""
    label: str
    token: Optional[str] = None
    url: Optional[str] = None


Keyboard = List[List[Action]]
ChatId = Union[int, str]


@dataclass
class Reply:
    """What the bot should say back for one inbound event."""
    text: str = ""
    keyboard: Keyboard = field(default_factory=list)
    # Ephemeral acknowledgement for button presses
    toast: Optional[str] = None
    alert: bool = False


class DeliveryFailed(Exception):
    """The messaging platform refused or failed to deliver a message."""


class Transport(Protocol):
    async def send_message(self, chat_id: ChatId, text: str, keyboard: Sequence[Sequence[Action]] = ()) -> int:
        """Send a message and return its message id. Raises DeliveryFailed."""
        ...

    async def edit_keyboard(self, chat_id: ChatId, message_id: int, keyboard: Sequence[Sequence[Action]]) -> None:
        """Replace the buttons of an existing message. Raises DeliveryFailed."""
        ...
