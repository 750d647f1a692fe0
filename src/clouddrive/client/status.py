"""Transient status messages shown to the user after each action."""
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple

SUCCESS_MESSAGE_TTL_SECONDS = 5.0


class StatusKind(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class StatusMessage:
    kind: StatusKind
    text: str
    # (label, url) pairs rendered after the text, e.g. the files of an upload
    links: List[Tuple[str, str]] = field(default_factory=list)
    created_at: float = field(default_factory=time.monotonic)

    def render(self) -> str:
        if not self.links:
            return self.text
        links = ", ".join(f"{label} <{url}>" for label, url in self.links)
        return f"{self.text} {links}"


class StatusBoard:
    """
    Dismissable status messages.

    Success messages expire on their own after a few seconds; info and error
    messages stay until dismissed or cleared.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._messages: List[StatusMessage] = []

    def post(self, kind: StatusKind, text: str, links: Optional[List[Tuple[str, str]]] = None) -> StatusMessage:
        message = StatusMessage(kind=kind, text=text, links=list(links or []), created_at=self._clock())
        self._messages.append(message)
        return message

    def info(self, text: str, links: Optional[List[Tuple[str, str]]] = None) -> StatusMessage:
        return self.post(StatusKind.INFO, text, links)

    def success(self, text: str) -> StatusMessage:
        return self.post(StatusKind.SUCCESS, text)

    def error(self, text: str) -> StatusMessage:
        return self.post(StatusKind.ERROR, text)

    def dismiss(self, message: StatusMessage) -> None:
        if message in self._messages:
            self._messages.remove(message)

    def clear(self) -> None:
        self._messages.clear()

    @property
    def messages(self) -> List[StatusMessage]:
        now = self._clock()
        self._messages = [
            message
            for message in self._messages
            if message.kind is not StatusKind.SUCCESS
            or now - message.created_at < SUCCESS_MESSAGE_TTL_SECONDS
        ]
        return list(self._messages)
