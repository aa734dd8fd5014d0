from typing import Protocol

class NotificationPort(Protocol):
    """
    Outbound notifications. Implementations must raise on delivery failure;
    callers decide whether a failure matters.
    """
    async def send_user(self, to: str, subject: str, html: str) -> None: ...
    async def send_operators(self, subject: str, text: str) -> None: ...
