"""Email delivery exceptions."""

from __future__ import annotations

from utilities.errors import DomainError


class EmailDeliveryError(DomainError):
    """The code could not be delivered to the recipient."""

    def __init__(self, reason: str) -> None:
        super().__init__("Failed to send email.", reason=reason)
        self.reason = reason
