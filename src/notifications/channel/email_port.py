"""Email channel port: abstract interface for order emails."""

from abc import ABC, abstractmethod


class EmailPort(ABC):
    """Abstract interface for email transports.

    Adapters report delivery problems in the returned dict rather than raising;
    the dispatcher treats an exception the same as a ``"failed"`` status.
    """

    @abstractmethod
    def send(self, to: str, subject: str, body: str, reply_to: str | None = None) -> dict:
        """Send a plain-text email.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional)
        """
        ...
