"""
Outbound mail contract.

Delivery is an external concern; the bundled mailer hands messages to the
structured log so flows that send mail stay testable without an SMTP server.
"""

from collections import deque
from datetime import datetime

from app.core.config import get_settings
from app.core.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()


class Mailer:
    """Sends transactional email. Replace `deliver` to use a real transport."""

    def __init__(self, sender: str | None = None):
        self.sender = sender or settings.MAIL_FROM
        self.outbox: deque[dict] = deque(maxlen=100)

    async def send_password_reset(self, email: str, name: str, otp: str, expires_at: datetime) -> None:
        body = (
            f"Hello {name},\n\n"
            f"Your password reset code is {otp}. "
            f"It expires at {expires_at:%Y-%m-%d %H:%M} UTC.\n\n"
            "If you did not request this, you can ignore this email."
        )
        await self.deliver(to=email, subject="Your password reset code", body=body)

    async def deliver(self, to: str, subject: str, body: str) -> None:
        self.outbox.append({"from": self.sender, "to": to, "subject": subject, "body": body})
        logger.info("mail_queued", to=to, subject=subject)


_mailer = Mailer()


def get_mailer() -> Mailer:
    return _mailer
