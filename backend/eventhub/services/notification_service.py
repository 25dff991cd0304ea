"""
Best-effort registration confirmation email over SMTP.

The mailer raises NotificationError on any delivery failure.
`notify_registration` is the only caller-facing entry point: it turns every
failure into NotificationOutcome.FAILED so the registration flow can report
what happened without ever failing because of mail.
"""

import smtplib
import ssl
from email.errors import MessageError
from email.mime.text import MIMEText
from email.utils import parseaddr
from typing import Optional

from starlette.concurrency import run_in_threadpool

from eventhub.core.config import Settings, get_settings
from eventhub.core.exceptions import NotificationError
from eventhub.core.metrics import record_notification
from eventhub.core.logging import get_logger
from eventhub.schemas.registration import NotificationOutcome

logger = get_logger(__name__)


class Mailer:
    """Thin synchronous SMTP client: one connection per message."""

    def __init__(
        self,
        host: str,
        port: int,
        secure: bool,
        username: Optional[str],
        password: Optional[str],
        from_address: str,
        timeout: int = 10,
    ):
        self.host = host
        self.port = port
        self.secure = secure
        self.username = username
        self.password = password
        self.from_address = from_address
        self.timeout = timeout

    def _connect(self) -> smtplib.SMTP:
        if self.secure:
            return smtplib.SMTP_SSL(
                self.host, self.port, timeout=self.timeout, context=ssl.create_default_context()
            )

        server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        server.ehlo()
        if server.has_extn("starttls"):
            server.starttls(context=ssl.create_default_context())
            server.ehlo()
        return server

    def _message(self, to: str, subject: str, body: str) -> str:
        msg = MIMEText(body, "plain", "utf-8")
        msg["From"] = self.from_address
        msg["To"] = to
        msg["Subject"] = subject
        return msg.as_string()

    def send(self, to: str, subject: str, body: str) -> None:
        # Header injection in a user-supplied address fails here, before any connection
        try:
            message = self._message(to, subject, body)
        except (MessageError, ValueError) as e:
            raise NotificationError(f"Cannot build message for {to!r}: {e}") from e

        try:
            with self._connect() as server:
                if self.username and self.password:
                    server.login(self.username, self.password)
                server.sendmail(parseaddr(self.from_address)[1], [to], message)
        except (smtplib.SMTPException, OSError, UnicodeError) as e:
            raise NotificationError(f"SMTP delivery to {to!r} failed: {e}") from e


def build_mailer(settings: Settings) -> Optional[Mailer]:
    """Returns None when no SMTP host is configured; mail is then skipped."""
    if not settings.SMTP_HOST:
        return None

    return Mailer(
        host=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        secure=settings.SMTP_SECURE,
        username=settings.SMTP_USER,
        password=settings.SMTP_PASS,
        from_address=settings.MAIL_FROM,
        timeout=settings.SMTP_TIMEOUT,
    )


def get_mailer() -> Optional[Mailer]:
    """FastAPI dependency; overridden in tests."""
    return build_mailer(get_settings())


def registration_email(event_title: str, starts_at: str, location: str, link: str) -> tuple[str, str]:
    subject = f"Registration confirmed: {event_title}"
    body = (
        "You're registered ✅\n"
        "\n"
        f"Event: {event_title}\n"
        f"When: {starts_at}\n"
        f"Where: {location}\n"
        "\n"
        f"View event: {link}\n"
    )
    return subject, body


async def send_registration_email(
    mailer: Optional[Mailer],
    to_address: str,
    event_title: str,
    starts_at: str,
    location: str,
    link: str,
) -> bool:
    """
    Send the confirmation. Returns False without doing anything when no
    mailer is configured. Raises NotificationError on delivery failure.
    """
    if mailer is None:
        return False

    subject, body = registration_email(event_title, starts_at, location, link)
    # smtplib blocks; keep it off the event loop
    await run_in_threadpool(mailer.send, to_address, subject, body)
    return True


async def notify_registration(
    mailer: Optional[Mailer],
    to_address: str,
    event_title: str,
    starts_at: str,
    location: str,
    link: str,
) -> NotificationOutcome:
    try:
        sent = await send_registration_email(mailer, to_address, event_title, starts_at, location, link)
    except NotificationError as e:
        logger.warning("registration_email_failed", to=to_address, error=str(e))
        outcome = NotificationOutcome.FAILED
    except Exception as e:
        # The registration is already committed; mail must not turn it into a 500
        logger.exception("registration_email_failed", to=to_address, error=str(e))
        outcome = NotificationOutcome.FAILED
    else:
        outcome = NotificationOutcome.SENT if sent else NotificationOutcome.SKIPPED
        logger.info("registration_email", to=to_address, outcome=outcome.value)

    record_notification(outcome.value)
    return outcome
