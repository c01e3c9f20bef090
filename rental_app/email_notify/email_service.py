import asyncio
import html
import logging
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr

import aiosmtplib

from core.breaker import email_breaker
from core.settings import settings

logger = logging.getLogger(__name__)


def build_message(to: str, subject: str, text: str) -> MIMEMultipart:
    body = html.escape(text).replace("\n", "<br>")
    html_content = f"""
    <html>
    <body style="font-family: Arial, sans-serif; line-height: 1.6;">
        <h2>{html.escape(subject)}</h2>
        <p>{body}</p>
        <p>Best regards,<br>{html.escape(settings.EMAIL_SENDER_NAME)}</p>
    </body>
    </html>
    """

    message = MIMEMultipart("alternative")
    message["Subject"] = subject
    message["From"] = formataddr((settings.EMAIL_SENDER_NAME, settings.EMAIL_USER or ""))
    message["To"] = to
    message.attach(MIMEText(text, "plain"))
    message.attach(MIMEText(html_content, "html"))
    return message


async def send_email(to: str, subject: str, text: str):
    async def handler():
        message = build_message(to, subject, text)
        try:
            await aiosmtplib.send(
                message,
                hostname=settings.EMAIL_SERVER,
                port=settings.EMAIL_PORT,
                username=settings.EMAIL_USER,
                password=settings.EMAIL_PASSWORD,
                start_tls=settings.EMAIL_USE_TLS,
            )
        except Exception as e:
            logger.error(f"Error sending email to {to}: {e}")
            raise

    return await email_breaker.call(handler)


async def send_bulk_email(recipients: list[str], subject: str, text: str) -> int:
    """Sends concurrently; returns how many messages were accepted."""
    results = await asyncio.gather(
        *(send_email(to, subject, text) for to in recipients),
        return_exceptions=True,
    )
    failures = [r for r in results if isinstance(r, Exception)]
    if failures:
        logger.warning(
            "Bulk email: %d of %d sends failed", len(failures), len(recipients)
        )
        if len(failures) == len(recipients):
            raise failures[0]
    return len(recipients) - len(failures)
