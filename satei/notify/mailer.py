import logging
import smtplib
from email.message import EmailMessage
from typing import List

import httpx
from starlette.concurrency import run_in_threadpool

from .base import NotificationPort
from ..core.config import settings

logger = logging.getLogger(__name__)

class LogNotifier(NotificationPort):
    """
    No-op transport: writes what would have been sent to the log.
    Default when no mail backend is configured.
    """
    async def send_user(self, to: str, subject: str, html: str) -> None:
        logger.info("mail (skip) to=%s subject=%s", to, subject)

    async def send_operators(self, subject: str, text: str) -> None:
        logger.info("notify (skip) to=%s subject=%s text=%s", settings.NOTIFY_TO, subject, text)

class SmtpNotifier(NotificationPort):
    """
    Plain SMTP. Port 465 uses implicit TLS, anything else STARTTLS.
    smtplib blocks, so sends run in the thread pool.
    """
    def __init__(self, host: str, port: int, user: str | None, password: str | None,
                 sender: str, operators: List[str], timeout: float = 10):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.sender = sender
        self.operators = operators
        self.timeout = timeout

    def _send(self, to: List[str], subject: str, body: str, subtype: str) -> None:
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = ", ".join(to)
        msg["Subject"] = subject
        msg.set_content(body, subtype=subtype)

        if self.port == 465:
            server = smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
        else:
            server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        with server:
            if self.port != 465:
                server.starttls()
            if self.user and self.password:
                server.login(self.user, self.password)
            server.send_message(msg)

    async def send_user(self, to: str, subject: str, html: str) -> None:
        await run_in_threadpool(self._send, [to], subject, html, "html")

    async def send_operators(self, subject: str, text: str) -> None:
        if not self.operators:
            return
        await run_in_threadpool(self._send, self.operators, subject, text, "plain")

class HttpMailNotifier(NotificationPort):
    """
    Transactional mail API (JSON POST with a bearer key).
    Expects {from, to: [...], subject, html|text}.
    """
    def __init__(self, api_url: str, api_key: str | None, sender: str,
                 operators: List[str], timeout: float = 10,
                 transport: httpx.AsyncBaseTransport | None = None):
        self.api_url = api_url
        self.api_key = api_key
        self.sender = sender
        self.operators = operators
        self.timeout = timeout
        self.transport = transport

    async def _post(self, payload: dict) -> None:
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            r = await client.post(self.api_url, json={"from": self.sender, **payload}, headers=headers)
            r.raise_for_status()

    async def send_user(self, to: str, subject: str, html: str) -> None:
        await self._post({"to": [to], "subject": subject, "html": html})

    async def send_operators(self, subject: str, text: str) -> None:
        if not self.operators:
            return
        await self._post({"to": self.operators, "subject": subject, "text": text})

def notifier() -> NotificationPort:
    """
    Factory picks the transport from NOTIFY_PROVIDER; falls back to logging
    when the chosen backend is not configured.
    """
    provider = settings.NOTIFY_PROVIDER
    operators = settings.notify_recipients
    if provider == "smtp" and settings.SMTP_HOST:
        return SmtpNotifier(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            user=settings.SMTP_USER,
            password=settings.SMTP_PASS,
            sender=settings.MAIL_FROM,
            operators=operators,
            timeout=settings.MAIL_TIMEOUT_SECONDS,
        )
    if provider == "http" and settings.MAIL_API_URL:
        return HttpMailNotifier(
            api_url=settings.MAIL_API_URL,
            api_key=settings.MAIL_API_KEY,
            sender=settings.MAIL_FROM,
            operators=operators,
            timeout=settings.MAIL_TIMEOUT_SECONDS,
        )
    if provider != "log":
        logger.warning("notify provider %r not configured; mails will be logged only", provider)
    return LogNotifier()
