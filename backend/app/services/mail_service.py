"""
Mail Service

Sends the account activation and password reset mails over SMTP.
smtplib is blocking, so delivery runs in a worker thread.

Any transport failure is raised as UpstreamDeliveryError; callers treat it as
fatal to the operation that triggered the mail and roll that operation back.
"""
import asyncio
import logging
import smtplib
from email.message import EmailMessage

from app.config import settings
from app.core.exceptions import UpstreamDeliveryError
from app.models.user import User

logger = logging.getLogger("uvicorn.error")


class MailService:
    def __init__(
        self,
        host: str = settings.smtp_host,
        port: int = settings.smtp_port,
        username: str | None = settings.smtp_user,
        password: str | None = settings.smtp_password,
        sender: str = settings.mail_from,
        frontend_url: str = settings.frontend_url,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender
        self.frontend_url = frontend_url.rstrip("/")

    async def send_account_activation(self, user: User) -> None:
        link = f"{self.frontend_url}/#/login?token={user.activation_token}"
        html = (
            "<div><b>Please click below link to activate your account</b></div>"
            f'<div><a href="{link}">Activate</a></div>'
        )
        await self.send(user.email, "Account Activation", html)

    async def send_password_reset(self, user: User) -> None:
        link = f"{self.frontend_url}/#/password-reset?reset={user.password_reset_token}"
        html = (
            "<div><b>Please click below link to reset your password</b></div>"
            f'<div><a href="{link}">Reset</a></div>'
        )
        await self.send(user.email, "Password Reset", html)

    async def send(self, to: str, subject: str, html: str) -> None:
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content(html, subtype="html")
        try:
            await asyncio.to_thread(self._deliver, msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("[mail] delivery to %s failed: %s", to, e)
            raise UpstreamDeliveryError() from e

    def _deliver(self, msg: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=10) as smtp:
            if self.username and self.password:
                smtp.starttls()
                smtp.login(self.username, self.password)
            smtp.send_message(msg)


mail_service = MailService()
