from typing import List, Optional
from urllib.parse import urlencode

from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType
from fastapi_mail.errors import ConnectionErrors

from schooldesk.core.config import settings, get_mail_settings
from schooldesk.core.logging import logger


class EmailService:
    def __init__(self):
        """Mail is disabled, with a warning, until the mail settings are complete"""
        self.fastmail: Optional[FastMail] = None

        if not settings.mail_configured:
            logger.warning("Mail settings incomplete; outgoing mail is disabled")
            return

        mail = get_mail_settings()
        self.conf = ConnectionConfig(
            MAIL_USERNAME=mail["username"],
            MAIL_PASSWORD=mail["password"],
            MAIL_FROM=mail["from_email"],
            MAIL_PORT=mail["port"],
            MAIL_SERVER=mail["server"],
            MAIL_STARTTLS=mail["port"] == 587,
            MAIL_SSL_TLS=mail["port"] == 465,
            USE_CREDENTIALS=True,
            VALIDATE_CERTS=True,
            MAIL_FROM_NAME=mail["from_name"],
            TIMEOUT=10
        )
        self.fastmail = FastMail(self.conf)
        logger.info("FastMail client initialized successfully")

    @property
    def enabled(self) -> bool:
        return self.fastmail is not None

    async def send_email(
        self,
        recipients: List[str],
        subject: str,
        body: str,
        subtype: MessageType = MessageType.html
    ) -> bool:
        """Send one message; failures are logged and reported as False"""
        if not self.enabled:
            logger.info(f"Mail disabled; not sending '{subject}'")
            return False

        message = MessageSchema(
            subject=subject,
            recipients=recipients,
            body=body,
            subtype=subtype
        )
        try:
            await self.fastmail.send_message(message)
        except ConnectionErrors as e:
            logger.error(f"Failed to send '{subject}': {str(e)}")
            return False

        logger.info(f"Email sent successfully to {', '.join(recipients)}")
        return True

    async def send_password_reset(self, email: str, token: str) -> bool:
        link = f"{settings.PASSWORD_RESET_URL}?{urlencode({'token': token})}"
        body = f"""
        <h2>{settings.APP_NAME} password reset</h2>
        <p>We received a request to reset the password for {email}.</p>
        <p><a href="{link}">Choose a new password</a></p>
        <p>The link expires in {settings.PASSWORD_RESET_EXPIRE_MINUTES} minutes. If you did not ask for a reset, ignore this message.</p>
        """
        return await self.send_email([email], f"{settings.APP_NAME}: reset your password", body)


_email_service: Optional[EmailService] = None


def get_email_service() -> EmailService:
    """Shared instance, built on first use"""
    global _email_service
    if _email_service is None:
        _email_service = EmailService()
    return _email_service
