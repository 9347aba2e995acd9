# storeit/utils/mailer.py
import logging

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from .. import config

logger = logging.getLogger(__name__)


def send_otp_email_sendgrid(to_email: str, code: str) -> None:
    """Email the OTP code. Raises whatever SendGrid raises."""
    if not config.SENDGRID_API_KEY:
        logger.warning("SendGrid is not configured, OTP for %s: %s", to_email, code)
        return

    message = Mail(
        from_email=(config.SENDGRID_FROM_EMAIL, config.SENDGRID_FROM_NAME),
        to_emails=to_email,
        subject="Your OTP Code",
        plain_text_content=f"Your OTP code is: {code}",
    )
    response = SendGridAPIClient(config.SENDGRID_API_KEY).send(message)
    logger.info("OTP email sent to %s (status %s)", to_email, response.status_code)
