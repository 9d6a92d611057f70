from core.config import RESEND_API_KEY, EMAIL_FROM
from core.logger import logger
import resend

if not RESEND_API_KEY:
    logger.warning("RESEND_API_KEY not set, outgoing emails are disabled")

resend.api_key = RESEND_API_KEY


def _send(to_email : str , subject : str , html : str) -> bool:

    if not RESEND_API_KEY:
        logger.warning(f"Email '{subject}' to {to_email} skipped: no API key")
        return False

    try :
        resend.emails.send(
            {
                "from": EMAIL_FROM,
                "to": [to_email],
                "subject": subject,
                "html": html,
            }
        )

        logger.info(f"Email '{subject}' sent to {to_email}")
        return True

    except Exception :
        logger.error(
            f"Failed to send email '{subject}' to {to_email}",
            exc_info=True
        )
        return False


def send_reset_password_email(to_email : str , reset_link : str) -> bool:
    return _send(
        to_email,
        "Reset your password",
        f"""
            <p>Hello,</p>
            <p>You requested to reset your Prompt Enhancer password.</p>
            <p>
                <a href="{reset_link}">
                    Click here to reset your password
                </a>
            </p>
            <p>This link will expire in 10 minutes.</p>
            <p>If you did not request this, please ignore this email.</p>
        """
    )


def send_welcome_email(to_email : str , daily_limit : int) -> bool:
    return _send(
        to_email,
        "Welcome to Prompt Enhancer",
        f"""
            <p>Hello,</p>
            <p>Your account is ready. Pick your role in the workspace so
            enhancements are tailored to how you work.</p>
            <p>The free plan includes {daily_limit} enhancements per day.</p>
        """
    )
