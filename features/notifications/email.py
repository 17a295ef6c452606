"""Templated email delivery (the notification sink)."""

import logging
import smtplib

from django.conf import settings
from django.core.mail import BadHeaderError, EmailMultiAlternatives
from django.template.loader import render_to_string
from django.utils.html import strip_tags

from core.utils.config import get_setting
from core.utils.exceptions import DependencyError, ValidationError

logger = logging.getLogger(__name__)

SUBJECTS = {
    "email_verification": "Verify Your Vastu Vision Account",
    "password_reset": "Reset Your Vastu Vision Password",
    "welcome": "Welcome to Vastu Vision!",
}


def send_templated_email(recipient: str, template_name: str, context: dict) -> None:
    """Render ``emails/<template_name>.html`` and send it. Raises DependencyError."""
    if template_name not in SUBJECTS:
        raise ValidationError(f"Unknown email template '{template_name}'")
    context = {"support_email": get_setting().SUPPORT_EMAIL, **context}
    html = render_to_string(f"emails/{template_name}.html", context)
    message = EmailMultiAlternatives(
        subject=SUBJECTS[template_name],
        body=strip_tags(html),
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=[recipient],
    )
    message.attach_alternative(html, "text/html")
    try:
        message.send()
    except (smtplib.SMTPException, BadHeaderError, OSError) as exc:
        logger.error("Email '%s' to %s failed: %s", template_name, recipient, exc)
        raise DependencyError("Email could not be sent") from exc
    logger.info("Email '%s' sent to %s", template_name, recipient)


def send_best_effort(recipient: str, template_name: str, context: dict) -> bool:
    """Send an email whose failure must not fail the calling operation."""
    try:
        send_templated_email(recipient, template_name, context)
    except DependencyError:
        logger.warning("Continuing without '%s' email to %s", template_name, recipient)
        return False
    return True
