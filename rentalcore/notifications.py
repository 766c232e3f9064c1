import logging

from flask import current_app
from flask_mail import Message

from .extensions import mail

logger = logging.getLogger(__name__)


def send_email(to_email: str, subject: str, body: str):
    """
    Send email using Flask-Mail configuration.
    Logs and returns False instead of raising when the mail server fails.
    """
    try:
        msg = Message(
            subject=subject,
            recipients=[to_email],
            body=body,
            sender=current_app.config.get('MAIL_DEFAULT_SENDER'),
        )
        mail.send(msg)
    except Exception:
        logger.exception("[EMAIL - ERROR] Failed to send to %s", to_email)
        return False

    logger.info("[EMAIL - SENT] To: %s | Subject: %s", to_email, subject)
    return True


def notify_application_decision(event, application):
    """Tell the applicant their application was approved or rejected."""
    if not current_app.config.get('NOTIFICATIONS_ENABLED', True):
        return False

    applicant = application.applicant
    if applicant is None or not applicant.email:
        return False

    prop = application.rental_property
    where = f"{prop.name} - Unit {application.unit_number}" if prop else f"Unit {application.unit_number}"

    if event == 'approved':
        subject = 'Application Approved!'
        body = (
            f"Your application for {where} has been approved. "
            f"Your lease starts on {application.move_in_date:%B %d, %Y} "
            f"for {application.lease_duration_months} months. Welcome to our community!"
        )
    else:
        subject = 'Application Status Update'
        body = (
            f"Your application for {where} has been reviewed. "
            "Unfortunately, we cannot proceed with your application at this time."
        )
        if application.rejection_reason:
            body += f"\n\nReason: {application.rejection_reason}"

    return send_email(applicant.email, subject, body)
