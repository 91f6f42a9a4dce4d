"""
Email Service using Resend

Sends the portal's transactional emails: offer-letter decisions for
students and agents, and agent registration confirmations.
"""

import asyncio
import logging
from html import escape

import resend

from app.core.config import settings

logger = logging.getLogger(__name__)

resend.api_key = settings.resend_api_key

_STYLES = """
            body { font-family: system-ui, -apple-system, sans-serif; line-height: 1.6; color: #1f2937; }
            .container { max-width: 600px; margin: 0 auto; padding: 40px 20px; }
            .header { color: #1a365d; margin-bottom: 24px; }
            .success { background-color: #d1fae5; border: 1px solid #22c55e; padding: 16px; border-radius: 8px; margin: 16px 0; }
            .warning { background-color: #fee2e2; border: 1px solid #ef4444; padding: 16px; border-radius: 8px; margin: 16px 0; }
            .message-box { background-color: #eff6ff; border: 1px solid #bfdbfe; padding: 16px; border-radius: 8px; margin: 16px 0; }
            .button { display: inline-block; background-color: #1a365d; color: white; padding: 14px 28px; text-decoration: none; border-radius: 8px; margin: 24px 0; }
            .footer { margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb; color: #6b7280; font-size: 14px; }
"""


def _render(title: str, body: str) -> str:
    """Wrap body HTML in the shared email layout."""
    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <style>{_STYLES}</style>
    </head>
    <body>
        <div class="container">
            <h1 class="header">{title}</h1>
            {body}
            <div class="footer">
                <p>Questions? Contact us at {escape(settings.support_email)}.</p>
                <p>Sov Portal - Study Abroad Services</p>
            </div>
        </div>
    </body>
    </html>
    """


async def send_email(
    to_email: str,
    subject: str,
    html_content: str,
) -> bool:
    """
    Send an email using Resend.

    Args:
        to_email: Recipient email address
        subject: Email subject line
        html_content: HTML content of the email

    Returns:
        True if email was sent successfully
    """
    if not resend.api_key:
        logger.warning("RESEND_API_KEY not set - logging email instead of sending")
        logger.info(f"EMAIL TO: {to_email} | SUBJECT: {subject}")
        return True

    try:
        params: resend.Emails.SendParams = {
            "from": settings.email_from,
            "to": [to_email],
            "subject": subject,
            "html": html_content,
        }

        # Resend's client is synchronous
        email = await asyncio.to_thread(resend.Emails.send, params)
        logger.info(f"Email sent successfully to {to_email}, id: {email['id']}")
        return True
    except Exception as e:
        logger.error(f"Failed to send email to {to_email}: {e}")
        return False


async def send_offer_letter_decision(
    to_email: str,
    recipient_name: str,
    student_name: str,
    application_id: str,
    approved: bool,
    message: str | None = None,
    for_agent: bool = False,
) -> bool:
    """
    Tell a student (or their agent) that an offer letter was approved or rejected.

    Args:
        to_email: Recipient address
        recipient_name: Name used in the greeting
        student_name: Student the application belongs to
        application_id: Human-readable application identifier
        approved: True for approval, False for rejection
        message: Reviewer's message, if any
        for_agent: Word the email for the student's agent
    """
    safe_recipient = escape(recipient_name)
    safe_student = escape(student_name)
    safe_application_id = escape(application_id)

    outcome = "approved" if approved else "rejected"
    whose = f"{safe_student}'s" if for_agent else "your"
    box_class = "success" if approved else "warning"

    message_html = ""
    if message:
        message_html = f"""
            <div class="message-box">
                <p><strong>Message from the review team:</strong></p>
                <p>{escape(message)}</p>
            </div>
        """

    if approved:
        next_steps = "<p>You can now continue with the next steps of the application.</p>"
    else:
        next_steps = (
            "<p>Please review the message above and resubmit once the issues are addressed.</p>"
        )

    applications_url = f"{settings.frontend_url}/applications"
    body = f"""
            <p>Hello {safe_recipient},</p>

            <div class="{box_class}">
                The offer letter request for {whose} application
                <strong>{safe_application_id}</strong> has been <strong>{outcome}</strong>.
            </div>

            {message_html}
            {next_steps}

            <a href="{applications_url}" class="button">View Application</a>
    """

    return await send_email(
        to_email=to_email,
        subject=f"Offer letter {outcome} - {safe_application_id}",
        html_content=_render(f"Offer Letter {outcome.capitalize()}", body),
    )


async def send_agent_registration_complete(
    to_email: str,
    first_name: str,
    ag_id: str,
) -> bool:
    """Confirm to an agent that their company registration was submitted."""
    safe_first_name = escape(first_name)
    safe_ag_id = escape(ag_id)

    body = f"""
            <p>Dear {safe_first_name},</p>

            <div class="success">
                Your company registration has been submitted successfully.
                Your agent ID is <strong>{safe_ag_id}</strong>.
            </div>

            <p>Our team is reviewing your details. You will be able to start
            filing student applications once your account is approved.</p>
    """

    return await send_email(
        to_email=to_email,
        subject="Registration Successful, Awaiting Admin Approval",
        html_content=_render("Registration Received", body),
    )
