"""
Email service for the contact relay.

Sends transactional email through the Resend HTTP API
(POST https://api.resend.com/emails, bearer-token auth). The HTML body is
rendered from a Jinja2 template so every user-supplied value is escaped.

Usage:
    from contact_relay.services.email_service import send_contact_email

    send_contact_email(submission, metadata, config)

Exactly one request is made per call. There is no retry.
"""

import logging

import requests
from flask import render_template

logger = logging.getLogger(__name__)

NOTIFICATION_TEMPLATE = "emails/contact_notification.html"


class EmailDeliveryError(RuntimeError):
    """The provider did not accept the message (or could not be asked)."""


def build_contact_email(submission, metadata, config):
    """
    Build the Resend payload for a contact form submission.

    Args:
        submission: Sanitized ContactSubmission.
        metadata:   ConnectionMetadata for the request.
        config:     RelayConfig with sender and recipients.

    Returns a dict with from, to, subject, html and reply_to.
    """
    html_body = render_template(
        NOTIFICATION_TEMPLATE,
        submission=submission,
        metadata=metadata,
    )

    return {
        "from": config.sender,
        "to": list(config.to_emails),
        "subject": f"Contact Form: {submission.name}",
        "html": html_body,
        "reply_to": submission.email,
    }


def send_email(payload, config):
    """POST a prepared payload to Resend. Returns the provider message id, if any.

    Raises EmailDeliveryError on a missing API key, missing recipients or a
    non-2xx response. Network errors from requests propagate unchanged.
    """
    if not config.api_key:
        raise EmailDeliveryError("RESEND_API_KEY is not configured.")
    if not payload.get("to"):
        raise EmailDeliveryError("TO_EMAIL is not configured.")

    headers = {
        "Authorization": f"Bearer {config.api_key}",
        "Content-Type": "application/json",
    }

    resp = requests.post(
        config.api_url, headers=headers, json=payload, timeout=config.timeout
    )

    if not 200 <= resp.status_code < 300:
        logger.error(
            f"Resend rejected email to {', '.join(payload['to'])}: "
            f"{resp.status_code} {resp.text}"
        )
        raise EmailDeliveryError(f"Resend responded with status {resp.status_code}")

    logger.info(f"Email sent to {', '.join(payload['to'])} - {payload['subject']}")

    try:
        return resp.json().get("id")
    except ValueError:
        return None


def send_contact_email(submission, metadata, config):
    """Render and send the notification for one submission."""
    payload = build_contact_email(submission, metadata, config)
    return send_email(payload, config)
