"""Contact submission service.

Turns an inbound contact form request into a relayed email:
origin check, body parsing (JSON or form), sanitation, validation,
connection metadata, then one call to the email service.

handle_submission() is the only entry point the blueprint uses. It owns the
error boundary: validation problems come back as plain-text 400/403
responses, anything unexpected is logged and answered with an opaque 500.
"""

import logging
import re

from flask import Response, jsonify

from contact_relay.models.contact import (
    SUBMISSION_FIELDS,
    UNKNOWN,
    ConnectionMetadata,
    ContactSubmission,
)
from contact_relay.services.email_service import send_contact_email

logger = logging.getLogger(__name__)

TAG_RE = re.compile(r"<[^>]*>")
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MAX_NAME_LENGTH = 100
MAX_EMAIL_LENGTH = 255
MAX_MESSAGE_LENGTH = 5000

MISSING_FIELDS_ERROR = "Missing required fields: name, email, message"
INVALID_EMAIL_ERROR = "Invalid email format"
TOO_LONG_ERROR = "Input too long"

SUCCESS_MESSAGE = "Email sent successfully"
FAILURE_MESSAGE = "Failed to send email"

# Edge context key -> Cloudflare visitor-location header
EDGE_HEADERS = {
    "country": "CF-IPCountry",
    "city": "CF-IPCity",
    "region": "CF-Region",
    "timezone": "CF-Timezone",
}
EDGE_KEYS = ("country", "city", "region", "timezone", "asn", "colo")

FORM_MIMETYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


# ── Origin / CORS ──


def is_origin_allowed(origin, config):
    return origin in config.allowed_origins


def apply_cors(response, origin, config):
    """Echo an allowed Origin back so the browser can read the response."""
    if origin and is_origin_allowed(origin, config):
        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Access-Control-Allow-Methods"] = "POST, OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        response.vary.add("Origin")
    return response


def _text_response(text, status):
    return Response(text, status=status, mimetype="text/plain")


def _json_response(success, message, status):
    response = jsonify(success=success, message=message)
    response.status_code = status
    return response


def forbidden_response():
    return _text_response("Forbidden", 403)


def preflight_response(origin, config):
    """Answer a CORS preflight. Disallowed origins get 403."""
    if origin and not is_origin_allowed(origin, config):
        return forbidden_response()
    return apply_cors(Response(status=204), origin, config)


# ── Parsing ──


def _field(data, key):
    value = data.get(key)
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        raise ValueError(f"Field {key!r} must be a string, got {type(value).__name__}")
    return value if isinstance(value, str) else str(value)


def _parse_json(req):
    # Malformed JSON raises werkzeug's BadRequest here.
    data = req.get_json(force=True)
    if not isinstance(data, dict):
        raise ValueError(f"JSON body must be an object, got {type(data).__name__}")
    return data


def _parse_form(req):
    if req.mimetype not in FORM_MIMETYPES:
        raise ValueError(f"Unsupported content type {req.mimetype or '(none)'}")
    return req.form


def parse_submission(req):
    """Read name/email/phone/message from a JSON or form-encoded body.

    Missing fields come back as empty strings. Object or array values, and
    bodies that are neither JSON nor form-encoded, raise ValueError.
    """
    content_type = req.headers.get("Content-Type", "")
    if "application/json" in content_type:
        data = _parse_json(req)
    else:
        data = _parse_form(req)

    return ContactSubmission(**{key: _field(data, key) for key in SUBMISSION_FIELDS})


# ── Sanitation / validation ──


def sanitize(text):
    """Strip anything that looks like an HTML tag, then trim whitespace."""
    if text is None:
        return ""
    return TAG_RE.sub("", text).strip()


def sanitize_submission(submission):
    return ContactSubmission(
        **{key: sanitize(getattr(submission, key)) for key in SUBMISSION_FIELDS}
    )


def validate_submission(submission):
    """Validate a sanitized submission.

    Returns (ok: bool, error: str|None). Checks run in a fixed order and the
    first failure wins: required fields, email shape, then lengths.
    """
    if not submission.name or not submission.email or not submission.message:
        return False, MISSING_FIELDS_ERROR

    if not EMAIL_RE.match(submission.email):
        return False, INVALID_EMAIL_ERROR

    if (
        len(submission.name) > MAX_NAME_LENGTH
        or len(submission.email) > MAX_EMAIL_LENGTH
        or len(submission.message) > MAX_MESSAGE_LENGTH
    ):
        return False, TOO_LONG_ERROR

    return True, None


# ── Connection metadata ──


def _client_ip(req):
    ip = req.headers.get("CF-Connecting-IP")
    if ip:
        return ip
    # X-Forwarded-For is "client, proxy1, proxy2"
    forwarded = req.headers.get("X-Forwarded-For", "")
    return forwarded.split(",")[0].strip() or UNKNOWN


def _colo_from_ray(ray):
    """CF-Ray looks like "8a1b2c3d4e5f6a7b-DFW"; the suffix is the datacenter."""
    if ray and "-" in ray:
        return ray.rsplit("-", 1)[1] or UNKNOWN
    return UNKNOWN


def collect_metadata(req):
    """Gather client IP, user agent and edge geo/network context.

    Edge values come from the "cf" mapping a hosting layer may place in the
    WSGI environ, then from Cloudflare location headers. Anything missing is
    reported as "unknown".
    """
    edge = req.environ.get("cf") or {}

    values = {}
    for key in EDGE_KEYS:
        value = edge.get(key)
        if not value and key in EDGE_HEADERS:
            value = req.headers.get(EDGE_HEADERS[key])
        values[key] = str(value) if value else UNKNOWN

    if values["colo"] == UNKNOWN:
        values["colo"] = _colo_from_ray(req.headers.get("CF-Ray"))

    return ConnectionMetadata(
        client_ip=_client_ip(req),
        user_agent=req.headers.get("User-Agent") or UNKNOWN,
        **values,
    )


# ── Handler ──


def _process(req, config, origin):
    if origin and not is_origin_allowed(origin, config):
        logger.warning(f"Contact form: rejected origin {origin}")
        return forbidden_response()

    submission = sanitize_submission(parse_submission(req))

    ok, error = validate_submission(submission)
    if not ok:
        logger.info(f"Contact form: rejected submission: {error}")
        return apply_cors(_text_response(error, 400), origin, config)

    metadata = collect_metadata(req)

    send_contact_email(submission, metadata, config)

    logger.info(
        f"Contact form: message from {submission.name} <{submission.email}> "
        f"forwarded to {', '.join(config.to_emails)} (ip: {metadata.client_ip})"
    )

    return apply_cors(_json_response(True, SUCCESS_MESSAGE, 200), origin, config)


def handle_submission(req, config):
    """
    Handle one contact form POST.

    Args:
        req:    The incoming Flask/werkzeug request.
        config: RelayConfig with provider credentials, recipients and allow-list.

    Returns a Flask Response:
        403 "Forbidden" (text) for a disallowed Origin,
        400 (text) for a validation failure,
        200 {success: true, message} once the provider accepts the email,
        500 {success: false, message} for anything else.
    """
    origin = req.headers.get("Origin")
    try:
        return _process(req, config, origin)
    except Exception as e:
        logger.exception(f"Contact form error: {e}")
        return apply_cors(_json_response(False, FAILURE_MESSAGE, 500), origin, config)
