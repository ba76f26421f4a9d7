"""Contact form blueprint - /api/contact

Public endpoint hit by the website's contact form. Accepts a JSON or
form-encoded POST, relays it by email and answers with a JSON status.

Route Map:
  POST    /api/contact  - Accept submission, relay via email
  OPTIONS /api/contact  - CORS preflight
  POST    /contact      - Same handler, legacy path
"""

from flask import Blueprint, current_app, request

from contact_relay.models.contact import RelayConfig
from contact_relay.services.contact_service import handle_submission, preflight_response

contact_bp = Blueprint("contact", __name__)


@contact_bp.route("/api/contact", methods=["POST", "OPTIONS"])
@contact_bp.route("/contact", methods=["POST", "OPTIONS"])
def submit():
    """Accept a contact form submission, or answer its preflight."""
    config = RelayConfig.from_app(current_app)

    if request.method == "OPTIONS":
        return preflight_response(request.headers.get("Origin"), config)

    return handle_submission(request, config)
