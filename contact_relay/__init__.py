import dataclasses
import logging
import os

import click
import requests
from flask import Flask
from markupsafe import Markup, escape

from contact_relay.config import config_by_name


def create_app(config_name=None):
    """Application factory."""

    if config_name is None:
        config_name = os.environ.get("FLASK_ENV", "development")

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])

    # --- Validate required env vars (skip in testing) ---
    if config_name != "testing":
        try:
            config_by_name[config_name].validate()
        except RuntimeError as e:
            app.logger.warning(f"Config validation: {e}")

    # --- Register blueprints ---
    from contact_relay.blueprints.contact import contact_bp

    app.register_blueprint(contact_bp)

    # --- CLI commands ---
    register_cli(app)

    # --- Security headers ---
    @app.after_request
    def add_security_headers(response):
        """Add security headers to every response."""
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # Strict Transport Security (only in production)
        if not app.debug:
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )
        return response

    # --- Custom Jinja filters ---
    @app.template_filter("nl2br")
    def nl2br_filter(value):
        """Escape a string and turn each newline into <br>."""
        return Markup("<br>").join(escape(value or "").split("\n"))

    # --- Logging ---
    if not app.debug:
        logging.basicConfig(level=logging.INFO)

    return app


def register_cli(app):
    """Register custom CLI commands with the Flask app."""

    @app.cli.command("check-config")
    def check_config():
        """Show the relay configuration (the API key itself is never printed).

        Usage:
            flask check-config
        """
        from contact_relay.models.contact import RelayConfig

        config = RelayConfig.from_app(app)

        click.echo("")
        click.echo("=" * 60)
        click.echo("Contact relay configuration")
        click.echo("=" * 60)
        click.echo(f"  API key:     {'set' if config.api_key else '(not set)'}")
        click.echo(f"  API URL:     {config.api_url}")
        click.echo(f"  From:        {config.sender}")
        click.echo(f"  To:          {', '.join(config.to_emails) or '(not set)'}")
        click.echo(f"  Origins:     {', '.join(config.allowed_origins) or '(not set)'}")
        click.echo(f"  Timeout:     {config.timeout}s")
        click.echo("=" * 60)

    @app.cli.command("send-test-email")
    @click.option("--to", "to_email", default=None, help="Override the TO_EMAIL recipient.")
    def send_test_email(to_email):
        """Send a sample submission through Resend to verify credentials.

        Usage:
            flask send-test-email
            flask send-test-email --to me@example.com
        """
        from contact_relay.models.contact import (
            ConnectionMetadata,
            ContactSubmission,
            RelayConfig,
        )
        from contact_relay.services.email_service import (
            EmailDeliveryError,
            send_contact_email,
        )

        config = RelayConfig.from_app(app)
        if to_email:
            config = dataclasses.replace(config, to_emails=(to_email,))

        submission = ContactSubmission(
            name="Contact Relay Test",
            email=config.from_address,
            phone="",
            message="This is a test message from flask send-test-email.\nNo action needed.",
        )

        try:
            message_id = send_contact_email(submission, ConnectionMetadata(), config)
        except (EmailDeliveryError, requests.RequestException) as e:
            click.echo(f"ERROR: {e}")
            return

        click.echo(f"Test email sent to {', '.join(config.to_emails)} (id: {message_id or 'n/a'})")
