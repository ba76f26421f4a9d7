"""Request-scoped value objects for the contact relay.

Nothing here is persisted. A ContactSubmission and its ConnectionMetadata
live for one request and are dropped once the provider call returns.
RelayConfig is the explicit configuration handed to the submission handler.
"""

from dataclasses import dataclass

UNKNOWN = "unknown"

SUBMISSION_FIELDS = ("name", "email", "phone", "message")


def split_csv(value):
    """Return a comma-separated setting as a cleaned tuple."""
    if not value:
        return ()
    return tuple(v.strip() for v in value.split(",") if v.strip())


@dataclass
class ContactSubmission:
    name: str = ""
    email: str = ""
    phone: str = ""
    message: str = ""


@dataclass(frozen=True)
class ConnectionMetadata:
    """Where a submission came from, as reported by headers and the edge."""

    client_ip: str = UNKNOWN
    user_agent: str = UNKNOWN
    country: str = UNKNOWN
    city: str = UNKNOWN
    region: str = UNKNOWN
    timezone: str = UNKNOWN
    asn: str = UNKNOWN
    colo: str = UNKNOWN

    @property
    def location(self):
        return f"{self.city}, {self.region}, {self.country}"


@dataclass(frozen=True)
class RelayConfig:
    api_key: str
    to_emails: tuple
    allowed_origins: tuple
    from_address: str
    from_name: str = None
    api_url: str = "https://api.resend.com/emails"
    timeout: float = 30.0

    @classmethod
    def from_app(cls, app):
        """Build from a Flask app's config (RESEND_*, TO_EMAIL, ALLOWED_ORIGINS, MAIL_FROM_*)."""
        return cls(
            api_key=app.config.get("RESEND_API_KEY"),
            to_emails=split_csv(app.config.get("TO_EMAIL")),
            allowed_origins=split_csv(app.config.get("ALLOWED_ORIGINS")),
            from_address=app.config.get("MAIL_FROM_ADDRESS", "contact@yourdomain.com"),
            from_name=app.config.get("MAIL_FROM_NAME"),
            api_url=app.config.get("RESEND_API_URL", "https://api.resend.com/emails"),
            timeout=app.config.get("RESEND_TIMEOUT", 30.0),
        )

    @property
    def sender(self):
        if self.from_name:
            return f"{self.from_name} <{self.from_address}>"
        return self.from_address
