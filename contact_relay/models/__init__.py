from contact_relay.models.contact import (  # noqa: F401
    UNKNOWN,
    ConnectionMetadata,
    ContactSubmission,
    RelayConfig,
)
