import os


class Config:
    """Base configuration. Shared across all environments."""

    # --- Required ---
    RESEND_API_KEY = os.environ.get("RESEND_API_KEY")
    TO_EMAIL = os.environ.get("TO_EMAIL")                  # comma-separated, e.g. "owner@biz.com,sales@biz.com"
    ALLOWED_ORIGINS = os.environ.get("ALLOWED_ORIGINS", "")  # comma-separated, e.g. "https://biz.com,https://www.biz.com"

    # --- Sender ---
    MAIL_FROM_ADDRESS = os.environ.get("MAIL_FROM_ADDRESS", "contact@yourdomain.com")
    MAIL_FROM_NAME = os.environ.get("MAIL_FROM_NAME")      # optional display name

    # --- Resend API ---
    RESEND_API_URL = os.environ.get("RESEND_API_URL", "https://api.resend.com/emails")
    RESEND_TIMEOUT = float(os.environ.get("RESEND_TIMEOUT", 30))

    @staticmethod
    def validate():
        """Fail fast if required env vars are missing."""
        required = [
            "RESEND_API_KEY",
            "TO_EMAIL",
            "ALLOWED_ORIGINS",
        ]
        missing = [v for v in required if not os.environ.get(v)]
        if missing:
            raise RuntimeError(
                f"Missing required environment variables: {', '.join(missing)}"
            )


class DevConfig(Config):
    """Local development."""

    DEBUG = True


class TestConfig(Config):
    """Testing: fake provider credentials, fixed allow-list."""

    TESTING = True
    DEBUG = True
    RESEND_API_KEY = "re_test_fake"
    TO_EMAIL = "inbox@site.example"
    ALLOWED_ORIGINS = "https://site.example,https://www.site.example"
    MAIL_FROM_ADDRESS = "contact@site.example"
    MAIL_FROM_NAME = None
    RESEND_API_URL = "https://api.resend.com/emails"
    RESEND_TIMEOUT = 30.0

    @staticmethod
    def validate():
        """Skip validation in test mode, everything is hardcoded."""
        pass


class ProdConfig(Config):
    """Production."""

    DEBUG = False


config_by_name = {
    "development": DevConfig,
    "production": ProdConfig,
    "testing": TestConfig,
}
