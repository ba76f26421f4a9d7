"""Local development server for the contact relay.

Usage:
    python run.py

Reads RESEND_API_KEY, TO_EMAIL and ALLOWED_ORIGINS from .env, then serves
POST /api/contact with the development config.
"""

from dotenv import load_dotenv

load_dotenv()

from contact_relay import create_app  # noqa: E402

app = create_app()

if __name__ == "__main__":
    app.run(debug=True, host="0.0.0.0", port=5001)
