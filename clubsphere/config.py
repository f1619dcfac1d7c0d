import os

DEFAULT_DEMO_EMAILS = "admin@sphere.com,manager@sphere.com,member@sphere.com"


def _split_emails(raw):
    return frozenset(
        e.strip().lower() for e in (raw or "").split(",") if e.strip()
    )


class Config:
    """Base configuration. Shared across all environments."""

    # --- Required ---
    SECRET_KEY = os.environ.get("SECRET_KEY")

    # Handle DATABASE_URL: some PaaS providers (Railway, Heroku) use
    # "postgres://" which SQLAlchemy 1.4+ doesn't accept.
    _db_url = os.environ.get("DATABASE_URL", "")
    if _db_url.startswith("postgres://"):
        _db_url = _db_url.replace("postgres://", "postgresql://", 1)
    SQLALCHEMY_DATABASE_URI = _db_url or None

    # --- Checkout Provider (Stripe) ---
    STRIPE_SECRET_KEY = os.environ.get("STRIPE_SECRET_KEY")
    STRIPE_WEBHOOK_SECRET = os.environ.get("STRIPE_WEBHOOK_SECRET")
    CHECKOUT_CURRENCY = os.environ.get("CHECKOUT_CURRENCY", "usd")
    STRIPE_TIMEOUT_SECONDS = int(os.environ.get("STRIPE_TIMEOUT_SECONDS", 20))
    STRIPE_MAX_NETWORK_RETRIES = int(
        os.environ.get("STRIPE_MAX_NETWORK_RETRIES", 2)
    )

    # --- Session tokens ---
    JWT_SECRET = os.environ.get("JWT_SECRET")
    JWT_EXPIRES_SECONDS = int(os.environ.get("JWT_EXPIRES_SECONDS", 3600))

    # --- Client app ---
    # Used for Stripe success/cancel redirects and as the CORS origin.
    CLIENT_DOMAIN = os.environ.get("CLIENT_DOMAIN", "http://localhost:5173")

    # --- Demo mode ---
    # Identities that can browse everything but never write.
    DEMO_EMAILS = _split_emails(
        os.environ.get("DEMO_EMAILS", DEFAULT_DEMO_EMAILS)
    )

    # --- Store ---
    STORE_TIMEOUT_SECONDS = int(os.environ.get("STORE_TIMEOUT_SECONDS", 10))

    # --- SQLAlchemy ---
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_recycle": 300,
    }

    @staticmethod
    def validate():
        """Fail fast if required env vars are missing."""
        required = [
            "SECRET_KEY",
            "DATABASE_URL",
            "STRIPE_SECRET_KEY",
            "STRIPE_WEBHOOK_SECRET",
            "JWT_SECRET",
            "CLIENT_DOMAIN",
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
    """Testing — in-memory SQLite, fake Stripe credentials."""

    TESTING = True
    DEBUG = True
    SECRET_KEY = "test-secret-key-not-for-production"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    STRIPE_SECRET_KEY = "sk_test_fake"
    STRIPE_WEBHOOK_SECRET = "whsec_test_fake"
    JWT_SECRET = "test-jwt-secret-not-for-production"
    CLIENT_DOMAIN = "http://localhost:5173"
    DEMO_EMAILS = _split_emails(DEFAULT_DEMO_EMAILS)
    RATELIMIT_ENABLED = False  # disable rate limiting in tests
    SERVER_NAME = "localhost"

    @staticmethod
    def validate():
        """Skip validation in test mode — everything is hardcoded."""
        pass


class ProdConfig(Config):
    """Production (Postgres)."""

    DEBUG = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_recycle": 300,
        "pool_timeout": Config.STORE_TIMEOUT_SECONDS,
        "connect_args": {
            "connect_timeout": Config.STORE_TIMEOUT_SECONDS,
            "options": f"-c statement_timeout={Config.STORE_TIMEOUT_SECONDS * 1000}",
        },
    }


config_by_name = {
    "development": DevConfig,
    "production": ProdConfig,
    "testing": TestConfig,
}
