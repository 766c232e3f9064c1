import os


def _env_bool(name, default="false"):
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def _env_int_list(name, default):
    raw = os.getenv(name)
    if not raw:
        return default
    return tuple(int(part) for part in raw.split(",") if part.strip())


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///rentalcore.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # JWT Configuration
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", SECRET_KEY)

    API_PREFIX = "/api"
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Application documents are kept on local disk, one folder per application
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "uploads/application_documents")
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024

    # Lease terms offered to owners when approving
    LEASE_DURATION_OPTIONS = _env_int_list("LEASE_DURATION_OPTIONS", (1, 3, 6, 9, 12, 18, 24, 36))
    ALLOW_CUSTOM_LEASE_DURATION = _env_bool("ALLOW_CUSTOM_LEASE_DURATION")
    MAX_LEASE_DURATION_MONTHS = int(os.getenv("MAX_LEASE_DURATION_MONTHS", "120"))

    # Mail
    NOTIFICATIONS_ENABLED = _env_bool("NOTIFICATIONS_ENABLED", "true")
    MAIL_SERVER = os.getenv("MAIL_SERVER", "localhost")
    MAIL_PORT = int(os.getenv("MAIL_PORT", "25"))
    MAIL_USE_TLS = _env_bool("MAIL_USE_TLS")
    MAIL_USERNAME = os.getenv("MAIL_USERNAME")
    MAIL_PASSWORD = os.getenv("MAIL_PASSWORD")
    MAIL_DEFAULT_SENDER = os.getenv("MAIL_DEFAULT_SENDER", "no-reply@rentalcore.local")


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET_KEY = "test-jwt-secret-with-enough-length-for-hs256"
    SECRET_KEY = "test-secret"
    MAIL_SUPPRESS_SEND = True
    LOG_LEVEL = "WARNING"
