import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./invoices.db")
    MIGRATION_DB_URI = data.get("MIGRATION_DB_URI", "sqlite:///./invoices.db")
    API_PREFIX = data.get("API_PREFIX", "")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    ENABLE_SENTRY = data.get("ENABLE_SENTRY", 0)
    DSN_SENTRY = data.get("DSN_SENTRY", "")
    SENTRY_ENVIRONMENT = data.get("SENTRY_ENVIRONMENT", "dev")

    # Object storage (Cloudinary raw assets)
    CLOUDINARY_CLOUD_NAME = data.get("CLOUDINARY_CLOUD_NAME", "")
    CLOUDINARY_API_KEY = data.get("CLOUDINARY_API_KEY", "")
    CLOUDINARY_API_SECRET = data.get("CLOUDINARY_API_SECRET", "")
    CLOUDINARY_FOLDER = data.get("CLOUDINARY_FOLDER", "invoices")
    CLOUDINARY_SIGN_URLS = bool(data.get("CLOUDINARY_SIGN_URLS", False))

    # Invoicing
    INVOICE_CURRENCY = data.get("INVOICE_CURRENCY", "USD")
    INVOICE_CLIENT_NAME = data.get("INVOICE_CLIENT_NAME", "Acme Trading LLC")
    INVOICE_CLIENT_ADDRESS = data.get("INVOICE_CLIENT_ADDRESS", [])
    INVOICE_NUMBERING_MAX_ATTEMPTS = int(data.get("INVOICE_NUMBERING_MAX_ATTEMPTS", 3))

    # Biller profile printed on the PDF
    BILLER_NAME = data.get("BILLER_NAME", "Independent Contractor")
    BILLER_ADDRESS = data.get("BILLER_ADDRESS", "")
    BILLER_PAYEE_NAME = data.get("BILLER_PAYEE_NAME", BILLER_NAME)
    BILLER_BANK_DETAILS = data.get("BILLER_BANK_DETAILS", {})  # label -> value

    # Provisional invoice retry worker
    PROVISIONAL_RETRY_ENABLED = bool(data.get("PROVISIONAL_RETRY_ENABLED", True))
    PROVISIONAL_RETRY_INTERVAL_SECONDS = data.get("PROVISIONAL_RETRY_INTERVAL_SECONDS", 900)
    PROVISIONAL_RETRY_GRACE_SECONDS = data.get("PROVISIONAL_RETRY_GRACE_SECONDS", 300)
    PROVISIONAL_RETRY_BATCH_SIZE = data.get("PROVISIONAL_RETRY_BATCH_SIZE", 50)
