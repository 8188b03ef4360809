"""Configuration and settings."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Paths
PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = Path(os.getenv("LOGISTX_DATA_DIR", str(PROJECT_ROOT / "data")))
OUTPUT_DIR = Path(os.getenv("LOGISTX_OUTPUT_DIR", str(PROJECT_ROOT / "output")))
EXPORT_DIR = Path(os.getenv("EXPORT_DIR", str(OUTPUT_DIR / "exports")))

# Ensure directories exist
DATA_DIR.mkdir(parents=True, exist_ok=True)
OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

# Remote store
STORE_BACKEND = os.getenv("STORE_BACKEND", "sql").lower()  # "memory" | "sql" | "rest"
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR / 'logistx.db'}")
REMOTE_STORE_URL = os.getenv("REMOTE_STORE_URL", "").rstrip("/")
REMOTE_STORE_API_KEY = os.getenv("REMOTE_STORE_API_KEY", "")
REMOTE_STORE_TIMEOUT_SECONDS = float(os.getenv("REMOTE_STORE_TIMEOUT_SECONDS", "30"))

# View-models
LOAD_TIMEOUT_SECONDS = float(os.getenv("LOAD_TIMEOUT_SECONDS", "5.0"))
DEFAULT_MIN_QUANTITY = int(os.getenv("DEFAULT_MIN_QUANTITY", "10"))
RECENT_TRANSACTIONS_LIMIT = int(os.getenv("RECENT_TRANSACTIONS_LIMIT", "10"))
TOP_PRODUCTS_LIMIT = int(os.getenv("TOP_PRODUCTS_LIMIT", "5"))

# Orders
ORDER_NUMBER_PREFIX = os.getenv("ORDER_NUMBER_PREFIX", "ORD")
ORDER_NUMBER_MAX_ATTEMPTS = int(os.getenv("ORDER_NUMBER_MAX_ATTEMPTS", "5"))

# Export
CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "₱")
PDF_MAX_ROWS = int(os.getenv("PDF_MAX_ROWS", "20"))
PDF_CELL_CHARS = int(os.getenv("PDF_CELL_CHARS", "15"))

# Logging
LOG_DIR = OUTPUT_DIR / "logs"
LOG_FILE = Path(os.getenv("LOG_FILE", str(LOG_DIR / "app.jsonl")))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
VERBOSE_LOGGING = os.getenv("VERBOSE_LOGGING", "false").lower() == "true"

# Ensure log directory exists
LOG_FILE.parent.mkdir(parents=True, exist_ok=True)

# Tracing (OpenTelemetry)
TRACING_ENABLED = os.getenv("TRACING_ENABLED", "false").lower() == "true"
OTLP_ENDPOINT = os.getenv("OTLP_ENDPOINT", "http://localhost:4318/v1/traces")
OTLP_API_KEY = os.getenv("OTLP_API_KEY", "")
SERVICE_NAME = os.getenv("SERVICE_NAME", "logistx")
DEPLOYMENT_ENVIRONMENT = os.getenv("DEPLOYMENT_ENVIRONMENT", "development")
TRACE_SAMPLE_RATIO = float(os.getenv("TRACE_SAMPLE_RATIO", "1.0"))

# Webhook (database change notifications)
WEBHOOK_PORT = int(os.getenv("WEBHOOK_PORT", "8000"))
WEBHOOK_SECRET = os.getenv("WEBHOOK_SECRET", "")
