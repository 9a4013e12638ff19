import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# "mysql" or "directus"
RECORD_BACKEND = os.getenv("RECORD_BACKEND", "mysql")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "payroll_db"),
}

DIRECTUS_URL = os.getenv("DIRECTUS_URL", "http://localhost:8055")
DIRECTUS_TOKEN = os.getenv("DIRECTUS_TOKEN")
DIRECTUS_EMAIL = os.getenv("DIRECTUS_EMAIL")
DIRECTUS_PASSWORD = os.getenv("DIRECTUS_PASSWORD")
DIRECTUS_TIMEOUT = float(os.getenv("DIRECTUS_TIMEOUT", "30"))

CASCADE_MAX_DEPTH = int(os.getenv("CASCADE_MAX_DEPTH", "10"))
# Fail the whole cascade instead of truncating when the depth bound is hit.
CASCADE_STRICT_DEPTH = bool(int(os.getenv("CASCADE_STRICT_DEPTH", "0")))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
DEBUG = True
