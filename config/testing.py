import os

SECRET_KEY = "test-secret"

RECORD_BACKEND = "mysql"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "payroll_test"),
}

DIRECTUS_URL = "http://directus.test"
DIRECTUS_TOKEN = "test-token"
DIRECTUS_TIMEOUT = 5.0

CASCADE_MAX_DEPTH = 10
CASCADE_STRICT_DEPTH = False

LOG_LEVEL = "WARNING"
DEBUG = False
TESTING = True
