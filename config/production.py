import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "dtr"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "dtr_db"),
    "connection_timeout": int(os.getenv("DB_TIMEOUT_SECONDS", "5")),
}

ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
# Must be a werkzeug hash; the placeholder never verifies.
ADMIN_PASSWORD_HASH = os.getenv("ADMIN_PASSWORD_HASH", "CHANGE_ME")

STORE_WRITE_ATTEMPTS = int(os.getenv("STORE_WRITE_ATTEMPTS", "3"))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
