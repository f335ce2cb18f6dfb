import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "dtr_db"),
    "connection_timeout": int(os.getenv("DB_TIMEOUT_SECONDS", "5")),
}

# Admin gate: a single account. When no werkzeug hash is provided the plain
# development password is hashed at startup.
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD_HASH = os.getenv("ADMIN_PASSWORD_HASH")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

STORE_WRITE_ATTEMPTS = int(os.getenv("STORE_WRITE_ATTEMPTS", "2"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also register the demo cards from seed.sql
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
