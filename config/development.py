import os

from werkzeug.security import generate_password_hash

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hris_db"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

TIMEZONE = os.getenv("TIMEZONE", "Asia/Jakarta")
FACE_MATCH_MIN_SCORE = int(os.getenv("FACE_MATCH_MIN_SCORE", "60"))

# Development-only default credential: admin / admin123
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD_HASH = os.getenv("ADMIN_PASSWORD_HASH") or generate_password_hash("admin123")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also insert default departments and settings
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "1")))
