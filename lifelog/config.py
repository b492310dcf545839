import os
from dotenv import load_dotenv

load_dotenv()

# --- JWT Configuration ---
JWT_SECRET = os.getenv("JWT_SECRET", "change-this-secret-key")
JWT_ALGORITHM = "HS256"
JWT_EXPIRY_HOURS = int(os.getenv("JWT_EXPIRY_HOURS", "720"))  # 30 days

# --- Database ---
# Default to local SQLite, but prefer environment variable (for Postgres deployments)
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./data/lifelog.db")

# Fix for common SQLAlchemy issues with postgres:// vs postgresql://
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

# --- Analytics ---
# Calendar days are computed in this zone (IANA name)
LIFELOG_TIMEZONE = os.getenv("LIFELOG_TIMEZONE", "UTC")
STREAK_LOOKBACK_DAYS = int(os.getenv("STREAK_LOOKBACK_DAYS", "365"))
FAVORITE_TAG_NAME = os.getenv("FAVORITE_TAG_NAME", "Favorite")
FAVORITE_TAG_COLOR = "#EAB308"
RECENT_ENTRIES_LIMIT = int(os.getenv("RECENT_ENTRIES_LIMIT", "5"))
NOTIFICATIONS_LIMIT = int(os.getenv("NOTIFICATIONS_LIMIT", "50"))

# --- App ---
APP_NAME = os.getenv("APP_NAME", "LifeLog")
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
