from pathlib import Path
import os
from dotenv import load_dotenv

load_dotenv()

# project paths
BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent
DATA_DIR = Path(os.getenv("CAPS_DATA_DIR", BASE_DIR / "data"))
LOGS_DIR = DATA_DIR / "logs"

# preferences (last selected hospital)
PREFERENCES_FILE = Path(os.getenv("CAPS_PREFERENCES_FILE", DATA_DIR / "preferences.json"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "dashboard.log")
# per-logger overrides, e.g. "caps_dashboard.extract=DEBUG,sqlalchemy.engine=INFO"
LOG_LEVELS = os.getenv("LOG_LEVELS", "")

# current dashboard user (authentication lives outside this app)
DASHBOARD_USER_EMAIL = os.getenv("DASHBOARD_USER_EMAIL")

# Database
DB_USER = os.getenv("DB_USER")
DB_PASSWORD = os.getenv("DB_PASSWORD")
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = os.getenv("DB_PORT", "5432")
DB_NAME = os.getenv("DB_NAME")

if os.getenv("DATABASE_URL"):
    DATABASE_URL = os.getenv("DATABASE_URL")
elif all([DB_USER, DB_PASSWORD, DB_NAME]):
    DATABASE_URL = f"postgresql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
else:
    DATABASE_URL = None
