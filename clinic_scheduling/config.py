import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./clinic.db")

# Connection pool settings (ignored for SQLite)
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "20"))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "30"))
DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "30"))
DB_POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "300"))
DB_LOG_SLOW_QUERIES = os.getenv("DB_LOG_SLOW_QUERIES", "true").lower() == "true"
DB_SLOW_QUERY_THRESHOLD = float(os.getenv("DB_SLOW_QUERY_THRESHOLD", "1.0"))

# Scheduling limits
# Creating counts only confirmed appointments against CREATE_DAILY_CAP,
# editing counts every appointment of the day against EDIT_DAILY_CAP.
CREATE_DAILY_CAP = int(os.getenv("CREATE_DAILY_CAP", "8"))
EDIT_DAILY_CAP = int(os.getenv("EDIT_DAILY_CAP", "10"))
DEFAULT_DOCTOR_DAILY_MAX = int(os.getenv("DEFAULT_DOCTOR_DAILY_MAX", "20"))

# Doctors are only checked for activeness when an edit moves an appointment to them,
# set to "true" to also reject inactive doctors when booking
REQUIRE_ACTIVE_DOCTOR_ON_CREATE = (
    os.getenv("REQUIRE_ACTIVE_DOCTOR_ON_CREATE", "false").lower() == "true"
)

# Listing
DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))
