"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = Path(os.environ.get("PET_SCHEDULE_DB_PATH", PROJECT_ROOT / "data" / "db" / "pet-schedule.db"))
OUTPUT_DIR = PROJECT_ROOT / "output"

# =============================================================================
# CLASSIFIER CONFIGURATION
# =============================================================================

DURATION_TOKENS = (15, 20, 30, 45, 60)
DEFAULT_SERVICE_MINUTES = 30
HOUSESIT_MINUTES = 1440  # 24 hours
OVERNIGHT_MINUTES = 720  # 12 hours

# Entries this long that cross midnight count as overnight stays
OVERNIGHT_MIN_HOURS = 8
# A single stay never contributes more than this to one day's workload
OVERNIGHT_DAILY_CAP_MINUTES = 12 * 60

CLIENT_LABEL_SEPARATORS = (" - ", " – ", " — ", " | ", " @ ")

# =============================================================================
# WORKLOAD CONFIGURATION
# =============================================================================

TRAVEL_MINUTES_PER_LEG = int(os.environ.get("TRAVEL_MINUTES_PER_LEG", "15"))
INCLUDE_TRAVEL_TIME = os.environ.get("INCLUDE_TRAVEL_TIME", "true").lower() == "true"
WARNING_RATIO = float(os.environ.get("WARNING_RATIO", "0.8"))

# Hour boundaries per period: (comfortable, busy, high). Above high = burnout.
DEFAULT_DAILY_THRESHOLDS = (4, 6, 8)
DEFAULT_WEEKLY_THRESHOLDS = (25, 35, 45)
DEFAULT_MONTHLY_THRESHOLDS = (100, 140, 180)

MAX_VISITS_PER_DAY = int(os.environ.get("MAX_VISITS_PER_DAY", "8"))
MAX_HOURS_PER_DAY = float(os.environ.get("MAX_HOURS_PER_DAY", "10"))
MAX_HOURS_PER_WEEK = float(os.environ.get("MAX_HOURS_PER_WEEK", "50"))

# Python weekday numbering (Monday=0). 6 = weeks start on Sunday.
WEEK_STARTS_ON = int(os.environ.get("WEEK_STARTS_ON", "6"))

# =============================================================================
# CLIENT MATCHING CONFIGURATION
# =============================================================================

MATCH_WEIGHTS = {
    "name_in_title": 0.8,
    "first_word": 0.4,
    "similarity_scale": 0.5,
    "pet_name": 0.6,
    "separator_prefix": 0.3,
}
NAME_SIMILARITY_CUTOFF = 0.6
PREFIX_SIMILARITY_CUTOFF = 0.8
DEFAULT_MATCH_THRESHOLD = 0.3

# =============================================================================
# REPORT CONFIGURATION
# =============================================================================

WORKLOAD_HEADERS = ["Date", "Visits", "Work Hours", "Travel Hours", "Total Hours", "Level"]
DETAIL_HEADERS = ["Date", "Client", "Service", "Start", "End", "Minutes", "Location"]
MIN_TABLE_ROWS = 12  # Minimum rows for better display in Numbers when few entries

SUMMARY_ROW_LABELS = [
    "Period",
    "Total work hours",
    "Total travel hours",
    "Average daily hours",
    "Busiest day",
    "Visits",
    "Workload level",
]

# =============================================================================
# API CONFIGURATION
# =============================================================================

PET_SCHEDULE_API_KEY = os.environ.get("PET_SCHEDULE_API_KEY", "")
API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
API_VERSION = "1.0.0"
