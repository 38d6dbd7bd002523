# config.py
import os

from dotenv import load_dotenv

from services.weights import DEFAULT_CONFIG, load_scoring_config

load_dotenv()

REVIEW_PROVIDER = os.getenv("REVIEW_PROVIDER", "stub").lower()
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
PORT = int(os.getenv("PORT", 8001))

# request limits
MAX_UPLOAD_PHOTOS = int(os.getenv("MAX_UPLOAD_PHOTOS", "12"))
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_MB", "15")) * 1024 * 1024

# selection / preprocessing
MAX_SELECTED = 6  # fixed selection size, not configurable
RESIZE_WIDTH = int(os.getenv("RESIZE_WIDTH", "640"))
FEEDBACK_ENABLED = os.getenv("FEEDBACK_ENABLED", "true").lower() == "true"

SCORING_WEIGHTS_FILE = os.getenv("SCORING_WEIGHTS_FILE")
SCORING_CONFIG = load_scoring_config(SCORING_WEIGHTS_FILE) if SCORING_WEIGHTS_FILE else DEFAULT_CONFIG
