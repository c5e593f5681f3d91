"""
Configuration settings for QR Vinyl
Loads Spotify credentials from .env and holds tuning constants
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root (parent of the config package)
BASE_DIR = Path(__file__).resolve().parent.parent

# Missing .env is fine: credentials fall back to empty strings
load_dotenv(BASE_DIR / '.env')

# Try to import optional libraries and set availability flags
try:
    from picamera2 import Picamera2
    PICAMERA2_AVAILABLE = True
except ImportError:
    PICAMERA2_AVAILABLE = False

# Spotify API credentials (get from https://developer.spotify.com/dashboard)
SPOTIFY_CLIENT_ID = os.getenv('SPOTIFY_CLIENT_ID', '')
SPOTIFY_CLIENT_SECRET = os.getenv('SPOTIFY_CLIENT_SECRET', '')
SPOTIFY_REDIRECT_URI = os.getenv('SPOTIFY_REDIRECT_URI', 'http://127.0.0.1:8888/callback')
TOKEN_CACHE_PATH = os.getenv('QR_VINYL_TOKEN_CACHE', '.spotify_cache')

# Spotify API scopes
SCOPE = 'user-read-playback-state,user-modify-playback-state,user-read-currently-playing'

# Connection budgets (seconds)
AUTH_TIMEOUT = 30  # Token acquisition / refresh
CONNECT_TIMEOUT = 15  # Device lookup and transport commands
STATE_POLL_INTERVAL = 1.0  # Seconds between playback state polls

# Logging
LOG_LEVEL = os.getenv('QR_VINYL_LOG_LEVEL', 'INFO').upper()

# Camera settings
CAMERA_WIDTH = 640
CAMERA_HEIGHT = 480

# Now-playing window
WINDOW_NAME = 'QR Vinyl'
SCREEN_WIDTH = 480
SCREEN_HEIGHT = 720

# Vinyl interaction
SPIN_DURATION = 3.0  # Seconds per full turn while playing
DRAG_SENSITIVITY = 300.0  # Pixels of (dx - dy) per full turn
FLING_SPEED_THRESHOLD = 800.0  # Release speed (px/s) that starts a momentum spin
MOMENTUM_FACTOR = 1200.0  # Turn duration = MOMENTUM_FACTOR / release speed
MOMENTUM_MIN_DURATION = 0.4
MOMENTUM_MAX_DURATION = 2.5
RELAX_DELAY = 1.5  # Seconds before a momentum spin relaxes to SPIN_DURATION
RESUME_DELAY = 0.3  # Seconds after release before playback resumes
