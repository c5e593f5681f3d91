"""
Spotify Client module for QR Vinyl
Handles Spotify authentication, transport commands and state subscriptions
"""

import logging

import requests
import spotipy
from spotipy.cache_handler import CacheFileHandler
from spotipy.exceptions import SpotifyException
from spotipy.oauth2 import SpotifyOAuth, SpotifyOauthError

from config.settings import (
    SPOTIFY_CLIENT_ID,
    SPOTIFY_CLIENT_SECRET,
    SPOTIFY_REDIRECT_URI,
    SCOPE,
    TOKEN_CACHE_PATH,
    AUTH_TIMEOUT,
    CONNECT_TIMEOUT,
    STATE_POLL_INTERVAL
)
from core.errors import ConnectionFailure, PlaybackCommandFailure, SessionEnded
from core.playback_state import PlaybackState
from playback.subscription import StateSubscription

logger = logging.getLogger(__name__)

SPOTIFY_ERRORS = (SpotifyException, SpotifyOauthError, requests.RequestException)


def create_auth_manager(cache_path=TOKEN_CACHE_PATH):
    """OAuth manager bound to the token cache written by authenticate_spotify.py"""
    return SpotifyOAuth(
        client_id=SPOTIFY_CLIENT_ID,
        client_secret=SPOTIFY_CLIENT_SECRET,
        redirect_uri=SPOTIFY_REDIRECT_URI,
        scope=SCOPE,
        cache_handler=CacheFileHandler(cache_path=cache_path),
        open_browser=False,  # Headless: never try to launch a browser
        requests_timeout=AUTH_TIMEOUT
    )


def create_spotify(auth_manager):
    """API client for transport commands; one attempt per call, no retries"""
    return spotipy.Spotify(
        auth_manager=auth_manager,
        requests_timeout=CONNECT_TIMEOUT,
        retries=0,
        status_retries=0
    )


class SpotifyClient:
    """Playback gateway over the Spotify Web API"""

    def __init__(self, verbose=False, auth_factory=create_auth_manager,
                 spotify_factory=create_spotify, poll_interval=STATE_POLL_INTERVAL):
        self.verbose = verbose
        self.sp = None
        self.device_id = None
        self._auth_factory = auth_factory
        self._spotify_factory = spotify_factory
        self._poll_interval = poll_interval
        self._subscriptions = []

    @property
    def connected(self):
        return self.sp is not None and self.device_id is not None

    def connect(self):
        """
        Acquire a token, then find a device to play on

        Returns:
            bool: True if connected. Timeouts and rejections are logged and
            reported as False.
        """
        if not SPOTIFY_CLIENT_ID or not SPOTIFY_CLIENT_SECRET:
            logger.error("Spotify credentials missing - set SPOTIFY_CLIENT_ID and "
                         "SPOTIFY_CLIENT_SECRET in .env")
            return False

        # Step 1: token from cache (refreshed if expired)
        logger.info("Getting Spotify authentication token...")
        try:
            auth_manager = self._auth_factory()
            token_info = auth_manager.validate_token(auth_manager.cache_handler.get_cached_token())
        except requests.Timeout as e:
            logger.error("Spotify authentication timed out after %ss: %s", AUTH_TIMEOUT, e)
            return False
        except SPOTIFY_ERRORS as e:
            logger.error("Spotify authentication failed: %s", e)
            return False

        if not token_info:
            logger.error("No cached Spotify token. Run: python3 authenticate_spotify.py")
            return False

        # Step 2: API client and playback device
        logger.info("Connecting to Spotify playback device...")
        try:
            sp = self._spotify_factory(auth_manager)
            device_id = self._find_device(sp)
        except requests.Timeout as e:
            logger.error("Spotify device lookup timed out after %ss: %s", CONNECT_TIMEOUT, e)
            return False
        except SPOTIFY_ERRORS as e:
            logger.error("Failed to connect to Spotify: %s", e)
            if getattr(e, 'http_status', None) == 403:
                logger.error("Playback control requires Spotify Premium")
            return False

        if not device_id:
            logger.error("No Spotify device found - open Spotify on a device first")
            return False

        self.sp = sp
        self.device_id = device_id
        logger.info("Connected to Spotify (device %s)", device_id)
        if self.verbose:
            try:
                user = sp.current_user()
                logger.info("Logged in as: %s", (user or {}).get('display_name', 'Unknown'))
            except SPOTIFY_ERRORS as e:
                logger.debug("User lookup failed: %s", e)
        return True

    @staticmethod
    def _find_device(sp):
        """Active device if there is one, else the first available"""
        devices = (sp.devices() or {}).get('devices') or []
        for device in devices:
            if device.get('is_active'):
                return device['id']
        if devices:
            return devices[0]['id']
        return None

    def play(self, track_uri):
        """
        Start playing a track

        Raises:
            PlaybackCommandFailure: not connected or Spotify rejected the request
        """
        if not self.connected:
            raise PlaybackCommandFailure("Not connected to Spotify")
        try:
            self.sp.start_playback(device_id=self.device_id, uris=[track_uri])
        except SPOTIFY_ERRORS as e:
            logger.error("Failed to play %s: %s", track_uri, e)
            raise PlaybackCommandFailure(str(e)) from e
        logger.info("Playing track: %s", track_uri)

    def pause(self):
        """Pause playback. Failures are logged, not raised."""
        if not self.connected:
            logger.warning("Pause ignored - not connected")
            return False
        try:
            self.sp.pause_playback(device_id=self.device_id)
        except SPOTIFY_ERRORS:
            logger.error("Failed to pause", exc_info=True)
            return False
        logger.debug("Paused playback")
        return True

    def resume(self):
        """Resume playback. Failures are logged, not raised."""
        if not self.connected:
            logger.warning("Resume ignored - not connected")
            return False
        try:
            self.sp.start_playback(device_id=self.device_id)
        except SPOTIFY_ERRORS:
            logger.error("Failed to resume", exc_info=True)
            return False
        logger.debug("Resumed playback")
        return True

    def subscribe_state(self):
        """
        Start a playback state subscription

        Raises:
            ConnectionFailure: not connected
        """
        if not self.connected:
            raise ConnectionFailure("Not connected to Spotify")
        subscription = StateSubscription(
            self.fetch_state,
            interval=self._poll_interval,
            on_close=self._forget_subscription
        )
        self._subscriptions.append(subscription)
        return subscription.start()

    def fetch_state(self):
        """Current playback as a PlaybackState; raises SessionEnded on 401"""
        sp = self.sp
        if sp is None:
            raise SessionEnded("Disconnected")
        try:
            playback = sp.current_playback()
        except SpotifyException as e:
            if e.http_status == 401:
                raise SessionEnded(str(e)) from e
            raise
        return PlaybackState.from_playback(playback)

    def _forget_subscription(self, subscription):
        try:
            self._subscriptions.remove(subscription)
        except ValueError:
            pass

    def disconnect(self):
        """End every subscription and drop the session. Never raises."""
        for subscription in list(self._subscriptions):
            try:
                subscription.cancel()
            except Exception:
                logger.error("Failed to cancel state subscription", exc_info=True)
        self._subscriptions = []
        was_connected = self.sp is not None
        self.sp = None
        self.device_id = None
        if was_connected:
            logger.info("Disconnected from Spotify")
