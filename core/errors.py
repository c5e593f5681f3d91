"""
Error types for QR Vinyl
"""


class QRVinylError(Exception):
    """Base class for QR Vinyl errors"""


class CameraPermissionDenied(QRVinylError):
    """Video devices exist but the current user may not open them"""


class CameraUnavailable(QRVinylError):
    """No camera could be opened"""


class ConnectionFailure(QRVinylError):
    """Not connected to Spotify (timeout, rejection or no device)"""


class PlaybackCommandFailure(QRVinylError):
    """A transport command the caller depends on was rejected"""


class SessionEnded(QRVinylError):
    """The Spotify session behind a state subscription is gone"""
