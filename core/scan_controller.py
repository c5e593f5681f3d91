"""
Scan controller
Owns the camera while scanning and hands the first code of a scan session
to the playback flow
"""

import logging
from enum import Enum

from playback.uri import normalize

logger = logging.getLogger(__name__)


class ScanState(Enum):
    SCANNING = 'scanning'
    SUSPENDED = 'suspended'


class ScanController:
    """Two-state scanner: one navigation per scan session"""

    def __init__(self, camera, on_track):
        """
        Args:
            camera: Camera handle with start() and stop()
            on_track: Called with the track URI when a code is accepted
        """
        self.camera = camera
        self.on_track = on_track
        self.state = ScanState.SCANNING
        self.scan_count = 0

    @property
    def scanning(self):
        return self.state is ScanState.SCANNING

    def on_capture(self, codes):
        """
        Handle the codes decoded from one camera frame

        Args:
            codes: Decoded strings (None and empty entries are skipped)

        Returns:
            str or None: Track URI that triggered navigation
        """
        if not self.scanning:
            return None

        code = next((c for c in codes if c), None)
        if code is None:
            return None

        self.state = ScanState.SUSPENDED
        self.camera.stop()
        self.scan_count += 1

        track_uri = normalize(code)
        logger.info("QR code accepted: %s -> %s", code, track_uri)
        self.on_track(track_uri)
        return track_uri

    def resume_scanning(self):
        """Back from the playback flow: restart the camera and scan again"""
        if self.scanning:
            return
        self.state = ScanState.SCANNING
        self.camera.start()
        logger.debug("Scanning resumed")
