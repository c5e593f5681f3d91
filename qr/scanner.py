"""
QR Code Scanner module for QR Vinyl
Handles QR code decoding and detection overlays
"""

import cv2
import numpy as np
from pyzbar import pyzbar

from playback.uri import is_track_uri

GREEN = (84, 185, 29)  # Spotify green (BGR)
ORANGE = (0, 165, 255)


def decode_payload(data):
    """Decode raw QR bytes to text"""
    try:
        return data.decode('utf-8')
    except UnicodeDecodeError:
        return data.decode('latin-1')


class QRScanner:
    """Decodes every QR code in a camera frame"""

    def __init__(self, debug_mode=False):
        self.debug_mode = debug_mode
        self.qr_detection_count = 0

    def decode_all(self, frame):
        """
        Decode QR codes from camera frame

        Args:
            frame: OpenCV frame (annotated in place)

        Returns:
            list: Decoded strings in detection order (one capture event)
        """
        decoded_objects = pyzbar.decode(frame, symbols=[pyzbar.ZBarSymbol.QRCODE])
        if decoded_objects:
            self.qr_detection_count += 1

        codes = []
        for obj in decoded_objects:
            qr_data = decode_payload(obj.data)
            codes.append(qr_data)
            self._draw_detection(frame, obj.polygon, qr_data)
        return codes

    def _draw_detection(self, frame, polygon, qr_data):
        if len(polygon) != 4:
            return
        pts = np.array([(point.x, point.y) for point in polygon], np.int32)

        # Canonical URIs in green, links that still need normalizing in orange
        color = GREEN if is_track_uri(qr_data) else ORANGE
        cv2.polylines(frame, [pts], True, color, 3)

        status_text = "TRACK" if is_track_uri(qr_data) else "LINK"
        if self.debug_mode:
            # Show first 30 chars of QR data for debugging
            preview = qr_data[:30] + "..." if len(qr_data) > 30 else qr_data
            status_text = f"{status_text}: {preview}"

        cv2.putText(
            frame, status_text,
            (int(pts[0][0]), int(pts[0][1]) - 10),
            cv2.FONT_HERSHEY_SIMPLEX, 0.5, color, 2
        )
