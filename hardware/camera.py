"""
Camera module for QR Vinyl
Handles camera initialization for both picamera2 and OpenCV
"""

import os
import cv2
import glob
import logging

from config.settings import (
    PICAMERA2_AVAILABLE,
    CAMERA_WIDTH,
    CAMERA_HEIGHT
)
from core.errors import CameraPermissionDenied, CameraUnavailable

# Import picamera2 if available
if PICAMERA2_AVAILABLE:
    from picamera2 import Picamera2

logger = logging.getLogger(__name__)


def list_video_devices():
    """Return (index, path) for every /dev/video* node, sorted by index"""
    devices = []
    for dev_path in glob.glob('/dev/video*'):
        try:
            devices.append((int(dev_path.replace('/dev/video', '')), dev_path))
        except ValueError:
            continue
    return sorted(devices)


class Camera:
    """Scanner camera handle - picamera2 first, then OpenCV"""

    def __init__(self, width=CAMERA_WIDTH, height=CAMERA_HEIGHT):
        self.width = width
        self.height = height
        self.device = None
        self.camera_type = None

    @property
    def running(self):
        return self.device is not None

    def start(self):
        """
        Open the camera

        Raises:
            CameraPermissionDenied: video devices exist but none may be opened
            CameraUnavailable: no camera could be opened
        """
        if self.running:
            return
        if PICAMERA2_AVAILABLE and self._start_picamera2():
            return
        if self._start_opencv():
            return

        devices = list_video_devices()
        if devices and not any(os.access(path, os.R_OK | os.W_OK) for _, path in devices):
            raise CameraPermissionDenied(
                "No permission to open the camera - add this user to the 'video' group"
            )
        raise CameraUnavailable("Could not read from camera")

    def _start_picamera2(self):
        picam2 = None
        try:
            picam2 = Picamera2()
            config = picam2.create_preview_configuration(
                main={"size": (self.width, self.height)}
            )
            picam2.configure(config)
            picam2.start()

            # Test if we can read a frame
            test_frame = picam2.capture_array()
            if test_frame is not None and test_frame.size > 0:
                self.device = picam2
                self.camera_type = 'picamera2'
                logger.info("Camera initialized using picamera2 (libcamera)")
                return True
        except Exception as e:
            logger.warning("picamera2 failed: %s", e)
        if picam2 is not None:
            self._close_picamera2(picam2)
        return False

    def _start_opencv(self):
        # Try existing devices first, then fall back to range 0-20
        indices = sorted(set([index for index, _ in list_video_devices()] + list(range(21))))
        for device_index in indices:
            capture = cv2.VideoCapture(device_index)
            if capture.isOpened():
                capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
                capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
                ret, _ = capture.read()
                if ret:
                    self.device = capture
                    self.camera_type = 'opencv'
                    logger.info("Camera initialized on device %d (OpenCV/V4L2)", device_index)
                    return True
            capture.release()
        return False

    def read(self):
        """
        Read a frame

        Returns:
            tuple: (success, frame) where frame is a numpy array or None
        """
        if not self.running:
            return False, None
        if self.camera_type == 'picamera2':
            try:
                frame = self.device.capture_array()
            except Exception as e:
                logger.error("Failed to read from camera: %s", e)
                return False, None
            return frame is not None and frame.size > 0, frame
        return self.device.read()

    def stop(self):
        """Release the camera so nothing holds it while we are not scanning"""
        if not self.running:
            return
        if self.camera_type == 'picamera2':
            self._close_picamera2(self.device)
        else:
            self.device.release()
        logger.debug("Camera released")
        self.device = None
        self.camera_type = None

    @staticmethod
    def _close_picamera2(picam2):
        try:
            picam2.stop()
            picam2.close()
        except Exception as e:
            logger.debug("picamera2 close failed: %s", e)
