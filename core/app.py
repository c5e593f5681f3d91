"""
Core QR Vinyl application class
Orchestrates camera, QR scanner, scan controller and the now-playing session
"""

import os
import sys
import time
import logging

import cv2
import numpy as np

from config.settings import WINDOW_NAME
from core.errors import CameraPermissionDenied, CameraUnavailable
from core.player_session import PlayerSession, SessionStatus
from core.scan_controller import ScanController
from hardware.camera import Camera
from playback.client import SpotifyClient
from playback.worker import CommandWorker
from qr.scanner import QRScanner
from ui import screens
from ui.gestures import DragTracker, dispatch_mouse

logger = logging.getLogger(__name__)

KEY_ESC = 27


class VinylPlayer:
    """Main application: scan a code, play the track, spin the record"""

    def __init__(self, force_display=False, verbose=False, debug_mode=False, no_display=False):
        self.verbose = verbose
        self.debug_mode = debug_mode
        print("\n" + "="*60)
        print("  QR VINYL - Initialization")
        print("="*60)

        self.spotify = SpotifyClient(verbose=verbose)
        self.worker = CommandWorker().start()
        self.camera = Camera()
        self.qr_scanner = QRScanner(debug_mode=debug_mode)
        self.scan_controller = ScanController(self.camera, self._open_player)
        self.drag = DragTracker()

        self.session = None
        self.camera_blocked = None  # Message while the camera cannot be opened
        self.last_qr_attempt_time = 0
        self.last_status = None
        self.reported_status = None
        self.heard_playing = False

        self.display_available = False if no_display else self._check_display(force_display)
        if self.display_available:
            cv2.namedWindow(WINDOW_NAME, cv2.WINDOW_AUTOSIZE)
            cv2.setMouseCallback(WINDOW_NAME, self._on_mouse)
            print("✓ Display available - camera preview and player will be shown")
        else:
            print("⚠ Display not available - running in headless mode")
            print("  Playback returns to scanning when the track stops or fails")

        self._open_camera()
        if self.camera_blocked and not self.display_available:
            print(f"❌ {self.camera_blocked}")
            sys.exit(1)

        print("\n✓ QR Vinyl is ready to spin!")

    def _check_display(self, force_display):
        """Try to open a test window to see if a display works"""
        if 'DISPLAY' not in os.environ and sys.platform.startswith('linux'):
            if force_display:
                print("⚠ DISPLAY not set - export DISPLAY=:0 or use ssh -X")
            return False
        try:
            test_img = np.zeros((100, 100, 3), dtype=np.uint8)
            cv2.namedWindow('__test__', cv2.WINDOW_NORMAL)
            cv2.imshow('__test__', test_img)
            cv2.waitKey(1)
            cv2.destroyWindow('__test__')
            return True
        except cv2.error as e:
            if self.verbose or force_display:
                print(f"⚠ Display test failed: {e}")
            return False

    def _open_camera(self):
        try:
            self.camera.start()
            self.camera_blocked = None
        except CameraPermissionDenied as e:
            self.camera_blocked = str(e)
        except CameraUnavailable as e:
            self.camera_blocked = str(e)
            print("\nTroubleshooting:")
            print("- Check camera cable connection")
            print("- Verify camera is enabled in /boot/firmware/config.txt")
            print("- Try: rpicam-still -o test.jpg (to verify camera works)")

    # Navigation

    def _open_player(self, track_uri):
        """Scan controller accepted a code: show the now-playing screen"""
        print(f"\n{'='*60}")
        print(f"→ Track: {track_uri}")
        print(f"{'='*60}")
        self.session = PlayerSession(self.spotify, track_uri, self.worker)
        self.heard_playing = False
        self.reported_status = None
        if self.display_available:
            cv2.imshow(WINDOW_NAME, screens.render_loading())
            cv2.waitKey(1)
        print("→ Connecting to Spotify...")
        self.session.start()

    def _close_player(self):
        """Back to the scanner, whatever happened on the player screen"""
        if self.session is None:
            return
        self.session.close()
        self.session = None
        self.drag = DragTracker()
        print("\n← Back to scanning")
        try:
            self.scan_controller.resume_scanning()
            self.camera_blocked = None
        except (CameraPermissionDenied, CameraUnavailable) as e:
            self.camera_blocked = str(e)

    def _report(self, status):
        """Print the session outcome once per change"""
        if status is self.reported_status:
            return
        self.reported_status = status
        if status is SessionStatus.READY:
            print(f"♪ Now playing: {self.session.track_uri}")
        elif status is SessionStatus.ERROR:
            print(f"✗ {self.session.error_message}")

    # Input

    def _on_mouse(self, event, x, y, flags, param):
        if self.session is None or not self.session.ready:
            return
        dispatch_mouse(self.drag, self.session.controller, event, (x, y), flags)

    def _handle_key(self, key):
        """Returns False when the user asked to quit"""
        if key == ord('q'):
            return False
        if self.session is not None:
            if key == ord(' ') and self.session.ready:
                self.session.controller.toggle()
                print(f"{'⏸' if self.session.controller.is_paused else '▶️'} "
                      f"{'Paused' if self.session.controller.is_paused else 'Resumed'}")
            elif key in (ord('b'), KEY_ESC):
                self._close_player()
            elif key == ord('r') and self.session.status is SessionStatus.ERROR:
                print("→ Retrying...")
                self.session.retry()
                self.reported_status = None
        elif self.camera_blocked and key == ord('r'):
            self._open_camera()
        return True

    # Main loop steps

    def _scan_step(self):
        if self.camera_blocked:
            return screens.render_permission()

        ret, frame = self.camera.read()
        if not ret or frame is None:
            print("✗ Failed to read from camera")
            time.sleep(0.1)
            return None

        codes = self.qr_scanner.decode_all(frame)
        current_time = time.time()
        if self.debug_mode and codes and (current_time - self.last_qr_attempt_time) > 1.0:
            print(f"[DEBUG] QR detected: {codes[0][:50]}...")
            self.last_qr_attempt_time = current_time

        screens.draw_scan_overlay(frame, self.qr_scanner.qr_detection_count, self.debug_mode)
        self.scan_controller.on_capture(codes)
        return frame

    def _player_step(self):
        session = self.session
        session.pump()
        self._report(session.status)
        if not self.display_available:
            self._headless_player_check(session)
            return None
        if session.status is SessionStatus.LOADING:
            return screens.render_loading()
        if session.status is SessionStatus.ERROR:
            return screens.render_error(session.error_message or '')
        return screens.render_now_playing(session.controller)

    def _headless_player_check(self, session):
        """Without a screen there is no back button: leave when playback stops"""
        state = session.controller.state
        status = (session.status, state.is_paused)
        if status != self.last_status and self.verbose:
            print(f"[{session.status.value}] {'paused' if state.is_paused else 'playing'}")
        self.last_status = status

        if not state.is_paused:
            self.heard_playing = True

        if session.status is SessionStatus.ERROR or session.stream_closed:
            self._close_player()
        elif self.heard_playing and state.is_paused:
            self._close_player()

    def run(self):
        """Main application loop"""
        print("\n" + "="*60)
        print("  QR VINYL - Drop the needle!")
        print("="*60)
        print("\n📷 Scan a Spotify track QR code to play it")
        print("\n⌨️  CONTROLS:")
        print("  • Drag the record - Scratch")
        print("  • Space / click button - Play/Pause")
        print("  • 'b' or Esc - Back to scanning")
        print("  • 'r' - Retry after an error")
        print("  • 'q' - Quit application")
        print("\n" + "="*60 + "\n")

        try:
            while True:
                if self.session is None:
                    frame = self._scan_step()
                else:
                    frame = self._player_step()

                if self.display_available:
                    if frame is not None:
                        cv2.imshow(WINDOW_NAME, frame)
                    key = cv2.waitKey(16) & 0xFF
                else:
                    # Headless mode - use Ctrl+C to quit
                    key = 0
                    time.sleep(0.033)  # ~30 fps

                if key and not self._handle_key(key):
                    print("\n👋 QR Vinyl signing off...")
                    break

        except KeyboardInterrupt:
            print("\n\n⚠ Interrupted by user")

        finally:
            print("Cleaning up...")
            if self.session is not None:
                self.session.close()
            self.worker.stop()
            self.camera.stop()
            if self.display_available:
                cv2.destroyAllWindows()
            print("✓ Thank you for using QR Vinyl!\n")
