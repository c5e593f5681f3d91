"""
Screen rendering for QR Vinyl
Draws the scanner overlay and the player screens with OpenCV
"""

import math

import cv2
import numpy as np

from config.settings import SCREEN_WIDTH, SCREEN_HEIGHT
from core.playback_state import format_duration

BACKGROUND = (18, 18, 18)  # #121212
TRACK_BG = (40, 40, 40)  # #282828
GREEN = (84, 185, 29)  # #1DB954
WHITE = (255, 255, 255)
GREY = (160, 160, 160)
RED = (80, 80, 232)

FONT = cv2.FONT_HERSHEY_SIMPLEX

# Player layout
DISC_CENTER = (SCREEN_WIDTH // 2, 270)
DISC_RADIUS = 180
LABEL_RADIUS = 60
BAR_Y = 500
BAR_LEFT = 40
BAR_RIGHT = SCREEN_WIDTH - 40
BUTTON_CENTER = (SCREEN_WIDTH // 2, 620)
BUTTON_RADIUS = 44


def blank_screen():
    return np.full((SCREEN_HEIGHT, SCREEN_WIDTH, 3), BACKGROUND, dtype=np.uint8)


def put_centered(frame, text, y, scale=0.7, color=WHITE, thickness=2):
    (width, _), _ = cv2.getTextSize(text, FONT, scale, thickness)
    x = (frame.shape[1] - width) // 2
    cv2.putText(frame, text, (x, y), FONT, scale, color, thickness, cv2.LINE_AA)


def in_disc(pos):
    return math.dist(pos, DISC_CENTER) <= DISC_RADIUS


def in_button(pos):
    return math.dist(pos, BUTTON_CENTER) <= BUTTON_RADIUS


def draw_scan_overlay(frame, scan_count, debug_mode=False):
    """Status text over the live camera frame"""
    cv2.putText(frame, "Scan a Spotify QR code", (10, 30), FONT, 0.7, GREEN, 2)
    cv2.putText(frame, "Position the QR code within the frame", (10, 55), FONT, 0.45, WHITE, 1)
    if scan_count > 0:
        cv2.putText(frame, f"QR scans: {scan_count}", (10, 80), FONT, 0.4, (150, 150, 255), 1)
    cv2.putText(frame, "'q' to quit", (10, frame.shape[0] - 20), FONT, 0.4, (180, 180, 180), 1)
    if debug_mode:
        cv2.putText(frame, "DEBUG MODE", (frame.shape[1] - 150, 30), FONT, 0.5, (255, 0, 255), 2)
    return frame


def render_permission():
    frame = blank_screen()
    put_centered(frame, "Camera permission required", 300, 0.8)
    put_centered(frame, "This app needs camera access to scan QR codes", 340, 0.45, GREY, 1)
    put_centered(frame, "Press 'r' to try again", 420, 0.6, GREEN)
    return frame


def render_loading():
    frame = blank_screen()
    cv2.circle(frame, (SCREEN_WIDTH // 2, 300), 30, GREEN, 4, cv2.LINE_AA)
    put_centered(frame, "Connecting to Spotify...", 380, 0.7)
    return frame


def render_error(message):
    frame = blank_screen()
    cv2.circle(frame, (SCREEN_WIDTH // 2, 260), 40, RED, 4, cv2.LINE_AA)
    put_centered(frame, "!", 276, 1.2, RED, 3)
    put_centered(frame, "Oops! Something went wrong", 350, 0.75)
    put_centered(frame, message[:60], 390, 0.45, GREY, 1)
    put_centered(frame, "Press 'r' to try again, 'b' to go back", 460, 0.55, GREEN)
    return frame


def draw_vinyl(frame, phase):
    """Disc with grooves and a label marker at the rotation phase"""
    cx, cy = DISC_CENTER
    cv2.circle(frame, DISC_CENTER, DISC_RADIUS, (10, 10, 10), -1, cv2.LINE_AA)
    for radius in range(LABEL_RADIUS + 15, DISC_RADIUS, 12):
        cv2.circle(frame, DISC_CENTER, radius, (35, 35, 35), 1, cv2.LINE_AA)
    cv2.circle(frame, DISC_CENTER, LABEL_RADIUS, GREEN, -1, cv2.LINE_AA)

    # Clockwise from 12 o'clock
    angle = phase * 2 * math.pi
    tip = (int(cx + LABEL_RADIUS * math.sin(angle)), int(cy - LABEL_RADIUS * math.cos(angle)))
    cv2.line(frame, DISC_CENTER, tip, WHITE, 4, cv2.LINE_AA)
    cv2.circle(frame, DISC_CENTER, 6, BACKGROUND, -1, cv2.LINE_AA)


def draw_progress(frame, state):
    cv2.rectangle(frame, (BAR_LEFT, BAR_Y - 3), (BAR_RIGHT, BAR_Y + 3), TRACK_BG, -1)
    filled = BAR_LEFT + int((BAR_RIGHT - BAR_LEFT) * state.progress)
    if filled > BAR_LEFT:
        cv2.rectangle(frame, (BAR_LEFT, BAR_Y - 3), (filled, BAR_Y + 3), GREEN, -1)
    cv2.putText(frame, format_duration(state.playback_position_ms),
                (BAR_LEFT, BAR_Y + 28), FONT, 0.45, GREY, 1, cv2.LINE_AA)
    remaining = format_duration(state.remaining_ms)
    (width, _), _ = cv2.getTextSize(remaining, FONT, 0.45, 1)
    cv2.putText(frame, remaining, (BAR_RIGHT - width, BAR_Y + 28), FONT, 0.45, GREY, 1, cv2.LINE_AA)


def draw_toggle(frame, is_paused):
    cx, cy = BUTTON_CENTER
    cv2.circle(frame, BUTTON_CENTER, BUTTON_RADIUS, GREEN, -1, cv2.LINE_AA)
    if is_paused:
        triangle = np.array([(cx - 12, cy - 18), (cx - 12, cy + 18), (cx + 18, cy)], np.int32)
        cv2.fillPoly(frame, [triangle], WHITE, cv2.LINE_AA)
    else:
        cv2.rectangle(frame, (cx - 14, cy - 18), (cx - 4, cy + 18), WHITE, -1)
        cv2.rectangle(frame, (cx + 4, cy - 18), (cx + 14, cy + 18), WHITE, -1)


def render_now_playing(controller):
    frame = blank_screen()
    put_centered(frame, "Now Playing", 45, 0.8)
    draw_vinyl(frame, controller.phase)
    draw_progress(frame, controller.state)
    draw_toggle(frame, controller.is_paused)
    put_centered(frame, f"space: {controller.toggle_label} | drag: scratch | b: back",
                 SCREEN_HEIGHT - 20, 0.4, (180, 180, 180), 1)
    return frame
