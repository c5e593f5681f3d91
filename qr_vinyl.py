#!/usr/bin/env python3
"""
QR Vinyl - Spotify QR Code Player with a scratchable record
Scans a QR code, plays the track on Spotify and spins a vinyl
you can drag to scratch.

Version: 1.0
License: MIT
"""

import os
import sys
import logging
import argparse

from config.settings import LOG_LEVEL
from core.app import VinylPlayer


def setup_logging(verbose=False):
    """Configure console logging"""
    level = logging.DEBUG if verbose else getattr(logging, LOG_LEVEL, logging.INFO)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    ))
    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(console)

    # Quiet down noisy libraries
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('requests').setLevel(logging.WARNING)
    logging.getLogger('spotipy').setLevel(logging.WARNING)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description='QR Vinyl - Spotify QR Code Player',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Authenticate once (writes the token cache):
  python3 authenticate_spotify.py

  # Run with display (camera preview and vinyl player):
  DISPLAY=:0 python3 qr_vinyl.py

  # Run in headless mode (no window, Ctrl+C to quit):
  python3 qr_vinyl.py --no-display

  # Run with verbose debugging:
  python3 qr_vinyl.py --verbose --debug
        """
    )
    parser.add_argument(
        '--display', '-d',
        action='store_true',
        help='Force display mode (show error if display unavailable)'
    )
    parser.add_argument(
        '--no-display',
        action='store_true',
        help='Run in headless mode (no window)'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Verbose output (debug logging)'
    )
    parser.add_argument(
        '--debug', '--debug-mode',
        action='store_true',
        dest='debug_mode',
        help='Debug mode (show detailed QR code information)'
    )
    args = parser.parse_args()

    setup_logging(args.verbose)

    # Set DISPLAY if requested
    if args.display and 'DISPLAY' not in os.environ:
        if os.path.exists('/dev/tty7') or os.path.exists('/dev/tty1'):
            os.environ['DISPLAY'] = ':0'
            print("→ Set DISPLAY=:0 for local display")

    try:
        player = VinylPlayer(
            force_display=args.display,
            verbose=args.verbose,
            debug_mode=args.debug_mode,
            no_display=args.no_display
        )
        if args.no_display:
            print("→ Running in headless mode (--no-display flag)")
        if args.debug_mode:
            print("→ Debug mode enabled - showing detailed QR code information")
        player.run()
    except Exception as e:
        logging.getLogger(__name__).exception("Fatal error")
        print(f"\n❌ Fatal error: {e}")
        sys.exit(1)
