"""
Track URI normalization
Turns whatever a QR code encodes into a spotify:track:<id> URI
"""

import logging

logger = logging.getLogger(__name__)

TRACK_PREFIX = 'spotify:track:'
SHORT_LINK_MARKER = '/sp/'  # e.g. https://dezi.re/sp/<id>
OPEN_TRACK_MARKER = 'open.spotify.com/track/'
GENERIC_TRACK_MARKER = 'track/'


def _until(text, *stops):
    """Return text up to the first of the stop characters"""
    for stop in stops:
        text = text.split(stop, 1)[0]
    return text


def normalize(text):
    """
    Derive a track URI from scanned QR code data

    Rules are tried in order and the first match wins. Short links are
    checked before the generic track/ rule, so '.../sp/track/99' gives
    'spotify:track:track'.

    Args:
        text: Raw QR code data

    Returns:
        str: spotify:track:<id>
    """
    if TRACK_PREFIX in text:
        logger.debug("Already a track URI: %s", text)
        return text

    if SHORT_LINK_MARKER in text:
        track_id = _until(text.split(SHORT_LINK_MARKER, 1)[1], '?', '/')
        logger.debug("Short link %s -> %s", text, track_id)
        return TRACK_PREFIX + track_id

    if OPEN_TRACK_MARKER in text:
        track_id = _until(text.split('/track/', 1)[1], '?')
        logger.debug("open.spotify.com link %s -> %s", text, track_id)
        return TRACK_PREFIX + track_id

    if GENERIC_TRACK_MARKER in text:
        track_id = _until(text.split(GENERIC_TRACK_MARKER, 1)[1], '?')
        logger.debug("Generic track link %s -> %s", text, track_id)
        return TRACK_PREFIX + track_id

    logger.debug("Treating %s as a raw track ID", text)
    return TRACK_PREFIX + text


def is_track_uri(text):
    """Check if text is already a canonical track URI"""
    return text.startswith(TRACK_PREFIX)
