"""
Playback state snapshot as reported by Spotify
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PlaybackState:
    """Latest known playback state. The default is the pre-notification state."""
    is_paused: bool = True
    playback_position_ms: int = 0
    track_duration_ms: int = 0

    @classmethod
    def from_playback(cls, playback: Optional[dict]) -> 'PlaybackState':
        """Build from a spotipy current_playback() payload"""
        if not playback:
            return cls()
        item = playback.get('item') or {}
        return cls(
            is_paused=not playback.get('is_playing', False),
            playback_position_ms=max(0, int(playback.get('progress_ms') or 0)),
            track_duration_ms=max(0, int(item.get('duration_ms') or 0)),
        )

    @property
    def progress(self) -> float:
        if self.track_duration_ms <= 0:
            return 0.0
        return max(0.0, min(1.0, self.playback_position_ms / self.track_duration_ms))

    @property
    def remaining_ms(self) -> int:
        return max(0, self.track_duration_ms - self.playback_position_ms)


def format_duration(milliseconds: int) -> str:
    """Format milliseconds as m:ss"""
    seconds = max(0, int(milliseconds)) // 1000
    return f"{seconds // 60}:{seconds % 60:02d}"
