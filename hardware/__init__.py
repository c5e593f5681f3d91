"""Hardware modules for QR Vinyl"""

from .camera import Camera

__all__ = ['Camera']
