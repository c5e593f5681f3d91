"""QR code scanning for QR Vinyl"""
