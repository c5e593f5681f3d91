"""Spotify playback modules for QR Vinyl"""
