"""Core QR Vinyl modules"""
