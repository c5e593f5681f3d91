"""Configuration for QR Vinyl"""
