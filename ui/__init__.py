"""Screens and input handling for QR Vinyl"""
