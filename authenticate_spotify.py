#!/usr/bin/env python3
"""
Spotify Authentication Script for QR Vinyl
Run this script once to authenticate with Spotify and cache your token.
After authentication, qr_vinyl.py will use the cached token automatically.
"""

import os
import sys
from urllib.parse import urlparse, parse_qs

import spotipy

from config.settings import (
    SPOTIFY_CLIENT_ID,
    SPOTIFY_CLIENT_SECRET,
    SPOTIFY_REDIRECT_URI,
    TOKEN_CACHE_PATH
)
from playback.client import create_auth_manager


def extract_code(callback_url):
    """Return the authorization code from a pasted callback URL, or None"""
    params = parse_qs(urlparse(callback_url).query)
    if 'code' not in params:
        return None
    return params['code'][0]


def main():
    print("\n" + "="*60)
    print("  QR VINYL - Spotify Authentication")
    print("="*60)
    print()

    if not SPOTIFY_CLIENT_ID or not SPOTIFY_CLIENT_SECRET:
        print("❌ ERROR: Spotify API credentials not configured!")
        print("\nCopy .env.example to .env and add your credentials:")
        print("1. Go to: https://developer.spotify.com/dashboard")
        print("2. Create an app and get your Client ID and Secret")
        print("3. Set SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET in .env\n")
        sys.exit(1)

    # Check if token already exists
    if os.path.exists(TOKEN_CACHE_PATH):
        print("⚠ Found existing authentication token.")
        response = input("   Do you want to re-authenticate? (y/N): ").strip().lower()
        if response != 'y':
            print("\n✓ Using existing token. No re-authentication needed.")
            print(f"   If you're having issues, delete {TOKEN_CACHE_PATH} and run this script again.")
            return

    auth_manager = create_auth_manager(TOKEN_CACHE_PATH)
    auth_url = auth_manager.get_authorize_url()

    print("📋 AUTHENTICATION STEPS:")
    print("="*60)
    print()
    print("1. Open the authorization URL below in a web browser")
    print("2. Log in to Spotify and click 'Agree'")
    print("3. You'll land on an error page (the redirect URI is localhost)")
    print("4. Copy the ENTIRE URL from the browser address bar")
    print(f"   (It should start with: {SPOTIFY_REDIRECT_URI}?code=...)")
    print("5. Paste it below and press Enter")
    print()
    print(f"🔗 Authorization URL:\n\n{auth_url}\n")
    print("="*60)
    print()

    callback_url = input("Paste the callback URL here: ").strip()
    if not callback_url:
        print("\n❌ No callback URL provided. Authentication cancelled.")
        sys.exit(1)

    code = extract_code(callback_url)
    if code is None:
        print("\n❌ Invalid callback URL. No authorization code found.")
        print(f"   Expected format: {SPOTIFY_REDIRECT_URI}?code=...")
        print(f"   You provided: {callback_url[:100]}...")
        sys.exit(1)

    print("\n⏳ Exchanging authorization code for token...")
    token = auth_manager.get_access_token(code, as_dict=False, check_cache=False)
    if not token:
        print("❌ Failed to get access token.")
        sys.exit(1)

    print("✓ Authentication successful!")
    print(f"✓ Token saved to: {TOKEN_CACHE_PATH}")

    # Test the connection
    try:
        sp = spotipy.Spotify(auth_manager=auth_manager)
        user = sp.current_user()
        if user:
            print(f"✓ Verified: Logged in as {user.get('display_name', 'Unknown')}")
    except spotipy.SpotifyException as test_error:
        print(f"⚠ Connection test failed: {test_error}")
        print("   But token was saved - try running qr_vinyl.py")

    print("\n🎉 You're all set! Run: python3 qr_vinyl.py\n")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n\n⚠ Authentication cancelled by user.")
        sys.exit(1)
    except Exception as e:
        print(f"\n❌ Unexpected error: {e}")
        print("   Check that the redirect URI in .env matches your Spotify app settings")
        print(f"   Current redirect URI: {SPOTIFY_REDIRECT_URI}")
        sys.exit(1)
