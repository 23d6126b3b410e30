"""Shared test configuration.

The environment is pinned before any application module is imported, because
configuration is loaded once at import time.
"""

import os
from pathlib import Path

os.environ["APP_ENVIRONMENT"] = "Test"
os.environ["APP_CONFIG_FILE"] = str(Path(__file__).resolve().parent.parent / "config.yaml")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_FILE"] = ""
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["REDIS_ENABLED"] = "false"
os.environ["AUTHENTICATION_GOOGLE_CLIENT_ID"] = "test-google-client-id"
os.environ["AUTHENTICATION_GOOGLE_CLIENT_SECRET"] = "test-google-client-secret"
os.environ["AUTHENTICATION_MICROSOFT_CLIENT_ID"] = ""
os.environ["AUTHENTICATION_MICROSOFT_CLIENT_SECRET"] = ""
os.environ["AUTHENTICATION_FACEBOOK_APP_ID"] = "YOUR_FACEBOOK_APP_ID"
os.environ["AUTHENTICATION_FACEBOOK_APP_SECRET"] = "YOUR_FACEBOOK_APP_SECRET"

from tests.fixtures import *  # noqa: E402,F401,F403
