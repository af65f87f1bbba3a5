"""Configuration settings for the metadata service."""

import os

from common.constants import DEFAULT_ADMIN_ROLE


DATABASE_PATH = os.environ.get("FMS_DATABASE_PATH", "/app/data/metadata.db")

SERVICE_HOST = os.environ.get("FMS_HOST", "0.0.0.0")

SERVICE_PORT = int(os.environ.get("FMS_PORT", "8000"))

ADMIN_ROLE = os.environ.get("FMS_ADMIN_ROLE", DEFAULT_ADMIN_ROLE)

USER_ID_HEADER = os.environ.get("FMS_USER_ID_HEADER", "X-User-Id")
