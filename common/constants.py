"""Project-wide constants (field limits, admin role, storage key layout)."""

MAX_FILE_NAME_LENGTH: int = 255
MAX_CONTENT_TYPE_LENGTH: int = 100
MAX_STORAGE_KEY_LENGTH: int = 500

MAX_FILE_SIZE_BYTES: int = 10 * 1024 * 1024 * 1024  # 10 GiB

DEFAULT_ADMIN_ROLE: str = "ADMIN"

STORAGE_KEY_TEMPLATE: str = "users/{owner_id}/files/{disambiguator}"
