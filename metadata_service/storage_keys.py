"""Storage key generation for new file records."""

import secrets
import time
from typing import Callable, Optional

from common.constants import STORAGE_KEY_TEMPLATE


def extract_extension(file_name: str) -> str:
    """
    Return the lowercased suffix after the last '.' in file_name, or an
    empty string when there is none.
    """
    _, dot, suffix = file_name.rpartition(".")
    if not dot:
        return ""
    return suffix.lower()


class StorageKeyGenerator:
    """
    Builds keys of the form users/<owner_id>/files/<millis>-<random>.<ext>.

    Uniqueness is probabilistic; the record store's unique index on
    storage_key has the final word.
    """

    def __init__(
        self,
        clock: Optional[Callable[[], float]] = None,
        token_source: Optional[Callable[[], str]] = None,
    ):
        self._clock = clock or time.time
        self._token_source = token_source or (lambda: secrets.token_hex(8))

    def generate(self, file_name: str, owner_id: str) -> str:
        disambiguator = f"{int(self._clock() * 1000)}-{self._token_source()}"
        extension = extract_extension(file_name)
        if extension:
            disambiguator = f"{disambiguator}.{extension}"
        return STORAGE_KEY_TEMPLATE.format(owner_id=owner_id, disambiguator=disambiguator)
