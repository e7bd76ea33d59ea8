"""Random shortcode generation."""

import random
import string
from typing import Optional

from .common.validators import MAX_SHORT_CODE_LENGTH, MIN_SHORT_CODE_LENGTH

ALPHABET = string.ascii_letters + string.digits


class ShortCodeGenerator:
    """Draw random base62 shortcodes.

    Generated codes always satisfy ``is_valid_short_code``. Uniqueness is
    not checked here; the service claims each candidate with an atomic
    registry create and draws again on collision.
    """

    def __init__(self, default_length: int = 6):
        self.default_length = self._checked_length(default_length)
        self._random = random.SystemRandom()

    def generate_random(self, length: Optional[int] = None) -> str:
        """Return a fresh code of ``length`` characters (default length if None)."""
        length = self.default_length if length is None else self._checked_length(length)
        return "".join(self._random.choices(ALPHABET, k=length))

    @staticmethod
    def _checked_length(length: int) -> int:
        if not MIN_SHORT_CODE_LENGTH <= length <= MAX_SHORT_CODE_LENGTH:
            raise ValueError(
                f"Shortcode length must be between {MIN_SHORT_CODE_LENGTH} "
                f"and {MAX_SHORT_CODE_LENGTH}, got {length}"
            )
        return length
