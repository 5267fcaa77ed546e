"""Short code generation utilities."""

import random
import re
import string
from typing import Optional


class ShortCodeGenerator:
    """Generate candidate short codes for links."""

    # Base36 characters (digits + lowercase letters)
    BASE36_CHARS = string.digits + string.ascii_lowercase  # 0-9a-z

    CODE_PATTERN = re.compile(r'^[A-Za-z0-9_-]+$')

    def __init__(self, default_length: int = 6, rng: Optional[random.Random] = None):
        """Initialize short code generator.

        Args:
            default_length: Length of generated codes
            rng: Optional random source (seeded instances make draws reproducible)
        """
        if default_length < 1:
            raise ValueError("default_length must be at least 1")
        self.default_length = default_length
        self.rng = rng or random.Random()

    def generate(self, length: Optional[int] = None) -> str:
        """Generate a random candidate code.

        Uniqueness is not guaranteed here; the registry retries on collision.

        Args:
            length: Length of the code (uses default if not specified)

        Returns:
            Random base36 code
        """
        length = length or self.default_length
        return ''.join(self.rng.choices(self.BASE36_CHARS, k=length))

    @staticmethod
    def validate_format(code: str) -> bool:
        """Check that a code is non-empty and only uses letters, digits, '-' and '_'."""
        if not code or not isinstance(code, str):
            return False
        return ShortCodeGenerator.CODE_PATTERN.fullmatch(code) is not None
