"""Short code generation utilities."""

import random
import string
from typing import Optional


MIN_CODE_LENGTH = 3
MAX_CODE_LENGTH = 10


class ShortCodeGenerator:
    """Generate random short codes for URLs."""

    # Base62 characters (alphanumeric, case-sensitive)
    BASE62_CHARS = string.ascii_letters + string.digits  # a-zA-Z0-9

    def __init__(self, default_length: int = 6, rng: Optional[random.Random] = None):
        """Initialize short code generator.

        Args:
            default_length: Default length for generated codes
            rng: Optional random source (a seeded ``random.Random`` makes codes reproducible)

        Raises:
            ValueError: If default_length is outside the allowed code length range
        """
        if not MIN_CODE_LENGTH <= default_length <= MAX_CODE_LENGTH:
            raise ValueError(
                f"default_length must be between {MIN_CODE_LENGTH} and {MAX_CODE_LENGTH}"
            )
        self.default_length = default_length
        self._rng = rng or random.SystemRandom()

    def generate_random(self, length: Optional[int] = None) -> str:
        """Generate a random short code.

        Args:
            length: Length of the code (uses default if not specified)

        Returns:
            Random short code
        """
        length = length or self.default_length
        return ''.join(self._rng.choices(self.BASE62_CHARS, k=length))
