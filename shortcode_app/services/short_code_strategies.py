"""
Short code generation strategies.
Uses Strategy Pattern to allow different generation algorithms.
"""

import secrets
import string
from abc import ABC, abstractmethod

from shortcode_app.errors import ShortcodeGenerationError
from shortcode_app.storage.strategies import CollectionStrategy


class ShortCodeStrategy(ABC):
    """Abstract base class for short code generation strategies"""
    
    @abstractmethod
    async def generate(self, collection: CollectionStrategy) -> str:
        """
        Generate a short code not yet present in ``collection``.
        
        Args:
            collection: The shortcodes collection, checked for collisions
            
        Returns:
            A unique short code string
        """
        pass


class RandomShortCodeStrategy(ShortCodeStrategy):
    """
    Random alphanumeric codes with collision checking against storage.

    With 62 symbols and the default length of 6 there are 62**6 (about
    5.7e10) codes, so a retry is rare until millions of codes exist.
    The check and the later write are separate operations; two concurrent
    creations drawing the same code would both pass the check.
    """
    
    CHARACTERS = string.ascii_letters + string.digits
    
    def __init__(self, length: int = 6, max_retries: int = 5):
        if length < 1:
            raise ValueError("Short code length must be positive")
        self.length = length
        self.max_retries = max_retries
    
    async def generate(self, collection: CollectionStrategy) -> str:
        for _ in range(self.max_retries):
            short_code = self._generate_random_string()
            if await collection.get(short_code) is None:
                return short_code
        
        raise ShortcodeGenerationError(
            f"Could not generate unique short code after {self.max_retries} attempts"
        )
    
    def _generate_random_string(self) -> str:
        return ''.join(secrets.choice(self.CHARACTERS) for _ in range(self.length))
