import os
from enum import Enum
from pathlib import Path

from dotenv import load_dotenv


class CacheBackendType(Enum):
    """Supported cache backends for scraped content."""
    MEMORY = "memory"
    REDIS = "redis"


class GroqModels:
    """Known Groq model identifiers."""
    LLAMA_8B = "llama-3.1-8b-instant"
    LLAMA_70B = "llama-3.1-70b-versatile"
    MIXTRAL = "mixtral-8x7b-32768"


class Config:
    """Configuration management for the application."""

    def __init__(self):
        """Initialize configuration with environment variables."""
        # Load environment variables from .env file if it exists
        env_path = Path(__file__).parent.parent / '.env'
        if env_path.exists():
            load_dotenv(dotenv_path=env_path)

        # Language model
        self.GROQ_API_KEY = os.getenv('GROQ_API_KEY')
        self.GROQ_BASE_URL = os.getenv('GROQ_BASE_URL', 'https://api.groq.com/openai/v1')
        self.DEFAULT_MODEL = os.getenv('DEFAULT_MODEL', GroqModels.LLAMA_8B)
        self.MODEL_TEMPERATURE = float(os.getenv('MODEL_TEMPERATURE', '0.7'))

        # Scrape cache
        self.CACHE_BACKEND = os.getenv('CACHE_BACKEND', CacheBackendType.MEMORY.value).lower()
        self.REDIS_URL = os.getenv('REDIS_URL', 'redis://localhost:6379/0')
        self.SCRAPE_CACHE_TTL_SECONDS = int(os.getenv('SCRAPE_CACHE_TTL_SECONDS', str(7 * 24 * 60 * 60)))
        self.SCRAPE_CACHE_MAX_BYTES = int(os.getenv('SCRAPE_CACHE_MAX_BYTES', '1024000'))

        # Extraction tiers
        self.STATIC_FETCH_TIMEOUT_S = float(os.getenv('STATIC_FETCH_TIMEOUT_S', '15'))
        self.RENDER_TIMEOUT_MS = int(os.getenv('RENDER_TIMEOUT_MS', '30000'))
        self.SCRAPER_USER_AGENT = os.getenv(
            'SCRAPER_USER_AGENT',
            'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36',
        )

        # Server
        self.API_KEYS = [k.strip() for k in os.getenv('API_KEYS', '').split(',') if k.strip()]

    def validate(self) -> list[str]:
        """
        Validate that all required configuration is present.

        Returns:
            list[str]: Problems found; empty when configuration is valid
        """
        problems = []
        if not self.GROQ_API_KEY:
            problems.append("GROQ_API_KEY is not set. Please set it in the .env file.")

        valid_backends = [e.value for e in CacheBackendType]
        if self.CACHE_BACKEND not in valid_backends:
            problems.append(
                f"Unknown CACHE_BACKEND '{self.CACHE_BACKEND}'. Must be one of: {', '.join(valid_backends)}"
            )

        if self.SCRAPE_CACHE_TTL_SECONDS <= 0:
            problems.append("SCRAPE_CACHE_TTL_SECONDS must be positive")

        return problems

    def get_model_info(self) -> str:
        """
        Get information about the currently selected model.

        Returns:
            str: Formatted string with model information
        """
        return f"Groq ({self.DEFAULT_MODEL}, temperature={self.MODEL_TEMPERATURE})"
