"""
Configuration management for the WhatsApp status webhook.

Loads environment variables from .env file and provides typed access to configuration.
Store backend selection lives in infra/config.py.
"""

import logging
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)

logger = logging.getLogger(__name__)


class Config:
    """Configuration class for the status webhook."""

    # Meta webhook handshake (hub.verify_token)
    VERIFY_TOKEN = os.getenv("VERIFY_TOKEN", "")

    # HTTP server
    PORT = int(os.getenv("PORT", "4000"))

    # Environment
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Timezone used for formattedTime on message logs
    DISPLAY_TIMEZONE = os.getenv("DISPLAY_TIMEZONE", "UTC")

    @classmethod
    def validate(cls) -> bool:
        """Validate that required configuration is set."""
        required = ["VERIFY_TOKEN"]
        missing = [key for key in required if not getattr(cls, key)]

        if missing:
            logger.warning(
                f"Missing required environment variables: {', '.join(missing)} "
                f"(set them in .env file)"
            )
            return False

        return True


if __name__ == "__main__":
    # Test configuration loading
    print("Configuration loaded:")
    print(f"  Verify Token: {'✓ Set' if Config.VERIFY_TOKEN else '✗ Missing'}")
    print(f"  Port: {Config.PORT}")
    print(f"  Environment: {Config.ENVIRONMENT}")
    print(f"  Display Timezone: {Config.DISPLAY_TIMEZONE}")
    print(f"\n  Validation: {'✓ PASSED' if Config.validate() else '✗ FAILED'}")
