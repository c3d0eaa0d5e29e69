import os
import logging
from dataclasses import dataclass

from dotenv import load_dotenv

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Checked in order, first non-empty wins
API_KEY_VARIABLES = ("GEMINI_API_KEY", "GOOGLE_API_KEY", "API_KEY")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the analysis service."""
    api_key: str = ""
    model: str = "gemini-3-pro-preview"
    thinking_budget: int = 12000
    image_mime_type: str = "image/jpeg"

    @property
    def has_credential(self):
        return bool(self.api_key)


def load_settings():
    """Read the service credential from the environment (or a .env file)"""
    load_dotenv()
    api_key = ""
    for name in API_KEY_VARIABLES:
        value = os.getenv(name, "").strip()
        if value:
            api_key = value
            break

    settings = Settings(api_key=api_key)
    if not settings.has_credential:
        logger.warning("No API key found in %s; analysis requests will fail", ", ".join(API_KEY_VARIABLES))
    return settings


def configure_logging(level="INFO"):
    """Install the root handler once; Streamlit re-executes the script on every rerun."""
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
        return
    logging.basicConfig(level=level, format=LOG_FORMAT)
