"""
Configuration for the treatment pricing engine.

Fabric width has no configured default: a roll width must
come from the fabric inventory item, otherwise the optimizer refuses to run.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file early so environment variables are available for Config class
load_dotenv(override=False)

# Base directory (where this file lives)
BASE_DIR = Path(__file__).resolve().parent


def _env_float(name: str, default: str) -> float:
    return float(os.environ.get(name, default))


class Config:
    """Default configuration for the Flask application."""

    # Flask settings
    SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
    ENVIRONMENT = os.environ.get("FLASK_ENV", "development")
    MAX_CONTENT_LENGTH = int(os.environ.get("MAX_REQUEST_BYTES", str(1024 * 1024)))  # 1 MB JSON bodies
    JSON_SORT_KEYS = False

    # Debug mode
    DEBUG = os.environ.get("FLASK_DEBUG", "1") == "1"

    # Logging
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "DEBUG" if DEBUG else "INFO")
    LOG_DIR = os.environ.get("LOG_DIR", str(BASE_DIR / "logs"))

    # ==========================================================================
    # Curtain Manufacturing Allowances
    # ==========================================================================
    # Used by the API only when a worksheet request omits an allowance.
    # The calculation modules themselves never apply these implicitly.
    #
    # CURTAIN_HEADER_HEM_CM: fabric turned over at the heading
    # CURTAIN_BOTTOM_HEM_CM: fabric turned up at the hem
    # CURTAIN_SIDE_HEM_CM:   per side, per panel
    # CURTAIN_SEAM_HEM_CM:   total allowance per join between widths
    # CURTAIN_WASTE_PERCENT: extra fabric ordered on top of the layout
    # ==========================================================================
    CURTAIN_HEADER_HEM_CM = _env_float("CURTAIN_HEADER_HEM_CM", "15")
    CURTAIN_BOTTOM_HEM_CM = _env_float("CURTAIN_BOTTOM_HEM_CM", "10")
    CURTAIN_SIDE_HEM_CM = _env_float("CURTAIN_SIDE_HEM_CM", "5")
    CURTAIN_SEAM_HEM_CM = _env_float("CURTAIN_SEAM_HEM_CM", "3")
    CURTAIN_WASTE_PERCENT = _env_float("CURTAIN_WASTE_PERCENT", "0")


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    TESTING = False
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    TESTING = False


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = False
    TESTING = True
    LOG_LEVEL = "WARNING"
