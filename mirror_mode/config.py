"""
Configuration module for Mirror Mode.

Handles Tesseract settings, OCR language selection and application-wide
settings, with overrides read from the environment (or a .env file).
"""

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "spa"


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, falling back on bad values."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer value for {name}: {raw!r}")
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class TesseractConfig:
    """Configuration for Tesseract OCR engine."""
    tesseract_cmd: Optional[str] = field(default_factory=lambda: os.getenv("TESSERACT_CMD") or None)
    language: str = field(default_factory=lambda: os.getenv("MIRROR_OCR_LANGUAGE", DEFAULT_LANGUAGE))
    oem: int = 3  # OCR Engine Mode: 3 = Default, based on what is available
    psm: int = 3  # Page Segmentation Mode: 3 = Fully automatic page segmentation
    timeout_seconds: int = field(default_factory=lambda: _env_int("MIRROR_OCR_TIMEOUT", 0))  # 0 = no timeout

    def get_config_string(self) -> str:
        """Generate Tesseract configuration string."""
        return f"--oem {self.oem} --psm {self.psm}"

    @staticmethod
    def find_tesseract() -> Optional[str]:
        """Attempt to find Tesseract installation."""
        common_paths = [
            "/usr/local/bin/tesseract",  # macOS Homebrew
            "/opt/homebrew/bin/tesseract",  # macOS M1/M2 Homebrew
            "/usr/bin/tesseract",  # Linux
            r"C:\Program Files\Tesseract-OCR\tesseract.exe",  # Windows
            r"C:\Program Files (x86)\Tesseract-OCR\tesseract.exe",  # Windows x86
        ]

        tesseract_path = shutil.which("tesseract")
        if tesseract_path:
            return tesseract_path

        for path in common_paths:
            if Path(path).exists():
                return path

        return None

    @staticmethod
    def validate_installation() -> tuple[bool, str]:
        """
        Validate Tesseract installation.

        Returns:
            Tuple of (is_valid, message)
        """
        tesseract_path = TesseractConfig.find_tesseract()

        if not tesseract_path:
            return False, (
                "Tesseract OCR is not installed or not found in PATH.\n\n"
                "Installation instructions:\n"
                "• macOS: brew install tesseract tesseract-lang\n"
                "• Ubuntu/Debian: sudo apt install tesseract-ocr tesseract-ocr-spa\n"
                "• Windows: Download from https://github.com/UB-Mannheim/tesseract/wiki\n"
            )

        try:
            result = subprocess.run(
                [tesseract_path, "--version"],
                capture_output=True,
                text=True,
                timeout=10
            )
            if result.returncode == 0:
                version_info = result.stdout.split('\n')[0]
                return True, f"Tesseract found: {version_info}"
            else:
                return False, f"Tesseract found but returned error: {result.stderr}"
        except subprocess.TimeoutExpired:
            return False, "Tesseract command timed out"
        except OSError as e:
            return False, f"Error validating Tesseract: {str(e)}"

    def available_languages(self) -> list[str]:
        """List language packs installed for the configured Tesseract binary."""
        import pytesseract

        if self.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self.tesseract_cmd
        try:
            return sorted(pytesseract.get_languages(config=""))
        except (pytesseract.TesseractNotFoundError, pytesseract.TesseractError) as e:
            logger.debug(f"Could not list Tesseract languages: {e}")
            return []


@dataclass
class AppConfig:
    """Main application configuration."""
    tesseract: TesseractConfig = field(default_factory=TesseractConfig)

    # Processing settings
    concurrent_extraction: bool = field(
        default_factory=lambda: _env_bool("MIRROR_CONCURRENT_EXTRACTION", True)
    )
    max_file_size_mb: int = field(default_factory=lambda: _env_int("MIRROR_MAX_FILE_SIZE_MB", 10))

    # Retry policy applied by callers of the pipeline; 1 means a single attempt
    ocr_max_attempts: int = field(default_factory=lambda: _env_int("MIRROR_OCR_MAX_ATTEMPTS", 1))

    log_level: str = field(default_factory=lambda: os.getenv("MIRROR_LOG_LEVEL", "INFO").upper())

    @property
    def language(self) -> str:
        """OCR language code used for every recognition call."""
        return self.tesseract.language

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024


def validate_system_requirements() -> dict:
    """
    Validate all system requirements on startup.

    Returns:
        Dictionary with validation results for each requirement.
    """
    results = {}

    tesseract_valid, tesseract_msg = TesseractConfig.validate_installation()
    config = get_config()

    results["tesseract"] = {
        "installed": tesseract_valid,
        "message": tesseract_msg,
        "path": TesseractConfig.find_tesseract(),
        "languages": config.tesseract.available_languages() if tesseract_valid else [],
    }
    results["language"] = {
        "configured": config.language,
        "installed": config.language in results["tesseract"]["languages"],
    }

    try:
        import cv2
        import numpy
        import openpyxl
        import PIL
        import pytesseract
        results["python_deps"] = {
            "installed": True,
            "message": "All Python dependencies installed"
        }
    except ImportError as e:
        results["python_deps"] = {
            "installed": False,
            "message": f"Missing Python dependency: {e.name}"
        }

    return results


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = AppConfig()
        # Auto-detect Tesseract path
        if not _config.tesseract.tesseract_cmd:
            _config.tesseract.tesseract_cmd = TesseractConfig.find_tesseract()
    return _config


def update_config(**kwargs) -> AppConfig:
    """Update configuration with new values."""
    config = get_config()
    for key, value in kwargs.items():
        # Tesseract fields first: AppConfig.language is a read-only view of them
        if hasattr(config.tesseract, key):
            setattr(config.tesseract, key, value)
        elif hasattr(config, key):
            setattr(config, key, value)
        else:
            logger.warning(f"Unknown configuration key ignored: {key}")
    return config


def reset_config() -> None:
    """Drop the global configuration so the next get_config() rebuilds it."""
    global _config
    _config = None
