#!/usr/bin/env python3
"""
Setup validation script for Mirror Mode.

Checks all system requirements and provides guidance for missing components.
"""

import shutil
import subprocess
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))


def print_header(text: str):
    """Print a formatted header."""
    print(f"\n{'=' * 60}")
    print(f"  {text}")
    print('=' * 60)


def print_check(name: str, status: bool, message: str = ""):
    """Print a check result."""
    icon = "✅" if status else "❌"
    print(f"{icon} {name}: {message}")


def print_info(message: str):
    """Print an info message."""
    print(f"ℹ️  {message}")


def check_python_version():
    """Check Python version."""
    print_header("Python Version")

    version = sys.version_info
    required = (3, 9)

    is_ok = version >= required
    print_check(
        "Python",
        is_ok,
        f"{version.major}.{version.minor}.{version.micro} "
        f"({'OK' if is_ok else f'requires {required[0]}.{required[1]}+'})"
    )

    return is_ok


def check_tesseract():
    """Check Tesseract installation."""
    print_header("Tesseract OCR")

    tesseract_cmd = shutil.which("tesseract")

    if not tesseract_cmd:
        print_check("Tesseract", False, "Not found in PATH")
        print_info("Install with:")
        print_info("  macOS: brew install tesseract tesseract-lang")
        print_info("  Ubuntu: sudo apt install tesseract-ocr tesseract-ocr-spa")
        print_info("  Windows: Download from https://github.com/UB-Mannheim/tesseract/wiki")
        return False

    try:
        result = subprocess.run(
            [tesseract_cmd, "--version"],
            capture_output=True,
            text=True,
        )
    except OSError as e:
        print_check("Tesseract", False, f"Error: {e}")
        return False

    version_line = result.stdout.split('\n')[0] if result.stdout else "unknown"
    print_check("Tesseract", True, f"Found at {tesseract_cmd}")
    print_info(f"Version: {version_line}")
    return True


def check_language():
    """Check that the configured OCR language pack is installed."""
    print_header("OCR Language")

    from mirror_mode.config import get_config

    config = get_config()
    languages = config.tesseract.available_languages()
    is_ok = config.language in languages

    print_check(
        f"Language '{config.language}'",
        is_ok,
        "Installed" if is_ok else "Not installed",
    )
    if languages:
        print_info(f"Installed languages: {', '.join(languages)}")
    if not is_ok:
        print_info(f"Install the tesseract-ocr-{config.language} package, "
                   "or set MIRROR_OCR_LANGUAGE in .env")

    return is_ok


def check_python_packages():
    """Check required Python packages."""
    print_header("Python Packages")

    # Import name -> package name
    required_packages = {
        "streamlit": "streamlit",
        "pytesseract": "pytesseract",
        "cv2": "opencv-python",
        "PIL": "Pillow",
        "numpy": "numpy",
        "pandas": "pandas",
        "openpyxl": "openpyxl",
        "dotenv": "python-dotenv",
        "tenacity": "tenacity",
    }

    all_ok = True

    for import_name, display_name in required_packages.items():
        try:
            __import__(import_name)
            print_check(display_name, True, "Installed")
        except ImportError:
            print_check(display_name, False, "Not installed")
            all_ok = False

    if not all_ok:
        print_info("\nInstall missing packages with:")
        print_info("  pip install -e .")

    return all_ok


def check_env_file():
    """Check for .env file."""
    print_header("Environment Configuration")

    if Path(".env").exists():
        print_check(".env file", True, "Found")
    else:
        print_info(".env file not found (defaults will be used)")
        print_info("Supported settings: TESSERACT_CMD, MIRROR_OCR_LANGUAGE, MIRROR_OCR_TIMEOUT,")
        print_info("  MIRROR_MAX_FILE_SIZE_MB, MIRROR_OCR_MAX_ATTEMPTS, MIRROR_LOG_LEVEL")
    return True


def main():
    """Run all checks."""
    print("\n" + "=" * 60)
    print("  QA Lab - Mirror Mode - Setup Validation")
    print("=" * 60)

    results = {}

    results["python"] = check_python_version()
    results["packages"] = check_python_packages()
    results["tesseract"] = check_tesseract()
    results["language"] = check_language() if results["tesseract"] and results["packages"] else False
    results["env"] = check_env_file()

    print_header("Summary")

    ready = all(results.values())

    if ready:
        print("✅ System is ready to run the application!")
        print("\nStart with:")
        print("  streamlit run mirror_mode/main.py")
    else:
        print("❌ Some requirements are missing:")

        if not results["python"]:
            print("  - Python 3.9+ required")
        if not results["packages"]:
            print("  - Some Python packages missing (run: pip install -e .)")
        if not results["tesseract"]:
            print("  - Tesseract OCR required for text extraction")
        elif not results["language"]:
            print("  - Tesseract language pack for the configured language")

    print()
    return 0 if ready else 1


if __name__ == "__main__":
    sys.exit(main())
