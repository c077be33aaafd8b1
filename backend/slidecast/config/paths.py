"""
Paths configuration

Centralized directory paths for the application.
"""

import os
from pathlib import Path

# Base directories
APP_DIR = Path(__file__).parent.parent
BACKEND_DIR = APP_DIR.parent
OUTPUT_DIR = Path(os.getenv("SLIDECAST_OUTPUT_DIR", str(BACKEND_DIR / "generated-videos")))
WORK_DIR = Path(os.getenv("SLIDECAST_WORK_DIR", str(BACKEND_DIR / "temp-assets")))

# Ensure directories exist
OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
WORK_DIR.mkdir(parents=True, exist_ok=True)

__all__ = ["APP_DIR", "BACKEND_DIR", "OUTPUT_DIR", "WORK_DIR"]
