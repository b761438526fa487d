"""
Configuration settings for Cascade page migration
"""

from pathlib import Path

# Default Cascade Server URL
DEFAULT_CMS_PATH = "https://cms.example.edu:8443"

# Output format options
OUTPUT_FORMATS = ["json", "summary"]
DEFAULT_OUTPUT_FORMAT = "json"

# Logging settings
LOG_LEVEL = "INFO"
LOG_FILE = "cascade_migration.log"
LOG_DIR = Path("logs")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_ROTATION_SIZE = 10 * 1024 * 1024  # 10MB
LOG_BACKUP_COUNT = 5

# Performance settings
REQUEST_TIMEOUT = 30  # seconds
