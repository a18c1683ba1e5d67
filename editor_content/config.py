import os
import logging
from dotenv import load_dotenv, find_dotenv

# Load environment variables from .env file
load_dotenv(find_dotenv())

# Logging Configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Rendering Settings
# Escaping block text is a hardening step; set to false for verbatim output
ESCAPE_HTML = os.getenv("EDITOR_CONTENT_ESCAPE_HTML", "true").strip().lower() not in ("0", "false", "no", "off")

# Serialization Settings
_indent = os.getenv("EDITOR_CONTENT_INDENT")
JSON_INDENT = int(_indent) if _indent else None


def setup_logging():
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
