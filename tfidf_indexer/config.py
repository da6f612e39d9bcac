import os
from dotenv import load_dotenv

from .log import LOG_LEVELS

load_dotenv()

# paths
INDEX_DIR = os.getenv("INDEX_DIR", os.path.join("data", "index"))
COLLECTION_DIR = os.getenv("COLLECTION_DIR", os.path.join("data", "collection"))

# documents
DOC_EXTENSION = os.getenv("DOC_EXTENSION", ".html")
if not DOC_EXTENSION.startswith("."):
    raise ValueError("DOC_EXTENSION must start with a dot, e.g. '.html'.")

# text processing
USE_STEMMING = os.getenv("USE_STEMMING", "1").lower() not in ("0", "false", "no")
MIN_TOKEN_LENGTH = int(os.getenv("MIN_TOKEN_LENGTH", "1"))
if not MIN_TOKEN_LENGTH > 0:
    raise ValueError("MIN_TOKEN_LENGTH must be a positive integer.")

# logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
if LOG_LEVEL not in LOG_LEVELS:
    raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}.")
