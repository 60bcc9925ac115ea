"""
Project-wide configuration and data locations.

This module defines the paths and tunable constants used throughout the
LegalTrans-LLMs system. Every value can be overridden through an
environment variable so deployments can point the pipeline at their own
terminology table or corpus without code changes.

Module Contents:
    APP_NAME: Application name for display purposes
    DATA_DIR: Directory holding the bundled static data
    TERMINOLOGY_FILE: Legal terminology/pattern table (JSON)
    CORPUS_DIR: Directory of reference legal documents (JSON records)
    MAX_CHUNK_CHARS: Largest source text translated in a single call
    REVIEW_THRESHOLD: Section score below which manual review is flagged
    DEFAULT_BACKEND: Translation backend used when none is given
    DEFAULT_MODEL: Model name passed to LLM backends (None = backend default)
    LOG_LEVEL: Logging level used by the CLI

Example:
    >>> from legaltrans_llms.config import TERMINOLOGY_FILE, CORPUS_DIR
    >>> print(f"Terminology at: {TERMINOLOGY_FILE}")
"""

import os
from pathlib import Path

# Application name for display and identification
APP_NAME = "LegalTrans-LLMs"

# Bundled data directory (terminology table + reference corpus)
DATA_DIR = Path(os.getenv("LEGALTRANS_DATA_DIR", Path(__file__).resolve().parent / "data"))

# Static terminology/pattern table keyed by concept, then language
TERMINOLOGY_FILE = Path(os.getenv("LEGALTRANS_TERMINOLOGY_FILE", DATA_DIR / "legal_terminology.json"))

# Reference legal documents, one JSON record (or list of records) per file
CORPUS_DIR = Path(os.getenv("LEGALTRANS_CORPUS_DIR", DATA_DIR / "corpus"))

# Chunking: documents longer than this are split on paragraph boundaries
MAX_CHUNK_CHARS = int(os.getenv("LEGALTRANS_MAX_CHUNK_CHARS", "3000"))

# Quality scoring: sections scoring below this need manual review
REVIEW_THRESHOLD = 70

# Translation backend defaults
DEFAULT_BACKEND = os.getenv("LEGALTRANS_BACKEND", "openai")
DEFAULT_MODEL = os.getenv("LEGALTRANS_MODEL") or None

LOG_LEVEL = os.getenv("LEGALTRANS_LOG_LEVEL", "WARNING").upper()
