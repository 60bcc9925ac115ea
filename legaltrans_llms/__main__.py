"""
Entry point for running LegalTrans-LLMs as a module.

Usage:
    python -m legaltrans_llms --help
    python -m legaltrans_llms translate --text "This AGREEMENT ..." --target hindi
"""
from .cli import app


if __name__ == "__main__":
    app()
