"""
Prompt composition and post-processing around the model call.

This module provides:
- PromptComposer / PromptSpec: grounded system prompts
- PostProcessor: newline cleanup, glossary enforcement, script checks
"""

from legaltrans_llms.refine.postprocess import PostProcessor, PostProcessResult, normalize_text
from legaltrans_llms.refine.prompting import PromptComposer, PromptSpec

__all__ = [
    "PostProcessor",
    "PostProcessResult",
    "normalize_text",
    "PromptComposer",
    "PromptSpec",
]
