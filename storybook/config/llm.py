"""
LLM configuration for the Consistent Storybook Generator.

The text provider is a single dspy.LM used for narrative and entity
extraction. Includes a 120s timeout per LLM call to fail fast on hanging
connections; there is no retry here, failures surface to the caller.
"""

import os
import logging
from dotenv import load_dotenv
import dspy

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

# Timeout for LLM calls (seconds)
LLM_TIMEOUT = 120


def get_inference_lm() -> dspy.LM:
    """
    Get the inference LM for story extraction.

    Priority order:
    1. Gemini (GOOGLE_API_KEY)
    2. Claude (ANTHROPIC_API_KEY)
    3. GPT-4o (OPENAI_API_KEY)

    Includes 120s timeout per call.
    """
    if os.getenv("GOOGLE_API_KEY"):
        return dspy.LM(
            "gemini/gemini-2.5-pro",
            api_key=os.getenv("GOOGLE_API_KEY"),
            max_tokens=8192,
            temperature=1.0,
            timeout=LLM_TIMEOUT,
        )
    elif os.getenv("ANTHROPIC_API_KEY"):
        return dspy.LM(
            "anthropic/claude-sonnet-4-20250514",
            api_key=os.getenv("ANTHROPIC_API_KEY"),
            max_tokens=8192,
            temperature=1.0,
            timeout=LLM_TIMEOUT,
        )
    elif os.getenv("OPENAI_API_KEY"):
        return dspy.LM(
            "openai/gpt-4o",
            api_key=os.getenv("OPENAI_API_KEY"),
            max_tokens=8192,
            temperature=1.0,
            timeout=LLM_TIMEOUT,
        )
    else:
        raise ValueError(
            "No API key found. Set GOOGLE_API_KEY, ANTHROPIC_API_KEY, or OPENAI_API_KEY in .env"
        )


def get_inference_model_name() -> str:
    """Get the name of the inference model that will be used."""
    if os.getenv("GOOGLE_API_KEY"):
        return "gemini-2.5-pro"
    elif os.getenv("ANTHROPIC_API_KEY"):
        return "claude-sonnet-4-20250514"
    elif os.getenv("OPENAI_API_KEY"):
        return "gpt-4o"
    else:
        return "unknown"


def configure_dspy() -> None:
    """
    Configure DSPy with the inference LM globally.

    Note:
        For testing or when you need explicit control, prefer passing
        an LM directly to StoryExtractor(lm=...) instead of using
        this global configuration.
    """
    dspy.configure(lm=get_inference_lm())
