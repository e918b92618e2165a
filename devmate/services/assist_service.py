import logging
from typing import Any, Dict, Tuple

import httpx

from devmate.utils.errors import upstream_details
from devmate.utils.gemini_client import GeminiClient, GeminiError

logger = logging.getLogger(__name__)

NO_CORRECTION = "No correction required"


def build_explain_prompt(code: str, language: str) -> str:
    return f"""Explain the following {language} code in simple terms:
1. Break down key components
2. Describe control flow
3. Highlight important variables/functions
4. Use bullet points for clarity

Return ONLY the explanation, no code formatting.

Code:
{code}"""


def build_improve_prompt(code: str, language: str) -> str:
    return f"""Analyze this {language} code and return ONLY the improved version:
- If the code is already optimal, return "{NO_CORRECTION}"
- Do not include any explanations or comments
- Keep the exact same functionality
- Only return the raw code

Code:
{code}"""


def normalize_improvement(text: str) -> str:
    if NO_CORRECTION in text:
        return NO_CORRECTION
    return text.strip() or "No correction generated"


async def explain_code(client: GeminiClient, code: str, language: str) -> Tuple[bool, Dict[str, Any], int]:
    """
    Ask the model for a plain-language explanation

    Returns:
        Tuple of (success, body, status_code)
    """
    try:
        text = await client.generate(build_explain_prompt(code, language))
    except (GeminiError, httpx.HTTPError, ValueError) as e:
        logger.error(f"Gemini explain error: {e}")
        return False, {'error': 'Failed to generate explanation', 'details': upstream_details(e)}, 500

    return True, {'explanation': text or 'No explanation generated'}, 200


async def improve_code(client: GeminiClient, code: str, language: str) -> Tuple[bool, Dict[str, Any], int]:
    """
    Ask the model for an improved version of the code

    Returns:
        Tuple of (success, body, status_code)
    """
    try:
        text = await client.generate(build_improve_prompt(code, language))
    except (GeminiError, httpx.HTTPError, ValueError) as e:
        logger.error(f"Gemini improve error: {e}")
        return False, {'error': 'Failed to generate improvements', 'details': upstream_details(e)}, 500

    return True, {'improvedCode': normalize_improvement(text)}, 200
