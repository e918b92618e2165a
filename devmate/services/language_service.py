import logging
from typing import Any, Dict, Iterable, Optional

import httpx

from devmate.utils.judge0_client import Judge0Client

logger = logging.getLogger(__name__)

# Judge0 CE ids for the languages the editor ships samples for
DEFAULT_LANGUAGE_IDS: Dict[str, int] = {
    'python': 71,
    'javascript': 63,
    'java': 62,
    'c': 50,
    'c++': 54,
}


def match_catalog(catalog: Iterable[Dict[str, Any]], language: str) -> Optional[Dict[str, Any]]:
    """
    Find the first catalog entry whose name or slug contains `language`
    (case-insensitive). Catalog order decides between several matches.
    """
    needle = language.strip().lower()
    if not needle:
        return None

    for entry in catalog:
        if not isinstance(entry, dict):
            continue
        name = str(entry.get('name') or '').lower()
        slug = str(entry.get('slug') or '').lower()
        if needle in name or needle in slug:
            return entry
    return None


async def resolve_language_id(client: Judge0Client, language: str) -> Optional[int]:
    """
    Resolve a language label to a Judge0 language id

    Args:
        client: Judge0 client used for the catalog fallback
        language: label as sent by the editor, e.g. "python" or "Rust"

    Returns:
        The language id, or None when the language is not supported
    """
    label = language.strip().lower()
    lang_id = DEFAULT_LANGUAGE_IDS.get(label)
    if lang_id is not None:
        logger.info(f"Using local language id mapping: {label} -> {lang_id}")
        return lang_id

    logger.info(f"Language '{language}' not in local map, querying Judge0 /languages")
    try:
        catalog = await client.list_languages()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"Could not fetch /languages from Judge0: {e}")
        return None

    if not isinstance(catalog, list):
        logger.warning(f"Unexpected /languages payload: {type(catalog).__name__}")
        return None

    found = match_catalog(catalog, label)
    if not found:
        logger.info(f"No matching language found for '{language}'")
        return None

    try:
        lang_id = int(found['id'])
    except (KeyError, TypeError, ValueError):
        logger.warning(f"Catalog entry without a usable id: {found}")
        return None

    logger.info(f"Auto-detected language: {found.get('name')} id={lang_id}")
    return lang_id
