"""
Decoding of Judge0 result fields.

Judge0 returns stdout/stderr/compile_output either base64-encoded or as
plain text, without telling which. decode_field() guesses: a field is taken
as base64 only when decoding it and encoding the result again reproduces the
input. This is best-effort. Short plain strings made only of base64
characters (e.g. "abcd") can be misread, and base64 of non-UTF-8 bytes is
returned undecoded.
"""
import base64
import binascii
import re
from typing import Any, Optional

NO_OUTPUT = "No output"

_BASE64_CHARS = re.compile(r"^[A-Za-z0-9+/=\s]+$")
_WHITESPACE = re.compile(r"\s+")


def _try_base64(text: str) -> Optional[str]:
    """Return the decoded text if `text` round-trips as base64, else None"""
    candidate = text.strip()
    if not candidate or not _BASE64_CHARS.match(candidate):
        return None

    # Judge0 wraps long base64 payloads every 60 characters
    compact = _WHITESPACE.sub("", candidate)
    unpadded = compact.rstrip("=")
    if "=" in unpadded or len(unpadded) % 4 == 1:
        return None

    try:
        raw = base64.b64decode(unpadded + "=" * (-len(unpadded) % 4), validate=True)
    except (binascii.Error, ValueError):
        return None

    decoded = raw.decode("utf-8", errors="replace")
    reencoded = base64.b64encode(decoded.encode("utf-8")).decode("ascii").rstrip("=")
    if reencoded != unpadded:
        return None
    return decoded


def decode_field(value: Any) -> str:
    """
    Decode one raw result field.

    Args:
        value: field as returned by Judge0 (may be None)

    Returns:
        Decoded text, the value unchanged when it does not look like
        base64, or "" for a missing field
    """
    if value is None:
        return ""
    text = value if isinstance(value, str) else str(value)
    decoded = _try_base64(text)
    return text if decoded is None else decoded


def select_output(compile_output: str, stderr: str, stdout: str) -> str:
    """Pick the stream to show: compile output, then stderr, then stdout"""
    for stream in (compile_output, stderr, stdout):
        if stream and stream.strip():
            return stream
    return NO_OUTPUT
