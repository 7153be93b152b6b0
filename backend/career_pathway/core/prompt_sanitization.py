"""Sanitization of user text before it is embedded in LLM prompts.

Security: Free text and typed answers come straight from the chat widget.
Role markers and instruction-override phrases are neutralized so the
advisory and extraction prompts keep their structure. This is
defense-in-depth; the controller never trusts model output for state
changes anyway.
"""

import re
import unicodedata

# Invisible characters that can split a keyword and dodge the patterns below
_ZERO_WIDTH_PATTERN = re.compile(
    "["
    "\u00ad"  # Soft hyphen
    "\u200b-\u200f"  # Zero-width space/joiners, LRM, RLM
    "\u202a-\u202e"  # BiDi embedding controls
    "\u2060-\u2064"  # Word joiner, invisible operators
    "\u2066-\u2069"  # BiDi isolate controls
    "\ufeff"  # BOM
    "]"
)

# C0 control characters except tab, newline and carriage return
_CONTROL_CHAR_PATTERN = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

_FILTERED = "[FILTERED]"
_TAG = "[TAG]"

_INJECTION_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"^\s*(system|assistant|human)\s*:", re.I | re.M), _FILTERED + ":"),
    (re.compile(r"<\s*/?\s*(system|user|assistant)\s*>", re.I), _TAG),
    (re.compile(r"<\|(system|user|assistant|im_start|im_end)\|>", re.I), _TAG),
    (re.compile(r"\[/?INST\]", re.I), _FILTERED),
    (re.compile(r"ignore\s+(all\s+)?previous\s+instructions?", re.I), _FILTERED),
    (re.compile(r"disregard\s+(all\s+)?(prior|previous)", re.I), _FILTERED),
    (re.compile(r"forget\s+everything", re.I), _FILTERED),
    (re.compile(r"new\s+instructions?\s*:", re.I), _FILTERED + ":"),
]

DEFAULT_MAX_LENGTH = 2000


def sanitize_user_text(text: str | None, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Neutralize prompt-injection patterns in user-provided text.

    Args:
        text: Raw user text (free text, typed answer). None is treated as empty.
        max_length: Characters kept after sanitization.

    Returns:
        Sanitized, trimmed text no longer than max_length.
    """
    if not text:
        return ""

    result = unicodedata.normalize("NFKC", text)
    result = _ZERO_WIDTH_PATTERN.sub("", result)
    result = _CONTROL_CHAR_PATTERN.sub("", result)
    for pattern, replacement in _INJECTION_PATTERNS:
        result = pattern.sub(replacement, result)

    return result.strip()[:max_length]
