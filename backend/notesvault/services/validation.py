"""Content normalization shared by note creation and update."""

from typing import Optional

from notesvault.exceptions import InvalidContentError

# Control characters and the ASCII space (U+0000..U+0020). Unicode spaces
# such as U+00A0 are content, not padding.
TRIMMED_CHARACTERS = "".join(chr(code) for code in range(0x21))


def normalize_content(raw: Optional[str]) -> str:
    """
    Trim surrounding control characters and spaces; an absent value becomes
    the empty string.

    Examples:
        normalize_content("  hello  ")  → "hello"
        normalize_content("\\t\\n")      → ""
        normalize_content("\\x00")       → ""
        normalize_content("\\u00a0")     → "\\u00a0"
        normalize_content(None)         → ""
    """
    if raw is None:
        return ""
    return raw.strip(TRIMMED_CHARACTERS)


def check_content(content: str) -> Optional[InvalidContentError]:
    """Return the InvalidContentError for blank normalized content, else None."""
    if not content:
        return InvalidContentError()
    return None
