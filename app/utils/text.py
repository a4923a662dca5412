# app/utils/text.py
import re

# Models sometimes wrap JSON output in ```json ... ``` blocks.
_CODE_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Removes Markdown code-fence markers from raw model output."""
    if "```" not in text:
        return text
    return _CODE_FENCE_RE.sub("", text).strip()
