import re
from typing import Any

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
TIME_PATTERN = r"^\d{2}:\d{2}$"
NEPHRO_ID_PATTERN = r"^[A-Z0-9/-]+$"
PHONE_PATTERN = r"^([\d\s\-\+\(\)]+)?$"

_INT = re.compile(r"^\s*[+-]?\d+\s*$")


def _to_int(part: str) -> int | None:
    return int(part) if _INT.match(part) else None


def parse_blood_pressure(value: str | None) -> tuple[int | None, int | None]:
    """Split "120/80" into (120, 80); anything malformed yields None parts."""
    if not value:
        return None, None
    parts = value.split("/")
    if len(parts) != 2:
        return None, None
    return _to_int(parts[0]), _to_int(parts[1])


def merge_json(existing: dict[str, Any] | None, updates: dict[str, Any] | None) -> dict[str, Any]:
    """Key-by-key merge; an explicit None in ``updates`` removes the key."""
    merged = dict(existing or {})
    for k, v in (updates or {}).items():
        if v is None:
            merged.pop(k, None)
        else:
            merged[k] = v
    return merged


_ENTITIES = [("&nbsp;", " "), ("&lt;", "<"), ("&gt;", ">"), ("&quot;", '"'), ("&#39;", "'"), ("&amp;", "&")]


def html_to_plain_text(html: str | None) -> str:
    """Rich-text editor output to plain text: list items become bullets, blocks become lines."""
    if not html:
        return ""
    text = re.sub(r"<li[^>]*>", "\n• ", html, flags=re.I)
    text = re.sub(r"</li>", "", text, flags=re.I)
    text = re.sub(r"</p>", "\n", text, flags=re.I)
    text = re.sub(r"<p[^>]*>", "", text, flags=re.I)
    text = re.sub(r"<br\s*/?>", "\n", text, flags=re.I)
    text = re.sub(r"<[^>]*>", "", text)
    # entities last so an escaped "<" is not mistaken for a tag
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()
