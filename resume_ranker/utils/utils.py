import re
from datetime import datetime, timezone
from typing import Any, List

# ```json ... ``` or a bare ``` ... ``` fence
_FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)

_DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%Y.%m.%d",
    "%d.%m.%Y",
    "%m/%d/%Y",
    "%d %B %Y",
    "%B %d, %Y",
    "%B %Y",
    "%b %Y",
)


def extract_json(raw: str) -> str:
    """Best-effort recovery of the JSON object embedded in an LLM reply.

    Order: empty -> "{}", fenced block, outermost braces, otherwise the input
    unchanged (the caller's decode then fails).
    """
    if raw is None or not raw.strip():
        return "{}"

    match = _FENCED_BLOCK.search(raw)
    if match:
        return match.group(1).strip()

    start = raw.find("{")
    end = raw.rfind("}")
    if start >= 0 and end > start:
        return raw[start:end + 1]

    return raw


def as_text(x: Any) -> str:
    if x is None:
        return ""
    if isinstance(x, list):
        # models sometimes answer with bullet lists
        return " ".join([str(t).strip() for t in x if str(t).strip()])
    return str(x).strip()


def as_list(x: Any) -> List[str]:
    if x is None:
        return []
    if isinstance(x, str):
        parts = [p.strip() for p in x.replace(";", ",").split(",")]
        return [p for p in parts if p]
    if isinstance(x, list):
        return [str(t).strip() for t in x if t is not None and str(t).strip()]
    return []


def parse_date(value: str) -> datetime:
    """Parse an experience date; unknown shapes map to datetime.min."""
    if not value:
        return datetime.min
    value = str(value).strip()

    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        return parsed
    except ValueError:
        pass

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue

    # strict YYYY-MM
    if len(value) == 7 and value[4] == "-" and value[:4].isdigit() and value[5:7].isdigit():
        year, month = int(value[:4]), int(value[5:7])
        if 1 <= month <= 12 and year >= 1:
            return datetime(year, month, 1)

    return datetime.min
