"""Classification of macros notation lines.

Grammar, one statement per line:

- ``id: <token>`` (first line only)
- ``meal:<Name>[ × <N>][ @HH:MM][ // <comment>]``
- ``group:<Name>[ @HH:MM][ // <comment>]``
- ``- <FoodQuery>[:<Quantity>][ @HH:MM][ // <comment>]`` (under a meal/group)
- ``<FoodQuery>[:<Quantity>][ @HH:MM][ // <comment>]``
"""

import re

from macros_tracker.domain.notation import LineKind, ParsedLine

ID_PATTERN = re.compile(r"^id:\s*(\S+)", re.IGNORECASE)
TIMESTAMP_PATTERN = re.compile(r"@(\d{2}:\d{2})")
QUANTITY_PATTERN = re.compile(r"\d+(?:\.\d+)?")
MEAL_COUNT_PATTERN = re.compile(r"^(.*)\s+×\s+(\d+)$")
COMMENT_MARKER = "//"

_SECTION_PREFIXES = (
    ("meal:", LineKind.MEAL),
    ("group:", LineKind.GROUP),
)


def classify_line(text: str, *, allow_id: bool = False) -> ParsedLine:
    """Split one line into its directive kind and parts.

    ``allow_id`` is set only for the first line of a block, the one place an
    ``id:`` directive is meaningful.
    """
    line = text.strip()
    if allow_id:
        match = ID_PATTERN.match(line)
        if match:
            return ParsedLine(kind=LineKind.ID, raw_text=line, name=match.group(1))

    lowered = line.lower()
    for prefix, kind in _SECTION_PREFIXES:
        if lowered.startswith(prefix):
            return _classify_section(line, line[len(prefix) :], kind)

    if line.startswith("-"):
        return _classify_item(line, line[1:], LineKind.BULLET)
    return _classify_item(line, line, LineKind.ITEM)


def parse_quantity(text: str | None) -> float | None:
    """Return the first numeric value in a quantity string, in grams."""
    if not text:
        return None
    match = QUANTITY_PATTERN.search(text)
    if match is None:
        return None
    return float(match.group(0))


def split_meal_count(name: str) -> tuple[str, int]:
    """Split a ``Name × N`` meal name into base name and count."""
    match = MEAL_COUNT_PATTERN.match(name.strip())
    if match is None:
        return name.strip(), 1
    count = int(match.group(2))
    return match.group(1).strip(), max(count, 1)


def extract_block_id(lines: list[str]) -> str | None:
    """Return the block identifier declared on the first line, if any."""
    if not lines:
        return None
    match = ID_PATTERN.match(lines[0].strip())
    return match.group(1) if match else None


def format_grams(value: float) -> str:
    """Format a gram amount without a trailing ``.0``."""
    cleaned = round(float(value), 4)
    if cleaned.is_integer():
        return str(int(cleaned))
    return str(cleaned)


def format_item_line(
    name: str,
    grams: float | None = None,
    *,
    comment: str | None = None,
    timestamp: str | None = None,
    bullet: bool = False,
) -> str:
    """Serialize an item so that it classifies back to the same fields."""
    text = name.strip()
    if grams is not None:
        text = f"{text}:{format_grams(grams)}g"
    if timestamp:
        text = f"{text} @{timestamp}"
    if comment:
        text = f"{text} {COMMENT_MARKER} {comment}"
    if bullet:
        text = f"- {text}"
    return text


def _split_annotations(text: str) -> tuple[str, str | None, str | None]:
    """Strip the trailing comment and an inline timestamp from a line body."""
    head, marker, tail = text.partition(COMMENT_MARKER)
    comment = (tail.strip() or None) if marker else None
    timestamp = None
    match = TIMESTAMP_PATTERN.search(head)
    if match:
        timestamp = match.group(1)
        head = head[: match.start()] + head[match.end() :]
    return head.strip(), comment, timestamp


def _classify_section(line: str, body: str, kind: LineKind) -> ParsedLine:
    working, comment, timestamp = _split_annotations(body)
    name, count = working, 1
    if kind is LineKind.MEAL:
        name, count = split_meal_count(working)
    return ParsedLine(
        kind=kind,
        raw_text=line,
        name=name,
        comment=comment,
        timestamp=timestamp,
        count=count,
    )


def _classify_item(line: str, body: str, kind: LineKind) -> ParsedLine:
    working, comment, timestamp = _split_annotations(body)
    name, quantity_text = working, None
    if ":" in working:
        name, _, quantity_text = working.partition(":")
        quantity_text = quantity_text.strip()
    return ParsedLine(
        kind=kind,
        raw_text=line,
        name=name.strip(),
        quantity_text=quantity_text,
        quantity=parse_quantity(quantity_text),
        comment=comment,
        timestamp=timestamp,
    )
