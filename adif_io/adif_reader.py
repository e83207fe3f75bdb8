import re
from typing import Dict, Iterator, Tuple

ADIF_FIELD_RE = re.compile(
    r"<(?P<name>[A-Za-z0-9_]+):(?P<len>\d+)(:[A-Za-z0-9]+)?>",
    re.IGNORECASE,
)


def iter_records(content: str) -> Iterator[Tuple[int, Dict[str, str]]]:
    """Yield (line, fields) for every record in an ADI document.

    Field names are lowercased. ``line`` is the 1-based line where the
    record's first field starts. A header (anything before <EOH>) is
    discarded; a trailing record without <EOR> is still yielded.
    """
    idx = 0
    length = len(content)
    current: Dict[str, str] = {}
    start = -1
    lower_content = content.lower()
    while idx < length:
        if lower_content.startswith("<eor>", idx):
            if current:
                yield content.count("\n", 0, start) + 1, current
            current = {}
            start = -1
            idx += 5
            continue
        if lower_content.startswith("<eoh>", idx):
            current = {}
            start = -1
            idx += 5
            continue
        m = ADIF_FIELD_RE.match(content, idx)
        if not m:
            idx += 1
            continue
        if start < 0:
            start = idx
        name = m.group("name").lower()
        value_start = m.end()
        value_end = value_start + int(m.group("len"))
        value = content[value_start:value_end].strip()
        if value:
            current[name] = value
        idx = value_end
    # Handle file not ending with <EOR>
    if current:
        yield content.count("\n", 0, start) + 1, current
