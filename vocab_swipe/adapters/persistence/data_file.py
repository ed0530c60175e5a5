# vocab_swipe/adapters/persistence/data_file.py
"""
Codec for `.data` vocabulary files.

Layout:
    #link: https://example.org/where-these-words-came-from
    [ {"term": "red", ...}, ... ]

The `#link:` line is optional; without it the whole file is the JSON array.
"""
import json
from dataclasses import dataclass
from typing import Any, List, Optional

LINK_PREFIX = "#link:"


class DataFileError(ValueError):
    """The file content is not a valid `.data` payload."""


@dataclass
class DataFile:
    words: Any
    origin_link: Optional[str] = None


def loads(content: str) -> DataFile:
    text = content.lstrip("\ufeff")
    origin_link: Optional[str] = None

    stripped = text.lstrip()
    if stripped.startswith(LINK_PREFIX):
        first_line, _, rest = stripped.partition("\n")
        origin_link = first_line[len(LINK_PREFIX):].strip() or None
        text = rest

    if not text.strip():
        raise DataFileError("file has no JSON content")

    try:
        words = json.loads(text)
    except json.JSONDecodeError as e:
        raise DataFileError(f"malformed JSON: {e.msg} (line {e.lineno})")

    if not isinstance(words, list):
        raise DataFileError("content must be a JSON array of words")
    return DataFile(words=words, origin_link=origin_link)


def dumps(words: List[dict], origin_link: Optional[str] = None) -> str:
    body = json.dumps(words, indent=2, ensure_ascii=False)
    if origin_link:
        # A newline inside the link would split the header
        link = " ".join(origin_link.split())
        return f"{LINK_PREFIX} {link}\n{body}\n"
    return body + "\n"
