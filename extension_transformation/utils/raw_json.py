"""
Raw JSON helpers for opaque pass-through members.

Some members of a request body (the extension options) must reach the
transformation service exactly as the caller sent them. Decoding them into
Python objects and encoding them again would normalize numbers and
whitespace, so these helpers work on the source text instead:

- extract_raw_member() returns the exact text of one top-level member
- splice_raw_member() appends raw text as a member of an encoded object
"""
from __future__ import annotations

import json

_decoder = json.JSONDecoder()
_WHITESPACE = " \t\n\r"


def _skip_whitespace(text: str, index: int) -> int:
    while index < len(text) and text[index] in _WHITESPACE:
        index += 1
    return index


def _expect(text: str, index: int, char: str) -> int:
    if index >= len(text) or text[index] != char:
        raise ValueError(f"Expected {char!r} at position {index}")
    return index + 1


def extract_raw_member(text: str, key: str, default: str = "null") -> str:
    """
    Return the source text of a top-level member of a JSON object.

    Args:
        text: Encoded JSON object
        key: Member name to look up
        default: Returned when the member is absent

    Returns:
        The member's value exactly as written in `text`. When the key is
        repeated, the last occurrence wins (matching json.loads).

    Raises:
        ValueError: If `text` is not a JSON object
    """
    index = _expect(text, _skip_whitespace(text, 0), "{")
    found = default

    index = _skip_whitespace(text, index)
    if index < len(text) and text[index] == "}":
        return found

    while True:
        index = _skip_whitespace(text, index)
        name, index = _decoder.raw_decode(text, index)
        if not isinstance(name, str):
            raise ValueError(f"Expected member name at position {index}")

        index = _expect(text, _skip_whitespace(text, index), ":")
        start = _skip_whitespace(text, index)
        _, index = _decoder.raw_decode(text, start)
        if name == key:
            found = text[start:index]

        index = _skip_whitespace(text, index)
        if index < len(text) and text[index] == ",":
            index += 1
            continue
        _expect(text, index, "}")
        return found


def splice_raw_member(encoded: str, key: str, raw_value: str) -> str:
    """
    Append a member with a pre-encoded value to an encoded JSON object.

    Args:
        encoded: Encoded JSON object, e.g. from model_dump_json()
        key: Member name
        raw_value: Value text, inserted verbatim

    Returns:
        The combined JSON object text
    """
    body = encoded.rstrip()
    if not body.endswith("}"):
        raise ValueError("Encoded value is not a JSON object")

    head = body[:-1].rstrip()
    separator = "" if head.endswith("{") else ","
    return f"{head}{separator}{json.dumps(key)}:{raw_value}}}"
