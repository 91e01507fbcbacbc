"""JSON array-of-strings exchange format for `PrefixTrie` contents.

`dumps` writes the stored strings, sorted, as a JSON array with ASCII-only
escaping (quote, backslash, `\\n`, `\\r`, `\\t` and `\\uXXXX` for anything
non-printable or non-ASCII). `loads` validates and parses such an array.
`load_into` is the trie-facing entry point: malformed payloads are reported as
a False result rather than an exception.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Iterable, List

if TYPE_CHECKING:
    from .trie import PrefixTrie

log = logging.getLogger(__name__)


class TrieFormatError(ValueError):
    """Raised when a payload is not a JSON array of strings."""


def encode_strings(strings: Iterable[str], *, indent: int | None = None) -> str:
    items = sorted(strings)
    for s in items:
        if not isinstance(s, str):
            raise TypeError(f"only str keys can be serialized, got {type(s).__name__}")
    return json.dumps(items, ensure_ascii=True, indent=indent)


def dumps(trie: "PrefixTrie", *, indent: int | None = None) -> str:
    return encode_strings(trie.iter_prefix(""), indent=indent)


def loads(payload: str) -> List[str]:
    """Parse `payload` into a list of strings.

    Raises
    ------
    TrieFormatError
        Not valid JSON (unterminated array or string, invalid escape, bare
        tokens), not an array, or an element that is not a string.
    """
    if not isinstance(payload, (str, bytes, bytearray)):
        raise TrieFormatError(f"payload must be text, got {type(payload).__name__}")
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise TrieFormatError(f"malformed payload: {exc.msg} at position {exc.pos}") from exc

    if not isinstance(data, list):
        raise TrieFormatError(f"expected a JSON array, got {type(data).__name__}")
    for i, item in enumerate(data):
        if not isinstance(item, str):
            raise TrieFormatError(f"element {i} is {type(item).__name__}, expected a string")
    return data


def load_into(trie: "PrefixTrie", payload: str) -> bool:
    """Replace the contents of `trie` with the strings in `payload`.

    The trie is cleared first. On a malformed payload it stays empty and the
    result is False.
    """
    trie.clear()
    try:
        strings = loads(payload)
    except TrieFormatError as exc:
        log.warning("rejected trie payload: %s", exc)
        return False

    added = trie.batch_insert(strings)
    log.debug("loaded %d strings (%d elements)", added, len(strings))
    return True
