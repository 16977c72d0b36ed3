from __future__ import annotations

import re

_WHITESPACE_BOUNDARY = re.compile(r"(?<=\s)")
_INVALID_CHARS = re.compile(r"[^_a-zA-Z0-9]")
_LEADING_LOWER = re.compile(r"^[a-z]")
_TRAILING_UPPER_RUN = re.compile(r"(?<=[A-Z])[A-Z0-9]+$")
_LOWER_AFTER_DIGIT = re.compile(r"(?<=[0-9])[a-z]")
_INNER_UPPER_RUN = re.compile(r"(?<=[A-Z])[A-Z]+?((?=[A-Z][a-z])|(?=[0-9]))")


def split_words(raw: str) -> list[str]:
    cleaned = _INVALID_CHARS.sub("", _WHITESPACE_BOUNDARY.sub("_", raw))
    return [word for word in cleaned.split("_") if word]


def normalize_word(word: str) -> str:
    word = _LEADING_LOWER.sub(lambda m: m.group(0).upper(), word)
    word = _TRAILING_UPPER_RUN.sub(lambda m: m.group(0).lower(), word)
    word = _LOWER_AFTER_DIGIT.sub(lambda m: m.group(0).upper(), word)
    word = _INNER_UPPER_RUN.sub(lambda m: m.group(0).lower(), word)
    return word


def to_pascal_case(raw: str) -> str:
    """Best-effort PascalCase for an exported symbol name.

    Purely casing/digit driven: ``my_function_name`` -> ``MyFunctionName``,
    ``HTTPServerSocket`` -> ``HttpServerSocket``, ``getURL`` -> ``GetUrl``.
    """
    return "".join(normalize_word(word) for word in split_words(raw))
