from __future__ import annotations

import re
from collections import namedtuple
from functools import lru_cache
from re import Pattern
from urllib.parse import unquote

from strata.exceptions import ImproperlyConfigured

Key = namedtuple("Key", ["name", "prefix", "pattern", "modifier"])

WILDCARD = "(.*)"

# Characters that, placed right before a parameter, become part of it.
PARAM_PREFIXES = "./"
MODIFIERS = "?*+"

_NAME = re.compile(r"\w+")


class PathMatcher:
    """
    A compiled path pattern.

    Exposes the ordered `keys` declared by the pattern so the positional
    captures returned by `test()` can be zipped to their names.
    """

    __slots__ = ("pattern", "regex", "keys")

    def __init__(self, pattern: str, regex: Pattern[str], keys: tuple[Key, ...]) -> None:
        self.pattern = pattern
        self.regex = regex
        self.keys = keys

    def test(self, path: str) -> tuple[str | None, ...] | None:
        """
        Returns the captured groups, in declaration order, or `None` when the
        path does not match.
        """
        match = self.regex.match(path)
        if match is None:
            return None
        return match.groups()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(pattern={self.pattern!r}, regex={self.regex.pattern!r})"


def decode_component(value: str) -> str:
    """
    Percent-decodes a captured value, falling back to the raw text when it is
    not valid UTF-8 once decoded.
    """
    try:
        return unquote(value, errors="strict")
    except UnicodeDecodeError:
        return value


def read_group(pattern: str, index: int) -> tuple[str, int]:
    """
    Reads the regex group starting at `pattern[index] == "("` and returns its
    body plus the index right after the closing parenthesis.
    """
    depth = 1
    position = index + 1
    body = ""

    if position < len(pattern) and pattern[position] == "?":
        raise ImproperlyConfigured(
            detail=f'Pattern cannot start with "?" at {position} in {pattern!r}.'
        )

    while position < len(pattern):
        char = pattern[position]

        if char == "\\":
            body += pattern[position : position + 2]
            position += 2
            continue

        if char == ")":
            depth -= 1
            if depth == 0:
                position += 1
                break
        elif char == "(":
            depth += 1
            if pattern[position + 1 : position + 2] != "?":
                raise ImproperlyConfigured(
                    detail=f"Capturing groups are not allowed at {position} in {pattern!r}."
                )

        body += char
        position += 1

    if depth:
        raise ImproperlyConfigured(detail=f"Unbalanced pattern at {index} in {pattern!r}.")
    if not body:
        raise ImproperlyConfigured(detail=f"Missing pattern at {index} in {pattern!r}.")

    return body, position


def tokenize(pattern: str, delimiter: str = "/") -> list[str | Key]:
    """
    Splits a path pattern into literal strings and parameter `Key`s.

    ```
    "/users/:id"        -> ["/users", Key("id", "/", "[^/]+?", "")]
    "/files/:path(.*)"  -> ["/files", Key("path", "/", ".*", "")]
    "/:lang?/docs"      -> [Key("lang", "/", "[^/]+?", "?"), "/docs"]
    "(.*)"              -> [Key("0", "", ".*", "")]
    ```

    Repeated names are allowed: a mounted prefix and the route under it may
    declare the same parameter.
    """
    default_pattern = f"[^{re.escape(delimiter)}]+?"
    tokens: list[str | Key] = []
    literal = ""
    unnamed_index = 0
    index = 0

    while index < len(pattern):
        char = pattern[index]

        if char == "\\":
            literal += pattern[index + 1 : index + 2]
            index += 2
            continue

        if char not in ":(":
            literal += char
            index += 1
            continue

        name = ""
        if char == ":":
            match = _NAME.match(pattern, index + 1)
            if match is None:
                raise ImproperlyConfigured(
                    detail=f"Missing parameter name at {index} in {pattern!r}."
                )
            name = match.group()
            index = match.end()

        group = ""
        if index < len(pattern) and pattern[index] == "(":
            group, index = read_group(pattern, index)

        if not name:
            name = str(unnamed_index)
            unnamed_index += 1

        modifier = ""
        if index < len(pattern) and pattern[index] in MODIFIERS:
            modifier = pattern[index]
            index += 1

        prefix = ""
        if literal and literal[-1] in PARAM_PREFIXES:
            prefix, literal = literal[-1], literal[:-1]

        if literal:
            tokens.append(literal)
            literal = ""

        tokens.append(Key(name, prefix, group or default_pattern, modifier))

    if literal:
        tokens.append(literal)
    return tokens


def raise_for_duplicate_params(path: str, duplicate_params: set[str] | None = None) -> None:
    """
    Builds and generates the error message for duplicate parameters
    in the path.
    """
    if not duplicate_params:
        return

    names = ", ".join(sorted(duplicate_params))
    ending = "s" if len(duplicate_params) > 1 else ""
    raise ImproperlyConfigured(detail=f"Duplicated param name{ending} {names} in the path {path}")


def key_to_regex(key: Key) -> str:
    prefix = re.escape(key.prefix)

    if key.modifier in ("+", "*"):
        if prefix:
            repeat = "*" if key.modifier == "*" else ""
            return f"(?:{prefix}((?:{key.pattern})(?:{prefix}(?:{key.pattern}))*)){repeat}"
        return f"((?:{key.pattern}){key.modifier})"

    if prefix:
        return f"(?:{prefix}({key.pattern})){key.modifier}"
    return f"({key.pattern}){key.modifier}"


def generate_regex(
    tokens: list[str | Key],
    delimiter: str,
    end: bool,
    strict: bool,
) -> str:
    delimiter_regex = f"[{re.escape(delimiter)}]"
    path_regex = "^"

    for token in tokens:
        if isinstance(token, Key):
            path_regex += key_to_regex(token)
        else:
            path_regex += re.escape(token)

    if end:
        if not strict:
            path_regex += f"{delimiter_regex}?"
        return path_regex + "$"

    end_token = tokens[-1] if tokens else None
    if isinstance(end_token, str):
        is_end_delimited = end_token[-1] in delimiter
    else:
        is_end_delimited = end_token is None

    if not strict:
        path_regex += f"(?:{delimiter_regex}(?=$))?"
    if not is_end_delimited:
        path_regex += f"(?={delimiter_regex}|$)"
    return path_regex


@lru_cache(maxsize=1024)
def compile_path(
    pattern: str,
    *,
    delimiter: str = "/",
    end: bool = True,
    strict: bool = False,
    sensitive: bool = False,
) -> PathMatcher:
    """
    Compiles a path pattern into a `PathMatcher`.

    Args:
        pattern (str): The path pattern (`/users/:id`, `/files/:path(.*)`, `(.*)`).
        delimiter (str): The segment delimiter; parameters never span it by default.
        end (bool): When `False` the pattern matches any path it is a prefix of,
            as long as the prefix ends on a delimiter.
        strict (bool): When `False` an optional trailing delimiter is accepted.
        sensitive (bool): Match case sensitively.

    Returns:
        PathMatcher: The compiled matcher. Matching is always anchored at the start.
    """
    tokens = tokenize(pattern, delimiter)
    path_regex = generate_regex(tokens, delimiter, end, strict)
    flags = 0 if sensitive else re.IGNORECASE
    keys = tuple(token for token in tokens if isinstance(token, Key))
    return PathMatcher(pattern, re.compile(path_regex, flags), keys)
