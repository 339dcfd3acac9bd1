#!/usr/bin/env python3
"""
Text scanner for source buffers.

Classifies an offset in a buffer as code or as part of a comment/string
literal. Used by the suppression-attribute detector so that attributes
mentioned in comments or strings are not reported.

Known simplification: block comments are tracked by counting `/*` and `*/`
markers, not by nesting depth.
"""


def _in_line_comment(before: str) -> bool:
    line_start = before.rfind("\n") + 1
    return "//" in before[line_start:]


def _in_block_comment(before: str) -> bool:
    return before.count("/*") > before.count("*/")


def _in_string_literal(before: str) -> bool:
    """
    Scan `before` left to right and report whether it ends inside a string.

    Raw strings (`r"..."`, `r#"..."#`) end at the next quote. Regular
    strings honour `\\"` escapes. An unterminated regular string counts as
    "inside".
    """
    in_raw_string = False
    i = 0
    length = len(before)

    while i < length:
        char = before[i]

        if in_raw_string:
            if char == '"':
                in_raw_string = False
            i += 1
            continue

        if char == "r" and i + 1 < length:
            j = i + 1
            while j < length and before[j] == "#":
                j += 1
            if j < length and before[j] == '"':
                in_raw_string = True
                i = j + 1
                continue

        if char == '"' and (i == 0 or before[i - 1] != "\\"):
            k = i + 1
            while k < length:
                if before[k] == '"' and before[k - 1] != "\\":
                    break
                k += 1
            if k >= length:
                return True
            i = k + 1
            continue

        i += 1

    return in_raw_string


def is_in_comment_or_string(text: str, offset: int) -> bool:
    """
    Check if `offset` in `text` falls inside a comment or string literal.

    Args:
        text: Full source buffer
        offset: Character offset of the position to classify

    Returns:
        True if the position is inside a line comment, block comment,
        raw string or regular string literal.
    """
    before = text[:offset]

    if _in_line_comment(before):
        return True

    if _in_block_comment(before):
        return True

    return _in_string_literal(before)


def is_code_position(text: str, offset: int) -> bool:
    """True if `offset` is in code (not inside a comment or string literal)."""
    return not is_in_comment_or_string(text, offset)


__all__ = [
    'is_in_comment_or_string',
    'is_code_position',
]
