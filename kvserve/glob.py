"""Glob-style key matching supporting ``*``, ``?``, ``[...]`` classes and ``\\`` escapes."""

from __future__ import annotations


def matches_character_class(char_class: str, char: str) -> bool:
    """Return whether ``char`` belongs to a class body such as ``abc``, ``a-z`` or ``^abc``."""
    if not char_class:
        return False

    negated = char_class.startswith("^")
    body = char_class[1:] if negated else char_class

    matched = False
    position = 0
    while position < len(body):
        if position + 2 < len(body) and body[position + 1] == "-":
            if body[position] <= char <= body[position + 2]:
                matched = True
                break
            position += 3
        else:
            if body[position] == char:
                matched = True
                break
            position += 1

    return not matched if negated else matched


def matches_glob(pattern: str, text: str) -> bool:
    """Return whether ``text`` matches the glob ``pattern`` as a whole."""
    text_length = len(text)
    pattern_length = len(pattern)

    # rows[p][s] tells whether pattern[p:] matches text[s:].
    rows: dict[int, list[bool]] = {pattern_length: [False] * text_length + [True]}

    for p in reversed(range(pattern_length)):
        following = rows[p + 1]
        row = [False] * (text_length + 1)
        row[text_length] = all(c == "*" for c in pattern[p:])
        token = pattern[p]

        class_end = pattern.find("]", p + 1) if token == "[" else -1

        for s in reversed(range(text_length)):
            current = text[s]
            if token == "*":
                row[s] = following[s] or row[s + 1]
            elif token == "?":
                row[s] = following[s + 1]
            elif token == "[":
                if class_end == -1:
                    row[s] = current == "[" and following[s + 1]
                else:
                    row[s] = (
                        matches_character_class(pattern[p + 1 : class_end], current)
                        and rows[class_end + 1][s + 1]
                    )
            elif token == "\\":
                row[s] = (
                    p + 1 < pattern_length
                    and pattern[p + 1] == current
                    and rows[p + 2][s + 1]
                )
            else:
                row[s] = token == current and following[s + 1]

        rows[p] = row

    return rows[0][0]