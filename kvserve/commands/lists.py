"""List commands."""

from __future__ import annotations

import re
from typing import Sequence

from kvserve.commands.errors import CommandError
from kvserve.store import Storage, WrongTypeError

NIL = "(nil)"
NOT_A_LIST = "ERREUR : cette clé ne contient pas une liste"

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1


def _parse_index(text: str, message: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise CommandError(message)
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise CommandError(message)
    return value


def _push(args: Sequence[str], store: Storage, name: str, left: bool) -> int:
    if len(args) < 2:
        raise CommandError(
            f"ERREUR : nombre d'arguments incorrect pour '{name}' "
            f"(attendu: {name} clé élément [élément ...])"
        )
    try:
        return store.push(args[0], args[1:], left)
    except WrongTypeError:
        raise CommandError(NOT_A_LIST) from None


def _pop(args: Sequence[str], store: Storage, name: str, left: bool) -> str:
    if len(args) != 1:
        raise CommandError(
            f"ERREUR : nombre d'arguments incorrect pour '{name}' (attendu: {name} clé)"
        )
    element = store.pop(args[0], left)
    return NIL if element is None else element


def lpush_command(args: Sequence[str], store: Storage) -> int:
    """LPUSH key element [element ...]"""
    return _push(args, store, "LPUSH", True)


def rpush_command(args: Sequence[str], store: Storage) -> int:
    """RPUSH key element [element ...]"""
    return _push(args, store, "RPUSH", False)


def lpop_command(args: Sequence[str], store: Storage) -> str:
    """LPOP key"""
    return _pop(args, store, "LPOP", True)


def rpop_command(args: Sequence[str], store: Storage) -> str:
    """RPOP key"""
    return _pop(args, store, "RPOP", False)


def llen_command(args: Sequence[str], store: Storage) -> int:
    """LLEN key"""
    if len(args) != 1:
        raise CommandError(
            "ERREUR : nombre d'arguments incorrect pour 'LLEN' (attendu: LLEN clé)"
        )
    try:
        return store.list_length(args[0])
    except WrongTypeError:
        raise CommandError(NOT_A_LIST) from None


def lrange_command(args: Sequence[str], store: Storage) -> list[str]:
    """LRANGE key start stop"""
    if len(args) != 3:
        raise CommandError(
            "ERREUR : nombre d'arguments incorrect pour 'LRANGE' (attendu: LRANGE clé début fin)"
        )
    start = _parse_index(args[1], "ERREUR : l'index de début doit être un nombre entier")
    stop = _parse_index(args[2], "ERREUR : l'index de fin doit être un nombre entier")
    try:
        return store.list_range(args[0], start, stop)
    except WrongTypeError:
        raise CommandError(NOT_A_LIST) from None