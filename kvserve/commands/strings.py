"""String, key-space and counter commands."""

from __future__ import annotations

import re
from typing import Optional, Sequence, Union

from kvserve.commands.errors import CommandError
from kvserve.protocol import SimpleString
from kvserve.store import DataType, Storage

NIL = "(nil)"
EMPTY_LIST = "(empty list or set)"
NOT_A_STRING = "ERREUR : cette clé ne contient pas une chaîne de caractères"
NOT_AN_INTEGER = "ERREUR : la valeur n'est pas un nombre entier"

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1

_TYPE_NAMES = {
    DataType.STRING: "string",
    DataType.LIST: "list",
    DataType.SET: "set",
    DataType.HASH: "hash",
    DataType.ZSET: "zset",
}


def _parse_int64(text: str) -> Optional[int]:
    """Parse a signed decimal 64-bit integer; None if it is not one."""
    if not _INTEGER.fullmatch(text):
        return None
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        return None
    return value


def _wrap_int64(value: int) -> int:
    return (value - _INT64_MIN) % (1 << 64) + _INT64_MIN


def _adjust_counter(key: str, store: Storage, delta: int) -> int:
    stored = store.get_value(key)
    current = 0
    if stored is not None:
        if stored.data_type is not DataType.STRING:
            raise CommandError(NOT_A_STRING)
        parsed = _parse_int64(stored.data)
        if parsed is None:
            raise CommandError(NOT_AN_INTEGER)
        current = parsed
    result = _wrap_int64(current + delta)
    store.set_value(key, str(result), DataType.STRING)
    return result


def set_command(args: Sequence[str], store: Storage) -> SimpleString:
    """SET key value [EX seconds]"""
    if len(args) < 2:
        raise CommandError(
            "ERREUR : nombre d'arguments incorrect pour 'SET' (attendu: SET clé valeur [EX secondes])"
        )
    key, value, *options = args
    if options:
        option = options[0]
        if option.upper() != "EX":
            raise CommandError(f"ERREUR : option inconnue '{option}' pour SET")
        if len(options) < 2:
            raise CommandError("ERREUR : valeur manquante après 'EX'")
        seconds = _parse_int64(options[1])
        if seconds is None:
            raise CommandError("ERREUR : la valeur après 'EX' doit être un nombre entier")
        if seconds <= 0:
            raise CommandError("ERREUR : le délai d'expiration doit être positif")
        store.set_value(key, value, DataType.STRING, seconds)
        return SimpleString("OK")

    store.set_value(key, value, DataType.STRING)
    return SimpleString("OK")


def get_command(args: Sequence[str], store: Storage) -> str:
    """GET key"""
    if len(args) != 1:
        raise CommandError("ERREUR : nombre d'arguments incorrect pour 'GET' (attendu: GET clé)")
    stored = store.get_value(args[0])
    if stored is None:
        return NIL
    if stored.data_type is not DataType.STRING:
        raise CommandError(NOT_A_STRING)
    return stored.data


def delete_command(args: Sequence[str], store: Storage) -> int:
    """DEL key [key ...]"""
    if not args:
        raise CommandError(
            "ERREUR : nombre d'arguments incorrect pour 'DEL' (attendu: DEL clé [clé ...])"
        )
    return sum(1 for key in args if store.delete(key))


def exists_command(args: Sequence[str], store: Storage) -> int:
    """EXISTS key [key ...]"""
    if not args:
        raise CommandError(
            "ERREUR : nombre d'arguments incorrect pour 'EXISTS' (attendu: EXISTS clé [clé ...])"
        )
    return sum(1 for key in args if store.exists(key))


def keys_command(args: Sequence[str], store: Storage) -> Union[str, list[str]]:
    """KEYS pattern"""
    if len(args) != 1:
        raise CommandError(
            "ERREUR : nombre d'arguments incorrect pour 'KEYS' (attendu: KEYS motif)"
        )
    matching = store.find_keys(args[0])
    if not matching:
        return EMPTY_LIST
    return matching


def type_command(args: Sequence[str], store: Storage) -> SimpleString:
    """TYPE key"""
    if len(args) != 1:
        raise CommandError("ERREUR : nombre d'arguments incorrect pour 'TYPE' (attendu: TYPE clé)")
    data_type = store.key_type(args[0])
    return SimpleString(_TYPE_NAMES.get(data_type, "none") if data_type is not None else "none")


def incr_command(args: Sequence[str], store: Storage) -> int:
    """INCR key"""
    if len(args) != 1:
        raise CommandError("ERREUR : nombre d'arguments incorrect pour 'INCR' (attendu: INCR clé)")
    return _adjust_counter(args[0], store, 1)


def decr_command(args: Sequence[str], store: Storage) -> int:
    """DECR key"""
    if len(args) != 1:
        raise CommandError("ERREUR : nombre d'arguments incorrect pour 'DECR' (attendu: DECR clé)")
    return _adjust_counter(args[0], store, -1)


def incrby_command(args: Sequence[str], store: Storage) -> int:
    """INCRBY key increment"""
    if len(args) != 2:
        raise CommandError(
            "ERREUR : nombre d'arguments incorrect pour 'INCRBY' (attendu: INCRBY clé incrément)"
        )
    increment = _parse_int64(args[1])
    if increment is None:
        raise CommandError("ERREUR : l'incrément doit être un nombre entier")
    return _adjust_counter(args[0], store, increment)


def decrby_command(args: Sequence[str], store: Storage) -> int:
    """DECRBY key decrement"""
    if len(args) != 2:
        raise CommandError(
            "ERREUR : nombre d'arguments incorrect pour 'DECRBY' (attendu: DECRBY clé décrément)"
        )
    decrement = _parse_int64(args[1])
    if decrement is None:
        raise CommandError("ERREUR : le décrément doit être un nombre entier")
    return _adjust_counter(args[0], store, -decrement)