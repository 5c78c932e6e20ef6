"""Hash and set commands."""

from __future__ import annotations

from typing import Sequence

from kvserve.commands.errors import CommandError
from kvserve.store import Storage, WrongTypeError

NIL = "(nil)"
NOT_A_SET = "ERREUR : cette clé ne contient pas un ensemble"
NOT_A_HASH = "ERREUR : cette clé ne contient pas un hash"


def hset_command(args: Sequence[str], store: Storage) -> int:
    """HSET key field value [field value ...]"""
    if len(args) < 3 or len(args) % 2 == 0:
        raise CommandError(
            "ERREUR : nombre d'arguments incorrect pour 'HSET' "
            "(attendu: HSET clé champ valeur [champ valeur ...])"
        )
    key = args[0]
    pairs = zip(args[1::2], args[2::2])
    return sum(1 for field, value in pairs if store.hash_set(key, field, value))


def hget_command(args: Sequence[str], store: Storage) -> str:
    """HGET key field"""
    if len(args) != 2:
        raise CommandError(
            "ERREUR : nombre d'arguments incorrect pour 'HGET' (attendu: HGET clé champ)"
        )
    value = store.hash_get(args[0], args[1])
    return NIL if value is None else value


def hgetall_command(args: Sequence[str], store: Storage) -> list[str]:
    """HGETALL key"""
    if len(args) != 1:
        raise CommandError(
            "ERREUR : nombre d'arguments incorrect pour 'HGETALL' (attendu: HGETALL clé)"
        )
    try:
        fields = store.hash_get_all(args[0])
    except WrongTypeError:
        raise CommandError(NOT_A_HASH) from None
    return [item for pair in fields.items() for item in pair]


def sadd_command(args: Sequence[str], store: Storage) -> int:
    """SADD key member [member ...]"""
    if len(args) < 2:
        raise CommandError(
            "ERREUR : nombre d'arguments incorrect pour 'SADD' (attendu: SADD clé membre [membre ...])"
        )
    try:
        return store.add_to_set(args[0], args[1:])
    except WrongTypeError:
        raise CommandError(NOT_A_SET) from None


def smembers_command(args: Sequence[str], store: Storage) -> list[str]:
    """SMEMBERS key"""
    if len(args) != 1:
        raise CommandError(
            "ERREUR : nombre d'arguments incorrect pour 'SMEMBERS' (attendu: SMEMBERS clé)"
        )
    try:
        return store.set_members(args[0])
    except WrongTypeError:
        raise CommandError(NOT_A_SET) from None


def sismember_command(args: Sequence[str], store: Storage) -> int:
    """SISMEMBER key member"""
    if len(args) != 2:
        raise CommandError(
            "ERREUR : nombre d'arguments incorrect pour 'SISMEMBER' (attendu: SISMEMBER clé membre)"
        )
    return 1 if store.is_set_member(args[0], args[1]) else 0