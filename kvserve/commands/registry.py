"""Dispatch of command names to their handlers."""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from kvserve.commands import hashes_sets, lists, strings, utility
from kvserve.commands.errors import CommandError
from kvserve.protocol import ErrorReply, Reply
from kvserve.store import Storage

Handler = Callable[[Sequence[str], Storage], Reply]

_SUGGESTION_THRESHOLD = 3


def levenshtein_distance(a: str, b: str) -> int:
    """Return the edit distance between ``a`` and ``b``."""
    if not a:
        return len(b)
    if not b:
        return len(a)
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(
                min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost)
            )
        previous = current
    return previous[-1]


class CommandRegistry:
    """Maps command names to handlers and runs them."""

    def __init__(self) -> None:
        self._commands: dict[str, Handler] = {
            "SET": strings.set_command,
            "GET": strings.get_command,
            "DEL": strings.delete_command,
            "EXISTS": strings.exists_command,
            "KEYS": strings.keys_command,
            "TYPE": strings.type_command,
            "INCR": strings.incr_command,
            "DECR": strings.decr_command,
            "INCRBY": strings.incrby_command,
            "DECRBY": strings.decrby_command,
            "LPUSH": lists.lpush_command,
            "RPUSH": lists.rpush_command,
            "LPOP": lists.lpop_command,
            "RPOP": lists.rpop_command,
            "LLEN": lists.llen_command,
            "LRANGE": lists.lrange_command,
            "SADD": hashes_sets.sadd_command,
            "SMEMBERS": hashes_sets.smembers_command,
            "SISMEMBER": hashes_sets.sismember_command,
            "HSET": hashes_sets.hset_command,
            "HGET": hashes_sets.hget_command,
            "HGETALL": hashes_sets.hgetall_command,
            "PING": utility.ping_command,
            "ECHO": utility.echo_command,
            "DBSIZE": utility.dbsize_command,
            "FLUSHALL": utility.flushall_command,
            "ALAIDE": utility.help_command,
        }

    @property
    def names(self) -> list[str]:
        return list(self._commands)

    def execute(self, name: str, args: Sequence[str], store: Storage) -> Reply:
        """Run command ``name``; rejected or unknown commands yield an ErrorReply."""
        handler = self._commands.get(name.upper())
        if handler is None:
            suggestion = self.find_similar_command(name)
            if suggestion is not None:
                return ErrorReply(
                    f"ERREUR : commande inconnue '{name}'. Vouliez-vous dire '{suggestion}' ?"
                )
            return ErrorReply(f"ERREUR : commande inconnue '{name}'")
        try:
            return handler(args, store)
        except CommandError as exc:
            return ErrorReply(exc.message)

    def find_similar_command(self, name: str) -> Optional[str]:
        """Return the closest known command within a small edit distance, if any."""
        target = name.upper()
        best: Optional[str] = None
        best_distance = _SUGGESTION_THRESHOLD
        for candidate in self._commands:
            distance = levenshtein_distance(target, candidate)
            if distance < best_distance:
                best_distance = distance
                best = candidate
        return best