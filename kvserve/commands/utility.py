"""Connection, server and help commands."""

from __future__ import annotations

from typing import Sequence, Union

from kvserve.commands.errors import CommandError
from kvserve.protocol import SimpleString
from kvserve.store import Storage

HELP_SUMMARY = (
    "ALAIDE Redis-Go: SET, GET, DEL, EXISTS, TYPE, INCR, DECR, INCRBY, DECRBY, "
    "LPUSH, RPUSH, LPOP, RPOP, LLEN, LRANGE, SADD, SMEMBERS, SISMEMBER, HSET, HGET, "
    "HGETALL, PING, ECHO, KEYS, DBSIZE, FLUSHALL - Tapez ALAIDE <commande> pour details"
)

HELP_UNKNOWN = "Commande inconnue. Tapez ALAIDE pour voir toutes les commandes disponibles"

HELP_TOPICS = {
    "SET": "SET key value [EX seconds] - Stocke une valeur avec TTL optionnel en secondes",
    "GET": "GET key - Recupere une valeur. Retourne (nil) si la cle n'existe pas",
    "DEL": "DEL key [key ...] - Supprime une ou plusieurs cles",
    "EXISTS": "EXISTS key [key ...] - Verifie l'existence de cles",
    "TYPE": "TYPE key - Retourne le type de donnees (string, list, set, hash, none)",
    "INCR": "INCR key - Incremente un compteur de 1",
    "DECR": "DECR key - Decremente un compteur de 1",
    "INCRBY": "INCRBY key increment - Incremente un compteur par la valeur donnee",
    "DECRBY": "DECRBY key decrement - Decremente un compteur par la valeur donnee",
    "LPUSH": "LPUSH key element [element ...] - Ajoute des elements au debut de la liste",
    "RPUSH": "RPUSH key element [element ...] - Ajoute des elements a la fin de la liste",
    "LPOP": "LPOP key - Retire et retourne le premier element de la liste",
    "RPOP": "RPOP key - Retire et retourne le dernier element de la liste",
    "LLEN": "LLEN key - Retourne la longueur de la liste",
    "LRANGE": "LRANGE key start stop - Retourne une partie de la liste (indices, -1 = dernier)",
    "SADD": "SADD key member [member ...] - Ajoute des membres uniques a un set",
    "SMEMBERS": "SMEMBERS key - Retourne tous les membres d'un set",
    "SISMEMBER": "SISMEMBER key member - Teste si un membre appartient au set (retourne 1 ou 0)",
    "HSET": "HSET key field value [field value ...] - Definit des champs dans un hash",
    "HGET": "HGET key field - Recupere la valeur d'un champ dans un hash",
    "HGETALL": "HGETALL key - Retourne tous les champs et valeurs d'un hash",
    "PING": "PING [message] - Test de connexion. Retourne PONG ou le message",
    "ECHO": "ECHO message - Retourne le message tel quel",
    "KEYS": "KEYS pattern - Recherche des cles par motif (* = tout, ? = 1 char, [abc] = choix)",
    "DBSIZE": "DBSIZE - Retourne le nombre total de cles dans la base",
    "FLUSHALL": "FLUSHALL - Vide completement la base de donnees",
}


def ping_command(args: Sequence[str], store: Storage) -> Union[SimpleString, str]:
    """PING [message]"""
    if not args:
        return SimpleString("PONG")
    return args[0]


def echo_command(args: Sequence[str], store: Storage) -> str:
    """ECHO message"""
    if len(args) != 1:
        raise CommandError(
            "ERREUR : nombre d'arguments incorrect pour 'ECHO' (attendu: ECHO message)"
        )
    return args[0]


def dbsize_command(args: Sequence[str], store: Storage) -> int:
    """DBSIZE"""
    if args:
        raise CommandError("ERREUR : DBSIZE ne prend aucun argument")
    return store.size()


def flushall_command(args: Sequence[str], store: Storage) -> SimpleString:
    """FLUSHALL"""
    if args:
        raise CommandError("ERREUR : FLUSHALL ne prend aucun argument")
    store.flush_all()
    return SimpleString("OK")


def help_command(args: Sequence[str], store: Storage) -> SimpleString:
    """ALAIDE [command]"""
    if not args:
        return SimpleString(HELP_SUMMARY)
    return SimpleString(HELP_TOPICS.get(args[0].upper(), HELP_UNKNOWN))