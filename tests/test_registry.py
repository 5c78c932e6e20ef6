import pytest

from kvserve.commands.registry import CommandRegistry, levenshtein_distance
from kvserve.protocol import ErrorReply, SimpleString
from kvserve.store import Storage


@pytest.fixture
def registry():
    return CommandRegistry()


@pytest.fixture
def store():
    return Storage()


def test_levenshtein_identity_and_empty():
    assert levenshtein_distance("GET", "GET") == 0
    assert levenshtein_distance("", "HGETALL") == len("HGETALL")
    assert levenshtein_distance("LRANGE", "") == len("LRANGE")


@pytest.mark.parametrize("a, b", [("GETT", "GET"), ("kitten", "sitting"), ("LPUSH", "RPOP")])
def test_levenshtein_symmetric_and_bounded(a, b):
    distance = levenshtein_distance(a, b)
    assert distance == levenshtein_distance(b, a)
    assert abs(len(a) - len(b)) <= distance <= max(len(a), len(b))


def test_levenshtein_single_insertion():
    assert levenshtein_distance("GETT", "GET") == 1


def test_execute_is_case_insensitive(registry, store):
    assert registry.execute("set", ["k", "v"], store) == SimpleString("OK")
    assert registry.execute("Get", ["k"], store) == "v"


def test_execute_turns_command_errors_into_error_replies(registry, store):
    assert registry.execute("GET", [], store) == ErrorReply(
        "ERREUR : nombre d'arguments incorrect pour 'GET' (attendu: GET clé)"
    )


def test_unknown_command_with_suggestion_keeps_original_spelling(registry, store):
    assert registry.execute("gett", [], store) == ErrorReply(
        "ERREUR : commande inconnue 'gett'. Vouliez-vous dire 'GET' ?"
    )


def test_unknown_command_without_suggestion(registry, store):
    assert registry.execute("ZZZZZZZZ", [], store) == ErrorReply(
        "ERREUR : commande inconnue 'ZZZZZZZZ'"
    )


def test_find_similar_command(registry):
    assert registry.find_similar_command("GETT") == "GET"
    assert registry.find_similar_command("ZZZZZZZZ") is None


def test_every_registered_name_dispatches(registry, store):
    for name in registry.names:
        reply = registry.execute(name, [], store)
        assert not (
            isinstance(reply, ErrorReply) and "commande inconnue" in reply.message
        )
    assert "ALAIDE" in registry.names


def test_execute_shares_state_across_commands(registry, store):
    registry.execute("RPUSH", ["l", "a", "b"], store)
    assert registry.execute("LLEN", ["l"], store) == 2
    assert registry.execute("TYPE", ["l"], store) == SimpleString("list")
    assert registry.execute("DBSIZE", [], store) == 1