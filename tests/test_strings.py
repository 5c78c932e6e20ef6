import pytest

from kvserve.commands.errors import CommandError
from kvserve.commands.strings import (
    decr_command,
    decrby_command,
    delete_command,
    exists_command,
    get_command,
    incr_command,
    incrby_command,
    keys_command,
    set_command,
    type_command,
)
from kvserve.protocol import SimpleString
from kvserve.store import DataType, Storage

NOT_A_STRING = "ERREUR : cette clé ne contient pas une chaîne de caractères"
NOT_AN_INTEGER = "ERREUR : la valeur n'est pas un nombre entier"


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return Storage(clock=clock)


def test_set_then_get_round_trip(store):
    assert set_command(["name", "alice"], store) == SimpleString("OK")
    assert get_command(["name"], store) == "alice"


def test_get_missing_key_returns_nil_text(store):
    assert get_command(["missing"], store) == "(nil)"


def test_get_on_list_is_rejected(store):
    store.push("items", ["a"], left=False)
    with pytest.raises(CommandError) as exc_info:
        get_command(["items"], store)
    assert exc_info.value.message == NOT_A_STRING


@pytest.mark.parametrize("args", [[], ["only"]])
def test_set_arity(store, args):
    with pytest.raises(CommandError) as exc_info:
        set_command(args, store)
    assert "'SET'" in exc_info.value.message


def test_set_with_ex_expires(store, clock):
    assert set_command(["session", "v", "ex", "10"], store) == SimpleString("OK")
    assert get_command(["session"], store) == "v"
    clock.now += 11
    assert get_command(["session"], store) == "(nil)"


@pytest.mark.parametrize(
    "options, message",
    [
        (["EX"], "ERREUR : valeur manquante après 'EX'"),
        (["EX", "soon"], "ERREUR : la valeur après 'EX' doit être un nombre entier"),
        (["EX", "0"], "ERREUR : le délai d'expiration doit être positif"),
        (["PX", "10"], "ERREUR : option inconnue 'PX' pour SET"),
    ],
)
def test_set_option_errors(store, options, message):
    with pytest.raises(CommandError) as exc_info:
        set_command(["k", "v", *options], store)
    assert exc_info.value.message == message
    assert get_command(["k"], store) == "(nil)"


def test_delete_counts_existing_keys(store):
    set_command(["a", "1"], store)
    set_command(["b", "2"], store)
    assert delete_command(["a", "b", "c"], store) == len(["a", "b"])
    assert exists_command(["a", "b"], store) == 0


def test_delete_and_exists_require_a_key(store):
    with pytest.raises(CommandError):
        delete_command([], store)
    with pytest.raises(CommandError):
        exists_command([], store)


def test_exists_counts_repeats(store):
    set_command(["a", "1"], store)
    assert exists_command(["a", "a", "nope"], store) == len(["a", "a"])


def test_keys_with_pattern(store):
    for key in ["user:1", "user:2", "order:1"]:
        set_command([key, "x"], store)
    assert sorted(keys_command(["user:*"], store)) == ["user:1", "user:2"]


def test_keys_without_match(store):
    assert keys_command(["*"], store) == "(empty list or set)"


def test_type_reports_each_kind(store):
    set_command(["s", "v"], store)
    store.push("l", ["a"], left=True)
    store.add_to_set("st", ["m"])
    store.hash_set("h", "f", "v")
    assert type_command(["s"], store) == SimpleString("string")
    assert type_command(["l"], store) == SimpleString("list")
    assert type_command(["st"], store) == SimpleString("set")
    assert type_command(["h"], store) == SimpleString("hash")
    assert type_command(["none"], store) == SimpleString("none")


def test_incr_then_decr_restores_value(store):
    set_command(["counter", "41"], store)
    raised = incr_command(["counter"], store)
    assert get_command(["counter"], store) == str(raised)
    assert decr_command(["counter"], store) == int("41")


def test_incrby_on_missing_key_starts_from_zero(store):
    assert incrby_command(["c", "5"], store) == int("5")
    assert decrby_command(["c", "5"], store) == 0
    assert store.get_value("c").data_type is DataType.STRING


def test_incr_on_non_integer_value(store):
    set_command(["c", "abc"], store)
    with pytest.raises(CommandError) as exc_info:
        incr_command(["c"], store)
    assert exc_info.value.message == NOT_AN_INTEGER


def test_incr_on_out_of_range_value(store):
    set_command(["c", "9223372036854775808"], store)
    with pytest.raises(CommandError) as exc_info:
        incr_command(["c"], store)
    assert exc_info.value.message == NOT_AN_INTEGER


def test_incr_on_list_rejected(store):
    store.push("l", ["a"], left=True)
    with pytest.raises(CommandError) as exc_info:
        decr_command(["l"], store)
    assert exc_info.value.message == NOT_A_STRING


def test_incrby_bad_increment(store):
    with pytest.raises(CommandError) as exc_info:
        incrby_command(["c", "1.5"], store)
    assert exc_info.value.message == "ERREUR : l'incrément doit être un nombre entier"
    with pytest.raises(CommandError) as exc_info:
        decrby_command(["c", "x"], store)
    assert exc_info.value.message == "ERREUR : le décrément doit être un nombre entier"