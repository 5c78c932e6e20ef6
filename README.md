# kvserve

An in-memory key-value server that speaks the RESP protocol. Clients send
commands as RESP arrays of bulk strings, so a standard RESP client such as
`redis-cli` can connect to it.

## Supported commands

- Strings and counters: `SET key value [EX seconds]`, `GET`, `DEL`, `EXISTS`,
  `KEYS pattern`, `TYPE`, `INCR`, `DECR`, `INCRBY`, `DECRBY`
- Lists: `LPUSH`, `RPUSH`, `LPOP`, `RPOP`, `LLEN`, `LRANGE`
- Sets: `SADD`, `SMEMBERS`, `SISMEMBER`
- Hashes: `HSET`, `HGET`, `HGETALL`
- Utilities: `PING [message]`, `ECHO`, `DBSIZE`, `FLUSHALL`, `ALAIDE [command]`

Command names are case-insensitive. `ALAIDE` lists every command and
`ALAIDE SET` gives help for a single one. An unknown command gets an error
reply, and when a known command is within an edit distance of two, the reply
suggests it.

Some replies differ from what other RESP servers send:

- `GET`, `HGET`, `LPOP` and `RPOP` answer a missing value with the bulk
  string `(nil)`, not a null reply.
- `KEYS` with no match answers with the bulk string `(empty list or set)`.
- `HGETALL` answers with alternating fields and values; `SMEMBERS` and
  `KEYS` return their items in no particular order.
- Error messages are in French, e.g.
  `ERREUR : cette clé ne contient pas une liste`.

`KEYS` accepts glob patterns: `*` matches any run of characters, `?` matches one
character, `[abc]`, `[a-z]` and `[^abc]` match character classes, and `\` escapes
the next character.

Counters are signed 64-bit integers and wrap around on overflow. Keys set with
`EX` expire after the given number of seconds; expired keys are dropped when
they are next looked up and by a periodic background sweep.

## Installation

```
pip install .
```

## Running

```
kvserve
```

The server is configured through environment variables. Empty or unparsable
values fall back to the defaults.

| Variable                          | Default     | Meaning                                  |
|-----------------------------------|-------------|------------------------------------------|
| `REDIS_HOST`                      | `localhost` | address to listen on                     |
| `REDIS_PORT`                      | `6379`      | TCP port                                 |
| `REDIS_MAX_CONNECTIONS`           | `1000`      | connections served at once               |
| `REDIS_EXPIRATION_CHECK_INTERVAL` | `1`         | seconds between sweeps for expired keys  |

Connections beyond the limit are closed at once. A client that sends nothing
for 30 seconds is disconnected. Stop the server with Ctrl+C or SIGTERM; it
closes all client connections before it exits. If the address cannot be
bound, `kvserve` exits with status 1.

## Using it as a library

```python
import threading

from kvserve.config import load_server_config
from kvserve.server import RedisServer

server = RedisServer(load_server_config({"REDIS_PORT": "6380"}))
threading.Thread(target=server.serve_forever, daemon=True).start()
server.wait_until_listening(5)
print(server.address)
# ...
server.stop()
```

`RedisServer` raises `ValueError` when the expiration check interval is not
positive, and `serve_forever` raises `OSError` when it cannot bind.

Commands can be run without a network connection:

```python
from kvserve.commands.registry import CommandRegistry
from kvserve.store import Storage

store = Storage()
registry = CommandRegistry()
registry.execute("RPUSH", ["queue", "a", "b"], store)   # 2
registry.execute("LRANGE", ["queue", "0", "-1"], store)  # ['a', 'b']
```

`execute` returns plain reply values (`int`, `str`, lists of `str`,
`kvserve.protocol.SimpleString` or `kvserve.protocol.ErrorReply`), which
`kvserve.protocol.RespEncoder.write_reply` writes in RESP form.
`kvserve.protocol.RespParser.parse_command` reads one command from a binary
stream.

The storage engine can also be used directly; it is safe to share between
threads:

```python
from kvserve.store import Storage

store = Storage()
store.push("queue", ["a", "b"], left=False)
store.list_range("queue", 0, -1)   # ['a', 'b']
```

Storage methods raise `kvserve.store.WrongTypeError` when a key holds another
kind of value.

## What it does not do

All data lives in memory only: nothing is saved to disk, and it is lost when
the server stops. There is a single keyspace with no authentication, and only
the commands listed above are understood.

## Tests

```
pip install .[test]
pytest
```