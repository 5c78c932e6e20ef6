import os
import signal
import socket
import threading
import time

import pytest

from kvserve.cli import main


def _free_port():
    with socket.create_server(("127.0.0.1", 0)) as probe:
        return probe.getsockname()[1]


def test_help_exits_successfully(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--help"])
    assert excinfo.value.code == 0
    assert "REDIS_PORT" in capsys.readouterr().out


def test_unknown_argument_is_rejected():
    with pytest.raises(SystemExit) as excinfo:
        main(["--bogus"])
    assert excinfo.value.code == 2


def test_port_in_use_returns_failure(monkeypatch):
    blocker = socket.create_server(("127.0.0.1", 0))
    with blocker:
        monkeypatch.setenv("REDIS_HOST", "127.0.0.1")
        monkeypatch.setenv("REDIS_PORT", str(blocker.getsockname()[1]))
        assert main([]) == 1


def test_serves_until_terminated(monkeypatch, capsys):
    port = _free_port()
    monkeypatch.setenv("REDIS_HOST", "127.0.0.1")
    monkeypatch.setenv("REDIS_PORT", str(port))
    replies = []

    def client():
        deadline = time.monotonic() + 10
        while time.monotonic() < deadline:
            try:
                sock = socket.create_connection(("127.0.0.1", port), timeout=5)
            except OSError:
                time.sleep(0.05)
                continue
            with sock, sock.makefile("rb") as reader:
                sock.sendall(b"*1\r\n$4\r\nPING\r\n")
                replies.append(reader.readline())
            break
        os.kill(os.getpid(), signal.SIGTERM)

    helper = threading.Thread(target=client, daemon=True)
    helper.start()
    status = main([])
    helper.join(5)

    assert status == 0
    assert replies == [b"+PONG\r\n"]
    assert "Arrêt du serveur en cours..." in capsys.readouterr().out
    assert signal.getsignal(signal.SIGTERM) is not None