"""Command-line entry point that runs the server until interrupted."""

from __future__ import annotations

import argparse
import logging
import signal
import threading
from typing import Optional, Sequence

from kvserve.config import load_server_config
from kvserve.server import RedisServer

logger = logging.getLogger(__name__)

_WAIT_STEP = 0.2


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the server until SIGINT or SIGTERM; return the exit status."""
    parser = argparse.ArgumentParser(
        prog="kvserve",
        description=(
            "In-memory key-value server speaking the RESP protocol. Configured through "
            "REDIS_HOST, REDIS_PORT, REDIS_MAX_CONNECTIONS and "
            "REDIS_EXPIRATION_CHECK_INTERVAL."
        ),
    )
    parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")

    config = load_server_config()
    server = RedisServer(config)

    stop_requested = threading.Event()
    failures: list[OSError] = []

    def request_stop(signum, frame) -> None:
        stop_requested.set()

    def run() -> None:
        try:
            server.serve_forever()
        except OSError as exc:
            logger.critical("Impossible de démarrer le serveur: %s", exc)
            failures.append(exc)
            stop_requested.set()

    previous = {
        signum: signal.signal(signum, request_stop)
        for signum in (signal.SIGINT, signal.SIGTERM)
    }
    thread = threading.Thread(target=run, name="kvserve-accept", daemon=True)
    try:
        logger.info(
            "Démarrage du serveur sur %s:%d", config.network.host, config.network.port
        )
        thread.start()
        while not stop_requested.wait(_WAIT_STEP):
            pass
    finally:
        for signum, handler in previous.items():
            signal.signal(signum, handler if handler is not None else signal.SIG_DFL)

    if failures:
        server.stop()
        return 1

    print("\nArrêt du serveur en cours...")
    server.stop()
    thread.join()
    logger.info("Serveur arrêté proprement")
    return 0