"""TCP server that runs commands against a shared store."""

from __future__ import annotations

import logging
import socket
import threading
from typing import Optional

from kvserve.commands.registry import CommandRegistry
from kvserve.config import ServerConfig
from kvserve.protocol import ProtocolError, RespEncoder, RespParser
from kvserve.store import Storage

logger = logging.getLogger(__name__)

_CLIENT_TIMEOUT = 30.0
_ACCEPT_POLL = 0.2
_INTERNAL_ERROR = "ERREUR : erreur interne du serveur"


class RedisServer:
    """Accepts connections, serves each in its own thread and expires keys in the background."""

    def __init__(
        self,
        config: ServerConfig,
        store: Optional[Storage] = None,
        registry: Optional[CommandRegistry] = None,
    ) -> None:
        interval = config.maintenance.expiration_check_interval
        if interval <= 0:
            raise ValueError(f"expiration check interval must be positive, got {interval}")
        self.config = config
        self.store = store if store is not None else Storage()
        self.registry = registry if registry is not None else CommandRegistry()
        self._listener: Optional[socket.socket] = None
        self._listening = threading.Event()
        self._shutdown = threading.Event()
        self._clients: dict[socket.socket, threading.Thread] = {}
        self._clients_lock = threading.Lock()
        self._collector = threading.Thread(
            target=self._collect_expired, name="kvserve-expiry", daemon=True
        )
        self._collector.start()

    @property
    def address(self) -> Optional[tuple]:
        """The bound socket address, once listening."""
        listener = self._listener
        if listener is None or not self._listening.is_set():
            return None
        return listener.getsockname()

    def wait_until_listening(self, timeout: Optional[float] = None) -> bool:
        """Block until the server is listening; return False on timeout."""
        return self._listening.wait(timeout)

    def serve_forever(self) -> None:
        """Listen and accept connections until ``stop`` is called.

        Raises OSError when the address cannot be bound.
        """
        host = self.config.network.host
        port = self.config.network.port
        try:
            listener = socket.create_server((host, port))
        except OSError as exc:
            raise OSError(f"impossible d'écouter sur {host}:{port}: {exc}") from exc

        listener.settimeout(_ACCEPT_POLL)
        self._listener = listener
        self._listening.set()
        logger.info("Serveur en écoute sur %s:%d", host, listener.getsockname()[1])

        try:
            while not self._shutdown.is_set():
                try:
                    connection, peer = listener.accept()
                except socket.timeout:
                    continue
                except OSError as exc:
                    if self._shutdown.is_set():
                        break
                    logger.error("Erreur lors de l'acceptation de connexion: %s", exc)
                    continue
                self._admit(connection, peer)
        finally:
            listener.close()

    def _admit(self, connection: socket.socket, peer) -> None:
        logger.info("Nouvelle connexion depuis %s", peer)
        limit = self.config.performance.max_connections
        with self._clients_lock:
            refused = len(self._clients) >= limit
            if not refused:
                worker = threading.Thread(
                    target=self._handle_client,
                    args=(connection, peer),
                    name=f"kvserve-client-{peer}",
                    daemon=True,
                )
                self._clients[connection] = worker
                worker.start()
        if refused:
            connection.close()
            logger.warning("Connexion refusée: limite atteinte (%d connexions max)", limit)

    def _handle_client(self, connection: socket.socket, peer) -> None:
        try:
            connection.settimeout(_CLIENT_TIMEOUT)
            with connection.makefile("rb") as reader, connection.makefile("wb") as writer:
                self._serve_commands(RespParser(reader), RespEncoder(writer), peer)
        except OSError as exc:
            logger.warning("Erreur de connexion avec %s: %s", peer, exc)
        finally:
            logger.info("Connexion fermée depuis %s", peer)
            connection.close()
            with self._clients_lock:
                self._clients.pop(connection, None)

    def _serve_commands(self, parser: RespParser, encoder: RespEncoder, peer) -> None:
        while not self._shutdown.is_set():
            try:
                command = parser.parse_command()
            except socket.timeout:
                logger.info("Timeout de connexion pour %s", peer)
                return
            except (EOFError, ProtocolError, OSError) as exc:
                logger.warning("Erreur de parsing depuis %s: %s", peer, exc)
                return

            if not command:
                continue

            name, *args = command
            reply = self.registry.execute(name, args, self.store)
            try:
                encoder.write_reply(reply)
            except (OSError, TypeError) as exc:
                logger.error("Erreur d'exécution de commande pour %s: %s", peer, exc)
                try:
                    encoder.write_error(_INTERNAL_ERROR)
                except OSError:
                    return

    def _collect_expired(self) -> None:
        interval = self.config.maintenance.expiration_check_interval
        logger.info("Garbage collector démarré (intervalle: %ss)", interval)
        while not self._shutdown.wait(interval):
            removed = self.cleanup_expired()
            if removed:
                logger.info("Nettoyage: %d clés expirées supprimées", removed)
        logger.info("Arrêt du garbage collector")

    def cleanup_expired(self) -> int:
        """Remove expired keys now; return how many were removed."""
        return self.store.cleanup_expired()

    def stop(self) -> None:
        """Stop accepting, close every client and wait for the worker threads."""
        logger.info("Arrêt du serveur en cours...")
        self._shutdown.set()

        listener = self._listener
        if listener is not None:
            listener.close()

        with self._clients_lock:
            clients = list(self._clients.items())
        for connection, _ in clients:
            try:
                connection.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
        if clients:
            logger.info("Fermeture de %d connexions clients...", len(clients))

        for _, worker in clients:
            worker.join()
        if self._collector is not threading.current_thread():
            self._collector.join()