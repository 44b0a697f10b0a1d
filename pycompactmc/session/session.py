"""
Session - one connection to a server, from connect to disconnect

Each session runs two threads:

- the main thread connects, then drains a FIFO task queue. It is the only
  thread that writes to the socket, swaps streams or closes resources.
- the reader thread blocks on frame reads and dispatches each inbound packet
  synchronously before reading the next one.

Public mutators called from any other thread put themselves on the task queue
and return immediately. Inbound handlers run on the reader thread, so their
sends are queued as well; the only fields they may set directly are ``state``
and ``compression_threshold``, which the reader thread itself depends on for
the next frame.
"""

import socket
import threading
import time
import logging
from dataclasses import replace
from functools import partial
from queue import Queue, Empty
from typing import Optional, Callable, Dict, Any

from ..config.client_config import ClientConfig
from ..errors import TransportError, ConnectError, FramingError, SessionClosedError
from ..events import EventManager, EventType, DisconnectEvent
from ..packets import DEFAULT_REGISTRY, PacketRegistry
from ..packets.base import OutboundPacket
from ..packets.outgoing import HandshakePacket, LoginStartPacket, StatusRequestPacket, PingPacket
from ..protocol.codec import encode_frame, read_frame, COMPRESSION_DISABLED
from ..protocol.encryption import CipherReader, CipherWriter, create_cipher
from ..protocol.states import State
from ..protocol.streams import SocketReader, SocketWriter
from ..utils.chat import chat_to_text
from ..utils.logging_config import configure_logging

logger = logging.getLogger(__name__)


class Session:
    """A client connection to a Minecraft server

    The constructor returns immediately; connecting happens on the session's
    own main thread. Connection problems are reported through the
    ``DISCONNECTED`` event (and ``on_disconnect``), never raised to the caller.
    """

    def __init__(self, username: str, host: str, port: int,
                 config: Optional[ClientConfig] = None,
                 registry: Optional[PacketRegistry] = None,
                 on_disconnect: Optional[Callable[[DisconnectEvent], None]] = None):
        self.config = replace(config or ClientConfig(), host=host, port=port, username=username).validate()
        configure_logging(self.config.log_level)
        self.host = self.config.host
        self.port = self.config.port
        self.username = self.config.username
        self.registry = registry if registry is not None else DEFAULT_REGISTRY

        self.events = EventManager()
        if on_disconnect:
            self.events.subscribe(EventType.DISCONNECTED, on_disconnect)

        # Protocol state
        self._state = State.HANDSHAKING
        self._compression_threshold = COMPRESSION_DISABLED

        # Network state
        self.socket: Optional[socket.socket] = None
        self._input: Optional[CipherReader] = None
        self._output: Optional[CipherWriter] = None
        self._running = True
        self._closed = False
        self._close_lock = threading.Lock()

        # Outcome
        self.disconnect_reason: Optional[str] = None
        self.disconnect_cause: Optional[BaseException] = None
        self.server_status: Optional[Dict[str, Any]] = None

        # Threading
        self._tasks: Queue = Queue()
        self._reader_thread = threading.Thread(
            target=self._read_loop, name=f"session-reader-{self.username}", daemon=True
        )
        self._main_thread = threading.Thread(
            target=self._run, name=f"session-main-{self.username}", daemon=True
        )
        self._main_thread.start()

    def __repr__(self) -> str:
        return f"<Session {self.username}@{self.host}:{self.port} state={self._state.name} running={self._running}>"

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        self.wait_closed(self.config.join_timeout)

    # =========================================================================
    # State
    # =========================================================================

    @property
    def state(self) -> State:
        return self._state

    @state.setter
    def state(self, state: State) -> None:
        if state is self._state:
            return
        logger.debug(f"State {self._state.name} -> {state.name}")
        self._state = state
        self.events.emit(EventType.STATE_CHANGED, state)

    def get_state(self) -> State:
        return self._state

    @property
    def compression_threshold(self) -> int:
        return self._compression_threshold

    @compression_threshold.setter
    def compression_threshold(self, threshold: int) -> None:
        self._compression_threshold = threshold
        if threshold >= 0:
            logger.debug(f"Compression enabled, threshold {threshold}")
            self.events.emit(EventType.COMPRESSION_ENABLED, threshold)
        else:
            logger.debug("Compression disabled")

    def is_running(self) -> bool:
        return self._running and not self._closed

    @property
    def closed(self) -> bool:
        return self._closed

    # =========================================================================
    # Public operations
    # =========================================================================

    def login(self) -> None:
        """Send Handshake(next=LOGIN) and Login Start"""
        if not self._on_main_thread():
            self._submit(self.login)
            return
        self._handshake(State.LOGIN)
        self.send_packet(LoginStartPacket(self.username))

    def request_status(self) -> None:
        """Start a server list ping; the result arrives as STATUS_RECEIVED"""
        if not self._on_main_thread():
            self._submit(self.request_status)
            return
        self._handshake(State.STATUS)
        self.send_packet(StatusRequestPacket())

    def ping(self, payload: Optional[int] = None) -> None:
        """Send a status ping; the server answers with PONG and hangs up"""
        if payload is None:
            payload = int(time.time() * 1000)
        self.send_packet(PingPacket(payload))

    def send_packet(self, packet: OutboundPacket) -> None:
        """Frame and send a packet using the compression threshold current at send time"""
        if not self._on_main_thread():
            self._submit(self.send_packet, packet)
            return
        self._ensure_open()

        frame = encode_frame(packet.packet_id, packet.to_bytes(), self._compression_threshold)
        try:
            self._output.write(frame)
        except TransportError as e:
            self._fail("Failed to send packet", e)
            raise

        if self.config.log_packets:
            logger.debug(f"-> {self._state.name} 0x{packet.packet_id:02X} {type(packet).__name__} ({len(frame)} bytes)")
        self.events.emit(EventType.PACKET_SENT, packet)

    def enable_encryption(self, key: bytes) -> None:
        """Switch both streams to AES/CFB8 with ``key`` as key and IV"""
        if not self._on_main_thread():
            create_cipher(key)  # reject bad keys in the caller's thread
            self._submit(self.enable_encryption, key)
            return
        self._ensure_open()

        # A second call re-keys rather than stacking ciphers
        self._input.set_key(key)
        self._output.set_key(key)
        logger.debug("Encryption enabled")
        self.events.emit(EventType.ENCRYPTION_ENABLED)

    def close(self) -> None:
        """Stop both threads and release the socket. Safe to call repeatedly."""
        if not self._on_main_thread():
            if not self._closed and self._main_thread.is_alive():
                self._tasks.put(self.close)
            return
        self._running = False
        self._release_resources()

    def handle_disconnect(self, reason: str) -> None:
        """Record a server-sent disconnect reason and shut the session down"""
        logger.info(f"Disconnected from server: {chat_to_text(reason)}")
        self._record_disconnect(reason)
        # Stop the reader before close() is processed on the main thread
        self._running = False
        self.close()

    def wait_closed(self, timeout: Optional[float] = None) -> bool:
        """Block until both threads have finished

        Returns:
            True if the session has fully shut down
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        for thread in (self._main_thread, self._reader_thread):
            if thread is threading.current_thread() or thread.ident is None:
                continue
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            thread.join(remaining)
        return self._closed and not self._main_thread.is_alive() and not self._reader_thread.is_alive()

    # =========================================================================
    # Main thread
    # =========================================================================

    def _on_main_thread(self) -> bool:
        return threading.current_thread() is self._main_thread

    def _submit(self, func: Callable, *args) -> None:
        if self._closed or not self._running:
            raise SessionClosedError(f"Session {self.username}@{self.host}:{self.port} is closed")
        self._tasks.put(partial(func, *args))

    def _ensure_open(self) -> None:
        if self._closed or self._output is None:
            raise SessionClosedError(f"Session {self.username}@{self.host}:{self.port} is not connected")

    def _handshake(self, next_state: State) -> None:
        self.send_packet(HandshakePacket(self.config.protocol_version, self.host, self.port, next_state))
        self.state = next_state

    def _connect(self) -> None:
        logger.info(f"Connecting to {self.host}:{self.port}")
        try:
            self.socket = socket.create_connection((self.host, self.port), timeout=self.config.connect_timeout)
            self.socket.settimeout(None)  # Remove timeout after connection
        except OSError as e:
            raise ConnectError(f"Could not connect to {self.host}:{self.port}: {e}") from e

        # Pass-through until enable_encryption() sets a key
        self._input = CipherReader(SocketReader(self.socket))
        self._output = CipherWriter(SocketWriter(self.socket))
        logger.info("Connection established")

    def _run(self) -> None:
        try:
            self._connect()
        except ConnectError as e:
            reason = f"Failed to connect to {self.host}:{self.port}"
            logger.error(f"{reason}: {e}")
            self._record_disconnect(reason, e)
            self._running = False
            self.events.emit(EventType.CONNECTION_FAILED, DisconnectEvent(reason, e))
            self._release_resources()
            return

        self._reader_thread.start()
        self.events.emit(EventType.CONNECTED, {'host': self.host, 'port': self.port})

        try:
            while self._running:
                try:
                    task = self._tasks.get(timeout=self.config.task_poll_interval)
                except Empty:
                    continue
                self._run_task(task)
        finally:
            self._running = False
            self._release_resources()

    def _run_task(self, task: Callable) -> None:
        try:
            task()
        except (TransportError, FramingError) as e:
            self._fail("Connection error", e)
        except SessionClosedError as e:
            logger.debug(f"Dropped task: {e}")
        except Exception:
            logger.exception("Main thread task failed")

    def _record_disconnect(self, reason: str, cause: Optional[BaseException] = None) -> None:
        with self._close_lock:
            if self.disconnect_reason is None:
                self.disconnect_reason = reason
                self.disconnect_cause = cause

    def _fail(self, reason: str, cause: BaseException) -> None:
        """Fatal transport or framing error on either thread"""
        if self._running:
            logger.error(f"{reason}: {cause}")
        self._record_disconnect(reason, cause)
        self._running = False
        self.close()

    def _release_resources(self) -> None:
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
        self._running = False

        if self.socket is not None:
            try:
                # Wakes the reader thread out of its blocking recv
                self.socket.shutdown(socket.SHUT_RDWR)
            except OSError as e:
                logger.debug(f"Socket shutdown: {e}")
            try:
                self.socket.close()
            except OSError as e:
                logger.debug(f"Socket close: {e}")

        if self._reader_thread.is_alive() and threading.current_thread() is not self._reader_thread:
            self._reader_thread.join(timeout=self.config.join_timeout)

        # Drop anything queued after close
        while True:
            try:
                self._tasks.get_nowait()
            except Empty:
                break

        self._record_disconnect("Connection closed")
        logger.info(f"Disconnected ({chat_to_text(self.disconnect_reason)})")
        self.events.emit(EventType.DISCONNECTED, DisconnectEvent(self.disconnect_reason, self.disconnect_cause))

    # =========================================================================
    # Reader thread
    # =========================================================================

    def _read_loop(self) -> None:
        while self._running:
            try:
                packet_id, body = read_frame(self._input, self._compression_threshold, self.config.max_packet_size)
            except TransportError as e:
                if self._running:
                    self._fail(f"Lost connection to {self.host}:{self.port}", e)
                else:
                    logger.debug(f"Reader stopped: {e}")
                break
            except FramingError as e:
                if self._running:
                    self._fail("Malformed frame from server", e)
                break

            if not self._running:
                break

            state = self._state
            if self.config.log_packets:
                logger.debug(f"<- {state.name} 0x{packet_id:02X} ({len(body)} bytes)")
            self.events.emit(EventType.PACKET_RECEIVED, (state, packet_id, body))
            self.registry.dispatch(state, packet_id, body, self)

        logger.debug("Reader thread exiting")


def new_session(username: str, host: str, port: int,
                config: Optional[ClientConfig] = None,
                registry: Optional[PacketRegistry] = None,
                on_disconnect: Optional[Callable[[DisconnectEvent], None]] = None) -> Session:
    """Create a session; it starts connecting in the background"""
    return Session(username, host, port, config=config, registry=registry, on_disconnect=on_disconnect)
