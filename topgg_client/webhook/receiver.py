"""Webhook receiver serving the vote app with uvicorn inside the caller's loop."""

import asyncio
import contextlib
import socket
from typing import Any, Generator, Optional

import structlog
import uvicorn

from ..core.exceptions import WebhookBindError, WebhookError, WebhookStoppedError
from ..parsers.topgg_models import WebhookVote
from .app import create_webhook_app
from .queue import OverflowPolicy, VoteQueue
from .settings import WebhookSettings

logger = structlog.get_logger(__name__)

# Interval for polling uvicorn's startup flag
_STARTUP_POLL_INTERVAL = 0.01


class _EmbeddedServer(uvicorn.Server):
    """uvicorn server that leaves the host application's signal handling alone."""

    def install_signal_handlers(self) -> None:
        pass

    @contextlib.contextmanager
    def capture_signals(self) -> Generator[None, None, None]:
        yield


class WebhookReceiver:
    """
    Listener for vote webhooks pushed by the directory.

    The receiver binds ``host:port``, checks every request against the shared
    secret and delivers decoded votes, in arrival order, to a single consumer
    through ``get()`` or ``async for``. The listener runs as a task on the
    current event loop until ``stop()`` is called.

    Example:
        >>> async with WebhookReceiver(port=5000, secret="my-webhook-secret") as receiver:
        ...     async for vote in receiver:
        ...         print(f"{vote.user} voted for {vote.bot}")
    """

    def __init__(
        self,
        port: int,
        secret: str,
        host: str = "0.0.0.0",
        path: str = "/",
        max_queue_size: int = 0,
        overflow: OverflowPolicy = OverflowPolicy.DROP_OLDEST,
    ):
        """
        Initialize the webhook receiver.

        Args:
            port: Port to listen on (0 picks a free port, see ``port``)
            secret: Shared secret expected in the Authorization header
            host: Bind address (default: all interfaces)
            path: URL path the directory posts to
            max_queue_size: Maximum pending votes (0 = unbounded)
            overflow: Policy when a bounded queue is full
        """
        self.host = host
        self.path = path
        self._requested_port = port
        self.queue = VoteQueue(max_size=max_queue_size, overflow=overflow)
        self.app = create_webhook_app(secret, self.queue, path)

        self._server: Optional[_EmbeddedServer] = None
        self._task: Optional[asyncio.Task] = None
        self._bound_port: Optional[int] = None
        self._stopped = asyncio.Event()

    @classmethod
    def from_settings(cls, settings: Optional[WebhookSettings] = None) -> "WebhookReceiver":
        """
        Create a receiver from WebhookSettings.

        Args:
            settings: Settings to use (read from TOPGG_WEBHOOK_* env vars when omitted)

        Returns:
            Unstarted WebhookReceiver
        """
        settings = settings or WebhookSettings()
        return cls(
            port=settings.port,
            secret=settings.secret,
            host=settings.host,
            path=settings.path,
            max_queue_size=settings.max_queue_size,
            overflow=settings.overflow,
        )

    @property
    def port(self) -> int:
        """The bound port while running, otherwise the requested one."""
        return self._bound_port if self._bound_port is not None else self._requested_port

    @property
    def is_running(self) -> bool:
        """Whether the listener task is serving requests."""
        return self._task is not None and not self._task.done()

    def _bind_socket(self) -> socket.socket:
        family = socket.AF_INET6 if ":" in self.host else socket.AF_INET
        sock = socket.socket(family, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self.host, self._requested_port))
        except OSError as e:
            sock.close()
            raise WebhookBindError(
                f"Could not bind webhook listener to {self.host}:{self._requested_port}: {e}",
                host=self.host,
                port=self._requested_port,
            ) from e
        sock.set_inheritable(True)
        return sock

    async def start(self) -> "WebhookReceiver":
        """
        Bind the socket and start serving in a background task.

        Returns:
            This receiver, ready to be consumed

        Raises:
            WebhookBindError: If the port cannot be bound
            WebhookError: If the receiver is already running or the server
                exits during startup
        """
        if self.is_running:
            raise WebhookError("Webhook receiver is already running")

        sock = self._bind_socket()
        self._bound_port = sock.getsockname()[1]
        self._stopped.clear()

        config = uvicorn.Config(
            self.app,
            host=self.host,
            port=self._bound_port,
            lifespan="off",
            log_config=None,
            access_log=False,
        )
        self._server = _EmbeddedServer(config)
        self._task = asyncio.create_task(
            self._server.serve(sockets=[sock]),
            name=f"topgg-webhook-{self._bound_port}",
        )

        while not self._server.started:
            if self._task.done():
                sock.close()
                self._task.result()
                raise WebhookError("Webhook server exited during startup")
            await asyncio.sleep(_STARTUP_POLL_INTERVAL)

        logger.info(
            "webhook_listening",
            host=self.host,
            port=self._bound_port,
            path=self.path,
            max_queue_size=self.queue.max_size,
        )
        return self

    async def stop(self) -> None:
        """
        Stop the listener and wake any consumer waiting in ``get()`` or ``async for``.

        Votes already queued stay available through ``get()`` and iteration.
        Calling stop() on a receiver that is not running only marks it stopped.
        """
        self._stopped.set()
        if self._task is None or self._server is None:
            return

        self._server.should_exit = True
        try:
            await self._task
        finally:
            self._task = None
            self._server = None
            self._bound_port = None

        logger.info("webhook_stopped", pending_votes=self.queue.qsize())

    async def get(self) -> WebhookVote:
        """
        Wait for the next vote.

        Votes queued before ``stop()`` are still returned; once the receiver
        is stopped and the queue is drained, waiting ends with an error.

        Raises:
            WebhookStoppedError: If the receiver is stopped and no vote is pending
        """
        if not self.queue.empty():
            return self.queue.get_nowait()
        if self._stopped.is_set():
            raise WebhookStoppedError()

        get_task = asyncio.ensure_future(self.queue.get())
        stop_task = asyncio.ensure_future(self._stopped.wait())
        try:
            done, _ = await asyncio.wait(
                {get_task, stop_task}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            stop_task.cancel()
            if not get_task.done():
                get_task.cancel()

        if get_task in done:
            return get_task.result()
        raise WebhookStoppedError()

    def get_nowait(self) -> WebhookVote:
        """
        Return the next vote without waiting.

        Raises:
            asyncio.QueueEmpty: If no vote is pending
        """
        return self.queue.get_nowait()

    def __aiter__(self) -> "WebhookReceiver":
        return self

    async def __anext__(self) -> WebhookVote:
        try:
            return await self.get()
        except WebhookStoppedError:
            raise StopAsyncIteration

    async def __aenter__(self) -> "WebhookReceiver":
        return await self.start()

    async def __aexit__(self, *args: Any) -> None:
        await self.stop()


async def start_webhook(port: int, secret: str, **kwargs: Any) -> WebhookReceiver:
    """
    Start a webhook receiver and return it as the vote event source.

    Args:
        port: Port to listen on
        secret: Shared secret expected in the Authorization header
        **kwargs: Further WebhookReceiver options (host, path, max_queue_size, overflow)

    Returns:
        Running WebhookReceiver; call ``stop()`` to shut it down

    Raises:
        WebhookBindError: If the port cannot be bound

    Example:
        >>> receiver = await start_webhook(5000, "my-webhook-secret")
        >>> vote = await receiver.get()
    """
    receiver = WebhookReceiver(port=port, secret=secret, **kwargs)
    return await receiver.start()
