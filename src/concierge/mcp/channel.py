"""Line-delimited JSON-RPC channel to the tool worker process.

:class:`JsonRpcChannel` owns the request/response correlation table and the
newline codec. It knows nothing about processes: subclasses provide
``_write`` and push inbound bytes through :meth:`JsonRpcChannel.feed`.
:class:`StdioChannel` is the subclass that spawns the worker and pumps its
stdout/stderr.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from concierge.mcp.protocol import (
    JsonRpcNotification,
    JsonRpcRequest,
    JsonRpcResponse,
    encode_message,
)

logger = logging.getLogger(__name__)

DEFAULT_REQUEST_TIMEOUT = 10.0
DEFAULT_READY_TIMEOUT = 2.0
DEFAULT_READY_SIGNAL = "running on stdio"
DEFAULT_MAX_LINE_BYTES = 4 * 1024 * 1024

_READ_CHUNK = 65536


class ChannelError(Exception):
    """Transport-level failure talking to the worker."""


class ChannelClosedError(ChannelError):
    """The channel was closed, never started, or the worker exited."""


class ChannelTimeoutError(ChannelError):
    """No response arrived within the per-call timeout."""


class RemoteError(ChannelError):
    """The worker answered with a JSON-RPC error object."""

    def __init__(self, message: str, code: int | None = None, data: Any = None):
        super().__init__(message)
        self.code = code
        self.data = data


class JsonRpcChannel:
    """Correlates JSON-RPC requests with responses arriving on a byte stream."""

    def __init__(
        self,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        max_line_bytes: int = DEFAULT_MAX_LINE_BYTES,
    ):
        """Initialize the channel.

        Args:
            request_timeout: Seconds before an unanswered call fails
            max_line_bytes: Longest inbound line kept; longer ones are dropped
        """
        self.request_timeout = request_timeout
        self.max_line_bytes = max_line_bytes
        self._discarding = False
        self._pending: dict[int, asyncio.Future[Any]] = {}
        self._next_id = 0
        self._buffer = b""
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending_ids(self) -> list[int]:
        """Ids of calls still awaiting a response."""
        return list(self._pending)

    async def start(self) -> None:
        """Bring the underlying transport up. Nothing to do by default."""

    async def _write(self, data: bytes) -> None:
        """Write one encoded message to the peer."""
        raise NotImplementedError

    async def send(
        self,
        method: str,
        params: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> Any:
        """Send a request and wait for the correlated response.

        Args:
            method: JSON-RPC method name
            params: Method parameters
            timeout: Override for the per-call timeout in seconds

        Returns:
            The ``result`` member of the response

        Raises:
            ChannelClosedError: If the channel is closed or the write fails
            ChannelTimeoutError: If no response arrives in time
            RemoteError: If the response carries an ``error`` member
        """
        if self._closed:
            raise ChannelClosedError("Channel is closed")

        self._next_id += 1
        request_id = self._next_id
        request = JsonRpcRequest(id=request_id, method=method, params=params or {})

        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._pending[request_id] = future
        wait = self.request_timeout if timeout is None else timeout

        try:
            try:
                await self._write(encode_message(request))
            except (OSError, RuntimeError) as e:
                raise ChannelClosedError(f"Failed to write request {request_id}: {e}") from e

            logger.debug("Sent request %d: %s", request_id, method)
            return await asyncio.wait_for(future, timeout=wait)
        except TimeoutError:
            logger.warning("Request %d (%s) timed out after %.1fs", request_id, method, wait)
            raise ChannelTimeoutError(
                f"Request {request_id} ({method}) timed out after {wait}s"
            ) from None
        finally:
            self._pending.pop(request_id, None)

    async def notify(self, method: str, params: dict[str, Any] | None = None) -> None:
        """Send a notification; no response is expected."""
        if self._closed:
            raise ChannelClosedError("Channel is closed")
        try:
            await self._write(encode_message(JsonRpcNotification(method=method, params=params)))
        except (OSError, RuntimeError) as e:
            raise ChannelClosedError(f"Failed to write notification {method}: {e}") from e

    def feed(self, data: bytes) -> None:
        """Accept inbound bytes and dispatch every complete line.

        A line that grows past ``max_line_bytes`` without a newline is
        dropped up to its terminating newline.
        """
        if self._discarding:
            newline = data.find(b"\n")
            if newline == -1:
                return
            data = data[newline + 1 :]
            self._discarding = False

        self._buffer += data
        *lines, self._buffer = self._buffer.split(b"\n")
        for line in lines:
            self._handle_line(line)

        if len(self._buffer) > self.max_line_bytes:
            logger.warning(
                "Dropping line from worker longer than %d bytes", self.max_line_bytes
            )
            self._buffer = b""
            self._discarding = True

    def _handle_line(self, raw: bytes) -> None:
        line = raw.strip()
        if not line:
            return

        try:
            payload = json.loads(line)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("Skipping malformed line from worker (%s): %r", e, line[:200])
            return

        if not isinstance(payload, dict):
            logger.warning("Skipping non-object message from worker: %r", line[:200])
            return

        request_id = payload.get("id")
        if (
            not isinstance(request_id, int)
            or isinstance(request_id, bool)
            or request_id not in self._pending
        ):
            # Notifications, server requests, and responses to calls that already timed out
            logger.debug("Ignoring unmatched message: %r", line[:200])
            return

        future = self._pending.pop(request_id)
        if future.done():
            return

        try:
            response = JsonRpcResponse.model_validate(payload)
        except ValidationError as e:
            future.set_exception(ChannelError(f"Malformed response to request {request_id}: {e}"))
            return

        if response.error is not None:
            future.set_exception(
                RemoteError(response.error.message, code=response.error.code, data=response.error.data)
            )
        else:
            future.set_result(response.result)

    def fail_pending(self, exc: ChannelError) -> None:
        """Reject every in-flight call with ``exc`` and clear the table."""
        pending = list(self._pending.values())
        self._pending.clear()
        for future in pending:
            if not future.done():
                future.set_exception(exc)

    async def close(self) -> None:
        """Close the channel, failing any in-flight calls."""
        self._closed = True
        self.fail_pending(ChannelClosedError("Channel closed"))


class StdioChannel(JsonRpcChannel):
    """JSON-RPC channel over the stdin/stdout of a worker subprocess.

    The worker's stderr is diagnostic only: it is used to detect readiness
    and is otherwise forwarded to the log.
    """

    def __init__(
        self,
        command: list[str],
        env: Mapping[str, str] | None = None,
        ready_signal: str = DEFAULT_READY_SIGNAL,
        ready_timeout: float = DEFAULT_READY_TIMEOUT,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        shutdown_timeout: float = 2.0,
        max_line_bytes: int = DEFAULT_MAX_LINE_BYTES,
    ):
        """Initialize channel config.

        Args:
            command: Worker command line
            env: Environment for the worker (None inherits ours)
            ready_signal: Substring on stderr that marks the worker ready
            ready_timeout: Seconds to wait for the ready signal before proceeding anyway
            request_timeout: Seconds before an unanswered call fails
            shutdown_timeout: Grace period before the worker is killed on close
            max_line_bytes: Longest stdout line kept; longer ones are dropped
        """
        if not command:
            raise ValueError("Worker command must not be empty")
        super().__init__(request_timeout=request_timeout, max_line_bytes=max_line_bytes)
        self.command = list(command)
        self.env = dict(env) if env is not None else None
        self.ready_signal = ready_signal
        self.ready_timeout = ready_timeout
        self.shutdown_timeout = shutdown_timeout
        self._process: asyncio.subprocess.Process | None = None
        self._ready = asyncio.Event()
        self._tasks: list[asyncio.Task[None]] = []

    async def start(self) -> None:
        """Spawn the worker and wait (best effort) until it reports ready.

        Raises:
            ChannelError: If the process cannot be spawned or exits during startup
        """
        if self._process is not None:
            return

        logger.info("Starting worker: %s", " ".join(self.command))
        try:
            self._process = await asyncio.create_subprocess_exec(
                *self.command,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=self.env,
            )
        except (OSError, ValueError) as e:
            self._closed = True
            raise ChannelError(f"Failed to start worker {self.command[0]!r}: {e}") from e

        self._tasks = [
            asyncio.create_task(self._pump_stdout()),
            asyncio.create_task(self._pump_stderr()),
        ]

        try:
            await asyncio.wait_for(self._ready.wait(), timeout=self.ready_timeout)
        except TimeoutError:
            logger.info(
                "No ready signal from worker after %.1fs, assuming it is up", self.ready_timeout
            )

        if self._process.returncode is not None:
            raise ChannelError(
                f"Worker exited during startup with code {self._process.returncode}"
            )
        logger.info("Worker started (pid %d)", self._process.pid)

    async def _write(self, data: bytes) -> None:
        if self._process is None or self._process.stdin is None:
            raise ChannelClosedError("Worker not started")
        self._process.stdin.write(data)
        await self._process.stdin.drain()

    async def _pump_stdout(self) -> None:
        assert self._process is not None and self._process.stdout is not None
        stdout = self._process.stdout
        while True:
            chunk = await stdout.read(_READ_CHUNK)
            if not chunk:
                break
            self.feed(chunk)

        code = await self._process.wait()
        self._ready.set()
        if not self._closed:
            logger.warning("Worker exited with code %s", code)
            self._closed = True
            self.fail_pending(ChannelClosedError(f"Worker process exited with code {code}"))

    async def _pump_stderr(self) -> None:
        # Drained in chunks: a line over the StreamReader limit must not stop the pump
        assert self._process is not None and self._process.stderr is not None
        stderr = self._process.stderr
        tail_size = max(len(self.ready_signal.encode()) - 1, 0)
        partial = b""
        while True:
            chunk = await stderr.read(_READ_CHUNK)
            if not chunk:
                break
            partial += chunk
            *lines, partial = partial.split(b"\n")
            for line in lines:
                self._on_stderr_line(line)
            if len(partial) > _READ_CHUNK:
                # Overlong line: log what we have, keep a tail for the ready match
                self._on_stderr_line(partial)
                partial = partial[len(partial) - tail_size :] if tail_size else b""
        if partial:
            self._on_stderr_line(partial)

    def _on_stderr_line(self, line: bytes) -> None:
        text = line.decode("utf-8", errors="replace").rstrip()
        if not self._ready.is_set() and self.ready_signal in text:
            self._ready.set()
        logger.debug("[worker] %s", text[:1000])

    async def close(self) -> None:
        """Terminate the worker and fail any in-flight calls."""
        await super().close()

        process = self._process
        if process is not None and process.returncode is None:
            if process.stdin is not None:
                process.stdin.close()
            try:
                process.terminate()
            except ProcessLookupError:
                pass
            try:
                await asyncio.wait_for(process.wait(), timeout=self.shutdown_timeout)
            except TimeoutError:
                logger.warning("Worker did not exit in %.1fs, killing it", self.shutdown_timeout)
                process.kill()
                await process.wait()

        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()
