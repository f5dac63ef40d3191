# src/uniflow/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
import sys
import threading
from datetime import datetime
from typing import Any

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..tasks.task_api import maybe_refresh_advice

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class _StdinReader:
    """
    Reads console lines on a daemon thread and hands them to the event loop.

    The thread is not part of the loop's executor, so shutting the loop
    down never waits on a pending read. None marks end of input.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, stream: Any | None = None) -> None:
        self._loop = loop
        self._stream = stream if stream is not None else _input_stream()
        self._encoding = getattr(sys.stdin, "encoding", None) or "utf-8"
        self._queue: asyncio.Queue[str | None] = asyncio.Queue()
        self._thread = threading.Thread(target=self._run, name="console-stdin", daemon=True)

    def start(self) -> None:
        self._thread.start()

    def _deliver(self, line: str | None) -> bool:
        try:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, line)
        except RuntimeError:
            # loop already closed
            return False
        return True

    def _run(self) -> None:
        while True:
            try:
                line = self._stream.readline()
            except (OSError, ValueError):
                logger.exception("Console input read failed.")
                line = ""
            if isinstance(line, bytes):
                line = line.decode(self._encoding, errors="replace")
            if not line:
                self._deliver(None)
                return
            if not self._deliver(line):
                return

    async def readline(self, prompt: str) -> str | None:
        print(prompt, end="", flush=True)
        return await self._queue.get()


def _input_stream() -> Any:
    # Unbuffered fd object: a read left pending at exit holds no buffer lock.
    try:
        return sys.stdin.buffer.raw
    except AttributeError:
        return sys.stdin


async def run_console_loop(state: AppState, stream: Any | None = None) -> None:
    """
    Async REPL. Input arrives from a reader thread so detached advisory
    calls keep running on the loop while the prompt waits.
    """
    logger.info("Console connector started.")
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "UniFlow"))
    _print_ts(f"[{app_name}] Type /help for commands, /list to see tasks, /exit to quit.\n")

    def emit(text: str) -> None:
        # Results of background calls (breakdown / advice) arrive between prompts.
        _print_ts(text)

    reader = _StdinReader(asyncio.get_running_loop(), stream)
    reader.start()

    maybe_refresh_advice(state)

    while True:
        try:
            line = await reader.readline(">>> ")
        except asyncio.CancelledError:
            # Ctrl+C: asyncio.run cancels the main task.
            logger.info("Console interrupted, exiting.")
            print()
            break
        if line is None:
            logger.info("Console EOF received, exiting.")
            break

        user_input = line.strip()
        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            # Bare text is a shortcut for /add.
            user_input = f"/add {user_input}"

        try:
            response = command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is not None:
            print(response, flush=True)

    pending = len(state.background)
    if pending:
        # No cancellation support: results of in-flight calls are dropped.
        logger.info("Exiting with %d advisory call(s) still pending.", pending)
    logger.info("Console connector finished.")
