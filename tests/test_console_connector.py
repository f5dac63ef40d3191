# tests/test_console_connector.py

from __future__ import annotations

import asyncio
import io
import os
import signal
import subprocess
import sys
from pathlib import Path

import pytest

from uniflow.connectors.console_connector import run_console_loop
from uniflow.core.state import AppState

from .fakes import BlockingInput

SRC_DIR = Path(__file__).resolve().parents[1] / "src"


@pytest.mark.asyncio
async def test_console_runs_commands_until_exit(state: AppState, capsys) -> None:
    stream = io.StringIO("/add Read ch 1 | | exam\nWrite essay\n\n/list\n/exit\n/add never\n")

    await asyncio.wait_for(run_console_loop(state, stream), timeout=5)
    await asyncio.gather(*state.background)

    assert [t.title for t in state.store.tasks] == ["Write essay", "Read ch 1"]
    out = capsys.readouterr().out
    assert "Added: Read ch 1 (Medium, Exam)" in out
    assert "All Assignments" in out


@pytest.mark.asyncio
async def test_console_exits_on_end_of_input(state: AppState) -> None:
    await asyncio.wait_for(run_console_loop(state, io.StringIO("")), timeout=5)
    assert state.store.count_tasks() == 0


@pytest.mark.asyncio
async def test_console_cancel_while_waiting_for_input_returns(state: AppState) -> None:
    stream = BlockingInput()
    loop_task = asyncio.create_task(run_console_loop(state, stream))
    await asyncio.sleep(0.1)

    loop_task.cancel()
    await asyncio.wait_for(loop_task, timeout=5)
    assert loop_task.done()

    stream.release()


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals")
def test_sigint_at_prompt_exits_without_further_input(tmp_path: Path) -> None:
    env = dict(os.environ)
    env.update(
        PYTHONPATH=os.pathsep.join(p for p in (str(SRC_DIR), env.get("PYTHONPATH", "")) if p),
        UNIFLOW_DATA_DIR=str(tmp_path / "data"),
        UNIFLOW_STORAGE_BACKEND="memory",
        UNIFLOW_OPENROUTER_API_KEY="",
        OPENROUTER_API_KEY="",
    )
    proc = subprocess.Popen(
        [sys.executable, "-m", "uniflow.cli.main"],
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.DEVNULL,
        cwd=tmp_path,
        env=env,
        text=True,
    )
    try:
        assert proc.stdout is not None
        banner = proc.stdout.readline()
        assert "Type /help" in banner

        proc.send_signal(signal.SIGINT)
        rc = proc.wait(timeout=10)
        assert rc == 0
    finally:
        if proc.poll() is None:
            proc.kill()
            proc.wait()
        if proc.stdin is not None:
            proc.stdin.close()
        if proc.stdout is not None:
            proc.stdout.close()
