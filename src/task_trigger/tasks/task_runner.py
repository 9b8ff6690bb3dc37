# src/task_trigger/tasks/task_runner.py

from __future__ import annotations

"""
Task executor.

Runs a task's command as a subprocess:
- command + args -> exec (no shell)
- command only   -> shell command line
Output (stdout+stderr) is forwarded line by line to the "task_trigger.tasks.output"
logger and to an optional callback. Non-zero exit raises TaskExecutionError.

One task runs at a time; a second trigger waits for the first to finish.
Cancelling a running task kills its process before the cancellation propagates.
"""

import asyncio
import contextlib
import logging
from collections.abc import Callable

from ..errors import TaskExecutionError
from .task_models import Task

logger = logging.getLogger(__name__)
output_logger = logging.getLogger("task_trigger.tasks.output")

OutputCallback = Callable[[Task, str], None]


class SubprocessTaskExecutor:
    def __init__(
        self,
        *,
        timeout_seconds: float | None = None,
        on_output: OutputCallback | None = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.on_output = on_output
        self._lock = asyncio.Lock()

    async def execute_task(self, task: Task) -> None:
        if not task.command:
            raise TaskExecutionError(task.name, "no command to run")

        async with self._lock:
            returncode = await self._run(task)

        if returncode != 0:
            logger.warning("Task %s exited with code %s", task.key, returncode)
            raise TaskExecutionError(task.name, f"exited with code {returncode}", returncode=returncode)

        logger.info("Task %s finished", task.key)

    async def _spawn(self, task: Task) -> asyncio.subprocess.Process:
        cwd = str(task.cwd) if task.cwd is not None else None
        try:
            if task.args:
                return await asyncio.create_subprocess_exec(
                    task.command,
                    *task.args,
                    cwd=cwd,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.STDOUT,
                )
            return await asyncio.create_subprocess_shell(
                task.command,
                cwd=cwd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as e:
            raise TaskExecutionError(task.name, f"cannot start {task.command!r}: {e}") from e

    async def _pump(self, task: Task, proc: asyncio.subprocess.Process) -> int:
        if proc.stdout is None:
            return await proc.wait()
        async for raw in proc.stdout:
            line = raw.decode("utf-8", errors="replace").rstrip("\r\n")
            output_logger.info("[%s] %s", task.name, line)
            if self.on_output is not None:
                try:
                    self.on_output(task, line)
                except Exception:
                    logger.debug("on_output callback failed.", exc_info=True)
        return await proc.wait()

    async def _run(self, task: Task) -> int:
        logger.info("Running task %s: %s %s", task.key, task.command, " ".join(task.args))
        proc = await self._spawn(task)

        try:
            return await asyncio.wait_for(self._pump(task, proc), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            await _kill(proc)
            raise TaskExecutionError(task.name, f"timed out after {self.timeout_seconds}s") from None
        except BaseException:
            # Cancellation (Ctrl+C, shutdown) or a streaming error: the child must not outlive the call.
            logger.info("Task %s interrupted, killing pid %s", task.key, proc.pid)
            await _kill(proc)
            raise


async def _kill(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is None:
        with contextlib.suppress(ProcessLookupError):
            proc.kill()
    await proc.wait()
