"""Run one invocation: launch the bundled executable and report its exit."""

import asyncio
import json
import logging
import sys
from typing import Any, Callable, Dict, Optional

from .config import Settings, settings
from .dump import render
from .errors import LauncherError, ProcessExitError, ProcessTimeoutError

logger = logging.getLogger(__name__)

Done = Callable[[Optional[BaseException]], None]


class Completion:
    """
    Outcome of a single invocation.

    Wraps the host's ``done`` callback so that only the first call goes
    through: ``None`` means success, an exception means failure. Later calls
    are logged and dropped.
    """

    def __init__(self, done: Optional[Done] = None):
        self._done = done
        self.completed = False
        self.error: Optional[BaseException] = None

    def __call__(self, error: Optional[BaseException] = None) -> None:
        if self.completed:
            logger.warning("Invocation already completed, ignoring outcome: %r", error)
            return

        self.completed = True
        self.error = error
        if self._done is not None:
            self._done(error)

    def result(self) -> None:
        """Return on success, raise the failure otherwise."""
        if not self.completed:
            raise LauncherError("Invocation finished without reporting an outcome")
        if self.error is not None:
            raise self.error


def _flush_streams() -> None:
    # The child writes straight to the inherited descriptors
    sys.stdout.flush()
    sys.stderr.flush()
    for handler in logging.getLogger().handlers:
        handler.flush()


async def _kill(process: asyncio.subprocess.Process) -> None:
    if process.returncode is None:
        process.kill()
    await process.wait()


async def run_child(
    executable: str, argument: str, timeout_sec: Optional[float] = None
) -> int:
    """
    Start ``executable`` with one argument and wait for it to exit.

    The child shares this process's stdin, stdout and stderr.

    Args:
        executable: Path of the program to run
        argument: Its only command line argument
        timeout_sec: Kill the child after this many seconds (None waits forever)

    Returns:
        The child's exit status (negative when killed by a signal)
    """
    _flush_streams()
    process = await asyncio.create_subprocess_exec(executable, argument)
    logger.debug("Started %s with pid %d", executable, process.pid)

    try:
        returncode = await asyncio.wait_for(process.wait(), timeout_sec)
    except asyncio.TimeoutError:
        await _kill(process)
        raise ProcessTimeoutError(timeout_sec) from None
    except asyncio.CancelledError:
        await _kill(process)
        raise

    logger.debug("%s exited with status %d", executable, returncode)
    return returncode


async def invoke(
    event: Any, context: Any, done: Done, config: Optional[Settings] = None
) -> None:
    """
    Handle one event and report the outcome through ``done`` exactly once.

    Logs the event and context, runs the configured executable with the
    event as compact JSON, then calls ``done(None)`` on exit status 0 or
    ``done(error)`` on any failure, including a child that cannot be started.
    """
    config = config or settings
    completion = done if isinstance(done, Completion) else Completion(done)

    try:
        logger.info("event %s", render(event, config.dump_max_depth))
        logger.info("context %s", render(context, config.dump_max_depth))

        payload = json.dumps(
            event, separators=(",", ":"), ensure_ascii=False, allow_nan=False
        )
        returncode = await run_child(config.executable, payload, config.timeout_sec)
    except Exception as e:
        logger.error(f"Invocation failed: {e}", exc_info=True)
        completion(e)
        return

    if returncode != 0:
        completion(ProcessExitError(returncode))
    else:
        completion(None)


def _fault_handler(completion: Completion, task: Optional[asyncio.Task] = None):
    """
    Build an event loop exception handler that fails the invocation.

    The invocation's task is cancelled so it stops waiting on the child,
    which gets killed on the way out.
    """

    def handle(loop: asyncio.AbstractEventLoop, ctx: Dict[str, Any]) -> None:
        message = ctx.get("message", "Unhandled fault")
        error = ctx.get("exception") or LauncherError(message)
        logger.error("Unhandled fault during invocation: %s", message, exc_info=error)
        completion(error)
        if task is not None and not task.done():
            task.cancel()

    return handle


async def _invoke_on_own_loop(
    event: Any, context: Any, completion: Completion, config: Settings
) -> None:
    task = asyncio.current_task()
    asyncio.get_running_loop().set_exception_handler(_fault_handler(completion, task))
    try:
        await invoke(event, context, completion, config)
    except asyncio.CancelledError:
        # Cancelled by the fault handler, which already reported the failure
        if not completion.completed:
            raise


def run(event: Any, context: Any, config: Settings) -> Completion:
    """
    Run one invocation on a fresh event loop.

    Stray faults raised in callbacks on that loop are routed to this
    invocation's completion, never to another invocation's, and end the
    invocation right away.

    Returns:
        The settled completion
    """
    completion = Completion()
    asyncio.run(_invoke_on_own_loop(event, context, completion, config))
    return completion
