"""Terminal console adapter.

Implements ConsolePort over stdin/stdout. Reads block on a daemon thread and
writes go through the default executor, so the event loop stays free.
"""

import asyncio
import logging
import threading
from functools import partial

from emporium.core.models import MessageLevel
from emporium.core.ports import ConsolePort

logger = logging.getLogger(__name__)

_RESET = "\033[0m"
_COLORS = {
    MessageLevel.INFO: "\033[36m",  # cyan
    MessageLevel.SUCCESS: "\033[32m",  # green
    MessageLevel.WARNING: "\033[33m",  # yellow
    MessageLevel.ERROR: "\033[31m",  # red
}


def _settle(
    future: "asyncio.Future[str]",
    result: str | None = None,
    exception: BaseException | None = None,
) -> None:
    if future.done():
        return
    if exception is not None:
        future.set_exception(exception)
    else:
        future.set_result(result)


class TerminalConsole(ConsolePort):
    """Prompts on stdin and prints leveled messages to stdout."""

    def __init__(self, color: bool = True):
        """Initialize terminal console.

        Args:
            color: If True, wrap messages in ANSI color codes per level.
        """
        self.color = color

    async def prompt(self, question: str) -> str:
        """Read one line from stdin.

        The read happens on a daemon thread. If the waiting task is
        cancelled (Ctrl-C under asyncio.run) the process can exit without
        waiting for the blocked ``input`` call to return.
        """
        loop = asyncio.get_running_loop()
        answer: asyncio.Future[str] = loop.create_future()

        def read() -> None:
            try:
                line = input(question)
            except BaseException as e:
                deliver = partial(_settle, answer, exception=e)
            else:
                deliver = partial(_settle, answer, result=line)
            try:
                loop.call_soon_threadsafe(deliver)
            except RuntimeError:
                # Loop already closed: nobody is waiting for this answer
                logger.debug("Discarding console input read after shutdown")

        threading.Thread(target=read, name="console-input", daemon=True).start()
        return await answer

    async def display(
        self, message: str, level: MessageLevel = MessageLevel.INFO
    ) -> None:
        await asyncio.to_thread(print, self.format(message, level))

    def format(self, message: str, level: MessageLevel) -> str:
        if not self.color:
            return message
        return f"{_COLORS[level]}{message}{_RESET}"
