"""Console Relay - forwards browser console messages to the structured logger

A page's console message is re-emitted through this process's own console
writer while the standard streams are intercepted. The intercepted text is
logged under the "Browser" source instead of reaching the real streams.

RESPONSIBILITY:
- Filter console messages by type
- Resolve message arguments (order preserved)
- Intercept stdout/stderr for exactly one message
- Attach to pages without letting relay failures escape

DOES NOT:
- Wire pages opened after attachment
- Persist messages
"""

import asyncio
import io
import json
import logging
import math
import sys
from contextlib import contextmanager, redirect_stderr, redirect_stdout
from typing import Any, Callable, Dict, Iterator, List

from core import logger


# Console type -> normalized level
SUPPORTED_CONSOLE_TYPES: Dict[str, str] = {
    "debug": "debug",
    "dir": "debug",
    "dirxml": "info",
    "table": "info",
    "log": "info",
    "info": "info",
    "warn": "warning",
    "warning": "warning",
    "error": "error",
}

_STDERR_TYPES = {"warn", "warning", "error"}


def console_type_is_supported(console_type: str) -> bool:
    return console_type in SUPPORTED_CONSOLE_TYPES


def level_from_type(console_type: str) -> str:
    return SUPPORTED_CONSOLE_TYPES[console_type]


def format_message(message: str) -> str:
    """Strip the single trailing newline a console write ends with."""
    return message[:-1] if message.endswith("\n") else message


def _inspect(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return json.dumps(value)
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(value)


def _number(value: Any, integer: bool) -> str:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return "NaN"
    if not math.isfinite(number):
        return "NaN" if math.isnan(number) else ("Infinity" if number > 0 else "-Infinity")
    if integer:
        return str(int(number))
    return json.dumps(int(number) if number.is_integer() else number)


def format_console_args(*args: Any) -> str:
    """Format arguments the way a JavaScript console does.

    A leading string may carry %s %d %i %f %j %o %O %c %% placeholders;
    remaining arguments are appended, space separated.
    """
    if not args:
        return ""

    remaining: List[Any] = list(args)
    parts: List[str] = []

    if isinstance(remaining[0], str):
        template = remaining.pop(0)
        out: List[str] = []
        i = 0
        while i < len(template):
            char = template[i]
            if char == "%" and i + 1 < len(template):
                spec = template[i + 1]
                if spec == "%":
                    out.append("%")
                    i += 2
                    continue
                if spec in "sdifjoOc":
                    if spec == "c":
                        # CSS directive: consumes an argument, prints nothing
                        if remaining:
                            remaining.pop(0)
                        i += 2
                        continue
                    if not remaining:
                        out.append(template[i:i + 2])
                        i += 2
                        continue
                    arg = remaining.pop(0)
                    if spec == "s":
                        out.append(_inspect(arg))
                    elif spec in "di":
                        out.append(_number(arg, integer=True))
                    elif spec == "f":
                        out.append(_number(arg, integer=False))
                    else:
                        out.append(json.dumps(arg, ensure_ascii=False, default=str))
                    i += 2
                    continue
            out.append(char)
            i += 1
        parts.append("".join(out))

    parts.extend(_inspect(arg) for arg in remaining)
    return " ".join(parts)


def _console_writer(console_type: str) -> Callable[..., None]:
    stream_name = "stderr" if console_type in _STDERR_TYPES else "stdout"

    def write(*args: Any) -> None:
        # Stream looked up at call time so interception applies
        print(format_console_args(*args), file=getattr(sys, stream_name))

    return write


# The process's own (unintercepted) console, one writer per supported type
ORIGINAL_CONSOLE: Dict[str, Callable[..., None]] = {
    console_type: _console_writer(console_type)
    for console_type in SUPPORTED_CONSOLE_TYPES
}


@contextmanager
def intercept_standard_strings(on_string: Callable[[str], None]) -> Iterator[io.StringIO]:
    """Redirect stdout and stderr into a buffer for the duration of the block.

    The real streams are restored when the block exits, even on error.
    On normal exit the captured text (if any) is handed to `on_string`.
    """
    buffer = io.StringIO()
    with redirect_stdout(buffer), redirect_stderr(buffer):
        yield buffer
    captured = buffer.getvalue()
    if captured:
        on_string(captured)


class ConsoleRelay:
    """Relays console messages from pages into the structured logger.

    Usage:
        relay = ConsoleRelay()
        relay.attach(page)

    Concurrency: the interception window contains no await, so relays on
    one event loop cannot interleave inside it. Relays from other threads
    are not supported.
    """

    def __init__(self, source: str = "Browser"):
        self.source = source

    async def relay(self, message: Any) -> None:
        """Log one console message. Unsupported types are dropped silently."""
        console_type = message.type

        if not console_type_is_supported(console_type):
            return

        level = level_from_type(console_type)
        args = await asyncio.gather(*(arg.json_value() for arg in message.args))

        def on_string(captured: str) -> None:
            logger.log(self.source, level, format_message(captured))

        with intercept_standard_strings(on_string):
            ORIGINAL_CONSOLE[console_type](*args)

    async def _on_console(self, message: Any) -> None:
        try:
            await self.relay(message)
        except Exception as e:
            logging.warning(f"Failed to relay browser console message: {e}")

    def attach(self, target: Any) -> None:
        """Listen for console messages on a page (or any console emitter)."""
        target.on("console", self._on_console)

