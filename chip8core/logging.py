"""Console logging utilities for chip8core.

Provides a small level-filtered console logger used by the emulator driver and
the command line tools, and a real-time tqdm progress bar for JAX scans over
emulated frames using io_callback.
"""

import sys
import time
from typing import Callable, Optional, TextIO

import jax
from jax.experimental import io_callback
from tqdm import tqdm


class ConsoleLogger:
    """Console logger with level filtering, colors and elapsed-time stamps."""

    LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(
        self,
        name: str = "chip8core",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream: Optional[TextIO] = None,
    ):
        self.name = name
        self.stream = stream if stream is not None else sys.stdout
        self.set_level(log_level)
        self.use_colors = (
            use_colors and hasattr(self.stream, "isatty") and self.stream.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

    def set_level(self, log_level: str):
        """Change the minimum level that gets printed."""
        level = log_level.upper()
        if level not in self.LEVELS:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {list(self.LEVELS)}")
        self.log_level = level

    def _rank(self, level: str) -> int:
        # Unrecognised level names rank as INFO
        return self.LEVELS.index(level) if level in self.LEVELS else self.LEVELS.index("INFO")

    def _should_log(self, level: str) -> bool:
        return self._rank(level) >= self._rank(self.log_level)

    def _format_message(self, level: str, message: str) -> str:
        """Format log message with timestamp, level, and colors."""
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        if self.use_colors:
            level_str = f"{self.COLORS.get(level, self.COLORS['INFO'])}{level_str}{self.RESET}"
        return f"{timestamp}{level_str}[{self.name}] {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level; unknown level names are treated as INFO."""
        level = level.upper()
        if self._should_log(level):
            print(self._format_message(level, message), file=self.stream, flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)


def build_frame_progress_bar(
    n: int,
    print_rate: Optional[int] = None,
    desc: Optional[str] = None,
    **tqdm_kwargs,
) -> Callable:
    """Build a tqdm bar that a traced loop can advance through io_callback.

    Returns `report(iter_num)`, to be called once per iteration inside the
    traced body. The host bar is created on the first report, caught up to
    the completed count every `print_rate` iterations and on the last one,
    then closed.
    """
    if desc is None:
        desc = f"Running ({n:,} frames)"
    if print_rate is None:
        print_rate = max(1, min(n // 20, 50))
    else:
        print_rate = max(1, min(print_rate, n))

    for kwarg in ("total", "mininterval", "maxinterval", "miniters"):
        tqdm_kwargs.pop(kwarg, None)

    bars = []

    def _advance(completed):
        if not bars:
            bars.append(tqdm(total=n, desc=desc, unit="frame", **tqdm_kwargs))
        bar = bars[0]
        bar.update(int(completed) - bar.n)
        if int(completed) == n:
            bar.close()
            bars.clear()

    def report(iter_num):
        completed = iter_num + 1
        jax.lax.cond(
            (completed % print_rate == 0) | (completed == n),
            lambda c: io_callback(_advance, None, c, ordered=True),
            lambda c: None,
            completed,
        )

    return report


def scan_with_progress(
    n: int,
    print_rate: Optional[int] = None,
    desc: Optional[str] = None,
    **tqdm_kwargs,
) -> Callable:
    """Decorator adding a live progress bar to a `jax.lax.scan` body.

    The scanned function must receive the iteration number as its `x` input
    (or as the first element of a tuple `x`).
    """
    report = build_frame_progress_bar(n, print_rate, desc, **tqdm_kwargs)

    def decorator(body):
        def body_with_progress(carry, x):
            result = body(carry, x)
            report(x[0] if isinstance(x, tuple) else x)
            return result
        return body_with_progress

    return decorator
