"""Console logging utilities for octavm.

A small levelled logger that writes one line per message to stdout, tagged
with the elapsed time, the level (coloured when stdout is a terminal) and the
logger name. Loggers are cached per name by ``get_logger``; the level of new
loggers comes from the ``OCTAVM_LOG_LEVEL`` environment variable.
"""

import os
import sys
import time
from typing import Dict, Optional

LOG_LEVEL_ENV = "OCTAVM_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

LEVEL_COLORS = {
    "DEBUG": "\033[36m",     # cyan
    "INFO": "\033[32m",      # green
    "WARNING": "\033[33m",   # yellow
    "ERROR": "\033[31m",     # red
    "CRITICAL": "\033[35m",  # magenta
}
RESET = "\033[0m"


class ConsoleLogger:
    """Console logger with a minimum level and optional colours and timestamps."""

    level_order = {level: rank for rank, level in enumerate(LEVELS)}

    def __init__(
        self,
        name: str = "octavm",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        self.name = name
        self.use_colors = use_colors and getattr(sys.stdout, "isatty", lambda: False)()
        self.show_timestamps = show_timestamps
        self.start_time = time.time()
        self.set_level(log_level)

    def set_level(self, log_level: str):
        """Change the minimum level that is printed."""
        level = log_level.upper()
        if level not in self.level_order:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {list(LEVELS)}")
        self.log_level = level

    def is_enabled_for(self, level: str) -> bool:
        return self.level_order.get(level.upper(), 1) >= self.level_order[self.log_level]

    def _format_message(self, level: str, message: str) -> str:
        tag = f"[{level:>8s}]"
        if self.use_colors:
            tag = f"{LEVEL_COLORS.get(level, '')}{tag}{RESET}"

        parts = []
        if self.show_timestamps:
            parts.append(f"[{time.time() - self.start_time:8.2f}s]")
        parts.append(tag)
        parts.append(f"[{self.name}]")
        return "".join(parts) + f" {message}"

    def log(self, level: str, message: str):
        level = level.upper()
        if self.is_enabled_for(level):
            print(self._format_message(level, message), flush=True)

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


def format_registers(state) -> str:
    """One-line dump of the CPU-visible registers, for post-mortem logging."""
    registers = state.registers
    v = " ".join(f"V{i:X}={int(value):02X}" for i, value in enumerate(registers.V))
    return (
        f"PC={int(registers.pc):04X} I={int(registers.I):04X} "
        f"SP={int(registers.stack.pointer)} DT={int(registers.delay_timer)} "
        f"ST={int(registers.sound_timer)} {v}"
    )


_loggers: Dict[str, ConsoleLogger] = {}


def get_logger(name: str, log_level: Optional[str] = None) -> ConsoleLogger:
    """Return the shared logger for name, creating it on first use."""
    if name not in _loggers:
        _loggers[name] = ConsoleLogger(
            name, log_level=os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)
        )
    logger = _loggers[name]
    if log_level is not None:
        logger.set_level(log_level)
    return logger


def set_log_level(log_level: str):
    """Set the level of every logger created so far and of future ones."""
    level = log_level.upper()
    if level not in ConsoleLogger.level_order:
        raise ValueError(f"Unknown log level '{log_level}'. Available: {list(LEVELS)}")
    os.environ[LOG_LEVEL_ENV] = level
    for logger in _loggers.values():
        logger.set_level(log_level)
