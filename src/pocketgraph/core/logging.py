"""Logging configuration with pretty formatting for pocketgraph.

Nothing here touches the root logger at import time. Applications opt in with
``configure_logging()``; library code asks ``get_logger()`` for a component
logger, which honours a sink installed with ``log_scope()`` for the current
context (asyncio tasks inherit it).
"""

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime
from enum import Enum, IntEnum
from typing import Any, Dict, Iterator, Optional

from pydantic import BaseModel, Field

# ANSI Color Codes
class Colors:
    """ANSI color codes for pretty terminal output."""
    INFO = '\033[94m'        # Blue
    WARNING = '\033[93m'     # Yellow
    ERROR = '\033[91m'       # Red
    RESET = '\033[0m'        # Reset
    BOLD = '\033[1m'         # Bold
    DIM = '\033[2m'          # Dim

# Pretty format strings
PRETTY_FORMAT = (
    "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
)

DETAILED_FORMAT = (
    f"{Colors.DIM}%(asctime)s{Colors.RESET} │ "
    f"%(colored_level)-40s │ "
    f"%(message)s"
)

class PrettyFormatter(logging.Formatter):
    """Custom formatter with colors and symbols."""

    level_colors = {
        'DEBUG': (Colors.DIM, '🔍'),
        'VERBOSE': (Colors.DIM, '·'),
        'INFO': (Colors.INFO, 'ℹ️'),
        'WARNING': (Colors.WARNING, '⚠️'),
        'ERROR': (Colors.ERROR, '❌'),
        'CRITICAL': (Colors.ERROR + Colors.BOLD, '🚨'),
    }

    def format(self, record):
        color, symbol = self.level_colors.get(record.levelname, (Colors.RESET, '•'))
        record.colored_level = f"{color}{symbol} {record.levelname}{Colors.RESET}"

        message = super().format(record)

        # Separator line for errors and warnings
        if record.levelno >= logging.WARNING:
            message = f"{message}\n{Colors.DIM}{'─' * 80}{Colors.RESET}"

        return message

class PrettyLogHandler(logging.StreamHandler):
    """Stream handler that stamps a short wall-clock time before formatting."""

    def emit(self, record):
        record.asctime = datetime.fromtimestamp(record.created).strftime('%H:%M:%S')
        super().emit(record)

class LogComponent(str, Enum):
    """Components that can be logged."""
    FLOW = "pocketgraph.core.flow"
    NODES = "pocketgraph.core.nodes"
    TOOLS = "pocketgraph.tools"
    WORKFLOW = "pocketgraph.workflows"

class LogLevel(IntEnum):
    """Log levels mapped to logging module levels."""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

class VerbosityLevel(IntEnum):
    """Custom verbosity levels for more granular control."""
    DEBUG = logging.DEBUG
    VERBOSE = 15  # Custom lower-than-INFO level
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

logging.addLevelName(VerbosityLevel.VERBOSE, "VERBOSE")

class FlowLoggingConfig(BaseModel):
    """Per-flow control over what the engine reports.

    Attributes:
        show_node_transitions: Log each transition at INFO instead of VERBOSE
        show_final_state: Dump the shared store at DEBUG when a traversal ends
    """
    show_node_transitions: bool = Field(default=False)
    show_final_state: bool = Field(default=False)

_active_sink: ContextVar[Optional[logging.Logger]] = ContextVar(
    "pocketgraph_log_sink", default=None
)

@contextmanager
def log_scope(sink: logging.Logger) -> Iterator[logging.Logger]:
    """Route engine logging to ``sink`` for the duration of the block.

    Component loggers become children of ``sink`` (``sink.nodes``,
    ``sink.flow``...), so handlers attached to ``sink`` see every record.

    Example:
        ```python
        run_logger = logging.getLogger(f"runs.{run_id}")
        with log_scope(run_logger):
            await flow.run_async(shared)
        ```
    """
    token = _active_sink.set(sink)
    try:
        yield sink
    finally:
        _active_sink.reset(token)

def get_logger(component: LogComponent) -> logging.Logger:
    """Get the logger for a component, honouring the active ``log_scope``."""
    sink = _active_sink.get()
    if sink is not None:
        return sink.getChild(component.name.lower())
    return logging.getLogger(component.value)

def configure_logging(
    default_level: LogLevel = LogLevel.INFO,
    component_levels: Optional[Dict[LogComponent, LogLevel]] = None,
    pretty: bool = True,
    log_file: Optional[str] = None
) -> None:
    """Configure process logging with pretty formatting.

    Only call this from applications and example scripts; the library never
    configures handlers on its own.
    """
    handlers = []

    console_handler = PrettyLogHandler() if pretty else logging.StreamHandler()
    console_handler.setFormatter(
        PrettyFormatter(DETAILED_FORMAT) if pretty else logging.Formatter(PRETTY_FORMAT)
    )
    handlers.append(console_handler)

    # File handler if specified (without colors)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(PRETTY_FORMAT))
        handlers.append(file_handler)

    root_logger = logging.getLogger()
    root_logger.setLevel(default_level.value)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    for handler in handlers:
        root_logger.addHandler(handler)

    if not component_levels:
        component_levels = {
            LogComponent.FLOW: LogLevel.INFO,
            LogComponent.NODES: LogLevel.INFO,
        }

    for component, level in component_levels.items():
        logging.getLogger(component.value).setLevel(level.value)

def log_verbose(logger: logging.Logger, message: str) -> None:
    """Log a message at VERBOSE level."""
    if logger.isEnabledFor(VerbosityLevel.VERBOSE):
        logger.log(VerbosityLevel.VERBOSE, message)

def log_state(logger: logging.Logger, state: Dict[str, Any], prefix: str = "") -> None:
    """Log a shared store in a readable, indented format at DEBUG level."""
    for key, value in state.items():
        if isinstance(value, dict):
            logger.debug(f"{prefix}{key}:")
            log_state(logger, value, prefix + "  ")
        else:
            logger.debug(f"{prefix}{key}: {value!r}")
