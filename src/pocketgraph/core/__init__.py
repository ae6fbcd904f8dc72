"""Core modules for pocketgraph."""

from pocketgraph.core.logging import (
    FlowLoggingConfig,
    LogComponent,
    LogLevel,
    configure_logging,
    log_scope,
)

__all__ = [
    'configure_logging',
    'log_scope',
    'FlowLoggingConfig',
    'LogLevel',
    'LogComponent'
]
