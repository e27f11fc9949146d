"""Shared helpers."""

from .logging import configure_json_logger, flush_handlers, log_event

__all__ = ["configure_json_logger", "flush_handlers", "log_event"]
