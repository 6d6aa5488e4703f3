"""Shared utilities (log forwarding for export consoles)."""

from .logging_utils import QueueLogHandler, forward_logs

__all__ = ["QueueLogHandler", "forward_logs"]
