"""Observability module - metrics and structured logging."""

from modelprobe.observability.metrics import metrics, MetricsCollector
from modelprobe.observability.logging import setup_logging, get_logger

__all__ = ["metrics", "MetricsCollector", "setup_logging", "get_logger"]
