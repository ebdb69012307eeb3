from __future__ import annotations

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone

from google.cloud import logging as cloud_logging

trace_id_var: ContextVar[str | None] = ContextVar("trace_id", default=None)
job_id_var: ContextVar[str | None] = ContextVar("job_id", default=None)

# Attributes every LogRecord carries; anything else arrived through `extra=`.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime", "taskName"}

_QUIET_LOGGERS = ("google", "urllib3", "httpx", "grpc")


def trace_resource(trace_id: str, project_id: str | None) -> str:
    """Trace name in the form Cloud Logging correlates with request traces."""
    if project_id:
        return f"projects/{project_id}/traces/{trace_id}"
    return trace_id


class JobContextFilter(logging.Filter):
    """Stamps the current trace and job onto every record passing through a handler."""

    def __init__(self, project_id: str | None = None) -> None:
        super().__init__()
        self.project_id = project_id

    def filter(self, record: logging.LogRecord) -> bool:
        trace_id = trace_id_var.get()
        if trace_id and not hasattr(record, "trace"):
            # Cloud Logging's handler reads `trace` straight off the record
            record.trace = trace_resource(trace_id, self.project_id)
        job_id = job_id_var.get()
        if job_id and not hasattr(record, "job_id"):
            record.job_id = job_id
        return True


class StructuredFormatter(logging.Formatter):
    """One JSON object per line, with the field names Cloud Logging understands."""

    def __init__(self, service: str = "site-compiler") -> None:
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "severity": record.levelname,
            "message": record.getMessage(),
            "service": self.service,
            "logger": record.name,
            "function": record.funcName,
            "line": record.lineno,
        }

        for key, value in vars(record).items():
            if key in _RESERVED_ATTRS or key.startswith("_"):
                continue
            if key == "trace":
                payload["logging.googleapis.com/trace"] = value
            else:
                payload[key] = value

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str, ensure_ascii=False)


def setup_logging(
    *,
    environment: str = "dev",
    project_id: str | None = None,
    use_cloud_logging: bool = True,
    service: str = "site-compiler",
) -> None:
    """Configure root logging for a service process.

    Outside dev, with a project, records go to Cloud Logging; otherwise they
    are written to stdout as JSON lines.

    Args:
        environment: Environment name (dev, staging, prod)
        project_id: GCP project ID for Cloud Logging and trace names
        use_cloud_logging: Whether to use the Cloud Logging client at all
        service: Service name written on every stdout record
    """
    log_level = logging.DEBUG if environment == "dev" else logging.INFO
    context_filter = JobContextFilter(project_id)

    if use_cloud_logging and project_id and environment != "dev":
        client = cloud_logging.Client(project=project_id)
        client.setup_logging(log_level=log_level)
        for handler in logging.getLogger().handlers:
            handler.addFilter(context_filter)
    else:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(StructuredFormatter(service))
        handler.addFilter(context_filter)
        logging.basicConfig(level=log_level, handlers=[handler], force=True)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def set_trace_id(trace_id: str) -> None:
    trace_id_var.set(trace_id)


def get_trace_id() -> str | None:
    return trace_id_var.get()


def set_job_id(job_id: str | None) -> None:
    """Tag records logged from the current context with ``job_id``."""
    job_id_var.set(job_id)


__all__ = [
    "setup_logging",
    "set_trace_id",
    "get_trace_id",
    "set_job_id",
    "trace_resource",
    "JobContextFilter",
    "StructuredFormatter",
]
