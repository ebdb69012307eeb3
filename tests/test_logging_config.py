import json
import logging

from site_compiler.logging_config import (
    JobContextFilter,
    StructuredFormatter,
    job_id_var,
    set_job_id,
    set_trace_id,
    trace_id_var,
    trace_resource,
)


def _record(**extra):
    record = logging.LogRecord("site_compiler.compiler", logging.INFO, __file__, 10, "Compiled site", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_extra_fields_are_written_as_json():
    line = StructuredFormatter().format(_record(files=12, image_status="RESOLVED"))

    payload = json.loads(line)
    assert payload["message"] == "Compiled site"
    assert payload["severity"] == "INFO"
    assert payload["service"] == "site-compiler"
    assert payload["files"] == 12
    assert payload["image_status"] == "RESOLVED"


def test_context_filter_adds_trace_and_job():
    trace_token = trace_id_var.set(None)
    job_token = job_id_var.set(None)
    try:
        set_trace_id("abc123")
        set_job_id("job_bistro_x1")
        record = _record()

        assert JobContextFilter("demo").filter(record)
        payload = json.loads(StructuredFormatter().format(record))
    finally:
        trace_id_var.reset(trace_token)
        job_id_var.reset(job_token)

    assert payload["logging.googleapis.com/trace"] == "projects/demo/traces/abc123"
    assert payload["job_id"] == "job_bistro_x1"


def test_explicit_job_id_wins():
    token = job_id_var.set("job_context")
    try:
        record = _record(job_id="job_explicit")
        JobContextFilter().filter(record)
    finally:
        job_id_var.reset(token)

    assert record.job_id == "job_explicit"


def test_trace_resource_without_project():
    assert trace_resource("abc", None) == "abc"
