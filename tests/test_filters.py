import re

import pytest

from damon import styles
from damon.filters import (
    filter_allocations,
    filter_deployments,
    filter_jobs,
    filter_logs,
    filter_namespaces,
    find_allocation,
    namespace_index,
    reverse_events,
)
from damon.state import Alloc, Deployment, Job, Namespace, TaskEvent

GREY = styles.COLOR_LIGHT_GREY_TAG.encode()
HIGHLIGHT = styles.HIGHLIGHT_SECONDARY_TAG.encode()
WHITE = styles.COLOR_WHITE_TAG.encode()


def test_filter_logs_without_pattern_prefixes_white_tag():
    logs = b"first\nsecond\n"
    assert filter_logs(logs, "") == WHITE + logs


def test_filter_logs_none_without_pattern():
    assert filter_logs(None, "") == WHITE


def test_filter_logs_highlights_first_match():
    result = filter_logs(b"hello world\nfoo", "wor")
    assert result == GREY + b"hello " + HIGHLIGHT + b"wor" + GREY + b"ld\n"


def test_filter_logs_keeps_only_matching_lines():
    result = filter_logs(b"alpha\nbeta\nalpine", "^al")
    lines = result.split(b"\n")
    assert len(lines) == 3
    assert lines[-1] == b""
    assert all(line.startswith(GREY + HIGHLIGHT + b"al") for line in lines[:2])


def test_filter_logs_no_match_is_empty():
    assert filter_logs(b"one\ntwo", "zzz") == b""


def test_filter_logs_invalid_pattern_raises():
    with pytest.raises(re.error):
        filter_logs(b"x", "(")


JOBS = [
    Job(id="web", name="web", namespace="default", status="running", type="service"),
    Job(id="batch", name="batch", namespace="default", status="dead", type="batch"),
    Job(id="api", name="api", namespace="prod", status="running", type="service"),
]


def test_filter_jobs_by_namespace():
    assert [j.id for j in filter_jobs(JOBS, "prod", "")] == ["api"]


def test_filter_jobs_empty_namespace_matches_all():
    assert filter_jobs(JOBS, "", "") == JOBS


def test_filter_jobs_pattern_over_fields():
    assert [j.id for j in filter_jobs(JOBS, "", "dead")] == ["batch"]
    assert [j.id for j in filter_jobs(JOBS, "default", "service")] == ["web"]


ALLOCS = [
    Alloc(id="a1", job_id="web", task_group="tg", node_name="node-1"),
    Alloc(id="a2", job_id="webapp", task_group="tg", node_name="node-2"),
    Alloc(id="a3", job_id="api", task_group="tg", node_name="node-1"),
]


def test_filter_allocations_matches_job_exactly():
    assert [a.id for a in filter_allocations(ALLOCS, "web", "")] == ["a1"]


def test_filter_allocations_pattern_spans_all_allocations():
    result = filter_allocations(ALLOCS, "web", "node-1")
    assert [a.id for a in result] == ["a1", "a3"]


def test_filter_deployments():
    deps = [
        Deployment(id="d1", job_id="web", status="running"),
        Deployment(id="d2", job_id="api", status="failed"),
    ]
    assert filter_deployments(deps, "") == deps
    assert [d.id for d in filter_deployments(deps, "fail")] == ["d2"]


def test_filter_namespaces():
    spaces = [Namespace(name="default"), Namespace(name="prod", description="live traffic")]
    assert filter_namespaces(spaces, "") == spaces
    assert [n.name for n in filter_namespaces(spaces, "traffic")] == ["prod"]


def test_namespace_index():
    spaces = [Namespace(name="default"), Namespace(name="prod")]
    assert namespace_index("prod", spaces) == 1
    assert namespace_index("missing", spaces) == 0


def test_reverse_events_in_place():
    events = [TaskEvent(type="a"), TaskEvent(type="b"), TaskEvent(type="c")]
    original = list(events)
    reverse_events(events)
    assert events == original[::-1]


def test_find_allocation():
    assert find_allocation(ALLOCS, "a2") is ALLOCS[1]
    assert find_allocation(ALLOCS, "nope") is None