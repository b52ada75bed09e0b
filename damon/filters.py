"""Pure filtering helpers used by the views."""

from __future__ import annotations

import re
from collections.abc import Iterable

from damon import styles
from damon.state import Alloc, Deployment, Job, Namespace, TaskEvent


def _any_match(rx: re.Pattern[str], values: Iterable[str]) -> bool:
    return any(rx.search(value) for value in values)


def filter_logs(logs: bytes | None, pattern: str) -> bytes:
    """Return log lines matching ``pattern`` with the first match highlighted.

    With an empty pattern the whole log is returned, prefixed by the white tag.
    An invalid pattern raises ``re.error``.
    """
    logs = logs or b""
    if not pattern:
        return styles.COLOR_WHITE_TAG.encode() + logs

    rx = re.compile(pattern.encode())
    grey = styles.COLOR_LIGHT_GREY_TAG.encode()
    highlight = styles.HIGHLIGHT_SECONDARY_TAG.encode()

    parts = []
    for line in logs.split(b"\n"):
        found = rx.search(line)
        if found is None:
            continue
        start, end = found.span()
        parts.append(
            grey + line[:start] + highlight + line[start:end] + grey + line[end:] + b"\n"
        )
    return b"".join(parts)


def filter_jobs(jobs: Iterable[Job], namespace: str, pattern: str) -> list[Job]:
    """Keep the jobs whose namespace matches ``namespace``, then apply ``pattern``."""
    namespace_rx = re.compile(namespace)
    data = [job for job in jobs if namespace_rx.search(job.namespace)]
    if not pattern:
        return data

    rx = re.compile(pattern)
    return [
        job
        for job in data
        if _any_match(rx, (job.id, job.name, job.namespace, job.status, job.type))
    ]


def filter_allocations(allocations: Iterable[Alloc], job_id: str, pattern: str) -> list[Alloc]:
    """Return the allocations of ``job_id``.

    When ``pattern`` is set it is applied to all given allocations instead.
    """
    allocations = list(allocations)
    if pattern:
        rx = re.compile(pattern)
        return [
            alloc
            for alloc in allocations
            if _any_match(
                rx,
                (
                    alloc.id,
                    alloc.task_group,
                    alloc.job_id,
                    alloc.desired_status,
                    alloc.node_id,
                    alloc.node_name,
                ),
            )
        ]

    job_rx = re.compile(f"^{job_id}\\Z")
    return [alloc for alloc in allocations if job_rx.search(alloc.job_id)]


def filter_deployments(deployments: Iterable[Deployment], pattern: str) -> list[Deployment]:
    """Keep the deployments matching ``pattern``; all of them if it is empty."""
    deployments = list(deployments)
    if not pattern:
        return deployments

    rx = re.compile(pattern)
    return [
        dep
        for dep in deployments
        if _any_match(
            rx, (dep.id, dep.job_id, dep.namespace, dep.status, dep.status_description)
        )
    ]


def filter_namespaces(namespaces: Iterable[Namespace], pattern: str) -> list[Namespace]:
    """Keep the namespaces whose name or description matches ``pattern``."""
    namespaces = list(namespaces)
    if not pattern:
        return namespaces

    rx = re.compile(pattern)
    return [ns for ns in namespaces if _any_match(rx, (ns.name, ns.description))]


def namespace_index(name: str, namespaces: Iterable[Namespace]) -> int:
    """Return the last position of the namespace called ``name``, or 0."""
    index = 0
    for position, namespace in enumerate(namespaces):
        if namespace.name == name:
            index = position
    return index


def reverse_events(events: list[TaskEvent]) -> None:
    """Reverse the events in place so the newest comes first."""
    events.reverse()


def find_allocation(allocations: Iterable[Alloc], alloc_id: str) -> Alloc | None:
    """Return the allocation with the given ID, or None."""
    return next((alloc for alloc in allocations if alloc.id == alloc_id), None)