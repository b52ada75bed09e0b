"""Central application state and the records it holds."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Job:
    id: str = ""
    name: str = ""
    namespace: str = ""
    status: str = ""
    type: str = ""
    status_summary: dict[str, Any] = field(default_factory=dict)
    submitted_time: int = 0


@dataclass
class TaskEvent:
    type: str = ""
    time: int = 0
    message: str = ""
    display_message: str = ""


@dataclass
class Task:
    name: str = ""
    state: str = ""
    events: list[TaskEvent] = field(default_factory=list)


@dataclass
class Alloc:
    id: str = ""
    name: str = ""
    namespace: str = ""
    task_group: str = ""
    job_id: str = ""
    job_type: str = ""
    desired_status: str = ""
    client_status: str = ""
    node_id: str = ""
    node_name: str = ""
    task_names: list[str] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)


@dataclass
class Deployment:
    id: str = ""
    job_id: str = ""
    namespace: str = ""
    status: str = ""
    status_description: str = ""


@dataclass
class Namespace:
    name: str = ""
    description: str = ""


@dataclass
class TaskGroup:
    name: str = ""
    job_id: str = ""
    queued: int = 0
    complete: int = 0
    failed: int = 0
    running: int = 0
    starting: int = 0
    lost: int = 0


@dataclass
class JobStatus:
    id: str = ""
    name: str = ""
    namespace: str = ""
    type: str = ""
    status: str = ""
    priority: int = 0
    datacenters: list[str] = field(default_factory=list)


@dataclass
class Filter:
    running: bool = False
    pending: bool = False
    dead: bool = False

    logs: str = ""
    jobs: str = ""
    deployments: str = ""
    namespaces: str = ""
    allocations: str = ""
    task_groups: str = ""


@dataclass
class Toggle:
    jump_to_job: bool = False
    search: bool = False
    log_search: bool = False


@dataclass
class Elements:
    drop_down_namespace: Any = None
    table_main: Any = None


@dataclass
class State:
    nomad_address: str = ""
    current_subscriber: Any = None

    jobs: list[Job] = field(default_factory=list)
    deployments: list[Deployment] = field(default_factory=list)
    task_groups: list[TaskGroup] = field(default_factory=list)
    allocations: list[Alloc] = field(default_factory=list)
    namespaces: list[Namespace] = field(default_factory=list)
    logs: bytes | None = None
    job_status: JobStatus | None = None

    selected_namespace: str = ""
    selected_region: str = ""

    filter: Filter = field(default_factory=Filter)
    elements: Elements = field(default_factory=Elements)
    toggle: Toggle = field(default_factory=Toggle)