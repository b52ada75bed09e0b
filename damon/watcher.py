"""Watch a Nomad cluster and keep the shared state up to date."""

from __future__ import annotations

import queue
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Protocol

from damon.activity import Activities, ActivityPool
from damon.state import Alloc, Deployment, Job, JobStatus, Namespace, State, TaskGroup

_QUEUE_POLL_SECONDS = 0.05


class Topic(str, Enum):
    """Kinds of data a subscriber can be notified about."""

    JOB = "Job"
    DEPLOYMENT = "Deployment"
    ALLOCATION = "Allocation"
    TASK_GROUP = "TaskGroup"
    NAMESPACE = "Namespace"
    LOG = "Log"
    JOB_STATUS = "JobStatus"


class Handler(Enum):
    """Kinds of message handlers."""

    ERROR = auto()
    INFO = auto()
    FATAL = auto()


@dataclass
class Event:
    """A single event from the cluster's event stream."""

    topic: Topic


@dataclass
class Events:
    """A batch of events delivered by the event stream."""

    events: list[Event] = field(default_factory=list)


@dataclass
class StreamFrame:
    """A chunk of log output."""

    data: bytes | None = None


@dataclass
class SearchOptions:
    """Options passed along with list queries."""

    namespace: str = ""


class Nomad(Protocol):
    """The cluster client the watcher reads from. Failures raise."""

    def jobs(self, options: SearchOptions | None) -> list[Job]: ...

    def job_status(self, job_id: str, options: SearchOptions | None) -> JobStatus | None: ...

    def namespaces(self, options: SearchOptions | None) -> list[Namespace]: ...

    def deployments(self, options: SearchOptions | None) -> list[Deployment]: ...

    def task_groups(self, job_id: str, options: SearchOptions | None) -> list[TaskGroup]: ...

    def allocations(self, options: SearchOptions | None) -> list[Alloc]: ...

    def logs(
        self, alloc_id: str, task_name: str, log_type: str, cancel: threading.Event
    ) -> queue.Queue[StreamFrame | BaseException]: ...

    def stream(self, topics: dict[Topic, list[str]], index: int) -> Iterable[Events]: ...


HandleFunc = Callable[..., None]


@dataclass
class _Subscriber:
    topics: tuple[Topic, ...]
    notify: Callable[[], None] | None


class Watcher:
    """Keeps the state in sync with the cluster and notifies the current subscriber."""

    poll_interval = 2.0
    """Seconds between polls of job status and task groups."""

    def __init__(self, state: State, nomad: Nomad, interval: float) -> None:
        self._state = state
        self._nomad = nomad
        self._interval = interval
        self._subscriber: _Subscriber | None = None
        self._handlers: dict[Handler, HandleFunc] = {}
        self._activities: Activities = ActivityPool()

    def subscribe(self, notify: Callable[[], None], *args: Topic) -> None:
        """Make ``notify`` the subscriber for the topics in ``args``.

        Every running background activity is stopped.
        """
        self._subscriber = _Subscriber(topics=tuple(args), notify=notify)
        self._activities.deactivate_all()

    def unsubscribe(self) -> None:
        """Remove the current subscriber."""
        self._subscriber = None

    def subscribe_handler(self, handler: Handler, handle: HandleFunc) -> None:
        """Register ``handle`` for messages of kind ``handler``."""
        self._handlers[handler] = handle

    def notify_handler(self, handler: Handler, msg: str, *args: Any) -> None:
        """Pass a message to the handler registered for ``handler``, if any."""
        handle = self._handlers.get(handler)
        if handle is not None:
            handle(msg, *args)

    def notify(self, topic: Topic) -> None:
        """Tell the current subscriber that data for ``topic`` changed."""
        subscriber = self._subscriber
        if subscriber is None or subscriber.notify is None:
            return
        for subscribed in subscriber.topics:
            if subscribed == topic:
                subscriber.notify()

    def watch(self) -> None:
        """Follow the event stream for jobs, deployments and allocations.

        Blocks until the stream ends; run it in a thread.
        """
        topics = {
            Topic.JOB: ["*"],
            Topic.DEPLOYMENT: ["*"],
            Topic.ALLOCATION: ["*"],
        }

        self._update(Topic.JOB)
        self._update(Topic.DEPLOYMENT)
        self._update(Topic.ALLOCATION)

        try:
            stream = self._nomad.stream(topics, 1000)
        except Exception as err:
            self.notify_handler(Handler.FATAL, str(err))
            return

        for batch in stream:
            for event in batch.events:
                self._update(event.topic)

        self.notify_handler(Handler.FATAL, "event stream closed")

    def subscribe_to_job_status(self, job_id: str, notify: Callable[[], None]) -> None:
        """Poll the status of a job and notify ``notify`` after each poll."""
        self._update_job_status(job_id)
        self.subscribe(notify, Topic.JOB_STATUS)
        self.notify(Topic.JOB_STATUS)
        self._start_polling(
            self.poll_interval, lambda: self._update_job_status(job_id), Topic.JOB_STATUS
        )

    def subscribe_to_logs(
        self, alloc_id: str, task_name: str, source: str, notify: Callable[[], None]
    ) -> None:
        """Stream the logs of a task and notify ``notify`` for each new chunk."""
        self._state.logs = None

        alloc = next((a for a in self._state.allocations if a.id == alloc_id), None)
        if alloc is None:
            self.notify_handler(Handler.ERROR, "allocation not found: %s", alloc_id)
            return

        if not alloc.task_names:
            self.notify_handler(Handler.ERROR, "no tasks for allocation: %s", alloc_id)
            return

        self.subscribe(notify, Topic.LOG)
        self.notify(Topic.LOG)

        cancel = threading.Event()
        frames = self._nomad.logs(alloc_id, task_name, source, cancel)
        self._activities.add(cancel)

        threading.Thread(
            target=self._follow_logs, args=(frames, cancel), daemon=True
        ).start()

    def subscribe_to_namespaces(self, notify: Callable[[], None]) -> None:
        """Poll namespaces at the watcher's interval and notify after each poll."""
        self._update_namespaces()
        self.subscribe(notify, Topic.NAMESPACE)
        self.notify(Topic.NAMESPACE)
        self._start_polling(self._interval, self._update_namespaces, Topic.NAMESPACE)

    def subscribe_to_task_groups(self, job_id: str, notify: Callable[[], None]) -> None:
        """Poll the task groups of a job and notify after each poll."""
        self._update_task_groups(job_id)
        self.subscribe(notify, Topic.TASK_GROUP)
        self.notify(Topic.TASK_GROUP)
        self._start_polling(
            self.poll_interval, lambda: self._update_task_groups(job_id), Topic.TASK_GROUP
        )

    def _start_polling(self, interval: float, update: Callable[[], None], topic: Topic) -> None:
        stop = threading.Event()
        self._activities.add(stop)

        def run() -> None:
            while not stop.wait(interval):
                update()
                self.notify(topic)

        threading.Thread(target=run, daemon=True).start()

    def _follow_logs(
        self, frames: queue.Queue[StreamFrame | BaseException], cancel: threading.Event
    ) -> None:
        while not cancel.is_set():
            try:
                item = frames.get(timeout=_QUEUE_POLL_SECONDS)
            except queue.Empty:
                continue
            if isinstance(item, BaseException):
                self.notify_handler(Handler.ERROR, str(item))
            elif item is not None and item.data is not None:
                self._state.logs = (self._state.logs or b"") + item.data
                self.notify(Topic.LOG)

    def _update(self, topic: Topic) -> None:
        if topic == Topic.JOB:
            self._update_jobs()
        elif topic == Topic.ALLOCATION:
            self._update_allocations()
        elif topic == Topic.DEPLOYMENT:
            self._update_deployments()
        self.notify(topic)

    def _update_jobs(self) -> None:
        try:
            self._state.jobs = self._nomad.jobs(SearchOptions(namespace="*"))
        except Exception as err:
            self.notify_handler(Handler.ERROR, str(err))
            self._state.jobs = []

    def _update_deployments(self) -> None:
        try:
            self._state.deployments = self._nomad.deployments(SearchOptions())
        except Exception as err:
            self.notify_handler(Handler.ERROR, str(err))
            self._state.deployments = []

    def _update_allocations(self) -> None:
        try:
            self._state.allocations = self._nomad.allocations(SearchOptions(namespace="*"))
        except Exception as err:
            self.notify_handler(Handler.ERROR, str(err))
            self._state.allocations = []

    def _update_job_status(self, job_id: str) -> None:
        try:
            self._state.job_status = self._nomad.job_status(job_id, None)
        except Exception as err:
            self.notify_handler(Handler.ERROR, str(err))
            self._state.job_status = None

    def _update_namespaces(self) -> None:
        try:
            self._state.namespaces = self._nomad.namespaces(None)
        except Exception as err:
            self.notify_handler(Handler.ERROR, str(err))
            self._state.namespaces = []

    def _update_task_groups(self, job_id: str) -> None:
        try:
            self._state.task_groups = self._nomad.task_groups(job_id, None)
        except Exception as err:
            self.notify_handler(Handler.ERROR, str(err))
            self._state.task_groups = []