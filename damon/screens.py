"""The screens of the interface: what each one shows and how it updates."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any

from damon.filters import (
    filter_allocations,
    filter_deployments,
    filter_jobs,
    filter_logs,
    filter_namespaces,
    find_allocation,
    reverse_events,
)
from damon.state import State
from damon.watcher import Topic


class CommandSet(Enum):
    """Which set of key commands the header shows."""

    JOBS = "jobs"
    ALLOCATIONS = "allocations"
    DEPLOYMENTS = "deployments"
    LOGS = "logs"
    NONE = "none"


class ScreensMixin:
    """Screen switching for a view.

    The class using this mixin provides ``state``, ``watcher``, ``client``,
    ``components`` and ``layout``, and the methods ``draw()``,
    ``_add_to_history(namespace, topic, update)``, ``_handle_error(fmt, *args)``,
    ``_handle_no_resources(fmt, *args)`` and the input handlers
    ``input_jobs``, ``input_allocations``, ``input_deployments``,
    ``input_namespaces``, ``input_task_groups``, ``input_main_commands`` and
    ``input_logs``.
    """

    state: State
    watcher: Any
    client: Any
    components: Any
    layout: Any

    def jobs(self) -> None:
        """Show the jobs of the selected namespace."""
        self._view_switch()

        self.layout.container.set_input_capture(self.input_jobs)
        self.components.commands.update(CommandSet.JOBS)

        search = self.components.search
        table = self.components.job_table

        self.state.elements.table_main = table.primitive

        def update() -> None:
            table.props.data = filter_jobs(
                self.state.jobs, self.state.selected_namespace, self.state.filter.jobs
            )
            table.props.namespace = self.state.selected_namespace
            table.render()
            self.draw()

        def changed(text: str) -> None:
            self.state.filter.jobs = text
            update()

        search.props.changed_func = changed

        if table.props.select_job is None:
            table.props.select_job = self.allocations

        self.watcher.subscribe(update, Topic.JOB, Topic.ALLOCATION)
        update()

        self._on_namespace_selected(self.jobs)

        self._add_to_history(self.state.selected_namespace, Topic.JOB, self.jobs)
        self.layout.container.set_focus(table.primitive)

    def allocations(self, job_id: str) -> None:
        """Show the allocations of a job."""
        self._view_switch()

        self.components.commands.update(CommandSet.ALLOCATIONS)
        self.layout.container.set_input_capture(self.input_allocations)

        search = self.components.search
        table = self.components.allocation_table

        def update() -> None:
            table.props.data = filter_allocations(
                self.state.allocations, job_id, self.state.filter.allocations
            )
            table.render()
            self.draw()

        def changed(text: str) -> None:
            self.state.filter.allocations = text
            update()

        search.props.changed_func = changed
        table.props.job_id = job_id

        self.watcher.subscribe(update, Topic.ALLOCATION)
        update()

        self._on_namespace_selected(lambda: self.allocations(job_id))

        self._add_to_history(
            self.state.selected_namespace, Topic.ALLOCATION, lambda: self.allocations(job_id)
        )

        self.state.elements.table_main = table.primitive
        self.layout.container.set_focus(table.primitive)

    def deployments(self) -> None:
        """Show the deployments."""
        self._view_switch()

        self.components.commands.update(CommandSet.DEPLOYMENTS)
        self.layout.container.set_input_capture(self.input_deployments)

        table = self.components.deployment_table
        self.state.elements.table_main = table.primitive

        def update() -> None:
            table.props.data = filter_deployments(
                self.state.deployments, self.state.filter.deployments
            )
            table.props.namespace = self.state.selected_namespace
            table.render()
            self.draw()

        search = self.components.search
        search.set_text("")

        def changed(text: str) -> None:
            self.state.filter.deployments = text
            update()

        search.props.changed_func = changed

        self.watcher.subscribe(update, Topic.DEPLOYMENT)
        update()

        self._on_namespace_selected(self.deployments)

        self._add_to_history(self.state.selected_namespace, Topic.DEPLOYMENT, self.deployments)
        self.layout.container.set_focus(table.primitive)

    def namespaces(self) -> None:
        """Show the namespaces."""
        self._view_switch()

        table = self.components.namespace_table
        self.state.elements.table_main = table.primitive
        self.components.commands.update(CommandSet.NONE)
        self.layout.container.set_input_capture(self.input_namespaces)

        def update() -> None:
            table.props.data = filter_namespaces(
                self.state.namespaces, self.state.filter.namespaces
            )
            table.render()
            self.draw()

        def changed(text: str) -> None:
            self.state.filter.namespaces = text
            update()

        self.components.search.props.changed_func = changed

        self.watcher.subscribe_to_namespaces(update)
        update()

        self._on_namespace_selected(self.namespaces)

        self._add_to_history(self.state.selected_namespace, Topic.NAMESPACE, self.namespaces)
        self.layout.container.set_focus(table.primitive)

    def task_events(self, alloc_id: str) -> None:
        """Show the events of the first task of an allocation, newest first."""
        table = self.components.task_events_table
        self.state.elements.table_main = table.primitive

        self.components.commands.update(CommandSet.NONE)
        self.layout.container.set_input_capture(self.input_main_commands)

        alloc = find_allocation(self.state.allocations, alloc_id)
        if alloc is None:
            self._handle_error("allocation with ID %s doesn't exist", alloc_id)
            return

        tasks = alloc.tasks
        if not tasks:
            self._handle_error("no tasks for allocID %s", alloc_id)
            return

        reverse_events(tasks[0].events)

        def update() -> None:
            table.props.data = tasks[0].events
            table.props.alloc_id = alloc_id
            table.props.handle_no_resources = self._handle_no_resources
            table.render()
            self.draw()

        self.watcher.subscribe(update, Topic.ALLOCATION)
        update()

        self._on_namespace_selected(lambda: self.task_events(alloc_id))

        self._add_to_history(
            self.state.selected_namespace, Topic.ALLOCATION, lambda: self.task_events(alloc_id)
        )
        self.layout.container.set_focus(table.primitive)

    def task_groups(self, job_id: str) -> None:
        """Show the task groups of a job."""
        table = self.components.task_group_table
        self.state.elements.table_main = table.primitive

        self.components.commands.update(CommandSet.NONE)
        self.layout.container.set_input_capture(self.input_task_groups)

        def update() -> None:
            table.props.data = self.state.task_groups
            table.props.job_id = job_id
            table.props.handle_no_resources = self._handle_no_resources
            table.render()
            self.draw()

        def changed(text: str) -> None:
            self.state.filter.task_groups = text
            update()

        self.components.search.props.changed_func = changed

        self.watcher.subscribe_to_task_groups(job_id, update)
        update()

        self._on_namespace_selected(lambda: self.task_groups(job_id))

        self._add_to_history(
            self.state.selected_namespace, Topic.TASK_GROUP, lambda: self.task_groups(job_id)
        )
        self.layout.container.set_focus(table.primitive)

    def logs(self, tasks: list[str], alloc_id: str, source: str) -> None:
        """Stream the logs of a task; with several tasks, ask which one first."""
        if len(tasks) > 1:
            modal = self.components.selector_modal
            modal.props.items = tasks
            modal.props.allocation_id = alloc_id
            modal.set_selected_func(lambda task: self.logs([task], alloc_id, source))
            modal.render()
            self.draw()
            self.layout.container.set_focus(modal.primitive)
            return

        task_name = tasks[0]

        self.layout.body.clear()

        self.layout.container.set_input_capture(self.input_logs)
        self.components.commands.update(CommandSet.LOGS)

        stream = self.components.log_stream

        def update() -> None:
            stream.props.data = filter_logs(self.state.logs, self.state.filter.logs)
            stream.render()
            self.draw()
            self.layout.container.set_focus(stream.primitive)

        self.watcher.subscribe_to_logs(alloc_id, task_name, source, update)
        update()

        self._add_to_history(self.state.selected_namespace, Topic.LOG, update)
        self.layout.container.set_input_capture(self.input_logs)

    def start_stop_job(self, job_id: str) -> None:
        """Ask for confirmation, then start a dead job or stop a running one."""
        try:
            job = self.client.get_job(job_id)
        except Exception as err:
            self._handle_error("failed to start/stop job: %s", str(err))
            return

        confirm = self.components.confirm

        if job.status == "dead":

            def done(index: int, text: str) -> None:
                if index == 1:
                    try:
                        self.client.start_job(job)
                    except Exception:
                        self._handle_error("Failed to start job")
                self._close_confirm_modal()

            confirm.props.done = done
            confirm.render("Do you really want to start the job?")
        else:

            def done(index: int, text: str) -> None:
                if index == 1:
                    try:
                        self.client.stop_job(job_id)
                    except Exception:
                        self._handle_error("Failed to stop job")
                self._close_confirm_modal()

            confirm.props.done = done
            confirm.render("Do you really want to stop the job?")

        self.layout.container.set_focus(confirm.primitive)

    def _on_namespace_selected(self, reload: Callable[[], None]) -> None:
        def selected(text: str, index: int) -> None:
            self.state.selected_namespace = text
            reload()

        self.components.selections.namespace.set_selected_func(selected)

    def _close_confirm_modal(self) -> None:
        self.layout.pages.remove_page(self.components.confirm.props.id)
        self.layout.container.set_focus(self.state.elements.table_main)

    def _reset_search(self) -> None:
        if self.state.toggle.search:
            self.layout.container.set_focus(self.state.elements.table_main)
            self.layout.footer.remove_item(self.components.search.primitive)
            self.layout.main_page.resize_item(self.layout.footer, 0, 0)
            self.state.toggle.search = False

    def _view_switch(self) -> None:
        self._reset_search()