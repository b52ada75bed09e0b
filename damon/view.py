"""The main view: wiring of components, key handling and navigation."""

from __future__ import annotations

import queue
import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from damon import styles
from damon.filters import filter_logs, find_allocation, namespace_index
from damon.history import HISTORY_SIZE, History
from damon.screens import ScreensMixin
from damon.state import State
from damon.watcher import Handler, Topic

_DRAW_POLL_SECONDS = 0.05


class Key(Enum):
    """Keys the view reacts to."""

    RUNE = auto()
    ENTER = auto()
    ESC = auto()
    CTRL_D = auto()
    CTRL_E = auto()
    CTRL_J = auto()
    CTRL_N = auto()
    CTRL_O = auto()
    CTRL_P = auto()
    CTRL_S = auto()


@dataclass(frozen=True)
class KeyEvent:
    """A key press; ``rune`` holds the character when ``key`` is ``Key.RUNE``."""

    key: Key
    rune: str = ""


@dataclass(frozen=True)
class NoResourcesNotice:
    """A centred, bordered message shown in the body when there is nothing to list."""

    text: str


class View(ScreensMixin):
    """Connects the state, the watcher and the interface components."""

    def __init__(
        self, components: Any, watcher: Any, client: Any, state: State, layout: Any
    ) -> None:
        self.components = components
        self.watcher = watcher
        self.client = client
        self.state = state
        self.layout = layout
        self._history = History(history_size=HISTORY_SIZE)
        self._draw_requests: queue.Queue[None] = queue.Queue(maxsize=1)
        self._draw_stop = threading.Event()

    def init(self, version: str) -> None:
        """Bind every component to the layout, start drawing and show the jobs."""
        c = self.components
        layout = self.layout

        c.cluster_info.props.info = (
            f"{styles.HIGHLIGHT_SECONDARY_TAG}Address{styles.STANDARD_COLOR_TAG}: "
            f"{self.state.nomad_address}\n"
            f"{styles.HIGHLIGHT_SECONDARY_TAG}Version:{styles.STANDARD_COLOR_TAG} {version}"
        )
        c.cluster_info.bind(layout.elements.cluster_info)
        c.cluster_info.render()

        c.jump_to_job.bind(layout.footer)
        c.jump_to_job.props.done_func = self._jump_to_job_done

        c.log_search.bind(layout.footer)
        c.log_search.props.changed_func = self._log_search_changed
        c.log_search.props.done_func = self._log_search_done

        c.search.bind(layout.footer)
        c.search.props.done_func = self._search_done

        c.job_table.bind(layout.body)
        c.job_table.props.handle_no_resources = self._handle_no_resources

        c.job_status.bind(layout.body)

        c.deployment_table.bind(layout.body)
        c.deployment_table.props.handle_no_resources = self._handle_no_resources

        c.namespace_table.bind(layout.body)
        c.namespace_table.props.handle_no_resources = self._handle_no_resources

        c.allocation_table.bind(layout.body)
        c.allocation_table.props.handle_no_resources = self._handle_no_resources
        c.allocation_table.props.select_allocation = self._select_allocation

        c.task_group_table.bind(layout.body)
        c.task_group_table.props.select_task_group = self._select_task_group

        c.task_events_table.bind(layout.body)

        c.log_stream.bind(layout.body)
        c.log_stream.props.handle_no_resources = self._handle_no_resources

        c.logo.bind(layout.header.slot_logo)
        c.logo.render()

        c.commands.bind(layout.header.slot_cmd)
        c.commands.render()

        c.selections.bind(layout.elements.dropdowns)
        c.selections.render()

        c.error.bind(layout.pages)
        c.error.props.done = self._error_done

        c.info.bind(layout.pages)
        c.info.props.done = self._modal_done(c.info)

        c.failure.bind(layout.pages)
        c.failure.props.done = self._modal_done(c.failure)

        c.confirm.bind(layout.pages)
        selector = c.selector_modal
        selector.bind(layout.pages)
        selector.bind_key(Key.ESC, selector.close)

        self.watcher.subscribe_handler(Handler.ERROR, self._handle_error)
        self.watcher.subscribe_handler(Handler.FATAL, self._handle_fatal)

        threading.Thread(target=self.draw_loop, args=(self._draw_stop,), daemon=True).start()

        self.jobs()

    def go_back(self) -> None:
        """Return to the previous view."""
        self._history.pop()

    def jump_to_job(self) -> None:
        """Open the jump-to-job field in the footer."""
        jump = self.components.jump_to_job
        jump.props.jobs = self.state.jobs
        self.layout.main_page.resize_item(self.layout.footer, 0, 1)
        jump.render()
        self.layout.container.set_focus(jump.primitive)

    def log_search(self) -> None:
        """Open the log search field in the footer."""
        self._open_footer_field(self.components.log_search)

    def search(self) -> None:
        """Open the table search field in the footer."""
        self._open_footer_field(self.components.search)

    def draw(self) -> None:
        """Request a redraw; requests made while one is pending are merged."""
        try:
            self._draw_requests.put_nowait(None)
        except queue.Full:
            pass

    def draw_loop(self, stop: threading.Event) -> None:
        """Redraw the screen for every request until ``stop`` is set."""
        while not stop.is_set():
            try:
                self._draw_requests.get(timeout=_DRAW_POLL_SECONDS)
            except queue.Empty:
                continue
            self.layout.container.draw()

    def job_status(self, job_id: str) -> None:
        """Show the status of a job."""
        self.layout.body.clear()

        self.layout.container.set_input_capture(self.input_main_commands)
        status = self.components.job_status
        self.layout.container.set_focus(status.primitive)

        def update() -> None:
            status.props.data = self.state.job_status
            status.render()
            self.draw()

        self.watcher.subscribe_to_job_status(job_id, update)
        update()

        self._add_to_history(self.state.selected_namespace, Topic.LOG, update)
        self.layout.container.set_input_capture(self.input_main_commands)

    def input_jobs(self, event: KeyEvent | None) -> KeyEvent | None:
        """Handle a key on the jobs screen."""
        event = self.input_main_commands(event)
        return self._input_jobs(event)

    def input_deployments(self, event: KeyEvent | None) -> KeyEvent | None:
        """Handle a key on the deployments screen."""
        return self.input_main_commands(event)

    def input_namespaces(self, event: KeyEvent | None) -> KeyEvent | None:
        """Handle a key on the namespaces screen."""
        return self.input_main_commands(event)

    def input_task_groups(self, event: KeyEvent | None) -> KeyEvent | None:
        """Handle a key on the task groups screen."""
        return self.input_main_commands(event)

    def input_allocations(self, event: KeyEvent | None) -> KeyEvent | None:
        """Handle a key on the allocations screen."""
        self.input_main_commands(event)
        return self._input_allocations(event)

    def input_main_commands(self, event: KeyEvent | None) -> KeyEvent | None:
        """Handle the keys that work on every screen."""
        if event is None:
            return None

        key = event.key
        if key is Key.CTRL_J:
            self.jobs()
        elif key is Key.CTRL_N:
            self.namespaces()
        elif key is Key.CTRL_D:
            self.deployments()
        elif key in (Key.CTRL_O, Key.ESC):
            self.go_back()
        elif key is Key.CTRL_P:
            if not self.layout.footer.has_focus():
                self.layout.container.set_focus(self.components.log_search.primitive)
                if not self.state.toggle.jump_to_job:
                    self._view_switch()
                    self.jump_to_job()
                    self.state.toggle.jump_to_job = True
                else:
                    self.layout.container.set_focus(self.components.jump_to_job.primitive)
        elif key is Key.RUNE and event.rune == "s":
            if not self.layout.footer.has_focus():
                self.layout.container.set_focus(self.state.elements.drop_down_namespace)

        return event

    def input_logs(self, event: KeyEvent | None) -> KeyEvent | None:
        """Handle a key on the logs screen."""
        if event is None:
            return None

        if event.key in (Key.ESC, Key.CTRL_O, Key.ENTER):
            if self.components.log_stream.primitive.has_focus():
                self.go_back()
                return None
        elif event.key is Key.RUNE and event.rune == "/":
            if not self.layout.footer.has_focus():
                if not self.state.toggle.log_search:
                    self.state.toggle.log_search = True
                    self.log_search()
                    return None
                self.layout.container.set_focus(self.components.log_search.primitive)

        return event

    def _input_jobs(self, event: KeyEvent | None) -> KeyEvent | None:
        if event is None:
            return None

        table = self.components.job_table
        if event.key is Key.CTRL_S:
            self.start_stop_job(table.get_id_for_selection())
        elif event.key is Key.RUNE:
            if event.rune in ("t", "i"):
                if self._typing():
                    return event
                job_id = table.get_id_for_selection()
                if event.rune == "t":
                    self.task_groups(job_id)
                else:
                    self.job_status(job_id)
            elif event.rune == "/":
                if not self.layout.footer.has_focus():
                    if not self.state.toggle.search:
                        self.state.toggle.search = True
                        self.search()
                    else:
                        self.layout.container.set_focus(self.components.search.primitive)
                    return None

        return event

    def _input_allocations(self, event: KeyEvent | None) -> KeyEvent | None:
        if event is None:
            return None

        table = self.components.allocation_table
        if event.key is Key.CTRL_E:
            row, column = table.get_selection()
            alloc_id = table.get_cell_content(row, column)
            alloc = find_allocation(self.state.allocations, alloc_id)
            if alloc is None:
                return None
            self.components.log_search.set_text("")
            self.logs(alloc.task_names, alloc_id, "stderr")
            return None
        if event.key is Key.RUNE and event.rune == "e":
            self.task_events(table.get_id_for_selection())

        return event

    def _typing(self) -> bool:
        return bool(
            self.layout.footer.has_focus() or self.components.search.primitive.has_focus()
        )

    def _open_footer_field(self, field: Any) -> None:
        self.layout.main_page.resize_item(self.layout.footer, 0, 1)
        field.render()
        self.layout.container.set_focus(field.primitive)

    def _close_footer_field(self, field: Any) -> None:
        self.layout.main_page.resize_item(self.layout.footer, 0, 0)
        self.layout.footer.remove_item(field.primitive)

    def _jump_to_job_done(self, key: Any) -> None:
        jump = self.components.jump_to_job
        self._close_footer_field(jump)
        self.layout.container.set_focus(self.state.elements.table_main)

        job_id = jump.get_text()
        if job_id:
            self.allocations(job_id)

        jump.set_text("")
        self.state.toggle.jump_to_job = False

    def _log_search_changed(self, text: str) -> None:
        self.state.filter.logs = text
        stream = self.components.log_stream
        stream.props.data = filter_logs(self.state.logs, text)
        stream.render()
        self.draw()

    def _log_search_done(self, key: Any) -> None:
        self._close_footer_field(self.components.log_search)
        self.layout.container.set_focus(self.components.log_stream.primitive)
        self.state.toggle.log_search = False

    def _search_done(self, key: Any) -> None:
        self._close_footer_field(self.components.search)
        self.layout.container.set_focus(self.state.elements.table_main)
        self.state.toggle.search = False

    def _select_allocation(self, alloc_id: str) -> None:
        alloc = find_allocation(self.state.allocations, alloc_id)
        if alloc is None:
            return
        self.components.log_search.set_text("")
        self.logs(alloc.task_names, alloc_id, "stdout")

    def _select_task_group(self, task_group_id: str) -> None:
        self._handle_info(
            "You selected TaskGroup: %s\n Sorry, selecting task groups isn't supported yet!",
            task_group_id,
        )

    def _error_done(self, button_index: int, button_label: str) -> None:
        if button_label == "Quit":
            self.layout.container.stop()
            return
        self._dismiss(self.components.error)

    def _modal_done(self, modal: Any) -> Callable[[int, str], None]:
        def done(button_index: int, button_label: str) -> None:
            self._dismiss(modal)

        return done

    def _dismiss(self, modal: Any) -> None:
        self.layout.pages.remove_page(modal.props.id)
        self.layout.container.set_focus(self.state.elements.table_main)
        self.go_back()

    def _add_to_history(self, namespace: str, topic: Topic, update: Callable[[], None]) -> None:
        def back() -> None:
            self.state.selected_namespace = namespace

            def selected(text: str, index: int) -> None:
                self.state.selected_namespace = text
                update()

            self.components.selections.namespace.set_selected_func(selected)

            index = namespace_index(namespace, self.state.namespaces)
            self.state.elements.drop_down_namespace.set_current_option(index)

        self._history.push(back)

    def _handle_no_resources(self, text: str, *args: Any) -> None:
        notice = NoResourcesNotice(text % args if args else text)
        self.layout.body.add_item(notice, 0, 1, False)

    def _show_modal(self, modal: Any, fmt: str, args: tuple[Any, ...]) -> None:
        modal.render(fmt % args if args else fmt)
        self.layout.container.set_focus(modal.primitive)

    def _handle_error(self, fmt: str, *args: Any) -> None:
        self._show_modal(self.components.failure, fmt, args)

    def _handle_info(self, fmt: str, *args: Any) -> None:
        self._show_modal(self.components.info, fmt, args)

    def _handle_fatal(self, fmt: str, *args: Any) -> None:
        self._show_modal(self.components.error, fmt, args)