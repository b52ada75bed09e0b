import threading
import time
from types import SimpleNamespace
from unittest.mock import ANY, MagicMock

import pytest

from damon import styles
from damon.state import Alloc, Namespace, State
from damon.view import Key, KeyEvent, NoResourcesNotice, View
from damon.watcher import Handler, Topic


@pytest.fixture
def view():
    components = MagicMock()
    layout = MagicMock()
    layout.footer.has_focus.return_value = False
    components.search.primitive.has_focus.return_value = False
    components.log_stream.primitive.has_focus.return_value = False
    watcher = MagicMock()
    client = MagicMock()
    state = State()
    state.elements.drop_down_namespace = MagicMock()
    return View(components, watcher, client, state, layout)


def test_main_commands_none_event(view):
    assert view.input_main_commands(None) is None


def test_ctrl_j_shows_jobs(view):
    event = KeyEvent(Key.CTRL_J)
    assert view.input_main_commands(event) is event
    view.watcher.subscribe.assert_called_with(ANY, Topic.JOB, Topic.ALLOCATION)


def test_ctrl_n_shows_namespaces(view):
    view.input_main_commands(KeyEvent(Key.CTRL_N))
    assert view.watcher.subscribe_to_namespaces.call_count == 1


def test_go_back_restores_namespace(view):
    view.state.namespaces = [Namespace(name="default"), Namespace(name="prod")]
    view.state.selected_namespace = "prod"
    view.jobs()
    view.state.selected_namespace = "default"
    view.deployments()
    view.input_main_commands(KeyEvent(Key.ESC))
    assert view.state.selected_namespace == "prod"
    view.state.elements.drop_down_namespace.set_current_option.assert_called_with(1)


def test_go_back_without_history_does_nothing(view):
    view.go_back()
    assert view.state.elements.drop_down_namespace.set_current_option.call_count == 0


def test_slash_opens_search_in_jobs(view):
    result = view.input_jobs(KeyEvent(Key.RUNE, "/"))
    assert result is None
    assert view.state.toggle.search is True
    view.layout.main_page.resize_item.assert_called_with(view.layout.footer, 0, 1)


def test_ctrl_p_opens_jump_to_job(view):
    view.state.jobs = []
    view.input_main_commands(KeyEvent(Key.CTRL_P))
    assert view.state.toggle.jump_to_job is True
    assert view.components.jump_to_job.props.jobs is view.state.jobs
    view.layout.container.set_focus.assert_called_with(view.components.jump_to_job.primitive)


def test_input_logs_escape_goes_back(view):
    view.components.log_stream.primitive.has_focus.return_value = True
    assert view.input_logs(KeyEvent(Key.ESC)) is None


def test_input_logs_slash_toggles_search(view):
    slash = KeyEvent(Key.RUNE, "/")
    assert view.input_logs(slash) is None
    assert view.state.toggle.log_search is True
    assert view.input_logs(slash) is slash
    view.layout.container.set_focus.assert_called_with(view.components.log_search.primitive)


def test_ctrl_e_streams_stderr(view):
    view.state.allocations = [Alloc(id="a1", task_names=["web"])]
    table = view.components.allocation_table
    table.get_selection.return_value = (1, 0)
    table.get_cell_content.return_value = "a1"
    assert view.input_allocations(KeyEvent(Key.CTRL_E)) is None
    view.watcher.subscribe_to_logs.assert_called_with("a1", "web", "stderr", ANY)


def test_ctrl_e_unknown_allocation(view):
    table = view.components.allocation_table
    table.get_selection.return_value = (1, 0)
    table.get_cell_content.return_value = "missing"
    assert view.input_allocations(KeyEvent(Key.CTRL_E)) is None
    assert view.watcher.subscribe_to_logs.call_count == 0


def test_job_status_shows_state(view):
    view.job_status("job1")
    view.watcher.subscribe_to_job_status.assert_called_with("job1", ANY)
    assert view.components.job_status.props.data is view.state.job_status


def test_ctrl_s_asks_to_start_dead_job(view):
    view.client.get_job.return_value = SimpleNamespace(status="dead")
    view.components.job_table.get_id_for_selection.return_value = "job1"
    view.input_jobs(KeyEvent(Key.CTRL_S))
    view.client.get_job.assert_called_with("job1")
    view.components.confirm.render.assert_called_with("Do you really want to start the job?")


def test_draw_requests_are_merged_and_drawn(view):
    view.draw()
    view.draw()
    stop = threading.Event()
    worker = threading.Thread(target=view.draw_loop, args=(stop,))
    worker.start()
    deadline = time.monotonic() + 5
    while view.layout.container.draw.call_count == 0 and time.monotonic() < deadline:
        time.sleep(0.01)
    stop.set()
    worker.join(timeout=5)
    assert not worker.is_alive()
    assert view.layout.container.draw.call_count == 1


def test_init_wires_components(view):
    view.state.nomad_address = "http://localhost:4646"
    view.init("v0.1.0")
    expected = (
        f"{styles.HIGHLIGHT_SECONDARY_TAG}Address{styles.STANDARD_COLOR_TAG}: "
        f"http://localhost:4646\n"
        f"{styles.HIGHLIGHT_SECONDARY_TAG}Version:{styles.STANDARD_COLOR_TAG} v0.1.0"
    )
    assert view.components.cluster_info.props.info == expected
    view.watcher.subscribe_handler.assert_any_call(Handler.ERROR, ANY)
    view.watcher.subscribe_handler.assert_any_call(Handler.FATAL, ANY)


def test_init_handle_no_resources(view):
    view.init("v0.1.0")
    view.components.job_table.props.handle_no_resources("no %s", "jobs")
    view.layout.body.add_item.assert_called_with(NoResourcesNotice("no jobs"), 0, 1, False)


def test_error_quit_stops_application(view):
    view.init("v0.1.0")
    view.components.error.props.done(0, "Quit")
    assert view.layout.container.stop.call_count == 1


def test_selecting_task_group_shows_info(view):
    view.init("v0.1.0")
    view.components.task_group_table.props.select_task_group("tg1")
    message = view.components.info.render.call_args.args[0]
    assert "tg1" in message


def test_jump_to_job_done_opens_allocations(view):
    view.init("v0.1.0")
    view.state.toggle.jump_to_job = True
    view.components.jump_to_job.get_text.return_value = "job1"
    view.components.jump_to_job.props.done_func(None)
    assert view.components.allocation_table.props.job_id == "job1"
    assert view.state.toggle.jump_to_job is False