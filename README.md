# damon

The core of a terminal dashboard for a Nomad cluster. It keeps the cluster
data in one central state and keeps that state fresh. It tells the screen
that is showing when its data has changed. It also decides what each screen
shows and how keys move between screens.

## Installation

```
pip install .
```

To run the tests, install the test extra with `pip install .[test]` and run `pytest`.

## Modules

- `damon.state`: the central `State`. It holds jobs, allocations,
  deployments, namespaces, task groups, log bytes and the job status. It also
  holds the current `Filter`, `Toggle` and `Elements`. The records are plain
  dataclasses: `Job`, `Alloc`, `Task`, `TaskEvent`, `Deployment`, `Namespace`,
  `TaskGroup` and `JobStatus`.
- `damon.watcher`: `Watcher` reads from a Nomad client object that you
  supply.
  - `watch()` loads jobs, deployments and allocations. It then follows the
    client's event stream and reloads on each event. It blocks until the
    stream ends.
  - `subscribe_to_namespaces()` polls namespaces at the watcher's interval.
  - `subscribe_to_task_groups()` and `subscribe_to_job_status()` poll every
    `Watcher.poll_interval` seconds. The default is 2.
  - `subscribe_to_logs()` appends streamed log frames to `State.logs`.
  - There is one current subscriber. It is notified only for the `Topic`
    values it subscribed to.
  - Client errors are passed to the handler registered for `Handler.ERROR`.
    A failed or closed event stream goes to `Handler.FATAL`.
- `damon.activity`: `ActivityPool` holds the stop signals (`threading.Event`)
  of the background pollers. Every new subscription stops all of them.
- `damon.refresher`: `Refresher(interval)` calls a function once at once.
  It then calls it again every `interval` seconds until a later `refresh()`
  replaces it. An interval of 0 means 2 seconds.
- `damon.filters`: regular-expression filters.
  - `filter_jobs`, `filter_allocations`, `filter_deployments` and
    `filter_namespaces` filter the records of each kind.
  - `filter_logs` keeps the matching log lines and adds colour tags around
    the first match in each line.
  - Smaller helpers: `namespace_index`, `reverse_events` and
    `find_allocation`.
- `damon.history`: `History` is a bounded stack of back-navigation callbacks.
  Its default size is 10. `pop()` calls the second-newest entry and then
  drops the two newest.
- `damon.screens` and `damon.view`: `View` (with `ScreensMixin`) switches
  between the jobs, allocations, deployments, namespaces, task groups, task
  events, job status and log screens. It handles key presses given as
  `KeyEvent(Key..., rune)` and keeps the back history.
- `damon.styles`: colour hex values, markup tags, `hex_to_rgb()` and
  `get_background_color()`.
- `damon.version`: `get_human_version()` builds the version string for
  display. With the defaults it returns `v0.1.0-dev`.

## Examples

Following the cluster:

```python
from damon.state import State
from damon.watcher import Handler, Topic, Watcher

state = State()
watcher = Watcher(state, nomad_client, 2.0)
watcher.subscribe_handler(Handler.ERROR, lambda msg, *args: print(msg % args if args else msg))
watcher.subscribe(lambda: print(len(state.jobs), "jobs"), Topic.JOB)
watcher.watch()  # blocks; run it in a thread
```

`nomad_client` is your own object. It must provide these methods:

- `jobs(options)`, `deployments(options)`, `allocations(options)` and
  `namespaces(options)`
- `task_groups(job_id, options)` and `job_status(job_id, options)`
- `logs(alloc_id, task_name, log_type, cancel)`: returns a `queue.Queue` of
  `StreamFrame` objects or exceptions
- `stream(topics, index)`: returns an iterable of `Events`

Each method raises an exception on failure.

Filtering log text:

```python
from damon.filters import filter_logs

filter_logs(b"hello\nworld", "wor")
# b"[#cccccc][#baff26]wor[#cccccc]ld\n"
```

## What it does not do

The package has no Nomad HTTP client. You pass in the object that talks to
the cluster. It has no terminal widgets, no screen layout and no application
loop either. `View` drives components and a layout object that you supply.
There is no command to start a dashboard.