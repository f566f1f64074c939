# alameda

Scoped logging for long-running services, with a few small helpers.

## Installation

```
pip install .
```

To run the tests, install with the `test` extra and run pytest:

```
pip install ".[test]"
pytest
```

## Levels

`alameda.log.levels.Level` is an `IntEnum` with, from quietest to most
verbose, `NONE`, `FATAL`, `ERROR`, `WARN`, `INFO` and `DEBUG`. `str(level)`
gives the lower-case name. `string_to_level(name)` returns the level for a
name, ignoring case, and raises `ValueError` for an unknown name.

## Scopes

Logging is organised into *scopes* (`alameda.log.scope.Scope`). Each scope
has a `name`, a `description` and three settings of its own, plain
attributes that can be changed at any time:

- `output_level`: the most verbose level the scope writes (default `INFO`);
- `stack_trace_level`: the level from which a stack trace is added
  (default `NONE`);
- `log_callers`: whether the caller's `directory/file.py:line` goes into
  the output (default `False`).

```python
from alameda.log.scope import register_scope
from alameda.log.levels import Level

scope = register_scope("gRPC", "gRPC server log", 0)
scope.info("starting server")
scope.warnf("retrying %s", "connect")
scope.output_level = Level.DEBUG
scope.debuga("value:", 42)
scope.error("request failed", code=13)
```

`register_scope(name, description, caller_skip)` returns the scope already
registered under `name`, or registers a new one. A name containing `:`, `,`
or `.` raises `ValueError`. `find_scope(name)` returns the registered scope
or `None`, and `scopes()` returns a snapshot dict of all registered scopes.

Each level has four methods:

- `info(msg, **fields)` writes the message as given; keyword arguments are
  attached as extra fields;
- `infof(template, *args)` formats the template with `%`-style arguments
  (with no arguments the template is written unchanged);
- `infoa(*args)` joins its arguments, putting a space between two adjacent
  arguments when neither is a string;
- `info_enabled()` tells whether that level is currently written.

The same holds for `debug`, `warn`, `error` and `fatal`. Writing a `fatal`
message only logs it; it does not stop the process.

The `alameda.log.default` module has the same functions at module level.
They write through the scope named `default`
(`alameda.log.config.DEFAULT_SCOPE`), whose lines carry no scope name.

Where entries go is set by `install_writer(write, sync, error_sink)`, which
`configure` calls for you. `write` receives one dict per entry with the keys
`time`, `level`, `scope`, `caller`, `msg`, `stack` and `fields`. If `write`
raises, a line describing the failure goes to `error_sink`, and the logging
call itself does not raise.

## Configuring output

`alameda.log.options.default_options()` returns an `Options` dataclass with
the defaults: output to `stdout`, errors to `stderr`, the default scope at
`info`, no stack traces, no rotating file, and rotation limits of 100 MB per
file, 1000 backups and 30 days.

Per-scope levels are held in `output_levels` and `stack_trace_levels` as
strings of the form `scope:level,scope:level`; a bare `level` stands for the
default scope. `log_callers` is a comma-separated list of scope names. The
methods `set_output_level`, `get_output_level`, `set_stack_trace_level`,
`get_stack_trace_level`, `set_log_callers` and `get_log_callers` edit and
read these strings; the getters raise `ValueError` when no level is defined
for the scope or the entry is malformed. `convert_scoped_level(text)` splits
one entry into its scope name and `Level`.

```python
from alameda.log.options import default_options
from alameda.log.levels import Level
from alameda.log.config import configure, sync

options = default_options()
options.set_output_level("default", Level.DEBUG)
options.set_log_callers("default", True)
options.json_encoding = True
configure(options)
sync()
```

`alameda.log.config.configure(options)`:

- opens each path in `output_paths` and `error_output_paths` (`stdout` and
  `stderr` name the standard streams; anything else is a file opened for
  appending);
- if `rotate_output_path` is set, also writes to that file, renaming it to
  a timestamped backup once it would grow beyond `rotation_max_size`
  megabytes, and deleting backups beyond `rotation_max_backups` or older
  than `rotation_max_age` days (0 means no limit);
- applies the per-scope output levels, stack-trace levels and caller
  settings;
- routes records of the standard `logging` module through the same output,
  filtered by the default scope's output level.

It raises `OSError` when an output cannot be opened and `ValueError` when a
level string is malformed or names a scope that is not registered; the
previous set-up then stays in force. The package configures itself with the
defaults on import. `sync()` flushes buffered output.

Lines are tab-separated console text (`time`, `level`, scope, caller,
message, then the extra fields as JSON) or, with `json_encoding`, one JSON
object per line. Timestamps are UTC with microsecond precision, for example
`2017-01-01T01:01:01.000999Z`; `format_date(datetime)` gives this form and
treats a naive datetime as UTC.

`alameda.log.config.Config` is a small dataclass of logging settings as they
would appear in a configuration file (`set_log_callers`, `stack_trace_level`,
`output_level`).

### Command-line arguments

The options can be exposed on a command line through `argparse`:

```python
import argparse

parser = argparse.ArgumentParser()
options = default_options()
options.attach_arguments(parser)
options.update_from_namespace(parser.parse_args())
```

This adds `--log_target` (repeatable), `--log_rotate`,
`--log_rotate_max_age`, `--log_rotate_max_size`, `--log_rotate_max_backups`,
`--log_as_json`, `--log_output_level`, `--log_stacktrace_level` and
`--log_caller`. Only arguments given on the command line change the options.

## Utilities

- `alameda.utils.replace_keys(mapping, old, new)` renames keys of a mapping
  in place, `old[i]` becoming `new[i]`, skipping absent keys, and returns
  the mapping. It raises `ValueError` if `new` is shorter than `old`.
- `alameda.utils.namespaced_name_key(namespace, name)` returns
  `"namespace/name"`.
- `alameda.env.get_datahub_address()` and
  `alameda.env.get_ai_service_address()` read `ALAMEDA_DATAHUB_ADDRESS` and
  `ALAMEDA_AI_SERVER_ADDRESS`. When a variable is unset or empty, they return
  `datahub.alameda.svc.cluster.local:50050` and
  `alameda-ai.alameda.svc.cluster.local:50051` respectively.

## What this package does not do

It is a library only. It has no command to run, starts no server, and does
not talk to a cluster, a metrics database or the services whose addresses
`alameda.env` returns; it only reports those addresses.