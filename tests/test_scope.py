import io

import pytest

from alameda.log.levels import Level
from alameda.log.scope import (
    Scope,
    find_scope,
    install_writer,
    register_scope,
    scopes,
)


@pytest.fixture
def captured():
    entries = []
    install_writer(entries.append, lambda: None, None)
    yield entries
    install_writer(None, None, None)


@pytest.fixture
def named_scope():
    s = register_scope("testScope", "z", 0)
    s.output_level = Level.DEBUG
    s.stack_trace_level = Level.NONE
    s.log_callers = False
    yield s
    s.output_level = Level.INFO
    s.stack_trace_level = Level.NONE
    s.log_callers = False


BASIC_CASES = [
    ("debug", ("Hello",), Level.DEBUG),
    ("debugf", ("Hello",), Level.DEBUG),
    ("debugf", ("%s", "Hello"), Level.DEBUG),
    ("debuga", ("Hello",), Level.DEBUG),
    ("info", ("Hello",), Level.INFO),
    ("infof", ("Hello",), Level.INFO),
    ("infof", ("%s", "Hello"), Level.INFO),
    ("infoa", ("Hello",), Level.INFO),
    ("warn", ("Hello",), Level.WARN),
    ("warnf", ("Hello",), Level.WARN),
    ("warnf", ("%s", "Hello"), Level.WARN),
    ("warna", ("Hello",), Level.WARN),
    ("error", ("Hello",), Level.ERROR),
    ("errorf", ("Hello",), Level.ERROR),
    ("errorf", ("%s", "Hello"), Level.ERROR),
    ("errora", ("Hello",), Level.ERROR),
    ("fatal", ("Hello",), Level.FATAL),
    ("fatalf", ("Hello",), Level.FATAL),
    ("fatalf", ("%s", "Hello"), Level.FATAL),
    ("fatala", ("Hello",), Level.FATAL),
]


@pytest.mark.parametrize("method, args, level", BASIC_CASES)
def test_basic_scopes(captured, named_scope, method, args, level):
    getattr(named_scope, method)(*args)
    assert len(captured) == 1
    entry = captured[0]
    assert entry["level"] is level
    assert entry["scope"] == "testScope"
    assert entry["msg"] == "Hello"
    assert entry["caller"] is None
    assert entry["stack"] is None


def test_caller_is_reported(captured, named_scope):
    named_scope.log_callers = True
    named_scope.debug("Hello")
    caller = captured[0]["caller"]
    location, _, line = caller.rpartition(":")
    assert location.endswith("test_scope.py")
    assert int(line) > 0


@pytest.mark.parametrize("method", ["debug", "info", "warn", "error", "fatal"])
def test_stack_and_caller_with_debug_stack_level(captured, named_scope, method):
    named_scope.log_callers = True
    named_scope.stack_trace_level = Level.DEBUG
    getattr(named_scope, method)("Hello")
    entry = captured[0]
    assert entry["msg"] == "Hello"
    assert "test_scope.py" in entry["caller"]
    assert "test_scope.py" in entry["stack"]


def test_lower_levels_use_error_threshold_for_stack(captured, named_scope):
    named_scope.stack_trace_level = Level.ERROR
    named_scope.debug("Hello")
    assert captured[0]["stack"] is not None and "test_scope.py" in captured[0]["stack"]

    named_scope.stack_trace_level = Level.FATAL
    named_scope.warn("Hello")
    assert captured[1]["stack"] is None
    named_scope.fatal("Hello")
    assert "test_scope.py" in captured[2]["stack"]


def test_fields_are_passed(captured, named_scope):
    named_scope.info("x", key="v", count=3)
    assert captured[0]["fields"] == {"key": "v", "count": 3}


def test_sprint_spacing(captured, named_scope):
    named_scope.infoa("a", 1, 2, "b")
    assert captured[0]["msg"] == "a1 2b"


def test_nothing_written_when_level_too_low(captured, named_scope):
    named_scope.output_level = Level.NONE
    named_scope.fatal("Hello")
    named_scope.error("Hello")
    named_scope.debugf("%s", "Hello")
    assert captured == []


def test_default_scope_emits_empty_scope_name(captured):
    s = register_scope("default", "Unscoped logging messages.", 0)
    previous = s.output_level
    try:
        s.output_level = Level.INFO
        s.info("Hello")
    finally:
        s.output_level = previous
    assert captured[0]["scope"] == ""


@pytest.mark.parametrize(
    "level, debug, info, warn, error, fatal",
    [
        (Level.NONE, False, False, False, False, False),
        (Level.FATAL, False, False, False, False, True),
        (Level.ERROR, False, False, False, True, True),
        (Level.WARN, False, False, True, True, True),
        (Level.INFO, False, True, True, True, True),
        (Level.DEBUG, True, True, True, True, True),
    ],
)
def test_scope_enabled(level, debug, info, warn, error, fatal):
    s = register_scope("TestEnabled", "Desc", 0)
    assert s.name == "TestEnabled"
    assert s.description == "Desc"
    s.output_level = level
    assert s.debug_enabled() is debug
    assert s.info_enabled() is info
    assert s.warn_enabled() is warn
    assert s.error_enabled() is error
    assert s.fatal_enabled() is fatal
    assert s.output_level is level


def test_new_scope_defaults():
    s = register_scope("FreshDefaults", "", 0)
    assert s.output_level is Level.INFO
    assert s.stack_trace_level is Level.NONE
    assert s.log_callers is False


def test_multiple_scopes_with_same_name():
    z1 = register_scope("zzzz", "z", 0)
    z2 = register_scope("zzzz", "z", 0)
    assert z1 is z2


def test_find():
    assert find_scope("TestFind") is None
    registered = register_scope("TestFind", "", 0)
    assert find_scope("TestFind") is registered


def test_scopes_snapshot():
    registered = register_scope("SnapshotScope", "", 0)
    snapshot = scopes()
    assert snapshot["SnapshotScope"] is registered
    snapshot.pop("SnapshotScope")
    assert scopes()["SnapshotScope"] is registered


@pytest.mark.parametrize("name", ["a:b", "a,b", "a.b"])
def test_bad_names(name):
    with pytest.raises(ValueError):
        register_scope(name, "", 0)
    assert find_scope(name) is None


def test_bad_writer():
    sink = io.StringIO()

    def failing(entry):
        raise RuntimeError("bad")

    install_writer(failing, lambda: None, sink)
    try:
        s = register_scope("BadWriterScope", "", 0)
        s.error("TestBadWriter")
    finally:
        install_writer(None, None, None)
    assert "log write error: bad" in sink.getvalue()


def test_scope_constructed_directly_uses_defaults(captured):
    s = Scope("direct", "d")
    s.info("Hello")
    assert captured[0]["scope"] == "direct"
    assert find_scope("direct") is None