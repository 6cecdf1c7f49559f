import threading
import time

from mbase import current_thread


def test_tid_matches_native_id():
    assert current_thread.tid() == threading.get_native_id()


def test_tid_string_layout():
    text = current_thread.tid_string()
    assert text.endswith(" ")
    assert len(text) >= 6
    assert text.strip() == str(current_thread.tid())


def test_main_thread_name_and_identity():
    assert current_thread.name() == "main"
    assert current_thread.is_main_thread() is True


def test_other_thread_name_and_tid():
    results = {}

    def worker():
        results["before"] = current_thread.name()
        current_thread.set_name("worker-1")
        results["after"] = current_thread.name()
        results["tid"] = current_thread.tid()
        results["main"] = current_thread.is_main_thread()

    t = threading.Thread(target=worker)
    t.start()
    t.join()
    assert results["before"] == "unknown"
    assert results["after"] == "worker-1"
    assert results["tid"] != current_thread.tid()
    assert results["main"] is False
    assert current_thread.name() == "main"


def test_sleep_usec_waits():
    start = time.monotonic()
    result = current_thread.sleep_usec(20000)
    elapsed = time.monotonic() - start
    assert result is None
    assert elapsed >= 0.019


def test_stack_trace_contains_caller():
    trace = current_thread.stack_trace(False)
    assert "test_stack_trace_contains_caller" in trace
    assert "in stack_trace" not in trace


def test_stack_trace_demangled_has_source_lines():
    trace = current_thread.stack_trace(True)
    assert "current_thread.stack_trace(True)" in trace