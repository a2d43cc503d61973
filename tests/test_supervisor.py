"""
Unit tests for launchwrap.core.process.supervisor.

Tests the ProcessSupervisor's signal handling, cleanup callbacks and
cancellation tokens.
"""

from __future__ import annotations

import signal
import threading
from unittest.mock import MagicMock, call, patch

import pytest

from launchwrap.core.process.supervisor import CancellationToken, ProcessSupervisor

# ===========================================================================
# CancellationToken
# ===========================================================================


def test_token_starts_uncancelled():
    """Test that a new token is not cancelled."""
    token = CancellationToken()
    assert token.cancelled is False
    assert token.wait(0) is False


def test_token_cancel():
    """Test that cancel() sets the token and releases waiters."""
    token = CancellationToken()
    token.cancel()
    assert token.cancelled is True
    assert token.wait(0) is True


def test_token_cancel_from_other_thread():
    """Test that a waiting thread observes cancellation from another thread."""
    token = CancellationToken()
    timer = threading.Timer(0.05, token.cancel)
    timer.start()
    try:
        assert token.wait(5) is True
    finally:
        timer.cancel()


# ===========================================================================
# Cleanup callbacks
# ===========================================================================


def test_supervisor_initialization():
    """Test that ProcessSupervisor initializes with correct default state."""
    supervisor = ProcessSupervisor()

    assert supervisor.cancelled is False
    assert supervisor._callbacks == []
    assert supervisor._original_handlers == {}


def test_cancel_runs_callbacks_in_order():
    """Test that cancel() runs registered callbacks in registration order."""
    supervisor = ProcessSupervisor()
    order = []
    supervisor.on_cancel(lambda: order.append(1))
    supervisor.on_cancel(lambda: order.append(2))

    supervisor.cancel()

    assert supervisor.cancelled is True
    assert order == [1, 2]


def test_cancel_is_idempotent():
    """Test that callbacks run only once across repeated cancel() calls."""
    supervisor = ProcessSupervisor()
    callback = MagicMock()
    supervisor.on_cancel(callback)

    supervisor.cancel()
    supervisor.cancel()

    callback.assert_called_once_with()


def test_callback_after_cancel_runs_immediately():
    """Test that a callback registered after cancellation runs at once."""
    supervisor = ProcessSupervisor()
    supervisor.cancel()
    callback = MagicMock()

    supervisor.on_cancel(callback)

    callback.assert_called_once_with()


def test_failing_callback_does_not_stop_others():
    """Test that an exception in one callback does not prevent the rest."""
    supervisor = ProcessSupervisor()
    second = MagicMock()
    supervisor.on_cancel(MagicMock(side_effect=RuntimeError("boom")))
    supervisor.on_cancel(second)

    supervisor.cancel()

    second.assert_called_once_with()


# ===========================================================================
# Signal handling
# ===========================================================================


def test_register_sets_signal_handlers():
    """Test that register() installs the handler for every supported signal."""
    supervisor = ProcessSupervisor()

    with patch("signal.signal") as mock_signal:
        mock_signal.return_value = signal.SIG_DFL
        supervisor.register()

    assert call(signal.SIGINT, supervisor._handle_signal) in mock_signal.call_args_list
    assert call(signal.SIGTERM, supervisor._handle_signal) in mock_signal.call_args_list
    assert supervisor._original_handlers[signal.SIGINT] == signal.SIG_DFL


def test_unregister_restores_original_handlers():
    """Test that unregister() restores the saved handlers."""
    supervisor = ProcessSupervisor()
    original = MagicMock()
    supervisor._original_handlers = {signal.SIGINT: original}

    with patch("signal.signal") as mock_signal:
        supervisor.unregister()

    mock_signal.assert_called_once_with(signal.SIGINT, original)
    assert supervisor._original_handlers == {}


def test_register_off_main_thread_is_noop():
    """Test that register() does nothing outside the main thread."""
    supervisor = ProcessSupervisor()

    with patch("signal.signal") as mock_signal:
        thread = threading.Thread(target=supervisor.register)
        thread.start()
        thread.join()

    mock_signal.assert_not_called()


def test_first_signal_cancels():
    """Test that the first signal cancels and runs cleanup."""
    supervisor = ProcessSupervisor()
    callback = MagicMock()
    supervisor.on_cancel(callback)

    supervisor._handle_signal(signal.SIGINT, None)

    assert supervisor.cancelled is True
    callback.assert_called_once_with()


def test_second_signal_force_exits():
    """Test that a second signal raises SystemExit(130)."""
    supervisor = ProcessSupervisor()
    supervisor._handle_signal(signal.SIGINT, None)

    with pytest.raises(SystemExit) as exc_info:
        supervisor._handle_signal(signal.SIGINT, None)

    assert exc_info.value.code == 130


def test_signal_while_registering_does_not_deadlock():
    """Test that a signal arriving inside on_cancel() defers cleanup instead of blocking."""
    supervisor = ProcessSupervisor()
    first = MagicMock()
    supervisor.on_cancel(first)
    seen = []

    class InterruptedList(list):
        # Delivers the signal while on_cancel() holds the lock
        def append(self, item):
            super().append(item)
            supervisor._handle_signal(signal.SIGINT, None)
            seen.append((supervisor.cancelled, first.called))

    supervisor._callbacks = InterruptedList(supervisor._callbacks)
    second = MagicMock()

    supervisor.on_cancel(second)

    assert seen == [(True, False)]
    first.assert_called_once_with()
    second.assert_called_once_with()


def test_second_signal_while_cleanup_is_deferred_force_exits():
    """Test that a second signal force exits even before deferred cleanup runs."""
    supervisor = ProcessSupervisor()

    with supervisor._lock:
        supervisor._handle_signal(signal.SIGINT, None)
        with pytest.raises(SystemExit) as exc_info:
            supervisor._handle_signal(signal.SIGINT, None)

    assert exc_info.value.code == 130
    assert supervisor._cancelled is False


def test_context_manager_registers_and_restores():
    """Test that the context manager installs and restores handlers."""
    before = signal.getsignal(signal.SIGINT)

    with ProcessSupervisor() as supervisor:
        assert signal.getsignal(signal.SIGINT) == supervisor._handle_signal

    assert signal.getsignal(signal.SIGINT) == before
