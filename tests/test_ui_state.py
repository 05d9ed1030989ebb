"""
Tests for UI state

Unit tests for UiState, StateHolder and the shared error-message helpers.
"""

import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from data.models import ApiResponse
from services.ui_state import Phase, StateHolder, UiState, failure_message, response_message
from utils.exceptions import GatewayError, TransportError


class TestUiState:
    """Tests for the UiState constructors and predicates."""

    def test_constructors(self):
        assert UiState.idle().is_idle
        assert UiState.loading().is_loading
        assert UiState.error('x').is_error
        assert UiState.deleted().phase is Phase.DELETED

    def test_success_payload(self):
        state = UiState.success(data=[1, 2], message='done')
        assert state.is_success
        assert state.data == [1, 2]
        assert state.message == 'done'


class TestStateHolder:
    """Tests for publish/subscribe."""

    def test_subscribers_notified_in_order(self):
        holder = StateHolder(UiState.idle())
        seen = []
        holder.subscribe(lambda s: seen.append(('a', s.phase)))
        holder.subscribe(lambda s: seen.append(('b', s.phase)))

        holder.set(UiState.loading())

        assert seen == [('a', Phase.LOADING), ('b', Phase.LOADING)]
        assert holder.value.is_loading

    def test_unsubscribe(self):
        holder = StateHolder(0)
        seen = []
        unsubscribe = holder.subscribe(seen.append)

        holder.set(1)
        unsubscribe()
        unsubscribe()
        holder.set(2)

        assert seen == [1]

    def test_failing_subscriber_does_not_block_others(self, capture_logs):
        holder = StateHolder(0)
        seen = []

        def broken(value):
            raise RuntimeError("listener bug")

        holder.subscribe(broken)
        holder.subscribe(seen.append)

        holder.set(5)

        assert seen == [5]
        assert any('listener bug' in r.getMessage() for r in capture_logs)


class TestMessages:
    """Tests for failure_message() and response_message()."""

    def test_transport_error(self):
        assert failure_message(TransportError('refused'), 'Failed') == 'No internet connection'

    def test_gateway_error(self):
        assert failure_message(GatewayError('HTTP 502', 502), 'Failed') == 'Failed (HTTP 502)'

    def test_unexpected_error(self):
        assert failure_message(KeyError('x'), 'Failed') == "Unexpected error: 'x'"

    def test_unexpected_error_without_text(self):
        assert failure_message(RuntimeError(), 'Failed') == 'Unexpected error: RuntimeError'

    def test_response_message(self):
        assert response_message(ApiResponse(status=False, message='Nope'), 'Failed') == 'Nope'
        assert response_message(ApiResponse(status=False), 'Failed') == 'Failed'
