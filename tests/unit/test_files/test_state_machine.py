"""Unit tests for the config file state machine."""

import pytest

from confnode.files import ConfigState, ConfigStateError
from confnode.files.state_machine import ConfigStateMachine


class TestConfigStateMachine:
    """Tests for ConfigStateMachine."""

    @pytest.mark.unit
    def test_initial_state(self) -> None:
        """New machines start UNLOADED."""
        machine = ConfigStateMachine()

        assert machine.state == ConfigState.UNLOADED
        assert not machine.is_ready()
        assert not machine.is_failed()

    @pytest.mark.unit
    def test_load_cycle(self) -> None:
        """UNLOADED -> LOADING -> READY -> LOADING is valid."""
        machine = ConfigStateMachine()

        machine.transition(ConfigState.LOADING)
        machine.transition(ConfigState.READY)
        assert machine.is_ready()
        machine.transition(ConfigState.LOADING)

        assert machine.state == ConfigState.LOADING

    @pytest.mark.unit
    def test_retry_after_failure(self) -> None:
        """FAILED -> LOADING is allowed."""
        machine = ConfigStateMachine()
        machine.transition(ConfigState.LOADING)
        machine.transition(ConfigState.FAILED)

        assert machine.is_failed()
        machine.transition(ConfigState.LOADING)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("path", "target"),
        [
            ([], ConfigState.READY),
            ([ConfigState.LOADING], ConfigState.LOADING),
            ([ConfigState.LOADING, ConfigState.FAILED], ConfigState.READY),
            ([ConfigState.LOADING, ConfigState.READY], ConfigState.READY),
        ],
    )
    def test_invalid_transitions(
        self, path: list[ConfigState], target: ConfigState
    ) -> None:
        """Invalid transitions raise ConfigStateError."""
        machine = ConfigStateMachine()
        for state in path:
            machine.transition(state)

        assert not machine.can_transition(target)
        with pytest.raises(ConfigStateError) as exc_info:
            machine.transition(target)

        assert exc_info.value.to_state == target
        assert "Invalid state transition" in str(exc_info.value)

    @pytest.mark.unit
    def test_require(self) -> None:
        """require raises unless the state matches."""
        machine = ConfigStateMachine()

        with pytest.raises(ConfigStateError):
            machine.require(ConfigState.READY)
        machine.require(ConfigState.UNLOADED)
