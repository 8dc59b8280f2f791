"""Unit tests for SessionState."""

import pytest

from widgetbridge.config.schema import SessionConfig
from widgetbridge.rpc.state import SessionState


class TestSessionState:

    def test_from_config(self):
        state = SessionState.from_config(SessionConfig(account="0xabc", chain_id=10))
        assert state.account == "0xabc"
        assert state.chain_id == 10

    def test_set_chain_id(self):
        state = SessionState("0xabc", 1)
        state.set_chain_id(5)
        assert state.chain_id == 5
        assert state.account == "0xabc"

    @pytest.mark.parametrize("bad", [-1, "5", 1.0, None, True])
    def test_set_chain_id_rejects_invalid(self, bad):
        state = SessionState("0xabc", 1)
        with pytest.raises(ValueError):
            state.set_chain_id(bad)
        assert state.chain_id == 1

    def test_constructor_validates_chain_id(self):
        with pytest.raises(ValueError):
            SessionState("0xabc", -3)

    def test_snapshot_is_a_copy(self):
        state = SessionState("0xabc", 1)
        snap = state.snapshot()
        snap["chain_id"] = 99
        assert state.chain_id == 1
        assert state.snapshot() == {"account": "0xabc", "chain_id": 1}
