"""Tests for inbound payload decoding at the protocol boundary."""

import pytest

from wrapsync.models.enums import ChatMode
from wrapsync.protocol.payloads import (
    PayloadError,
    decode_appearance,
    decode_chat,
    decode_join,
    decode_name,
    decode_state,
)


class TestJoinPayload:

    def test_missing_payload_means_no_overrides(self):
        join = decode_join(None)
        assert join.color is None
        assert join.wrapTexture is None
        assert join.displayName is None

    def test_known_fields_kept_and_extras_ignored(self):
        join = decode_join({
            "color": "#00ff00",
            "wrapTexture": None,
            "displayName": "  Drifter  ",
            "position": {"x": 100, "y": 100, "z": 100},
        })
        assert join.color == "#00ff00"
        assert join.displayName == "Drifter"
        assert not hasattr(join, "position")

    def test_blank_display_name_becomes_none(self):
        assert decode_join({"displayName": "   "}).displayName is None

    def test_wrong_typed_field_is_discarded_alone(self):
        join = decode_join({"color": 5, "wrapTexture": "https://cdn/wraps/flames.png", "displayName": ["x"]})
        assert join.color is None
        assert join.displayName is None
        assert join.wrapTexture == "https://cdn/wraps/flames.png"

    @pytest.mark.parametrize("payload", ["hello", 42, ["a"]])
    def test_malformed_join_raises(self, payload):
        with pytest.raises(PayloadError):
            decode_join(payload)


class TestStatePayload:

    def test_vectors_are_passed_through(self):
        state = decode_state({
            "position": {"x": 1, "y": 2, "z": 3},
            "rotation": {"x": 0, "y": 0, "z": 0, "w": 1},
            "velocity": {"x": 0, "y": 0, "z": 0, "spin": "ignored-by-server"},
        })
        assert state.position == {"x": 1, "y": 2, "z": 3}
        assert state.velocity["spin"] == "ignored-by-server"

    @pytest.mark.parametrize("payload", [
        None,
        {"position": {"x": 0, "y": 0, "z": 0}},
        {"position": [0, 0, 0], "rotation": {}, "velocity": {}},
    ])
    def test_incomplete_state_raises(self, payload):
        with pytest.raises(PayloadError):
            decode_state(payload)


class TestAppearancePayload:

    def test_missing_fields_become_none(self):
        appearance = decode_appearance({"color": "#ffffff"})
        assert appearance.color == "#ffffff"
        assert appearance.wrapTexture is None

    def test_non_object_raises(self):
        with pytest.raises(PayloadError):
            decode_appearance("#ffffff")


class TestNamePayload:

    def test_name_is_trimmed(self):
        assert decode_name("  Ghost Rider ") == "Ghost Rider"

    def test_blank_name_clears(self):
        assert decode_name("   ") is None

    def test_non_string_raises(self):
        with pytest.raises(PayloadError):
            decode_name({"name": "x"})


class TestChatPayload:

    def test_bare_string_is_broadcast(self):
        intent = decode_chat("gg")
        assert intent.mode == ChatMode.BROADCAST
        assert intent.text == "gg"
        assert intent.to is None
        assert not intent.is_directed

    @pytest.mark.parametrize("text", ["   ", "", "  spaced out  "])
    def test_bare_string_is_relayed_verbatim(self, text):
        intent = decode_chat(text)
        assert intent.mode == ChatMode.BROADCAST
        assert intent.text == text

    def test_directed_target_is_not_rewritten(self):
        assert decode_chat({"to": " peer42", "text": "hi"}).to == " peer42"

    def test_object_is_directed(self):
        intent = decode_chat({"to": "peer42", "text": " nice wrap! "})
        assert intent.mode == ChatMode.DIRECTED
        assert intent.is_directed
        assert intent.to == "peer42"
        assert intent.text == " nice wrap! "

    @pytest.mark.parametrize("payload", [
        {"to": "peer42", "text": "   "},
        {"to": "peer42"},
        {"text": "hi"},
        {"to": "", "text": "hi"},
        {"to": "peer42", "text": 7},
        None,
        12,
    ])
    def test_invalid_chat_raises(self, payload):
        with pytest.raises(PayloadError):
            decode_chat(payload)
