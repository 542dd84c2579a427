"""Unit tests for the Socket.IO text packet codec."""

import json

import pytest

from src.chat.protocol import (
    CONNECT_FRAME,
    ENGINE_MESSAGE,
    ENGINE_OPEN,
    ENGINE_PING,
    PONG_FRAME,
    SOCKET_ACK,
    SOCKET_CONNECT,
    SOCKET_CONNECT_ERROR,
    SOCKET_EVENT,
    decode_packet,
    encode_event,
)
from src.core.error_handling import ProtocolError


class TestDecodePacket:
    """Test frame decoding."""

    def test_engine_open(self):
        packet = decode_packet('0{"sid":"abc","pingInterval":25000,"pingTimeout":20000}')
        assert packet.engine_type == ENGINE_OPEN
        assert packet.data["sid"] == "abc"

    def test_ping(self):
        packet = decode_packet("2")
        assert packet.engine_type == ENGINE_PING
        assert packet.data is None

    def test_namespace_connect(self):
        packet = decode_packet('40{"sid":"xyz"}')
        assert packet.engine_type == ENGINE_MESSAGE
        assert packet.socket_type == SOCKET_CONNECT
        assert packet.data == {"sid": "xyz"}

    def test_event(self):
        packet = decode_packet('42["newMessage",{"username":"alice","message":"gm"}]')
        assert packet.is_event
        assert packet.socket_type == SOCKET_EVENT
        assert packet.ack_id is None
        assert packet.event == "newMessage"
        assert packet.args == [{"username": "alice", "message": "gm"}]

    def test_ack_with_multi_digit_id(self):
        packet = decode_packet('4312[{"ok":true}]')
        assert packet.socket_type == SOCKET_ACK
        assert packet.ack_id == 12
        assert packet.event is None
        assert packet.args == [{"ok": True}]

    def test_namespace_prefix_is_skipped(self):
        packet = decode_packet('42/chat,7["userLeft",{"username":"bob"}]')
        assert packet.ack_id == 7
        assert packet.event == "userLeft"

    def test_connect_error(self):
        packet = decode_packet('44{"message":"Not authorized"}')
        assert packet.socket_type == SOCKET_CONNECT_ERROR
        assert packet.data == {"message": "Not authorized"}

    @pytest.mark.parametrize("frame", ["", "x", "4", "4x", '42["broken"', "45-1-[]"])
    def test_malformed_frames(self, frame):
        with pytest.raises(ProtocolError):
            decode_packet(frame)


class TestEncode:
    """Test frame encoding."""

    def test_event_without_ack(self):
        frame = encode_event("joinRoom", {"roomId": "R", "username": "mcp-client"})
        assert frame == '42["joinRoom",{"roomId":"R","username":"mcp-client"}]'

    def test_event_with_ack(self):
        frame = encode_event("getMessageHistory", {"roomId": "R", "before": None, "limit": 100}, ack_id=3)
        assert frame.startswith("423[")
        assert json.loads(frame[3:]) == [
            "getMessageHistory",
            {"roomId": "R", "before": None, "limit": 100},
        ]

    def test_encoded_event_decodes(self):
        packet = decode_packet(encode_event("sendMessage", {"message": "hi"}, ack_id=9))
        assert packet.ack_id == 9
        assert packet.event == "sendMessage"
        assert packet.args == [{"message": "hi"}]

    def test_fixed_frames(self):
        assert PONG_FRAME == "3"
        assert CONNECT_FRAME == "40"
