def test_ping_pong(client):
    with client.websocket_connect("/_blazor") as websocket:
        greeting = websocket.receive_json()
        websocket.send_json({"type": "ping"})
        reply = websocket.receive_json()

    assert greeting["type"] == "connected"
    assert reply == {"type": "pong"}


def test_malformed_frames_are_ignored(client, log_messages):
    with client.websocket_connect("/_blazor") as websocket:
        websocket.receive_json()
        websocket.send_text("hello")
        websocket.send_bytes(b"\x00\x01")
        websocket.send_json(["not", "a", "dict"])
        websocket.send_json({"type": "ping"})
        reply = websocket.receive_json()

    assert reply == {"type": "pong"}
    assert not [m for m in log_messages if m["level"] == "ERROR"]
    assert any("malformed frame" in m["message"] for m in log_messages)


def test_unknown_message_types_get_no_reply(client):
    with client.websocket_connect("/_blazor") as websocket:
        websocket.receive_json()
        websocket.send_json({"type": "render"})
        websocket.send_json({"type": "ping"})

        assert websocket.receive_json() == {"type": "pong"}
