def _data(resp, status=200):
    assert resp.status_code == status, resp.get_json()
    body = resp.get_json()
    assert body["success"] is True
    assert body["error"] is None
    return body["data"]


def _error(resp, status):
    assert resp.status_code == status
    body = resp.get_json()
    assert body["success"] is False
    assert body["data"] is None
    return body["error"]


def _confirm_one(client, symbol=5):
    state = _data(client.post("/api/tickets/symbols", json={"symbol": symbol}))["state"]
    ticket_id = state["active_ticket_id"]
    return _data(client.post(f"/api/tickets/{ticket_id}/confirm")), ticket_id


def test_health(client):
    data = _data(client.get("/health"))
    assert data == {"status": "ok", "phase": "SELECTING", "round_no": 0}


def test_initial_state(client):
    state = _data(client.get("/api/game"))

    assert state["phase"] == "SELECTING"
    assert state["balance"] == "100.00"
    assert state["prize"] == "0.00"
    assert state["stake"]["label"] == "£1.00"
    assert state["stake"]["cap"] == "10.00"
    assert state["stake"]["limit_status"] == "OK"
    assert state["stake"]["limit_message"] is None
    assert len(state["stake"]["stakes"]) == 6
    assert state["draw"]["revealed_count"] == 0
    assert state["draw"]["next_step_in"] is None
    assert state["bonus_game"] is None
    assert state["last_round"] is None

    (ticket,) = state["tickets"]
    assert ticket["picks"] == []
    assert ticket["state"] == "DRAFT"
    assert ticket["stake"] is None


def test_select_and_confirm_ticket(client):
    result, ticket_id = _confirm_one(client, symbol=5)

    assert result["accepted"] is True
    draft, confirmed = result["state"]["tickets"]
    assert draft["picks"] == []
    assert confirmed["id"] == ticket_id
    assert confirmed["picks"] == [5]
    assert confirmed["glyphs"] == ["🐄"]
    assert confirmed["state"] == "CONFIRMED"
    assert confirmed["stake"] == "1.00"
    assert confirmed["stake_label"] == "£1.00"
    assert result["state"]["phase"] == "ARMED"


def test_rule_violations_are_reported_not_raised(client):
    client.post("/api/tickets/symbols", json={"symbol": 3})
    result = _data(client.post("/api/tickets/symbols", json={"symbol": 3}))

    assert result["accepted"] is False
    assert result["reason"] == "duplicate_symbol"
    assert result["state"]["tickets"][0]["picks"] == [3]


def test_bad_payloads_are_validation_errors(client):
    error = _error(client.post("/api/tickets/symbols", json={"symbol": 30}), 400)
    assert error["code"] == "validation_error"
    assert "symbol" in error["details"]

    error = _error(client.post("/api/tickets/symbols", json={}), 400)
    assert "symbol" in error["details"]

    assert _error(client.put("/api/stake", json={}), 400)["code"] == "validation_error"
    assert _error(client.put("/api/stake", json={"index": 9}), 400)["code"] == "validation_error"
    assert _error(client.post("/api/bonus/picks", json={"cell": 25}), 400)["code"] == "validation_error"
    assert _error(client.get("/api/events?since=abc"), 400)["code"] == "validation_error"


def test_unknown_ticket_and_routes(client):
    assert _error(client.post("/api/tickets/99/confirm"), 404)["code"] == "not_found"
    assert _error(client.get("/api/nothing-here"), 404)["code"] == "not_found"
    assert _error(client.get("/api/round/start"), 405)["code"] == "method_not_allowed"


def test_stake_selection(client):
    state = _data(client.put("/api/stake", json={"index": 3}))["state"]
    assert state["stake"]["label"] == "50p"
    assert state["stake"]["selected"] == "0.50"

    state = _data(client.put("/api/stake", json={"step": 1}))["state"]
    assert state["stake"]["selected_index"] == 4

    state = _data(client.put("/api/stake", json={"step": -1}))["state"]
    assert state["stake"]["selected_index"] == 3


def test_stake_limit_advisory(client):
    client.put("/api/stake", json={"index": 5})
    for symbol in range(5):
        _confirm_one(client, symbol=symbol)

    state = _data(client.get("/api/game"))
    assert state["stake"]["confirmed_total"] == "10.00"
    assert state["stake"]["limit_status"] == "REACHED"
    assert state["stake"]["limit_message"] == "Stake limit of £10 reached."

    result, ticket_id = _confirm_one(client, symbol=10)
    assert result["accepted"] is False
    assert result["reason"] == "stake_limit_exceeded"
    assert result["advisory"] == "Stake limit of £10 reached."


def test_ticket_editing_endpoints(client):
    _, confirmed_id = _confirm_one(client, symbol=1)
    state = _data(client.post("/api/tickets/symbols", json={"symbol": 2}))["state"]
    draft_id = state["active_ticket_id"]

    state = _data(client.post(f"/api/tickets/{draft_id}/cancel"))["state"]
    assert state["tickets"][0]["picks"] == []

    result = _data(client.post(f"/api/tickets/{draft_id}/random"))
    assert result["accepted"] is True
    built = [t for t in result["state"]["tickets"] if t["id"] == draft_id][0]
    assert built["state"] == "CONFIRMED"
    assert 1 <= len(built["picks"]) <= 5

    state = _data(client.delete(f"/api/tickets/{confirmed_id}"))["state"]
    assert confirmed_id not in [t["id"] for t in state["tickets"]]

    state = _data(client.post("/api/tickets/clear-confirmed"))["state"]
    assert [t["state"] for t in state["tickets"]] == ["DRAFT"]


def test_round_progresses_as_the_client_polls(client, app_clock):
    _confirm_one(client, symbol=7)

    result = _data(client.post("/api/round/start"))
    state = result["state"]
    assert result["accepted"] is True
    assert state["phase"] == "DRAWING"
    assert state["round_no"] == 1
    assert state["balance"] == "99.00"
    assert state["draw"]["revealed_count"] == 1
    assert state["draw"]["next_step_in"] == 2.0

    locked = _data(client.post("/api/tickets/symbols", json={"symbol": 1}))
    assert locked["accepted"] is False
    assert locked["reason"] == "round_in_progress"

    app_clock.advance(4.0)
    state = _data(client.get("/api/game"))
    assert state["draw"]["revealed_count"] == 3

    app_clock.advance(6.0)
    state = _data(client.get("/api/game"))
    assert state["phase"] in ("ARMED", "BONUS_GAME")
    assert state["draw"]["revealed_count"] == 5
    summary = state["last_round"]
    assert summary["round_no"] == 1
    assert summary["total_stake"] == "1.00"
    assert len(summary["symbols"]) == 5
    assert state["prize"] == summary["prize"]

    if state["phase"] == "BONUS_GAME":
        for cell in range(5):
            client.post("/api/bonus/picks", json={"cell": cell})
        state = _data(client.get("/api/game"))
    assert state["phase"] == "ARMED"

    types = [e["type"] for e in _data(client.get("/api/events?since=0"))]
    assert types[:2] == ["ticket_confirmed", "round_started"]
    assert types.count("reveal_step_completed") == 5
    assert "round_settled" in types


def test_demo_bonus_game(client):
    state = _data(client.post("/api/bonus/demo"))["state"]
    bonus = state["bonus_game"]
    assert state["phase"] == "BONUS_GAME"
    assert bonus["tier"] == "BASE"
    assert bonus["stake_basis"] == "1.00"
    assert bonus["picks_left"] == 5
    assert bonus["cells"] == [None] * 25

    repeat = _data(client.post("/api/bonus/demo"))
    assert repeat["reason"] == "round_in_progress"

    for cell in (0, 5, 10, 15, 20):
        state = _data(client.post("/api/bonus/picks", json={"cell": cell}))["state"]
    assert state["bonus_game"] is None

    events = _data(client.get("/api/events?since=0"))
    ended = events[-1]
    assert ended["type"] == "bonus_round_ended"
    total = ended["payload"]["total_multiplier"]
    assert 5 <= total <= 125
    assert ended["payload"]["award"] == f"{total}.00"
    assert state["balance"] == f"{100 + total}.00"

    assert _data(client.post("/api/bonus/picks", json={"cell": 1}))["reason"] == "no_bonus_game"


def test_reference_data(client):
    symbols = _data(client.get("/api/symbols"))
    assert [s["index"] for s in symbols] == list(range(25))
    assert symbols[0]["name"]

    paytable = _data(client.get("/api/paytable"))
    assert [row["picks"] for row in paytable] == [1, 2, 3, 4, 5]
    assert paytable[0]["bands"][0] == {"match": "exact", "hits": 1, "multiplier": "12"}


def test_events_since_filters(client):
    _confirm_one(client, symbol=1)
    _confirm_one(client, symbol=2)

    events = _data(client.get("/api/events?since=0"))
    assert [e["seq"] for e in events] == [1, 2]
    assert events[0]["payload"]["stake"] == "1.00"
    assert [e["seq"] for e in _data(client.get("/api/events?since=1"))] == [2]


def test_reset_starts_a_new_session(client):
    _confirm_one(client, symbol=1)
    client.put("/api/stake", json={"index": 0})

    state = _data(client.post("/api/game/reset"))
    assert state["phase"] == "SELECTING"
    assert len(state["tickets"]) == 1
    assert state["stake"]["selected_index"] == 4
    assert state["last_event_seq"] == 0
