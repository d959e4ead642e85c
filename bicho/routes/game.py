"""Game routes (controllers). No business logic here."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, request

from bicho.models.symbol import SYMBOLS, glyph_of
from bicho.runtime import get_game_service
from bicho.schemas.game import (
    BonusPickSchema,
    EventSchema,
    EventsQuerySchema,
    GameStateSchema,
    PaytableRowSchema,
    SelectSymbolSchema,
    StakeSchema,
    SymbolSchema,
)
from bicho.services.paytable import paytable_rows
from bicho.services.round_service import RoundOrchestrator
from bicho.utils.money import stake_label
from bicho.utils.responses import command_ok, ok

game_bp = Blueprint("game", __name__)

_state_schema = GameStateSchema()
_symbols_schema = SymbolSchema(many=True)
_paytable_schema = PaytableRowSchema(many=True)
_events_schema = EventSchema(many=True)
_select_schema = SelectSymbolSchema()
_stake_schema = StakeSchema()
_bonus_pick_schema = BonusPickSchema()
_events_query_schema = EventsQuerySchema()


def _render_state(game: RoundOrchestrator) -> dict[str, Any]:
    tickets = game.tickets
    draw = game.draw()
    return _state_schema.dump(
        {
            "phase": game.phase.value,
            "round_no": game.round_no,
            "balance": game.balance,
            "prize": game.prize,
            "active_ticket_id": tickets.active_ticket_id,
            "stake": {
                "stakes": list(tickets.stakes),
                "selected_index": tickets.selected_stake_index,
                "selected": tickets.selected_stake,
                "label": stake_label(tickets.selected_stake),
                "cap": tickets.stake_cap,
                "confirmed_total": tickets.total_confirmed_stake,
                "limit_status": tickets.stake_limit_status().value,
                "limit_message": tickets.stake_limit_message(),
            },
            "tickets": tickets.tickets,
            "draw": {
                "revealed_count": draw.revealed_count,
                "symbols": list(draw.symbols),
                "glyphs": [glyph_of(i) for i in draw.symbols],
                "bonus_flags": list(draw.bonus_flags),
                "next_step_in": game.seconds_until_next_step(),
            },
            "bonus_game": game.bonus_game,
            "last_round": game.last_summary,
            "last_event_seq": game.events.last_seq,
        }
    )


def _payload() -> dict[str, Any]:
    return request.get_json(silent=True) or {}


@game_bp.get("/game")
def get_state():
    """Current snapshot; also advances any reveal steps that are due."""

    return ok(get_game_service().snapshot(_render_state))


@game_bp.post("/game/reset")
def reset_game():
    return ok(get_game_service().reset(_render_state))


@game_bp.get("/symbols")
def list_symbols():
    return ok(_symbols_schema.dump(SYMBOLS))


@game_bp.get("/paytable")
def get_paytable():
    return ok(_paytable_schema.dump(paytable_rows()))


@game_bp.get("/events")
def list_events():
    query = _events_query_schema.load(request.args.to_dict())
    events = get_game_service().events_since(int(query["since"]))
    return ok(_events_schema.dump(events))


@game_bp.post("/tickets/symbols")
def select_symbol():
    data = _select_schema.load(_payload())
    result, state = get_game_service().execute(
        lambda game: game.tickets.select_symbol(int(data["symbol"]), data.get("ticket_id")),
        _render_state,
    )
    return command_ok(result, state)


@game_bp.post("/tickets/<int:ticket_id>/confirm")
def confirm_ticket(ticket_id: int):
    result, state = get_game_service().execute(lambda game: game.tickets.confirm(ticket_id), _render_state)
    return command_ok(result, state)


@game_bp.post("/tickets/<int:ticket_id>/cancel")
def cancel_ticket(ticket_id: int):
    result, state = get_game_service().execute(lambda game: game.tickets.cancel(ticket_id), _render_state)
    return command_ok(result, state)


@game_bp.delete("/tickets/<int:ticket_id>")
def delete_ticket(ticket_id: int):
    result, state = get_game_service().execute(lambda game: game.tickets.delete(ticket_id), _render_state)
    return command_ok(result, state)


@game_bp.post("/tickets/<int:ticket_id>/random")
def build_random_ticket(ticket_id: int):
    result, state = get_game_service().execute(lambda game: game.tickets.build_random(ticket_id), _render_state)
    return command_ok(result, state)


@game_bp.post("/tickets/clear-confirmed")
def clear_confirmed():
    result, state = get_game_service().execute(lambda game: game.tickets.clear_confirmed(), _render_state)
    return command_ok(result, state)


@game_bp.put("/stake")
def set_stake():
    data = _stake_schema.load(_payload())
    if data.get("index") is not None:
        index = int(data["index"])
        command = lambda game: game.tickets.set_stake_index(index)  # noqa: E731
    else:
        step = int(data["step"])
        command = lambda game: game.tickets.step_stake(step)  # noqa: E731
    result, state = get_game_service().execute(command, _render_state)
    return command_ok(result, state)


@game_bp.post("/round/start")
def start_round():
    result, state = get_game_service().execute(lambda game: game.start_round(), _render_state)
    return command_ok(result, state)


@game_bp.post("/bonus/picks")
def bonus_pick():
    data = _bonus_pick_schema.load(_payload())
    result, state = get_game_service().execute(lambda game: game.bonus_pick(int(data["cell"])), _render_state)
    return command_ok(result, state)


@game_bp.post("/bonus/demo")
def start_demo_bonus():
    result, state = get_game_service().execute(lambda game: game.start_demo_bonus(), _render_state)
    return command_ok(result, state)
