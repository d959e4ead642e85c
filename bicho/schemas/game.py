"""Schemas for the game API."""

from __future__ import annotations

from marshmallow import Schema, ValidationError, fields, validate, validates_schema

from bicho.models.symbol import SYMBOL_COUNT, glyph_of
from bicho.services.bonus_service import BONUS_GRID_SIZE
from bicho.utils.money import stake_label


def _money(**kwargs) -> fields.Decimal:
    return fields.Decimal(as_string=True, places=2, **kwargs)


# ----------------------------------------------------------------------
# Requests
# ----------------------------------------------------------------------


class SelectSymbolSchema(Schema):
    symbol = fields.Integer(required=True, validate=validate.Range(min=0, max=SYMBOL_COUNT - 1))

    # Omitted: the draft currently being edited.
    ticket_id = fields.Integer(required=False, load_default=None, allow_none=True)


class StakeSchema(Schema):
    index = fields.Integer(required=False, load_default=None, allow_none=True, validate=validate.Range(min=0))
    step = fields.Integer(required=False, load_default=None, allow_none=True, validate=validate.OneOf([-1, 1]))

    @validates_schema
    def _validate_one_of(self, data, **kwargs):  # type: ignore[no-untyped-def]
        has_index = data.get("index") is not None
        has_step = data.get("step") is not None
        if has_index == has_step:
            raise ValidationError({"index": ["Provide exactly one of index or step"]})


class BonusPickSchema(Schema):
    cell = fields.Integer(required=True, validate=validate.Range(min=0, max=BONUS_GRID_SIZE - 1))


class EventsQuerySchema(Schema):
    since = fields.Integer(required=False, load_default=0, validate=validate.Range(min=0))


# ----------------------------------------------------------------------
# Responses
# ----------------------------------------------------------------------


class SymbolSchema(Schema):
    index = fields.Integer(required=True)
    name = fields.String(required=True)
    glyph = fields.String(required=True)


class TicketSchema(Schema):
    id = fields.Integer(required=True)
    picks = fields.List(fields.Integer())
    glyphs = fields.Function(lambda t: [glyph_of(i) for i in t.picks])
    state = fields.Function(lambda t: t.state.value)
    stake = _money(allow_none=True)
    stake_label = fields.Function(lambda t: stake_label(t.stake) if t.stake is not None else None)
    current_win = _money()


class StakeStateSchema(Schema):
    stakes = fields.List(_money())
    selected_index = fields.Integer()
    selected = _money()
    label = fields.String()
    cap = _money()
    confirmed_total = _money()
    limit_status = fields.String()
    limit_message = fields.String(allow_none=True)


class DrawStateSchema(Schema):
    revealed_count = fields.Integer()
    symbols = fields.List(fields.Integer())
    glyphs = fields.List(fields.String())
    bonus_flags = fields.List(fields.Boolean())
    next_step_in = fields.Float(allow_none=True)


class BonusGameSchema(Schema):
    tier = fields.Function(lambda g: g.tier.value)
    min_multiplier = fields.Function(lambda g: str(g.multiplier_range.minimum))
    max_multiplier = fields.Function(lambda g: str(g.multiplier_range.maximum))
    stake_basis = _money()
    picks_left = fields.Integer()
    total_multiplier = fields.Integer()
    cells = fields.Function(lambda g: g.cells())
    finished = fields.Function(lambda g: g.is_finished)


class TicketResultSchema(Schema):
    ticket_id = fields.Integer()
    picks = fields.List(fields.Integer())
    stake = _money()
    multiplier = fields.Decimal(as_string=True)
    win = _money()


class RoundSummarySchema(Schema):
    round_no = fields.Integer()
    symbols = fields.Function(lambda s: list(s.draw.symbols))
    bonus_flags = fields.Function(lambda s: list(s.draw.bonus_flags))
    total_stake = _money()
    prize = _money()
    results = fields.List(fields.Nested(TicketResultSchema))
    bonus_tier = fields.String(allow_none=True)
    bonus_award = _money(allow_none=True)


class GameStateSchema(Schema):
    phase = fields.String(required=True)
    round_no = fields.Integer()
    balance = _money()
    prize = _money()
    active_ticket_id = fields.Integer()
    stake = fields.Nested(StakeStateSchema)
    tickets = fields.List(fields.Nested(TicketSchema))
    draw = fields.Nested(DrawStateSchema)
    bonus_game = fields.Nested(BonusGameSchema, allow_none=True)
    last_round = fields.Nested(RoundSummarySchema, allow_none=True)
    last_event_seq = fields.Integer()


class EventSchema(Schema):
    seq = fields.Integer()
    type = fields.Function(lambda e: e.type.value)
    payload = fields.Dict()


class PaytableBandSchema(Schema):
    match = fields.String()
    hits = fields.Integer()
    multiplier = fields.Decimal(as_string=True)


class PaytableRowSchema(Schema):
    picks = fields.Integer()
    bands = fields.List(fields.Nested(PaytableBandSchema))
