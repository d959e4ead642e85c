"""Play many rounds headless and report return-to-player.

Each round builds a number of random tickets at the chosen stake, runs the
draw on a virtual clock, and plays any bonus game by revealing random cells.

Usage:
  python scripts/simulate_rounds.py --rounds 20000 --tickets 3 --stake-index 4 --seed 7
"""

from __future__ import annotations

import argparse
import logging
import pathlib
import random
import sys
from collections import Counter
from decimal import Decimal

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from bicho.config import GameSettings
from bicho.services.clock import ManualClock
from bicho.services.events import EventType, GameEvent
from bicho.services.round_service import RoundOrchestrator


logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--rounds", type=int, default=10_000)
    parser.add_argument("--tickets", type=int, default=1, help="random tickets per round (stake cap still applies)")
    parser.add_argument("--stake-index", type=int, default=4)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--log-level", default="WARNING")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s %(message)s")

    if args.rounds <= 0 or args.tickets <= 0:
        logger.error("--rounds and --tickets must be positive")
        return 2

    settings = GameSettings(rng_seed=args.seed)
    clock = ManualClock()
    game = RoundOrchestrator(settings=settings, clock=clock)
    game.tickets.set_stake_index(args.stake_index)
    picker = random.Random(args.seed)

    bonus_tiers: Counter[str] = Counter()
    bonus_paid = Decimal("0")

    def _count_bonus(event: GameEvent) -> None:
        if event.type is EventType.BONUS_ROUND_STARTED:
            bonus_tiers[event.payload["tier"]] += 1

    game.events.subscribe(_count_bonus)

    wagered = Decimal("0")
    returned = Decimal("0")
    winning_rounds = 0

    for _ in range(args.rounds):
        for _ in range(args.tickets):
            game.tickets.build_random()
        if not game.start_round().accepted:
            logger.warning("Round %s could not start", game.round_no + 1)
            continue
        game.run_until_settled(sleep=clock.advance)

        summary = game.last_summary
        if summary is None:
            continue
        wagered += summary.total_stake
        returned += summary.prize
        if summary.prize > 0:
            winning_rounds += 1

        bonus = game.bonus_game
        if bonus is not None:
            for cell in picker.sample(range(bonus.grid_size), bonus.picks_left):
                game.bonus_pick(cell)
            award = summary.bonus_award or Decimal("0")
            returned += award
            bonus_paid += award

        game.tickets.clear_confirmed()

    rounds = game.round_no
    rtp = (returned / wagered * 100) if wagered else Decimal("0")
    print(f"Rounds played:   {rounds}")
    print(f"Total wagered:   £{wagered:.2f}")
    print(f"Total returned:  £{returned:.2f} (bonus £{bonus_paid:.2f})")
    print(f"RTP:             {rtp:.2f}%")
    print(f"Winning rounds:  {winning_rounds} ({(winning_rounds / rounds * 100) if rounds else 0:.2f}%)")
    for tier in ("TOP", "MID", "BASE"):
        count = bonus_tiers.get(tier, 0)
        print(f"Bonus {tier:<4}:      {count} ({(count / rounds * 100) if rounds else 0:.3f}%)")
    print(f"Final balance:   £{game.balance:.2f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
