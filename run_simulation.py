#!/usr/bin/env python3
"""Simple CLI runner for trying out the playsim motion engine."""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from playsim.config import config
from playsim.exceptions import PlaysimException
from playsim.formations import Formation, auto_assign_defense, build_preset_formation
from playsim.logging import configure_logging, get_logger
from playsim.models import Force, Player, ThrowEvent, default_disc_holder, offense_of, validate_roster
from playsim.simulation import PlaySimulation
from playsim.time import PlaybackClock
from spatial.field import clamp_to_field

logger = get_logger(__name__)


def load_roster(path: Path) -> list[Player]:
    """Load a roster from a JSON file (a list of players or {"players": [...]})."""
    data = json.loads(path.read_text())
    if isinstance(data, dict):
        data = data.get("players", [])
    return [Player.from_dict(item) for item in data]


def with_demo_cut(players: list[Player]) -> list[Player]:
    """Give the first cutter an under-then-deep cut so the defense has to react."""
    holder = default_disc_holder(players)
    result = []
    cut_added = False
    for player in players:
        if not cut_added and player.is_offense and player is not holder and not player.path:
            x, y = player.position
            path = (clamp_to_field((x - 8, y + 8)), clamp_to_field((x - 12, y - 12)))
            player = Player(**{**player.__dict__, "path": path, "path_start_offset": 0.5})
            cut_added = True
        result.append(player)
    return result


def demo_throw(players: list[Player]) -> list[ThrowEvent]:
    """A single throw from the disc holder to the cutter, released at 1.5 s."""
    holder = default_disc_holder(players)
    receiver = next((p for p in offense_of(players) if p.path), None)
    if holder is None or receiver is None:
        return []
    return [ThrowEvent(id="demo-throw", thrower_id=holder.id, receiver_id=receiver.id, release_time=1.5)]


def print_frame(simulation: PlaySimulation, players: list[Player], time: float) -> None:
    positions = simulation.positions_at_time(time)
    holder = simulation.disc_holder_at(time)
    print(f"\n[{time:5.2f}s] disc: {holder.label if holder else '-'}")
    for player in players:
        x, y = positions[player.id]
        print(f"  {player.label:>4} {player.team.value:<8} ({x:6.2f}, {y:6.2f})")


async def run_demo(args: argparse.Namespace) -> int:
    """Build a play and step through it with the playback clock."""
    configure_logging(args.log_level, json_logs=False)

    force = Force(args.force)
    if args.roster:
        players = load_roster(Path(args.roster))
    else:
        players = with_demo_cut(build_preset_formation(Formation(args.formation), force))
    players = auto_assign_defense(players, force)
    validate_roster(players)

    throws = [] if args.no_throw else demo_throw(players)
    simulation = PlaySimulation(players, force, throws, config.steering)
    duration = args.duration or simulation.duration
    logger.info("demo.play_ready", players=len(players), duration=round(duration, 2), force=force.value)

    clock = PlaybackClock(
        duration=duration,
        turnover_time=simulation.turnover_time,
        time_scale=args.speed,
    )
    print_frame(simulation, players, 0.0)
    await clock.start()
    while clock.is_active:
        await asyncio.sleep(args.step / clock.time_scale)
        time = clock.query_time()
        if time is not None:
            print_frame(simulation, players, time)

    await clock.stop()
    logger.info("demo.finished")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Step through a play and print player positions")
    parser.add_argument(
        "--formation",
        choices=[f.value for f in Formation],
        default=Formation.VERTICAL.value,
        help="Preset offensive formation (ignored with --roster)",
    )
    parser.add_argument(
        "--force",
        choices=[f.value for f in Force],
        default=config.default_force.value,
        help="Force setting",
    )
    parser.add_argument("--roster", help="JSON roster file to load instead of a preset")
    parser.add_argument("--step", type=float, default=0.5, help="Seconds between printed frames")
    parser.add_argument("--speed", type=float, default=config.default_time_scale, help="Playback time scale")
    parser.add_argument("--duration", type=float, default=None, help="Override the play duration")
    parser.add_argument("--no-throw", action="store_true", help="Skip the demo throw")
    parser.add_argument("--log-level", default=config.log_level)
    args = parser.parse_args()

    if args.step <= 0:
        parser.error("--step must be positive")
    if args.speed <= 0:
        parser.error("--speed must be positive")

    try:
        return asyncio.run(run_demo(args))
    except PlaysimException as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
