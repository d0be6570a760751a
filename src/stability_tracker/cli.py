"""CLI del tracker de estabilidad: ver, editar y guardar el registro de hoy."""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path

from stability_tracker.config import SETUP_SQL, build_store, load_config
from stability_tracker.datekey import today_key
from stability_tracker.engine import SyncEngine
from stability_tracker.history import format_history
from stability_tracker.scoring import MAX_SCORE, cigarettes_hint, steps_hint


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argparse namespace.
    """
    parser = argparse.ArgumentParser(
        description="14-day stability tracker: log today's habits and review history."
    )
    parser.add_argument("--env-file", type=Path, help="dotenv file with store settings.")
    parser.add_argument("--verbose", action="store_true", help="Debug logging.")
    parser.add_argument(
        "--pushups", action=argparse.BooleanOptionalAction, help="Pushups done."
    )
    parser.add_argument(
        "--deep-work", action=argparse.BooleanOptionalAction, help="Deep work done."
    )
    parser.add_argument("--steps", help="Step count for today.")
    parser.add_argument("--cigarettes", help="Cigarettes smoked today.")
    parser.add_argument("--save", action="store_true", help="Persist today's entry.")
    return parser.parse_args(argv)


def apply_edits(engine: SyncEngine, ns: argparse.Namespace) -> None:
    """Copy the edit flags that were given onto today's form."""
    edits = {
        "pushups_done": ns.pushups,
        "deep_work_done": ns.deep_work,
        "steps_count": ns.steps,
        "cigarettes_count": ns.cigarettes,
    }
    for name, value in edits.items():
        if value is not None:
            engine.set_field(name, value)


def render(engine: SyncEngine, today: str) -> str:
    """Text view of today's form and the history window."""
    form = engine.form
    summary = engine.summary()
    lines = [
        f"14-Day Stability Tracker  {today}",
        "",
        "Today",
        f"  Pushups done:    {'yes' if form.pushups_done else 'no'}",
        f"  Deep work done:  {'yes' if form.deep_work_done else 'no'}",
        f"  Steps:           {form.steps_count:,}  ({steps_hint(form.steps_count)})",
        f"  Cigarettes:      {form.cigarettes_count}  "
        f"({cigarettes_hint(form.cigarettes_count)})",
        f"  Score:           {engine.score}/{MAX_SCORE}",
        "",
        f"14-Day Progress  {summary.total_score} / {summary.max_possible} pts  "
        f"({summary.percent}%)",
        format_history(engine.history, today=today),
    ]
    return "\n".join(lines)


async def run(ns: argparse.Namespace) -> int:
    config = load_config(ns.env_file)
    store = build_store(config)
    engine = SyncEngine(store)
    if not engine.configured:
        print(
            "Setup required. Set SUPABASE_URL and SUPABASE_ANON_KEY "
            "(or STABILITY_DB_PATH), then create the table below."
        )
        print(SETUP_SQL)
        return 0

    await engine.activate()
    if engine.error is None:
        apply_edits(engine, ns)
        if ns.save:
            await engine.save()

    print(render(engine, today_key()))
    if engine.error is not None:
        print(f"Error: {engine.error}")
        return 1
    if engine.saved:
        print("Saved.")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the tracker CLI.

    Returns:
        Exit code (0 on success, 1 on store errors).
    """
    ns = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(run(ns))
