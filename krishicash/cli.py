"""
KrishiCash CLI - Command-line interface for the engine.

Usage:
    krishicash catalog                      Show difficulty tiers, goals and events
    krishicash inspect <save_file>          Validate a save file and summarize it
    krishicash simulate [--seed N] ...      Play a whole game with a policy
    krishicash serve [--host H] [--port P]  Run the HTTP API
"""

import argparse
import logging
import sys

from .config import Settings

POLICIES = ("prudent", "random", "first")


def main(argv=None):
    """Main CLI entry point."""
    settings = Settings.from_env()

    parser = argparse.ArgumentParser(
        description="KrishiCash - Farm finance simulation",
        prog="krishicash",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level (default from KRISHICASH_LOG_LEVEL)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Catalog command
    subparsers.add_parser("catalog", help="Show difficulty tiers, goals and events")

    # Inspect command
    inspect_parser = subparsers.add_parser("inspect", help="Validate a save file and summarize it")
    inspect_parser.add_argument("save_file", help="Path to a save file")

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Play a whole game with a policy")
    simulate_parser.add_argument("--seed", type=int, default=settings.seed, help="Seed for event draws")
    simulate_parser.add_argument("--difficulty", default="medium", choices=["easy", "medium", "hard"])
    simulate_parser.add_argument("--goal", default="motorbike", choices=["cycle", "motorbike", "car", "house"])
    simulate_parser.add_argument("--policy", default="prudent", choices=POLICIES)
    simulate_parser.add_argument("--save", help="Write the final game to this save file (.json)")
    simulate_parser.add_argument("--quiet", "-q", action="store_true", help="Only print the result")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command == "catalog":
        cmd_catalog(args)
    elif args.command == "inspect":
        cmd_inspect(args)
    elif args.command == "simulate":
        cmd_simulate(args)
    elif args.command == "serve":
        cmd_serve(args, settings)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_catalog(args):
    """Print the static tables."""
    from .catalog import DIFFICULTY_LEVELS, GAME_EVENTS, GAME_GOALS, total_expenses
    from .formatting import format_indian_currency

    print("Difficulty levels:")
    for config in DIFFICULTY_LEVELS.values():
        print(
            f"  {config.level.value:<7} {config.name:<8} income {format_indian_currency(config.monthly_income)}"
            f", expenses {format_indian_currency(total_expenses(config.expense_multiplier))}"
        )

    print("\nGoals:")
    for goal in GAME_GOALS.values():
        print(f"  {goal.goal_id.value:<10} {goal.name:<10} {format_indian_currency(goal.cost)}")

    print("\nEvents:")
    for event in GAME_EVENTS:
        if event.cost:
            amount = f"-{format_indian_currency(event.cost)}"
        elif event.reward:
            amount = f"+{format_indian_currency(event.reward)}"
        else:
            amount = f"{event.interest}% monthly" if event.interest else ""
        print(f"  {event.event_type.value:<10} {event.title:<24} {amount}")


def cmd_inspect(args):
    """Validate a save file and summarize it."""
    from .engine_core import get_game_result
    from .formatting import format_indian_currency
    from .persistence import SaveValidationError, loads_save

    try:
        with open(args.save_file, "r", encoding="utf-8") as f:
            text = f.read()
    except FileNotFoundError:
        print(f"Error: File not found: {args.save_file}")
        sys.exit(1)

    try:
        state, repairs = loads_save(text)
    except SaveValidationError as e:
        print("Invalid save:")
        for error in e.errors:
            print(f"  - {error}")
        sys.exit(1)

    print(f"Month {state.month}, phase {state.phase.value}, difficulty {state.difficulty.value}")
    print(f"Balance:   {format_indian_currency(state.balance)}")
    print(f"Savings:   {format_indian_currency(state.savings)}")
    print(f"Debt:      {format_indian_currency(state.debt)}")
    print(f"Stability: {state.stability_score}")
    if state.selected_goal:
        status = "bought" if state.goal_achieved else "not bought"
        print(f"Goal:      {state.selected_goal.name} ({format_indian_currency(state.selected_goal.cost)}, {status})")

    if repairs:
        print("\nRepairs:")
        for repair in repairs:
            print(f"  - {repair}")

    if state.is_over:
        result = get_game_result(state)
        print(f"\n{result.title}\n{result.description}")


def cmd_simulate(args):
    """Play a whole game with a policy."""
    from .bots import FirstLegalPolicy, PrudentPolicy, RandomPolicy, play_game
    from .engine_core import SeededRandomSource, game_lessons, get_game_result
    from .formatting import format_indian_currency
    from .persistence import FileSaveStore
    from .session import GameController

    controller = GameController(rng=SeededRandomSource(args.seed), autosave=False)

    if args.policy == "prudent":
        policy = PrudentPolicy(difficulty_id=args.difficulty, goal_id=args.goal)
    else:
        policy = RandomPolicy(seed=args.seed) if args.policy == "random" else FirstLegalPolicy()
        # Baseline policies would pick setup choices at random
        controller.start_game(args.difficulty)
        controller.select_goal(args.goal)

    result = play_game(policy, controller=controller)

    if not args.quiet:
        for line in result.transcript:
            print(line)
        print()

    state = result.state
    outcome = get_game_result(state)
    print(outcome.title)
    print(outcome.description)
    print(
        f"Balance {format_indian_currency(state.balance)}, savings {format_indian_currency(state.savings)}, "
        f"debt {format_indian_currency(state.debt)}, stability {state.stability_score}"
    )
    for lesson in game_lessons(state):
        print(f"  {'+' if lesson.positive else '-'} {lesson.text}")

    if args.save:
        from pathlib import Path

        path = Path(args.save)
        store = FileSaveStore(save_dir=path.parent, slot=path.stem)
        saved = store.save(state)
        if not saved.success:
            print(f"Error: could not save: {saved.error}")
            sys.exit(1)
        print(f"Saved to {saved.location}")

    if not result.finished:
        sys.exit(1)


def cmd_serve(args, settings):
    """Run the HTTP API."""
    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn not installed. Install with: pip install uvicorn")
        sys.exit(1)

    from .api.app import create_app

    app = create_app(settings=settings)
    uvicorn.run(app, host=args.host, port=args.port, log_level=str(args.log_level).lower())


if __name__ == "__main__":
    main()
