"""
main_cli.py
Entry point for the journal metrics CLI.
Modes:
 - Interactive (Human): standard shell, pretty printed output
 - Bot (JSON): command via args, one JSON object on stdout
"""
import sys
import argparse
from py_cli.models import CLIMode
from py_cli.controller import CLIController
from py_journal.config import load_config
from py_journal.logger import get_journal_logger, log_event
# Import handlers to trigger registration
import py_cli.handlers_metrics


def main():
    parser = argparse.ArgumentParser(description="Trading Journal Metrics CLI")
    parser.add_argument("--mode", choices=["human", "bot"], default="human", help="Operating Mode")
    parser.add_argument("--config", default="config/journal_config.json", help="Path to journal config JSON")
    parser.add_argument("--snapshot", default=None, help="Journal snapshot JSON (overrides config)")
    parser.add_argument("command", nargs=argparse.REMAINDER, help="Command to execute")

    args = parser.parse_args()

    # 1. Setup Context
    config = load_config(args.config)
    if not config.validate():
        print(f"Invalid configuration in {args.config}", file=sys.stderr)
        sys.exit(2)

    get_journal_logger(config.log_dir)
    log_event("SYSTEM", f"CLI started (mode={args.mode})")

    mode = CLIMode.BOT if args.mode == "bot" else CLIMode.HUMAN
    controller = CLIController(mode=mode, config=config)
    controller.context.snapshot_path = args.snapshot

    # 2. Single command
    if args.command:
        print(controller.process_input(" ".join(args.command)))
        return

    # 3. Interactive Loop (Only for Human Mode)
    if mode == CLIMode.HUMAN:
        print("📈 Journal Metrics CLI. Type 'help' for commands, 'exit' to stop.")
        while True:
            try:
                user_input = input(">> ")
                if user_input.lower() in ["exit", "quit"]:
                    break
                print(controller.process_input(user_input))
            except (KeyboardInterrupt, EOFError):
                print("\nExiting...")
                break
    else:
        print('{"success": false, "payload": null, "message": "No command provided", "error_code": "NO_INPUT"}')
        sys.exit(1)


if __name__ == "__main__":
    main()
