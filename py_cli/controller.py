"""
py_cli/controller.py
Turns one input line into a journal command call and renders the result.

Input grammar:  <command> [positional ...] [{json payload}]
The payload starts at the first token opening with '{' or '['.
"""
import sys
import json
import traceback
from typing import List, Dict, Any, Optional, Tuple

from py_journal.config import JournalConfig
from py_journal.logger import log_event
from .models import CLIContext, CLIMode, CommandResponse
from .commands import CommandRegistry, registry as global_registry


class PayloadError(ValueError):
    """ Raised when the JSON part of a command line is not a JSON object. """


def split_input(input_str: str) -> Tuple[str, List[str], str]:
    """ -> (command name, positional args, raw payload text). """
    parts = input_str.strip().split()
    cmd_name = parts[0].lower()

    args: List[str] = []
    rest = parts[1:]
    for i, token in enumerate(rest):
        if token.startswith("{") or token.startswith("["):
            return cmd_name, args, " ".join(rest[i:])
        args.append(token)
    return cmd_name, args, ""


def parse_payload(text: str) -> Dict[str, Any]:
    if not text:
        return {}
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise PayloadError(f"Invalid JSON payload: {e.msg}") from e
    if not isinstance(payload, dict):
        raise PayloadError("Payload must be a JSON object.")
    return payload


class CLIController:
    def __init__(self, mode: CLIMode, registry: CommandRegistry = global_registry, config: Optional[JournalConfig] = None):
        self.context = CLIContext(mode=mode, config=config or JournalConfig())
        self.registry = registry

    @property
    def actor(self) -> str:
        return "BOT" if self.context.mode == CLIMode.BOT else "USER"

    def execute(self, cmd_name: str, args: Optional[List[str]] = None, payload: Optional[Dict[str, Any]] = None) -> CommandResponse:
        """ Structured entry point: resolve and run a command, no rendering. """
        command = self.registry.get_command(cmd_name)
        if not command:
            return CommandResponse(False, f"Unknown command: {cmd_name}", error_code="UNKNOWN_COMMAND")

        response = command.execute(self.context, list(args or []), dict(payload or {}))
        if not response.success:
            log_event("SYSTEM", f"{command.name} failed: {response.error_code} {response.message}")
        return response

    def process_input(self, input_str: str) -> str:
        """ Returns the final output string (text or JSON) ready for stdout. """
        if not input_str.strip():
            return ""

        try:
            cmd_name, args, payload_text = split_input(input_str)
            if not self.registry.get_command(cmd_name):
                return self._render_error(f"Unknown command: {cmd_name}", "UNKNOWN_COMMAND")

            log_event(self.actor, input_str.strip())

            try:
                payload = parse_payload(payload_text)
            except PayloadError as e:
                return self._render_error(str(e), "JSON_ERROR")

            return self._render_response(self.execute(cmd_name, args, payload))

        except Exception as e:
            # Keep the shell alive; trace goes to stderr
            sys.stderr.write(traceback.format_exc())
            log_event("SYSTEM", f"Internal error: {e}")
            return self._render_error(f"Internal Error: {str(e)}", "INTERNAL_ERROR")

    def _render_response(self, response: CommandResponse) -> str:
        if self.context.mode == CLIMode.BOT:
            output = {
                "success": response.success,
                "payload": response.payload,
                "message": response.message,
                "error_code": response.error_code
            }
            return json.dumps(output, default=str)

        if not response.success:
            return f"❌ Error: {response.message} ({response.error_code})"

        out = []
        if response.message:
            out.append(f"✅ {response.message}")
        if response.payload:
            # Chinese labels (起始) stay readable
            out.append(json.dumps(response.payload, indent=2, default=str, ensure_ascii=False))
        return "\n".join(out)

    def _render_error(self, message: str, code: str) -> str:
        return self._render_response(CommandResponse(success=False, message=message, error_code=code))
