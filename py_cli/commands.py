"""
py_cli/commands.py
Journal command interface and registry.
"""
from typing import Protocol, List, Dict, Any, Optional
from .models import CLIContext, CommandResponse


class ICommand(Protocol):
    """
    A journal command. `args` are the positional tokens after the command name,
    `payload` the parsed JSON object that may follow them ({} when absent).
    """
    name: str
    description: str
    syntax: str

    def execute(self, ctx: CLIContext, args: List[str], payload: Dict[str, Any]) -> CommandResponse:
        ...


class CommandRegistry:
    def __init__(self):
        self._commands: Dict[str, ICommand] = {}
        self._aliases: Dict[str, str] = {}

    def register(self, command: ICommand, aliases: Optional[List[str]] = None):
        """
        Adds a command under its name and aliases.
        Raises ValueError if any of those names is already taken by another command.
        """
        names = [command.name] + list(aliases or [])
        for name in names:
            owner = self._owner(name)
            if owner is not None and owner != command.name:
                raise ValueError(f"Command name '{name}' already used by '{owner}'")

        self._commands[command.name] = command
        for alias in aliases or []:
            self._aliases[alias] = command.name

    def _owner(self, name: str) -> Optional[str]:
        if name in self._commands:
            return name
        return self._aliases.get(name)

    def get_command(self, name: str) -> Optional[ICommand]:
        """ Resolves command by name or alias (case-insensitive). """
        owner = self._owner(name.lower())
        return self._commands.get(owner) if owner else None

    def aliases_for(self, name: str) -> List[str]:
        return sorted(alias for alias, target in self._aliases.items() if target == name)

    def list_commands(self) -> List[ICommand]:
        return sorted(self._commands.values(), key=lambda c: c.name)

    def describe(self) -> List[Dict[str, Any]]:
        """ Help rows: name, aliases, syntax, description. """
        return [
            {
                "name": c.name,
                "aliases": self.aliases_for(c.name),
                "syntax": c.syntax,
                "description": c.description
            }
            for c in self.list_commands()
        ]


# Global instance; handler modules register into it on import
registry = CommandRegistry()
