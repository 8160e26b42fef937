"""Help and version actions."""

from typing import List

from rich.markup import escape

from . import __version__
from .registry import ActionContext, ActionRegistry
from .utils import console


def render_listing(registry: ActionRegistry) -> str:
    """Render every action with its usage banner, in registration order."""
    width = max((len(action.usage) for action in registry), default=0)
    lines = [
        "Usage: steve [-h|--help] [--version] [--debug] [<action> [<args...>]]",
        "",
        "Actions:",
    ]
    for action in registry:
        lines.append(f"  {action.usage:<{width}}  {action.summary}")
    lines.append("")
    lines.append("Run 'steve help <action>' for details.")
    return "\n".join(lines)


def render_description(registry: ActionRegistry, name: str) -> str:
    """Render the full description of one action."""
    action = registry.lookup(name)
    return f"Usage: steve {action.usage}\n\n{action.description.strip()}"


def cmd_help(ctx: ActionContext, args: List[str]) -> int:
    """Show the action listing or one action's description."""
    if args:
        text = render_description(ctx.registry, args[0])
    else:
        text = render_listing(ctx.registry)
    console.print(escape(text), soft_wrap=True, highlight=False)
    return 0


def cmd_version(ctx: ActionContext, args: List[str]) -> int:
    """Print the version."""
    console.print(f"steve {__version__}", highlight=False)
    return 0
