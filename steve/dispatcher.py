"""Resolve a parsed command to its action and run it."""

import logging

from .config import DEFAULT_ACTION
from .errors import SteveError, UnknownActionError, UsageError
from .parser import ParsedCommand
from .registry import ActionContext
from .utils import err_console, log

logger = logging.getLogger(__name__)


def report_unknown_action(error: UnknownActionError) -> int:
    """Report an unknown action together with the actions that do exist."""
    log(str(error), "error")
    err_console.print(f"Known actions: {', '.join(error.known)}", soft_wrap=True, highlight=False, markup=False)
    return error.exit_status


class Dispatcher:
    """Runs exactly one action per invocation."""

    def __init__(self, context: ActionContext, default_action: str = DEFAULT_ACTION) -> None:
        if default_action not in context.registry:
            raise ValueError(f"Default action is not registered: {default_action}")
        self.context = context
        self.default_action = default_action

    def dispatch(self, parsed: ParsedCommand) -> int:
        """Run the requested action.

        Args:
            parsed: Parsed command line

        Returns:
            The handler's exit status, or 1 on any error
        """
        name = parsed.action_name or self.default_action
        if not parsed.action_name:
            logger.debug("No action given, using default '%s'", name)

        try:
            action = self.context.registry.lookup(name)
        except UnknownActionError as e:
            return report_unknown_action(e)

        logger.debug("Invoking '%s' with %s", action.name, parsed.raw_args)
        try:
            status = action.handler(self.context, list(parsed.raw_args))
        except UnknownActionError as e:
            status = report_unknown_action(e)
        except UsageError as e:
            log(str(e), "error")
            err_console.print(f"Usage: steve {action.usage}", soft_wrap=True, highlight=False, markup=False)
            status = e.exit_status
        except SteveError as e:
            log(str(e), "error")
            status = e.exit_status
        except OSError as e:
            log(f"{action.name}: {e}", "error")
            status = SteveError.exit_status

        logger.debug("Action '%s' finished with status %s", action.name, status)
        return status
