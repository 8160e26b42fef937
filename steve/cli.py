"""CLI entry point for steve."""

from typing import List, Sequence

import click
from pydantic import ValidationError

from steve.actions import build_registry
from steve.config import get_settings
from steve.dispatcher import Dispatcher
from steve.parser import DEBUG_FLAG, END_OF_FLAGS, parse_args
from steve.registry import ActionContext
from steve.utils import log, setup_logging


class RawArgsCommand(click.Command):
    """Command that hands its arguments through untouched.

    Flag handling (including ``--``, ``-h`` and ``--version``) belongs to
    steve's own parser, so click must not interpret any of it.
    """

    def parse_args(self, ctx: click.Context, args: List[str]) -> List[str]:
        ctx.params["argv"] = tuple(args)
        return []


def wants_debug(argv: Sequence[str]) -> bool:
    """Check for --debug before parsing so the parser itself can be traced."""
    args = list(argv)
    if END_OF_FLAGS in args:
        args = args[:args.index(END_OF_FLAGS)]
    return DEBUG_FLAG in args


@click.command(cls=RawArgsCommand, add_help_option=False)
@click.pass_context
def main(ctx: click.Context, argv: Sequence[str] = ()) -> None:
    """Steve - bootstrap a bare-metal Kubernetes cluster."""
    try:
        settings = get_settings()
    except ValidationError as e:
        log(f"Invalid configuration: {e}", "error")
        ctx.exit(1)

    setup_logging(debug=wants_debug(argv), level=settings.log_level)

    context = ActionContext(settings=settings, registry=build_registry())
    dispatcher = Dispatcher(context)

    try:
        status = dispatcher.dispatch(parse_args(argv))
    except KeyboardInterrupt:
        log("Interrupted", "warning")
        status = 1
    finally:
        if context.http is not None:
            context.http.close()

    ctx.exit(status)


if __name__ == "__main__":
    main()
