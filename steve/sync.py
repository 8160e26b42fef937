"""Push the cluster configuration tree to the gateway node."""

import logging
import posixpath
from typing import List

from .config import Settings
from .errors import UsageError
from .registry import ActionContext
from .utils import Runner, log, log_header

logger = logging.getLogger(__name__)


def remote_address(settings: Settings, host: str) -> str:
    """Get the ``user@host`` address for a host."""
    if "@" in host:
        return host
    return f"{settings.remote_user}@{host}"


def ssh(runner: Runner, address: str, *command: str) -> None:
    runner.run(["ssh", address, *command])


def rsync_command(settings: Settings, address: str) -> List[str]:
    """Build the rsync command mirroring the local tree to the gateway."""
    source = f"{str(settings.config_dir).rstrip('/')}/"
    return [
        "rsync", "-az", "--delete",
        "--exclude", ".git",
        source,
        f"{address}:{settings.remote_dir.rstrip('/')}/",
    ]


def push(ctx: ActionContext, host: str) -> None:
    """Ensure the remote directory, sync files, then mark them ready.

    Raises:
        ExternalProcessError: The first failing ssh/rsync call
    """
    settings = ctx.settings
    address = remote_address(settings, host)
    remote_dir = settings.remote_dir
    user = address.split("@", 1)[0]

    log(f"Preparing {remote_dir} on {address}...", "step")
    ssh(ctx.runner, address, "sudo", "mkdir", "-p", remote_dir)
    ssh(ctx.runner, address, "sudo", "chown", user, remote_dir)

    log(f"Syncing {settings.config_dir}...", "step")
    ctx.runner.run(rsync_command(settings, address))

    marker = posixpath.join(remote_dir, settings.ready_marker)
    ssh(ctx.runner, address, "touch", marker)
    log(f"Marked {marker} on {address}", "success")


def watch(ctx: ActionContext, host: str) -> None:
    """Resync forever; only an interrupt ends the loop."""
    settings = ctx.settings
    address = remote_address(settings, host)
    command = rsync_command(settings, address)
    log(f"Resyncing every {settings.sync_interval:g}s (Ctrl+C to stop)...")
    try:
        while True:
            ctx.sleep(settings.sync_interval)
            ctx.runner.run(command)
            logger.debug("Resynced %s", address)
    except KeyboardInterrupt:
        log("Stopped watching", "info")


def cmd_push(ctx: ActionContext, args: List[str]) -> int:
    """Push the configuration tree to a host."""
    if not args:
        raise UsageError("push requires a host", "push")

    host = args[0]
    log_header(f"Pushing to {host}")
    push(ctx, host)

    if ctx.confirm("Keep watching for changes and resync?"):
        watch(ctx, host)
    return 0
