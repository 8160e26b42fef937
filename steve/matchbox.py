"""Local matchbox server and the CoreOS assets it serves."""

from typing import List

from .config import COREOS_ARTIFACTS, Settings
from .errors import UsageError
from .fetch import download
from .registry import ActionContext
from .utils import log, log_header


def matchbox_command(settings: Settings) -> List[str]:
    """Build the docker command running matchbox in the foreground."""
    data_dir = settings.matchbox_dir.resolve()
    return [
        "docker", "run", "--rm",
        "--name", "matchbox",
        "-p", f"{settings.matchbox_port}:8080",
        "-p", f"{settings.matchbox_rpc_port}:8081",
        "-v", f"{data_dir}:/var/lib/matchbox:Z",
        "-v", f"{data_dir / 'etc' / 'tls'}:/etc/matchbox:Z,ro",
        settings.matchbox_image,
        "-address=0.0.0.0:8080",
        "-rpc-address=0.0.0.0:8081",
        "-log-level=debug",
    ]


def cmd_matchbox(ctx: ActionContext, args: List[str]) -> int:
    """Run matchbox locally until the container exits."""
    if args:
        raise UsageError(f"matchbox takes no arguments, got: {' '.join(args)}", "matchbox")

    settings = ctx.settings
    log(
        f"Starting matchbox on ports {settings.matchbox_port} and "
        f"{settings.matchbox_rpc_port} (Ctrl+C to stop)..."
    )
    result = ctx.runner.run(matchbox_command(settings))
    log("matchbox exited", "success")
    return result.returncode


def artifact_names() -> List[str]:
    """Get every CoreOS artifact file name, signatures included."""
    names = []
    for artifact in COREOS_ARTIFACTS:
        names.extend([artifact, f"{artifact}.sig"])
    return names


def cmd_get_coreos(ctx: ActionContext, args: List[str]) -> int:
    """Download the CoreOS PXE assets into the matchbox assets directory."""
    if args:
        raise UsageError(f"get-coreos takes no arguments, got: {' '.join(args)}", "get-coreos")

    settings = ctx.settings
    dest_dir = settings.coreos_assets_dir()
    log_header(f"CoreOS {settings.coreos_channel} {settings.coreos_version}")

    client = ctx.http_client()
    for name in artifact_names():
        url = settings.coreos_url(name)
        log(f"Downloading {name}...", "step")
        download(client, url, dest_dir / name)

    log(f"CoreOS assets saved to {dest_dir}", "success")
    return 0
