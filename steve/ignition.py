"""Fetch a machine's rendered Ignition config from matchbox."""

from typing import List

from .config import Settings
from .errors import LocalFileError, UsageError
from .fetch import fetch_text
from .registry import ActionContext
from .utils import ConfirmGate, log


def normalize_mac(mac: str) -> str:
    """Rewrite a colon separated hardware address the way matchbox selects it."""
    return mac.strip().replace(":", "-")


def ignition_url(host: str, mac: str, port: int = 8080) -> str:
    """Build the matchbox URL serving the installed-OS Ignition config."""
    return f"http://{host}:{port}/ignition?mac={normalize_mac(mac)}&os=installed"


def install_command(settings: Settings) -> List[str]:
    """Build the command writing CoreOS to disk with the fetched config."""
    return [
        "sudo", "coreos-install",
        "-d", settings.install_device,
        "-C", settings.coreos_channel,
        "-i", str(settings.ignition_output),
    ]


def cmd_ignition(ctx: ActionContext, args: List[str]) -> int:
    """Fetch the Ignition config for a machine and optionally install CoreOS."""
    if len(args) < 2:
        raise UsageError("ignition requires a host and a MAC address", "ignition")

    host, mac = args[0], args[1]
    settings = ctx.settings
    url = ignition_url(host, mac, settings.matchbox_port)

    log(f"Fetching {url}...")
    content = fetch_text(ctx.http_client(), url)
    output = settings.ignition_output
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(content)
    except OSError as e:
        raise LocalFileError(output, e.strerror or str(e)) from e
    log(f"Ignition config written to {output}", "success")

    gate = ConfirmGate(
        ctx.confirm,
        f"Install CoreOS to {settings.install_device} with {output}?",
        f"This will erase {settings.install_device}. Are you sure?",
    )
    if gate.run(lambda: ctx.runner.run(install_command(settings))):
        log(f"CoreOS installed to {settings.install_device}", "success")
    else:
        log("Skipping install", "info")
    return 0
