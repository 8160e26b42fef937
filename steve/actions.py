"""The table of steve actions."""

from .help import cmd_help, cmd_version
from .ignition import cmd_ignition
from .matchbox import cmd_get_coreos, cmd_matchbox
from .registry import ActionRegistry
from .sync import cmd_push
from .users import cmd_user_deploy, cmd_user_setup


def build_registry() -> ActionRegistry:
    """Register every action, most relevant first."""
    registry = ActionRegistry()

    registry.register(
        "matchbox",
        """Run matchbox locally in the foreground.

Starts the matchbox container with the HTTP (8080) and gRPC (8081) ports
published and ./matchbox mounted as its data directory. Blocks until the
container exits.
""",
        cmd_matchbox,
        usage="matchbox",
    )
    registry.register(
        "get-coreos",
        """Download the CoreOS PXE images matchbox serves.

Fetches the kernel, initrd and disk image (with signatures) for the
configured channel and version into matchbox/assets/coreos/<version>.
A single failed download aborts the action.
""",
        cmd_get_coreos,
        usage="get-coreos",
    )
    registry.register(
        "ignition",
        """Fetch a machine's Ignition config from matchbox.

Requests http://<host>:8080/ignition?mac=<mac>&os=installed, with the
MAC address colons replaced by dashes, and writes it to ignition.json.
Then offers to install CoreOS to disk with it; the install only runs
after two confirmations.
""",
        cmd_ignition,
        usage="ignition <host> <mac>",
    )
    registry.register(
        "push",
        """Push the cluster configuration to the gateway.

Creates /opt/cluster-config on <host> owned by the remote user, rsyncs
the local tree into it and touches assets.ready so the gateway starts
matchbox and dnsmasq. Optionally keeps resyncing until interrupted.
""",
        cmd_push,
        usage="push <host>",
    )
    registry.register(
        "user-setup",
        """Install the shared shell profile and tools for users.

Downloads the shared tooling once, then for <username> (or every
directory under /home) replaces ~/.bashrc and the contents of ~/bin,
fixing ownership and permissions. Every user is attempted; the action
fails if any user failed.
""",
        cmd_user_setup,
        usage="user-setup [<username>]",
    )
    registry.register(
        "user-deploy",
        """Deploy a user's development container to the cluster.

Renders the per-user Deployment and creates or replaces it in the users
namespace. With --dry-run the manifest is printed instead.
""",
        cmd_user_deploy,
        usage="user-deploy <username> [--dry-run]",
    )
    registry.register(
        "help",
        """Show the list of actions, or the details of one action.""",
        cmd_help,
        usage="help [<action>]",
    )
    registry.register(
        "version",
        """Print the steve version.""",
        cmd_version,
        usage="version",
    )

    return registry
