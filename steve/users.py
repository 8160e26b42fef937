"""Per-user development environments."""

import logging
from pathlib import Path
import re
import shutil
from typing import Dict, List, Optional

from kubernetes import client, config
from kubernetes.client.rest import ApiException
import yaml

from .config import (
    SHARED_BIN,
    SHARED_PROFILE,
    USER_BIN_NAME,
    USER_PROFILE_NAME,
    Settings,
)
from .errors import ClusterError, SteveError, UsageError
from .fetch import download
from .registry import ActionContext
from .utils import console, log, log_header, log_subheader

logger = logging.getLogger(__name__)

DEPLOYMENT_TEMPLATE = Path(__file__).resolve().parent / "templates" / "user-deployment.yaml"

# Kubernetes object names (RFC 1123 labels)
USERNAME_PATTERN = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")

# Local account names
ACCOUNT_PATTERN = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.-]*$")


def target_users(settings: Settings, username: Optional[str] = None) -> List[str]:
    """Get the users to set up.

    Args:
        settings: Settings with the home directory root
        username: A single user, or None for every home directory

    Returns:
        Sorted user names
    """
    if username:
        if not ACCOUNT_PATTERN.match(username):
            raise UsageError(f"Invalid user name: {username}", "user-setup")
        return [username]
    if not settings.home_root.is_dir():
        return []
    return sorted(path.name for path in settings.home_root.iterdir() if path.is_dir())


def fetch_shared_tools(ctx: ActionContext) -> List[Path]:
    """Download the shared tooling once for all users."""
    settings = ctx.settings
    http = ctx.http_client()
    tools = []
    for name, url in settings.shared_tools.items():
        log(f"Downloading {name}...", "step")
        tools.append(download(http, url, settings.shared_tools_dir / name))
    return tools


def setup_user(ctx: ActionContext, user: str, tools: List[Path]) -> None:
    """Replace one user's profile and bin directory.

    Raises:
        UsageError: The user has no home directory
        ExternalProcessError: chown/chmod failed
    """
    settings = ctx.settings
    home = settings.home_root / user
    logger.debug("Setting up %s in %s", user, home)
    if not home.is_dir():
        raise UsageError(f"No home directory for {user} at {home}", "user-setup")

    shared = settings.user_setup_dir
    profile = home / USER_PROFILE_NAME
    shutil.copyfile(shared / SHARED_PROFILE, profile)

    bin_dir = home / USER_BIN_NAME
    if bin_dir.exists():
        shutil.rmtree(bin_dir)
    bin_dir.mkdir()

    sources = list(tools)
    shared_bin = shared / SHARED_BIN
    if shared_bin.is_dir():
        sources.extend(sorted(path for path in shared_bin.iterdir() if path.is_file()))
    for source in sources:
        shutil.copy2(source, bin_dir / source.name)

    ctx.runner.run(["chown", "-R", f"{user}:{user}", str(profile), str(bin_dir)])
    ctx.runner.run(["chmod", "-R", "+x", str(bin_dir)])


def cmd_user_setup(ctx: ActionContext, args: List[str]) -> int:
    """Install the shared profile and tooling for one or every user."""
    username = args[0] if args else None
    users = target_users(ctx.settings, username)
    if not users:
        log(f"No users found under {ctx.settings.home_root}", "warning")
        return 0

    log_header("User Environments")
    tools = fetch_shared_tools(ctx)

    failures: Dict[str, str] = {}
    for user in users:
        log_subheader(user)
        try:
            setup_user(ctx, user, tools)
        except (SteveError, OSError) as e:
            log(f"{user}: {e}", "error")
            failures[user] = str(e)
            continue
        log(f"{user} ready", "success")

    if failures:
        log(f"Setup failed for {len(failures)} of {len(users)} user(s): {', '.join(failures)}", "error")
        return 1
    return 0


def render_deployment(settings: Settings, username: str) -> dict:
    """Render the development Deployment for a user."""
    if not USERNAME_PATTERN.match(username):
        raise UsageError(f"Invalid user name: {username}", "user-deploy")

    text = DEPLOYMENT_TEMPLATE.read_text()
    text = (
        text.replace("<username>", username)
        .replace("<namespace>", settings.users_namespace)
        .replace("<registry>", settings.user_image_registry)
    )
    return yaml.safe_load(text)


def load_kube_config(kubeconfig: Optional[str] = None) -> None:
    """Load Kubernetes configuration."""
    try:
        if kubeconfig:
            config.load_kube_config(config_file=kubeconfig)
        else:
            try:
                config.load_incluster_config()
            except config.ConfigException:
                config.load_kube_config()
    except config.ConfigException as e:
        raise ClusterError(f"Failed to load Kubernetes config: {e}") from e


def apply_deployment(body: dict, namespace: str, kubeconfig: Optional[str] = None) -> str:
    """Create the Deployment, replacing it if it already exists.

    Returns:
        "created" or "replaced"
    """
    load_kube_config(kubeconfig)
    apps = client.AppsV1Api()
    name = body["metadata"]["name"]

    try:
        apps.create_namespaced_deployment(namespace=namespace, body=body)
        return "created"
    except ApiException as e:
        if e.status != 409:  # Already exists
            raise ClusterError(f"Failed to create deployment {name}: {e.reason}") from e

    try:
        apps.replace_namespaced_deployment(name=name, namespace=namespace, body=body)
    except ApiException as e:
        raise ClusterError(f"Failed to replace deployment {name}: {e.reason}") from e
    return "replaced"


def cmd_user_deploy(ctx: ActionContext, args: List[str]) -> int:
    """Deploy a user's development container."""
    flags = [arg for arg in args if arg.startswith("-")]
    positionals = [arg for arg in args if not arg.startswith("-")]
    unknown = [flag for flag in flags if flag != "--dry-run"]
    if unknown:
        raise UsageError(f"Unknown option: {unknown[0]}", "user-deploy")
    if not positionals:
        raise UsageError("user-deploy requires a user name", "user-deploy")

    settings = ctx.settings
    username = positionals[0]
    body = render_deployment(settings, username)

    if "--dry-run" in flags:
        console.print(yaml.safe_dump(body, sort_keys=False), markup=False, highlight=False, soft_wrap=True)
        return 0

    result = apply_deployment(body, settings.users_namespace, settings.kubeconfig_path)
    log(f"Deployment {username} {result} in {settings.users_namespace}", "success")
    return 0
