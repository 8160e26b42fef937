"""Configuration for the steve bootstrap tool."""

from pathlib import Path
from typing import Dict, Optional

from pydantic_settings import BaseSettings


def get_project_root() -> Path:
    """Get the cluster configuration root directory."""
    # This file is at steve/config.py
    # Project root is one level up
    return Path(__file__).resolve().parent.parent


# Actions
DEFAULT_ACTION = "help"
RESERVED_PREFIX = "_"

# CoreOS PXE artifacts served by matchbox (each also has a .sig)
COREOS_ARTIFACTS = [
    "coreos_production_pxe.vmlinuz",
    "coreos_production_pxe_image.cpio.gz",
    "coreos_production_image.bin.bz2",
]

# Per-user environment layout
USER_PROFILE_NAME = ".bashrc"
USER_BIN_NAME = "bin"
SHARED_PROFILE = "profile"
SHARED_BIN = "bin"


class Settings(BaseSettings):
    """Bootstrap configuration settings."""

    # Matchbox
    matchbox_image: str = "quay.io/coreos/matchbox:latest"
    matchbox_port: int = 8080
    matchbox_rpc_port: int = 8081
    matchbox_dir: Path = get_project_root() / "matchbox"

    # CoreOS
    coreos_channel: str = "stable"
    coreos_version: str = "1465.6.0"
    coreos_base_url: str = "https://{channel}.release.core-os.net/amd64-usr/{version}"
    ignition_output: Path = Path("ignition.json")
    install_device: str = "/dev/sda"

    # Gateway push
    remote_user: str = "core"
    remote_dir: str = "/opt/cluster-config"
    ready_marker: str = "assets.ready"
    config_dir: Path = get_project_root()
    sync_interval: float = 2.0

    # User environments
    home_root: Path = Path("/home")
    user_setup_dir: Path = get_project_root() / "user_setup"
    shared_tools_dir: Path = Path("/opt/steve/tools")
    shared_tools: Dict[str, str] = {
        "kubectl": (
            "https://storage.googleapis.com/kubernetes-release/release/"
            "v1.7.3/bin/linux/amd64/kubectl"
        ),
    }
    users_namespace: str = "users"
    user_image_registry: str = "localhost:5000"
    kubeconfig_path: Optional[str] = None

    # HTTP
    http_timeout: float = 30.0

    # Logging
    log_level: str = "WARNING"

    class Config:
        """Pydantic config."""

        env_prefix = "STEVE_"
        case_sensitive = False

    def coreos_url(self, artifact: str) -> str:
        """Get the download URL for a CoreOS artifact."""
        base = self.coreos_base_url.format(
            channel=self.coreos_channel,
            version=self.coreos_version,
        )
        return f"{base.rstrip('/')}/{artifact}"

    def coreos_assets_dir(self) -> Path:
        """Get the directory matchbox serves the CoreOS assets from."""
        return self.matchbox_dir / "assets" / "coreos" / self.coreos_version


def get_settings(**overrides) -> Settings:
    """Load settings from the environment, applying explicit overrides."""
    return Settings(**overrides)
