"""Tests for the matchbox and get-coreos actions."""

import httpx
import pytest

from steve.errors import ExternalProcessError, FetchError, LocalFileError, UsageError
from steve.matchbox import artifact_names, cmd_get_coreos, cmd_matchbox, matchbox_command


def test_matchbox_command(settings) -> None:
    """Test the docker command publishes both ports and mounts the data dir."""
    cmd = matchbox_command(settings)
    assert cmd[:3] == ["docker", "run", "--rm"]
    assert "8080:8080" in cmd
    assert "8081:8081" in cmd
    assert f"{settings.matchbox_dir.resolve()}:/var/lib/matchbox:Z" in cmd
    assert settings.matchbox_image in cmd


def test_matchbox_runs_in_foreground(make_context, runner) -> None:
    """Test that the container is run once and its status returned."""
    ctx = make_context()
    assert cmd_matchbox(ctx, []) == 0
    assert runner.calls == [matchbox_command(ctx.settings)]


def test_matchbox_failure_propagates(make_context, failing_runner) -> None:
    """Test that a failing container surfaces as an external error."""
    ctx = make_context(runner=failing_runner(lambda cmd: 125))
    with pytest.raises(ExternalProcessError) as exc_info:
        cmd_matchbox(ctx, [])
    assert exc_info.value.returncode == 125


def test_matchbox_rejects_arguments(make_context, runner) -> None:
    """Test that matchbox takes no arguments."""
    with pytest.raises(UsageError):
        cmd_matchbox(make_context(), ["extra"])
    assert runner.calls == []


def test_get_coreos_downloads_all_artifacts(make_context, settings) -> None:
    """Test that every image and signature is saved to the assets dir."""
    requested = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return httpx.Response(200, content=request.url.path.encode())

    assert cmd_get_coreos(make_context(handler), []) == 0

    dest = settings.matchbox_dir / "assets" / "coreos" / settings.coreos_version
    names = artifact_names()
    assert len(names) == 6
    assert sorted(p.name for p in dest.iterdir()) == sorted(names)
    assert requested[0] == (
        f"https://stable.release.core-os.net/amd64-usr/{settings.coreos_version}/"
        "coreos_production_pxe.vmlinuz"
    )


def test_get_coreos_aborts_on_first_failure(make_context) -> None:
    """Test that one failed download stops the whole action."""
    requested = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(request.url.path)
        if request.url.path.endswith(".sig"):
            return httpx.Response(404)
        return httpx.Response(200, content=b"data")

    with pytest.raises(FetchError) as exc_info:
        cmd_get_coreos(make_context(handler), [])

    assert "HTTP 404" in str(exc_info.value)
    assert len(requested) == 2


def test_get_coreos_unwritable_assets_dir(make_context, settings) -> None:
    """Test that an assets dir that cannot be created is reported, not raised raw."""
    settings.matchbox_dir.parent.mkdir(parents=True, exist_ok=True)
    settings.matchbox_dir.write_text("not a directory")
    ctx = make_context(lambda request: httpx.Response(200, content=b"data"))

    with pytest.raises(LocalFileError):
        cmd_get_coreos(ctx, [])
