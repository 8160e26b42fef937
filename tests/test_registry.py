"""Tests for the action registry."""

import pytest

from steve.actions import build_registry
from steve.config import DEFAULT_ACTION
from steve.errors import DuplicateActionError, ReservedActionNameError, UnknownActionError
from steve.registry import ActionRegistry


def noop(ctx, args) -> int:
    return 0


def test_list_keeps_registration_order() -> None:
    """Test that actions are listed in the order they were registered."""
    registry = ActionRegistry()
    for name in ["zeta", "alpha", "mid"]:
        registry.register(name, f"{name} action", noop)

    assert registry.names() == ["zeta", "alpha", "mid"]
    assert [action.name for action in registry.list()] == ["zeta", "alpha", "mid"]
    assert len(registry) == 3


@pytest.mark.parametrize("first, second", [("a", "b"), ("b", "a")])
def test_duplicate_registration_fails(first, second) -> None:
    """Test that registering a name twice fails whatever came before."""
    registry = ActionRegistry()
    registry.register(first, "first", noop)
    registry.register(second, "second", noop)

    with pytest.raises(DuplicateActionError):
        registry.register(first, "again", noop)
    assert registry.lookup(first).description == "first"


@pytest.mark.parametrize("name", ["", "_private", "__init"])
def test_reserved_names_rejected(name) -> None:
    """Test that empty and underscore-prefixed names cannot be actions."""
    registry = ActionRegistry()
    with pytest.raises(ReservedActionNameError):
        registry.register(name, "hidden", noop)
    assert len(registry) == 0


def test_lookup_unknown_lists_known_names() -> None:
    """Test that an unknown lookup reports the registered names."""
    registry = ActionRegistry()
    registry.register("push", "Push", noop)

    with pytest.raises(UnknownActionError) as exc_info:
        registry.lookup("frobnicate")
    assert exc_info.value.known == ["push"]
    assert registry.get("frobnicate") is None
    assert "frobnicate" not in registry


def test_usage_defaults_to_name() -> None:
    """Test that an action without a usage banner shows its name."""
    registry = ActionRegistry()
    action = registry.register("status", "Show status.\n\nMore text.", noop)
    assert action.usage == "status"
    assert action.summary == "Show status."


def test_builtin_table() -> None:
    """Test the static action table."""
    registry = build_registry()
    assert registry.names() == [
        "matchbox",
        "get-coreos",
        "ignition",
        "push",
        "user-setup",
        "user-deploy",
        "help",
        "version",
    ]
    assert DEFAULT_ACTION in registry
    for action in registry:
        assert action.usage.split()[0] == action.name
        assert action.summary
