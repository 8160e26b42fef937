"""Action registry and the context handed to action handlers."""

from dataclasses import dataclass, field
import time
from typing import Callable, Dict, Iterator, List, Optional

import httpx

from .config import RESERVED_PREFIX, Settings
from .errors import DuplicateActionError, ReservedActionNameError, UnknownActionError
from .utils import ConfirmFunc, Runner, confirm


@dataclass
class ActionContext:
    """Capabilities available to every handler."""

    settings: Settings
    registry: "ActionRegistry"
    runner: Runner = field(default_factory=Runner)
    confirm: ConfirmFunc = confirm
    http: Optional[httpx.Client] = None
    sleep: Callable[[float], None] = time.sleep

    def http_client(self) -> httpx.Client:
        """Get the HTTP client, creating one on first use."""
        if self.http is None:
            self.http = httpx.Client(
                timeout=self.settings.http_timeout,
                follow_redirects=True,
            )
        return self.http


Handler = Callable[[ActionContext, List[str]], int]


@dataclass(frozen=True)
class Action:
    """A named provisioning operation."""

    name: str
    description: str
    handler: Handler
    usage: str = ""

    @property
    def summary(self) -> str:
        """First line of the description."""
        lines = self.description.strip().splitlines()
        return lines[0] if lines else ""


class ActionRegistry:
    """Static table of actions, kept in registration order."""

    def __init__(self) -> None:
        self._actions: Dict[str, Action] = {}

    def register(
        self,
        name: str,
        description: str,
        handler: Handler,
        usage: str = "",
    ) -> Action:
        """Register an action.

        Raises:
            ReservedActionNameError: Name is empty or private
            DuplicateActionError: Name is already registered
        """
        if not name or name.startswith(RESERVED_PREFIX):
            raise ReservedActionNameError(name)
        if name in self._actions:
            raise DuplicateActionError(name)

        action = Action(name=name, description=description, handler=handler, usage=usage or name)
        self._actions[name] = action
        return action

    def list(self) -> List[Action]:
        return list(self._actions.values())

    def names(self) -> List[str]:
        return list(self._actions)

    def get(self, name: str) -> Optional[Action]:
        return self._actions.get(name)

    def lookup(self, name: str) -> Action:
        """Get an action by name.

        Raises:
            UnknownActionError: No action has that name
        """
        action = self._actions.get(name)
        if action is None:
            raise UnknownActionError(name, self.names())
        return action

    def __contains__(self, name: object) -> bool:
        return name in self._actions

    def __iter__(self) -> Iterator[Action]:
        return iter(self.list())

    def __len__(self) -> int:
        return len(self._actions)
