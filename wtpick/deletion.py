"""Force-deletion toggle and confirmation gate for removing worktrees.

The force flag is armed with the toggle key and survives a failed delete,
so the user can retry forced without toggling again. A successful delete
always disarms it.
"""

import logging
from collections.abc import Callable
from enum import Enum
from typing import Protocol

from wtpick.codec import decode
from wtpick.config import ConfirmPolicy
from wtpick.constants import DEFAULT_TOGGLE_FORCE_KEY
from wtpick.notify import Notifier

logger = logging.getLogger(__name__)

DELETE_PROMPT = "Delete worktree? [y/n]: "
FORCE_DELETE_PROMPT = "Force deletion of worktree? [y/n]: "


class ForceState(Enum):
    NORMAL = "normal"
    FORCE_ARMED = "force_armed"


class Prompter(Protocol):
    def ask(self, prompt: str, default: str = "") -> str | None: ...


class DeleteService(Protocol):
    def delete(
        self,
        path: str,
        forced: bool,
        on_success: Callable[[], None],
        on_failure: Callable[[], None],
    ) -> None: ...


class DeletionStateMachine:
    def __init__(
        self,
        service: DeleteService,
        notifier: Notifier,
        prompter: Prompter,
        toggle_key: str = DEFAULT_TOGGLE_FORCE_KEY,
    ) -> None:
        self._service = service
        self._notifier = notifier
        self._prompter = prompter
        self._toggle_key = toggle_key
        self.state = ForceState.NORMAL

    @property
    def forcing(self) -> bool:
        return self.state is ForceState.FORCE_ARMED

    def toggle(self) -> None:
        self.state = ForceState.NORMAL if self.forcing else ForceState.FORCE_ARMED
        logger.info("Toggled forced deletion", extra={"state": self.state.value})
        if self.forcing:
            self._notifier.echo("The next deletion will be forced")
        else:
            self._notifier.echo("The next deletion will not be forced")
        self._notifier.redraw()

    def _confirmed(self, policy: ConfirmPolicy) -> bool:
        if not policy.required:
            return True
        prompt = FORCE_DELETE_PROMPT if self.forcing else DELETE_PROMPT
        answer = self._prompter.ask(prompt) or ""
        if answer[:1].lower() == "y":
            return True
        self._notifier.echo("Didn't delete worktree")
        return False

    def attempt_delete(self, selected: list[str], policy: ConfirmPolicy) -> None:
        if not self._confirmed(policy):
            return

        record = decode(selected[0]) if selected else None
        if record is None or not record.path:
            return

        self._service.delete(
            record.path,
            self.forcing,
            on_success=self._on_success,
            on_failure=self._on_failure,
        )

    def _on_success(self) -> None:
        self.state = ForceState.NORMAL

    def _on_failure(self) -> None:
        self._notifier.echo(f"Deletion failed, use <{self._toggle_key}> to force the next deletion")
