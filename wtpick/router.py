"""Dispatch picker key actions to worktree switch, delete and force-toggle.

Each run of the worktree picker is a `PickerSession`. The session owns its
own deletion state, so the force flag starts disarmed every time the picker
opens.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from wtpick.codec import decode, parse_branch_name
from wtpick.config import ResolvedConfig
from wtpick.constants import (
    ACTION_DEFAULT,
    DEFAULT_PATH_PREFIX,
    LIST_DELIMITER,
    NO_WORKTREES_MESSAGE,
    PATH_PROMPT,
)
from wtpick.deletion import DeletionStateMachine, Prompter
from wtpick.models import PendingCreateRequest, PickerOptions, PickerResult
from wtpick.notify import Notifier

logger = logging.getLogger(__name__)

Picker = Callable[[list[str], PickerOptions], PickerResult | None]


class MutationService(Protocol):
    def switch(self, path: str) -> None: ...

    def delete(
        self,
        path: str,
        forced: bool,
        on_success: Callable[[], None],
        on_failure: Callable[[], None],
    ) -> None: ...

    def create(self, path: str, branch: str): ...


@dataclass
class Action:
    """Handler for one picker key. `resume` re-opens the picker after it runs."""

    handler: Callable[[list[str]], None]
    resume: bool = False


class PickerSession:
    def __init__(
        self,
        lines: list[str],
        picker: Picker,
        service: MutationService,
        notifier: Notifier,
        prompter: Prompter,
        config: ResolvedConfig,
        actions: dict[str, Action] | None = None,
    ) -> None:
        self._lines = lines
        self._picker = picker
        self._service = service
        self._notifier = notifier
        self._config = config
        self.deletion = DeletionStateMachine(service, notifier, prompter, toggle_key=config.toggle_force_key)
        self.actions = {**self.default_actions(), **(actions or {})}

    def default_actions(self) -> dict[str, Action]:
        return {
            ACTION_DEFAULT: Action(self.switch),
            self._config.delete_key: Action(self.delete),
            self._config.toggle_force_key: Action(self.toggle_force, resume=True),
        }

    def switch(self, selected: list[str]) -> None:
        record = decode(selected[0]) if selected else None
        if record is None or not record.path:
            return
        self._service.switch(record.path)

    def delete(self, selected: list[str]) -> None:
        self.deletion.attempt_delete(selected, self._config.confirm_policy)

    def toggle_force(self, selected: list[str]) -> None:
        self.deletion.toggle()

    def _options(self, query: str) -> PickerOptions:
        return PickerOptions(
            prompt=self._config.prompt,
            delimiter=LIST_DELIMITER,
            with_nth=self._config.with_nth,
            keys=[key for key in self.actions if key != ACTION_DEFAULT],
            query=query,
            status=self._notifier.take_status(),
        )

    def run(self) -> None:
        query = ""
        while True:
            result = self._picker(self._lines, self._options(query))
            if result is None:
                return
            action = self.actions.get(result.key)
            if action is None:
                logger.debug("No action bound to key", extra={"key": result.key})
                return
            action.handler(result.selected)
            if not action.resume:
                return
            query = result.query


def git_worktree(
    lines: list[str],
    picker: Picker,
    service: MutationService,
    notifier: Notifier,
    prompter: Prompter,
    config: ResolvedConfig,
    actions: dict[str, Action] | None = None,
) -> PickerSession | None:
    """Open the worktree picker over already-listed lines."""
    if not lines:
        notifier.echo(NO_WORKTREES_MESSAGE)
        return None
    session = PickerSession(lines, picker, service, notifier, prompter, config, actions)
    session.run()
    return session


def default_path_for(branch: str | None) -> str:
    if branch:
        return DEFAULT_PATH_PREFIX + branch
    return DEFAULT_PATH_PREFIX


def prompt_for_path(prompter: Prompter, branch: str | None) -> str | None:
    default_input = default_path_for(branch)
    path = prompter.ask(PATH_PROMPT, default_input)
    if path is None:
        return None
    return path or default_input


def build_create_request(result: PickerResult, prompter: Prompter) -> PendingCreateRequest | None:
    """Work out (branch, path) from a branch-picker result, prompting for the path."""
    branch = parse_branch_name(result.selected[0]) if result.selected else None
    if not branch:
        branch = result.query.strip() or None
    if not branch:
        return None

    path = prompt_for_path(prompter, branch)
    if not path:
        return None
    return PendingCreateRequest(branch=branch, path=path)


def create_git_worktree(
    branches: list[str],
    picker: Picker,
    service: MutationService,
    prompter: Prompter,
    config: ResolvedConfig,
) -> PendingCreateRequest | None:
    """Pick (or type) a branch, ask for a path and create the worktree."""
    result = picker(branches, PickerOptions(prompt=config.create_prompt))
    if result is None or result.key != ACTION_DEFAULT:
        return None
    request = build_create_request(result, prompter)
    if request is None:
        return None
    logger.info("Creating worktree", extra={"path": request.path, "branch": request.branch})
    service.create(request.path, request.branch)
    return request
