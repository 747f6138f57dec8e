from __future__ import annotations

from typing import Sequence

import pytest

from terraform_ai.agent.session import ConfirmationLoop, LoopState, UserAction
from terraform_ai.errors import SessionCancelled, UpstreamError


class ScriptedCompleter:
    def __init__(self, responses: dict[str, list[str]] | None = None) -> None:
        self.responses = responses or {}
        self.calls: list[tuple[list[str], str]] = []

    def __call__(self, session_args: Sequence[str], system_role: str) -> str:
        self.calls.append((list(session_args), system_role))
        queue = self.responses.get(system_role)
        if queue:
            return queue.pop(0)
        return f"{system_role}-{len(self.calls)}"


class ScriptedActions:
    def __init__(self, actions: list[UserAction]) -> None:
        self.actions = actions
        self.asked = 0

    def __call__(self) -> UserAction:
        self.asked += 1
        return self.actions.pop(0)


def test_reprompt_then_apply_accumulates_session() -> None:
    completer = ScriptedCompleter({"body": ["first", "second"]})
    actions = ScriptedActions([UserAction.reprompt("add versioning"), UserAction.apply()])
    loop = ConfirmationLoop(completer, actions, "body")
    session_args = ["create a bucket"]

    outcome = loop.run(session_args)

    assert outcome.state == LoopState.ACCEPTED
    assert outcome.accepted
    assert outcome.template == "second"
    assert outcome.iterations == 2
    assert session_args == ["create a bucket", "", "add versioning"]
    assert [call[0] for call in completer.calls] == [
        ["create a bucket", ""],
        ["create a bucket", "", "add versioning"],
    ]
    assert actions.asked == 2
    assert loop.state == LoopState.ACCEPTED


def test_confirmation_disabled_accepts_first_proposal() -> None:
    completer = ScriptedCompleter()

    def never_asked() -> UserAction:
        raise AssertionError("should not ask")

    loop = ConfirmationLoop(completer, never_asked, "body", require_confirmation=False)

    outcome = loop.run(["prompt"])

    assert outcome.accepted
    assert outcome.iterations == 1
    assert len(completer.calls) == 1


def test_dont_apply_declines() -> None:
    loop = ConfirmationLoop(ScriptedCompleter(), ScriptedActions([UserAction.dont_apply()]), "body")

    outcome = loop.run(["prompt"])

    assert outcome.state == LoopState.DECLINED
    assert not outcome.accepted
    assert outcome.template == "body-1"


def test_name_role_requests_file_name_each_iteration() -> None:
    completer = ScriptedCompleter({"body": ["t1", "t2"], "name": ["a.tf", "b.tf"]})
    shown: list[tuple[str, str | None]] = []
    loop = ConfirmationLoop(
        completer,
        ScriptedActions([UserAction.reprompt("again"), UserAction.apply()]),
        "body",
        name_role="name",
        present=lambda template, name: shown.append((template, name)),
    )

    outcome = loop.run(["prompt"])

    assert outcome.template == "t2"
    assert outcome.name == "b.tf"
    assert shown == [("t1", "a.tf"), ("t2", "b.tf")]
    assert [call[1] for call in completer.calls] == ["body", "name", "body", "name"]


def test_completion_failure_aborts_loop() -> None:
    def failing(session_args: Sequence[str], system_role: str) -> str:
        raise UpstreamError("backend down")

    loop = ConfirmationLoop(failing, ScriptedActions([]), "body")

    with pytest.raises(UpstreamError) as excinfo:
        loop.run(["prompt"])

    assert str(excinfo.value) == "error completing template: backend down"


def test_name_failure_is_labelled() -> None:
    def completer(session_args: Sequence[str], system_role: str) -> str:
        if system_role == "name":
            raise UpstreamError("no name")
        return "body"

    loop = ConfirmationLoop(completer, ScriptedActions([]), "body", name_role="name")

    with pytest.raises(UpstreamError) as excinfo:
        loop.run(["prompt"])

    assert excinfo.value.context == ["error completing name"]


def test_cancelled_prompt_propagates() -> None:
    def cancel() -> UserAction:
        raise SessionCancelled("input closed")

    loop = ConfirmationLoop(ScriptedCompleter(), cancel, "body")

    with pytest.raises(SessionCancelled):
        loop.run(["prompt"])

    assert loop.state == LoopState.AWAITING_ACTION
