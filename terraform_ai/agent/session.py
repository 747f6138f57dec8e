"""Interactive propose, confirm and reprompt loop."""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence

from terraform_ai.errors import TerraformAIError
from terraform_ai.logging import Logger, NullLogger


class ActionKind(str, Enum):
    """Choices offered after each proposal."""
    APPLY = "Apply"
    DONT_APPLY = "Don't Apply"
    REPROMPT = "Reprompt"


@dataclass(frozen=True)
class UserAction:
    """An action picked by the user; reprompts carry the new instruction."""
    kind: ActionKind
    text: str = ""

    @classmethod
    def apply(cls) -> "UserAction":
        return cls(ActionKind.APPLY, ActionKind.APPLY.value)

    @classmethod
    def dont_apply(cls) -> "UserAction":
        return cls(ActionKind.DONT_APPLY, ActionKind.DONT_APPLY.value)

    @classmethod
    def reprompt(cls, text: str) -> "UserAction":
        return cls(ActionKind.REPROMPT, text)


class LoopState(str, Enum):
    COLLECTING = "collecting"
    AWAITING_ACTION = "awaiting-action"
    ACCEPTED = "accepted"
    DECLINED = "declined"


@dataclass
class LoopOutcome:
    """Where the loop stopped and what it produced."""
    state: LoopState
    template: str = ""
    name: Optional[str] = None
    iterations: int = 0

    @property
    def accepted(self) -> bool:
        return self.state == LoopState.ACCEPTED


Completion = Callable[[Sequence[str], str], str]
AskAction = Callable[[], UserAction]
Present = Callable[[str, Optional[str]], None]


class ConfirmationLoop:
    """
    Drives completions until the user applies or declines.

    Each iteration appends the previous action text to the session (an
    empty string on the first pass), asks for the template body and, when a
    name role is configured, for a file name, shows the proposal and waits
    for an action. With confirmation disabled the first proposal is accepted
    without asking.
    """

    def __init__(
        self,
        completer: Completion,
        ask_action: AskAction,
        system_role: str,
        require_confirmation: bool = True,
        name_role: Optional[str] = None,
        present: Optional[Present] = None,
        logger: Optional[Logger] = None,
    ):
        """
        Initialize the loop.

        Args:
            completer: Callable(session_args, system_role) -> text
            ask_action: Callable returning the user's next UserAction
            system_role: Instruction for the template body
            require_confirmation: Ask the user before accepting
            name_role: Instruction for the file name; None skips naming
            present: Callable(template, name) showing a proposal
            logger: Event logger
        """
        self.completer = completer
        self.ask_action = ask_action
        self.system_role = system_role
        self.require_confirmation = require_confirmation
        self.name_role = name_role
        self.present = present or (lambda template, name: None)
        self.logger = logger or NullLogger()
        self.state = LoopState.COLLECTING

    def run(self, session_args: List[str]) -> LoopOutcome:
        """
        Run the loop over a session, appending to it in place.

        Args:
            session_args: Initial prompt turns; grows by one per iteration

        Returns:
            LoopOutcome in ACCEPTED or DECLINED state

        Raises:
            TerraformAIError: completion or prompt failures abort the loop
        """
        action = ""
        iterations = 0
        self.state = LoopState.COLLECTING
        self.logger.info("session.started", "Generating template")

        while True:
            session_args.append(action)
            iterations += 1

            try:
                template = self.completer(session_args, self.system_role)
            except TerraformAIError as e:
                raise e.wrap("error completing template")

            name = None
            if self.name_role is not None:
                try:
                    name = self.completer(session_args, self.name_role)
                except TerraformAIError as e:
                    raise e.wrap("error completing name")

            self.state = LoopState.AWAITING_ACTION
            self.present(template, name)

            choice = self._next_action()
            if choice.kind == ActionKind.APPLY:
                self.state = LoopState.ACCEPTED
                self.logger.info("session.accepted", "Template accepted", {"iteration": iterations})
                return LoopOutcome(LoopState.ACCEPTED, template, name, iterations)

            if choice.kind == ActionKind.DONT_APPLY:
                self.state = LoopState.DECLINED
                self.logger.info("session.declined", "Template not applied", {"iteration": iterations})
                return LoopOutcome(LoopState.DECLINED, template, name, iterations)

            self.state = LoopState.COLLECTING
            self.logger.info("session.reprompt", f"Reprompting: {choice.text}", {"iteration": iterations})
            action = choice.text

    def _next_action(self) -> UserAction:
        if not self.require_confirmation:
            return UserAction.apply()
        return self.ask_action()
