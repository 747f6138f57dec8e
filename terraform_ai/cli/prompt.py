"""Terminal widgets for showing proposals and collecting user actions."""

from typing import Callable, Optional

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt
from rich.syntax import Syntax

from terraform_ai.agent.session import ActionKind, UserAction
from terraform_ai.errors import SessionCancelled

ACTION_LABEL = (
    f"Would you like to apply this? "
    f"[{ActionKind.REPROMPT.value}/{ActionKind.APPLY.value}/{ActionKind.DONT_APPLY.value}]"
)

_APPLY_ANSWERS = {"1", "apply"}
_DONT_APPLY_ANSWERS = {"2", "don't apply", "dont apply"}


def parse_action(answer: str) -> Optional[UserAction]:
    """
    Map a typed answer to an action.

    "1"/"apply" and "2"/"don't apply" pick the fixed choices; any other
    non-empty text is a reprompt. Empty answers return None.
    """
    text = answer.strip()
    if not text:
        return None

    lowered = text.lower()
    if lowered in _APPLY_ANSWERS:
        return UserAction.apply()
    if lowered in _DONT_APPLY_ANSWERS:
        return UserAction.dont_apply()
    return UserAction.reprompt(text)


def ask_user_action(console: Console) -> UserAction:
    """
    Ask what to do with the current proposal.

    Raises:
        SessionCancelled: if input is closed before an answer is given
    """
    console.print(f"[bold]{escape(ACTION_LABEL)}[/bold]")
    console.print(f"  [cyan]1[/cyan]) {ActionKind.APPLY.value}")
    console.print(f"  [cyan]2[/cyan]) {ActionKind.DONT_APPLY.value}")
    console.print("  or type new instructions to reprompt")

    while True:
        try:
            answer = Prompt.ask("[bold]>[/bold]", console=console)
        except EOFError as e:
            raise SessionCancelled("error to run prompt: input closed") from e

        action = parse_action(answer)
        if action is not None:
            return action


def template_presenter(console: Console, verb: str) -> Callable[[str, Optional[str]], None]:
    """Build a callable that prints a proposed template and its file name."""

    def present(template: str, name: Optional[str]) -> None:
        console.print(f"\n🦄 Attempting to {verb} the following template:")
        if name is not None:
            console.print(f"[dim]file name suggestion:[/dim] {name.strip()}")
        console.print(Syntax(template.strip("\n"), "hcl", word_wrap=True))
        console.print()

    return present
