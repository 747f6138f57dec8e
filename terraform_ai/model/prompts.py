"""System-role texts prepended to every completion prompt."""

from typing import Sequence


INIT_SYSTEM_PROMPT = (
    "You are a Terraform HCL generator, only generate valid provider Terraform HCL templates."
)

RUN_SYSTEM_PROMPT = (
    "You are a Terraform HCL generator, only generate valid Terraform HCL without provider templates."
)

NAME_SYSTEM_PROMPT = (
    "You are a file name generator, only generate valid name for Terraform templates."
)


def build_prompt(system_role: str, session_args: Sequence[str]) -> str:
    """
    Build the full prompt text.

    The system role comes first, then every session argument on its own
    line, in insertion order.

    Args:
        system_role: Instruction describing what to generate
        session_args: Accumulated conversation turns

    Returns:
        Prompt string sent to the backend
    """
    lines = [system_role]
    lines.extend(session_args)
    return "\n".join(lines) + "\n"
