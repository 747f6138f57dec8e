"""Completion orchestration, the confirmation loop and the artifact pipeline."""

from terraform_ai.agent.completion import (
    complete,
    Completer,
)
from terraform_ai.agent.session import (
    ActionKind,
    UserAction,
    LoopState,
    LoopOutcome,
    ConfirmationLoop,
)
from terraform_ai.agent.pipeline import (
    Artifact,
    ArtifactPipeline,
    PROVIDER_FILE_NAME,
    default_file_name,
)

__all__ = [
    "complete",
    "Completer",
    "ActionKind",
    "UserAction",
    "LoopState",
    "LoopOutcome",
    "ConfirmationLoop",
    "Artifact",
    "ArtifactPipeline",
    "PROVIDER_FILE_NAME",
    "default_file_name",
]
