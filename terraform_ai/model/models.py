"""Model tables shared by the router and the token budget."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet

from terraform_ai.errors import UnknownModelError


class Backend(str, Enum):
    """Completion service selected at start-up."""
    DIRECT = "direct"
    GATEWAY = "gateway"


class CallShape(str, Enum):
    """Request shape used against a backend."""
    LEGACY = "legacy"
    CHAT = "chat"


@dataclass(frozen=True)
class ModelSpec:
    """Static facts about a model identifier."""
    model_id: str
    max_tokens: int
    chat_backends: FrozenSet[Backend] = field(default_factory=frozenset)


_BOTH = frozenset({Backend.DIRECT, Backend.GATEWAY})

# The gateway names the 3.5 family "gpt-35-*", the direct API "gpt-3.5-*".
MODEL_TABLE: Dict[str, ModelSpec] = {
    entry.model_id: entry
    for entry in [
        ModelSpec("code-davinci-002", 8001),
        ModelSpec("text-davinci-003", 4097),
        ModelSpec("gpt-3.5-turbo-0301", 4096, frozenset({Backend.DIRECT})),
        ModelSpec("gpt-3.5-turbo", 4096, frozenset({Backend.DIRECT})),
        ModelSpec("gpt-35-turbo-0301", 4096, frozenset({Backend.GATEWAY})),
        ModelSpec("gpt-35-turbo", 4096, frozenset({Backend.GATEWAY})),
        ModelSpec("gpt-4-0314", 8192, _BOTH),
        ModelSpec("gpt-4-32k-0314", 8192, _BOTH),
    ]
}


def max_tokens_for(model_id: str) -> int:
    """
    Look up the context size of a model.

    Raises:
        UnknownModelError: if the identifier is not in the table
    """
    entry = MODEL_TABLE.get(model_id)
    if entry is None:
        raise UnknownModelError(model_id)
    return entry.max_tokens


def route(backend: Backend, model_id: str) -> CallShape:
    """
    Pick the call shape for a model on a backend.

    Unknown identifiers fall back to legacy completion.
    """
    entry = MODEL_TABLE.get(model_id)
    if entry is not None and backend in entry.chat_backends:
        return CallShape.CHAT
    return CallShape.LEGACY
