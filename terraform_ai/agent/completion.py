"""Prompt completion: budget, route and call the backend."""

import logging
from typing import Optional, Sequence

from terraform_ai.config import AppConfig
from terraform_ai.errors import TerraformAIError
from terraform_ai.logging import Logger, NullLogger
from terraform_ai.model.client import BackendClient
from terraform_ai.model.models import Backend, CallShape, route
from terraform_ai.model.prompts import build_prompt
from terraform_ai.model.tokens import Encoder, compute_remaining_tokens

logger = logging.getLogger(__name__)


def complete(
    client: BackendClient,
    backend: Backend,
    session_args: Sequence[str],
    model_id: str,
    system_role: str,
    temperature: float = 0.0,
    max_tokens_override: int = 0,
    encoder: Optional[Encoder] = None,
) -> str:
    """
    Generate text for the accumulated session.

    Args:
        client: Backend client to call
        backend: Backend the client talks to, used for routing
        session_args: Conversation turns so far
        model_id: Target model or deployment identifier
        system_role: Instruction placed before the session turns
        temperature: Sampling temperature
        max_tokens_override: Replaces the table's max tokens when > 0
        encoder: Optional tokenizer for the budget

    Returns:
        Generated text, unchanged

    Raises:
        TerraformAIError: any budget or backend failure, with the failing
            stage added to its context
    """
    try:
        max_tokens = compute_remaining_tokens(session_args, model_id, max_tokens_override, encoder)
    except TerraformAIError as e:
        raise e.wrap("error calculate max token")

    prompt = build_prompt(system_role, session_args)
    shape = route(backend, model_id)
    logger.debug(f"Routing {model_id} on {backend.value} backend to {shape.value} completion")

    if shape == CallShape.CHAT:
        try:
            return client.run_chat_completion(prompt, max_tokens, temperature)
        except TerraformAIError as e:
            raise e.wrap(f"error {backend.value} chat completion")

    try:
        return client.run_completion(prompt, max_tokens, temperature)
    except TerraformAIError as e:
        raise e.wrap(f"error {backend.value} completion")


class Completer:
    """Completion bound to one client and configuration for a whole run."""

    def __init__(
        self,
        client: BackendClient,
        config: AppConfig,
        encoder: Optional[Encoder] = None,
        logger: Optional[Logger] = None,
    ):
        self.client = client
        self.config = config
        self.encoder = encoder
        self.logger = logger or NullLogger()
        self.calls = 0

    def __call__(self, session_args: Sequence[str], system_role: str) -> str:
        self.calls += 1
        self.logger.debug(
            "completion.requested",
            f"Requesting completion from {self.config.deployment_name}",
            {
                "model": self.config.deployment_name,
                "shape": route(self.config.backend, self.config.deployment_name).value,
            },
        )
        text = complete(
            self.client,
            self.config.backend,
            session_args,
            self.config.deployment_name,
            system_role,
            temperature=self.config.temperature,
            max_tokens_override=self.config.max_tokens,
            encoder=self.encoder,
        )
        self.logger.debug("completion.received", f"Received {len(text)} characters")
        return text
