"""Model client module for AI-powered Terraform generation."""

from .models import (
    Backend,
    CallShape,
    ModelSpec,
    MODEL_TABLE,
    max_tokens_for,
    route,
)
from .tokens import (
    TOKEN_SAFETY_MARGIN,
    compute_remaining_tokens,
    encode_text,
)
from .client import (
    BackendClient,
    HTTPBackendClient,
    OpenAIClient,
    AzureClient,
    create_client,
)
from .prompts import (
    INIT_SYSTEM_PROMPT,
    RUN_SYSTEM_PROMPT,
    NAME_SYSTEM_PROMPT,
    build_prompt,
)

__all__ = [
    'Backend',
    'CallShape',
    'ModelSpec',
    'MODEL_TABLE',
    'max_tokens_for',
    'route',
    'TOKEN_SAFETY_MARGIN',
    'compute_remaining_tokens',
    'encode_text',
    'BackendClient',
    'HTTPBackendClient',
    'OpenAIClient',
    'AzureClient',
    'create_client',
    'INIT_SYSTEM_PROMPT',
    'RUN_SYSTEM_PROMPT',
    'NAME_SYSTEM_PROMPT',
    'build_prompt',
]
