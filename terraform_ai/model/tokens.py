"""Token budget accounting for completion requests."""

import logging
from typing import Callable, Optional, Sequence

import litellm

from terraform_ai.model.models import max_tokens_for

logger = logging.getLogger(__name__)

# The encoder undercounts now and then, so every budget starts here.
TOKEN_SAFETY_MARGIN = 100

# Tokenizer used for every target model so counts stay deterministic.
TOKENIZER_MODEL = "gpt-3.5-turbo"

Encoder = Callable[[str], Sequence[int]]


def encode_text(text: str) -> Sequence[int]:
    """Encode text with litellm's bundled BPE tokenizer."""
    return litellm.encode(model=TOKENIZER_MODEL, text=text)


def compute_remaining_tokens(
    prompts: Sequence[str],
    model_id: str,
    override: int = 0,
    encoder: Optional[Encoder] = None,
) -> int:
    """
    Compute how many tokens are left for the completion.

    Args:
        prompts: Prompt texts, tokenized independently
        model_id: Target model identifier
        override: When greater than zero, replaces the table's max tokens
        encoder: Tokenizer; defaults to encode_text

    Returns:
        Max tokens minus prompt tokens minus the safety margin. The value
        can be negative; it is passed to the backend as is.

    Raises:
        UnknownModelError: if model_id is not in the max-token table
    """
    max_tokens = max_tokens_for(model_id)
    if override > 0:
        max_tokens = override

    encode = encoder or encode_text
    total = TOKEN_SAFETY_MARGIN
    for prompt in prompts:
        total += len(encode(prompt))

    remaining = max_tokens - total
    logger.debug(f"Token budget for {model_id}: {max_tokens} - {total} = {remaining}")
    return remaining
