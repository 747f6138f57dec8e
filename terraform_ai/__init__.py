"""terraform-ai - generate Terraform templates from natural language and apply them."""

__version__ = "0.1.0"

from . import model
from . import runtime
from . import agent

__all__ = [
    "model",
    "runtime",
    "agent",
]
