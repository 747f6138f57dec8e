"""Init command: generate a provider template and run terraform init."""

from typing import List, Optional

import typer

from terraform_ai.cli.common import run_session
from terraform_ai.runtime import TerraformOperation


def init_command(
    ctx: typer.Context,
    prompt: Optional[List[str]] = typer.Argument(None, help="Provider description"),
):
    """Generate a provider template, store it as provider.tf and run terraform init."""
    run_session(ctx.obj, prompt, TerraformOperation.INIT)
