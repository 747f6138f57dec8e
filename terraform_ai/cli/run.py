"""Run command: generate a template and run terraform apply."""

from typing import List, Optional

import typer

from terraform_ai.cli.common import run_session
from terraform_ai.runtime import TerraformOperation


def run_command(
    ctx: typer.Context,
    prompt: Optional[List[str]] = typer.Argument(None, help="Infrastructure description"),
):
    """
    Generate Terraform HCL from a prompt, store it and run terraform apply.

    This is the default command, so the command name can be left out.

    Examples:

        terraform-ai "create an s3 bucket named logs"

        terraform-ai --openai-deployment-name gpt-4-0314 run create a vpc
    """
    run_session(ctx.obj, prompt, TerraformOperation.APPLY)
