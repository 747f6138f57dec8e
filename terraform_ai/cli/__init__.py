"""Command-line interface for terraform-ai."""

import sys
from typing import List, Optional

import typer

from terraform_ai import __version__
from terraform_ai.cli.init import init_command
from terraform_ai.cli.run import run_command
from terraform_ai.config import DEFAULT_DEPLOYMENT_NAME, AppConfig
from terraform_ai.model.client import DEFAULT_API_VERSION, DEFAULT_TIMEOUT_SECONDS

app = typer.Typer(
    help="Generate Terraform templates from natural language and apply them",
    no_args_is_help=True,
)

# Register main commands
app.command(name="run")(run_command)
app.command(name="init")(init_command)

COMMANDS = {"run", "init"}
DEFAULT_COMMAND = "run"

# Global options that consume the following argument as their value.
VALUE_OPTIONS = {
    "--openai-deployment-name",
    "--max-tokens",
    "--openai-api-key",
    "--azure-openai-endpoint",
    "--azure-openai-api-version",
    "--temperature",
    "--working-dir",
    "--exec-dir",
    "--timeout",
    "--log-file",
}

# Global options that take no value.
FLAG_OPTIONS = {
    "--require-confirmation",
    "--no-require-confirmation",
    "--verbose",
    "-v",
}


def _version_callback(value: bool):
    if value:
        typer.echo(f"terraform-ai {__version__}")
        raise typer.Exit()


@app.callback()
def global_options(
    ctx: typer.Context,
    deployment_name: str = typer.Option(
        DEFAULT_DEPLOYMENT_NAME,
        "--openai-deployment-name",
        envvar="OPENAI_DEPLOYMENT_NAME",
        help="The deployment name used for the model in OpenAI service.",
    ),
    max_tokens: int = typer.Option(
        0,
        "--max-tokens",
        envvar="MAX_TOKENS",
        help="The max token will overwrite the max tokens in the max tokens map.",
    ),
    api_key: str = typer.Option(
        "",
        "--openai-api-key",
        envvar="OPENAI_API_KEY",
        show_default=False,
        help="The API key for the OpenAI service. This is required.",
    ),
    azure_endpoint: str = typer.Option(
        "",
        "--azure-openai-endpoint",
        envvar="AZURE_OPENAI_ENDPOINT",
        help="The endpoint for Azure OpenAI service. If provided, Azure OpenAI service will be used instead of OpenAI service.",
    ),
    api_version: str = typer.Option(
        DEFAULT_API_VERSION,
        "--azure-openai-api-version",
        envvar="AZURE_OPENAI_API_VERSION",
        help="API version sent to the Azure OpenAI service.",
    ),
    require_confirmation: bool = typer.Option(
        True,
        "--require-confirmation/--no-require-confirmation",
        envvar="REQUIRE_CONFIRMATION",
        help="Whether to require confirmation before executing the command.",
    ),
    temperature: float = typer.Option(
        0.0,
        "--temperature",
        envvar="TEMPERATURE",
        help="The temperature to use for the model. Set closer to 0 for more deterministic output.",
    ),
    working_dir: Optional[str] = typer.Option(
        None,
        "--working-dir",
        envvar="WORKING_DIR",
        help="The path of the project that you want to run (defaults to the current directory).",
    ),
    exec_dir: Optional[str] = typer.Option(
        None,
        "--exec-dir",
        envvar="EXEC_DIR",
        help="The path of Terraform (defaults to terraform on PATH).",
    ),
    timeout: float = typer.Option(
        DEFAULT_TIMEOUT_SECONDS,
        "--timeout",
        envvar="OPENAI_TIMEOUT",
        help="Socket timeout in seconds for completion requests.",
    ),
    log_file: Optional[str] = typer.Option(
        None,
        "--log-file",
        envvar="TERRAFORM_AI_LOG_FILE",
        help="Append JSON-lines session events to this file.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
):
    """Generate Terraform templates from natural language and apply them."""
    ctx.obj = AppConfig(
        api_key=api_key,
        deployment_name=deployment_name,
        max_tokens=max_tokens,
        azure_endpoint=azure_endpoint,
        api_version=api_version,
        require_confirmation=require_confirmation,
        temperature=temperature,
        working_dir=working_dir or ".",
        exec_dir=exec_dir or None,
        timeout=timeout,
        log_file=log_file,
        verbose=verbose,
    )


def with_default_command(argv: List[str]) -> List[str]:
    """
    Normalize argv so global options and the command are where typer expects them.

    The default command is inserted when the first positional is not a
    command, and global options given after the command are moved in front
    of it:

    ``terraform-ai --temperature 0.2 create a bucket`` becomes
    ``terraform-ai --temperature 0.2 run create a bucket``, and
    ``terraform-ai run create a bucket --temperature 0.2`` becomes
    ``terraform-ai --temperature 0.2 run create a bucket``.

    Everything after ``--`` is left untouched.
    """
    index = 0
    while index < len(argv):
        arg = argv[index]
        if arg == "--":
            break
        if arg.startswith("-"):
            index += 2 if arg in VALUE_OPTIONS else 1
            continue
        break

    if index >= len(argv):
        return list(argv)

    if argv[index] in COMMANDS:
        command, rest = argv[index], argv[index + 1:]
    else:
        command, rest = DEFAULT_COMMAND, argv[index:]

    moved: List[str] = []
    remaining: List[str] = []
    position = 0
    while position < len(rest):
        arg = rest[position]
        if arg == "--":
            remaining.extend(rest[position:])
            break
        if arg in VALUE_OPTIONS:
            moved.extend(rest[position:position + 2])
            position += 2
            continue
        if arg in FLAG_OPTIONS or arg.split("=", 1)[0] in VALUE_OPTIONS:
            moved.append(arg)
        else:
            remaining.append(arg)
        position += 1

    return [*argv[:index], *moved, command, *remaining]


def main():
    """Main CLI entry point."""
    app(args=with_default_command(sys.argv[1:]), prog_name="terraform-ai")


__all__ = ["app", "main", "with_default_command"]
