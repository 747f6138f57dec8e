"""Shared session driver for the run and init commands."""

import logging
from dataclasses import replace
from typing import Callable, List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from terraform_ai.agent import (
    ArtifactPipeline,
    Completer,
    ConfirmationLoop,
    UserAction,
    default_file_name,
)
from terraform_ai.config import AppConfig, resolve_exec_dir, resolve_working_dir
from terraform_ai.errors import TerraformAIError
from terraform_ai.logging import ConsoleLogger, FileLogger, Logger, LogLevel, TeeLogger
from terraform_ai.model import (
    INIT_SYSTEM_PROMPT,
    NAME_SYSTEM_PROMPT,
    RUN_SYSTEM_PROMPT,
    create_client,
)
from terraform_ai.runtime import TerraformOperation, TerraformRuntime
from terraform_ai.cli.prompt import ask_user_action, template_presenter

console = Console()
err_console = Console(stderr=True)

EXIT_CANCELLED = 130


def build_logger(config: AppConfig) -> Logger:
    """Console logger, plus a JSON-lines file logger when configured."""
    level = LogLevel.DEBUG if config.verbose else LogLevel.INFO
    loggers: List[Logger] = [ConsoleLogger(min_level=level)]
    if config.log_file:
        loggers.append(FileLogger(config.log_file))
    return TeeLogger(loggers)


def prepare_config(config: AppConfig) -> AppConfig:
    """Resolve directories and validate, exiting on configuration errors."""
    try:
        resolved = replace(
            config,
            working_dir=resolve_working_dir(config.working_dir),
            exec_dir=resolve_exec_dir(config.exec_dir),
        )
        return resolved.validate()
    except TerraformAIError as e:
        err_console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(code=1)


def run_session(
    config: AppConfig,
    prompt: Optional[List[str]],
    operation: TerraformOperation,
    ask_action: Optional[Callable[[], UserAction]] = None,
) -> None:
    """
    Generate, confirm, store and run a template for one command.

    Args:
        config: Configuration from the global options
        prompt: Prompt words given on the command line
        operation: Terraform command run after the template is stored
        ask_action: Action source; defaults to the interactive prompt
    """
    if not prompt:
        err_console.print("[red]Error:[/red] prompt must be provided")
        raise typer.Exit(code=1)

    config = prepare_config(config)
    if config.verbose:
        logging.basicConfig(level=logging.DEBUG)

    logger = build_logger(config)
    logger.debug("session.started", "Configuration loaded", config.to_dict())

    if operation == TerraformOperation.INIT:
        system_role, name_role, verb = INIT_SYSTEM_PROMPT, None, "apply"
    else:
        system_role, name_role, verb = RUN_SYSTEM_PROMPT, NAME_SYSTEM_PROMPT, "store"

    try:
        client = create_client(config)
        loop = ConfirmationLoop(
            completer=Completer(client, config, logger=logger),
            ask_action=ask_action or (lambda: ask_user_action(console)),
            system_role=system_role,
            require_confirmation=config.require_confirmation,
            name_role=name_role,
            present=template_presenter(console, verb),
            logger=logger,
        )
        outcome = loop.run(list(prompt))
        if not outcome.accepted:
            return

        runtime = TerraformRuntime(config.working_dir, config.exec_dir, console=err_console)
        pipeline = ArtifactPipeline(runtime, config.working_dir, logger=logger)
        artifact = pipeline.run(outcome, operation, default_file_name(operation))
    except TerraformAIError as e:
        err_console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Cancelled[/yellow]")
        raise typer.Exit(code=EXIT_CANCELLED)

    console.print(f"\n[green]✓[/green] terraform {operation.value} succeeded")
    console.print(f"[bold]Template saved to:[/bold] {artifact.path}")
    if artifact.result is not None and artifact.result.stdout.strip():
        console.print(artifact.result.stdout.rstrip(), markup=False, highlight=False)
