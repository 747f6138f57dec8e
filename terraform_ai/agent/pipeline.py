"""Validate, persist and hand an accepted template to Terraform."""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from terraform_ai.agent.session import LoopOutcome
from terraform_ai.errors import TerraformAIError
from terraform_ai.logging import Logger, NullLogger
from terraform_ai.runtime.files import get_name, remove_blank_lines, store_file
from terraform_ai.runtime.terraform import CommandResult, TerraformOperation, TerraformRuntime
from terraform_ai.runtime.validator import check_template, strip_markdown_fences

PROVIDER_FILE_NAME = "provider.tf"


@dataclass
class Artifact:
    """An accepted template and where it was written."""
    template: str
    filename: str
    path: Path
    result: Optional[CommandResult] = None


class ArtifactPipeline:
    """
    Runs the stages that follow an accepted proposal.

    The file is written before Terraform runs and is left in place when the
    Terraform command fails.
    """

    def __init__(
        self,
        runtime: TerraformRuntime,
        working_dir: str,
        validator: Callable[[str], None] = check_template,
        logger: Optional[Logger] = None,
    ):
        self.runtime = runtime
        self.working_dir = Path(working_dir)
        self.validator = validator
        self.logger = logger or NullLogger()

    def run(
        self,
        outcome: LoopOutcome,
        operation: TerraformOperation,
        default_name: Optional[str] = None,
    ) -> Artifact:
        """
        Validate, store and run Terraform for an accepted outcome.

        Args:
            outcome: Accepted loop outcome
            operation: Terraform command to run afterwards
            default_name: Fixed file name; otherwise derived from outcome.name

        Returns:
            Artifact describing the stored file and the Terraform result

        Raises:
            TerraformAIError: InvalidTemplateError before any write,
                ArtifactIOError or TerraformRunError afterwards
        """
        template = strip_markdown_fences(outcome.template)

        try:
            self.validator(template)
        except TerraformAIError as e:
            self.logger.error("template.invalid", "Generated template does not parse")
            raise e.wrap("error checking template")
        self.logger.info("template.validated", "Template is valid HCL")

        filename = default_name or get_name(outcome.name)
        path = self.working_dir / filename
        try:
            store_file(path, template)
        except TerraformAIError as e:
            raise e.wrap("error storing file")
        self.logger.info("template.stored", f"Stored template in {path}", {"file": filename})

        artifact = Artifact(template=remove_blank_lines(template), filename=filename, path=path)

        event = f"terraform.{operation.value}"
        self.logger.info(event, f"Running terraform {operation.value}")
        try:
            artifact.result = self.runtime.run(operation)
        except TerraformAIError as e:
            self.logger.error("terraform.failed", f"terraform {operation.value} failed", {"file": filename})
            raise e.wrap(f"error running terraform {operation.value}")

        self.logger.info(event, f"terraform {operation.value} finished", {"returncode": artifact.result.returncode})
        return artifact


def default_file_name(operation: TerraformOperation) -> Optional[str]:
    """Default file name used by an operation, if it has one."""
    if operation == TerraformOperation.INIT:
        return PROVIDER_FILE_NAME
    return None
