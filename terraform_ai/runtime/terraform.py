"""Terraform execution and management."""

import logging
import shutil
import subprocess
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from terraform_ai.errors import TerraformRunError

logger = logging.getLogger(__name__)


class TerraformOperation(str, Enum):
    """Terraform command run after a template is stored."""
    INIT = "init"
    APPLY = "apply"


@dataclass
class CommandResult:
    """Result of a subprocess command."""
    returncode: int
    stdout: str
    stderr: str
    duration_seconds: float

    @property
    def success(self) -> bool:
        return self.returncode == 0


class TerraformRuntime:
    """Runs terraform init and apply in a working directory."""

    def __init__(
        self,
        working_dir: str,
        exec_path: Optional[str] = None,
        console: Optional[Console] = None,
        timeout: int = 600,
    ):
        """
        Initialize Terraform runtime.

        Args:
            working_dir: Directory containing Terraform configuration
            exec_path: Terraform binary, or a directory containing it;
                defaults to the terraform found on PATH
            console: Console used for the progress spinner
            timeout: Command timeout in seconds
        """
        self.working_dir = Path(working_dir)
        self.exec_path = exec_path
        self.console = console or Console(stderr=True)
        self.timeout = timeout

    def init(self) -> CommandResult:
        """
        Run terraform init.

        Returns:
            CommandResult of the successful run

        Raises:
            TerraformRunError: if terraform is missing or exits non-zero
        """
        return self.run(TerraformOperation.INIT)

    def apply(self) -> CommandResult:
        """
        Run terraform apply without interactive approval.

        Returns:
            CommandResult of the successful run

        Raises:
            TerraformRunError: if terraform is missing or exits non-zero
        """
        return self.run(TerraformOperation.APPLY)

    def run(self, operation: TerraformOperation) -> CommandResult:
        if operation == TerraformOperation.INIT:
            args = ['init', '-input=false', '-no-color']
        else:
            args = ['apply', '-auto-approve', '-input=false', '-no-color']

        result = self._run_command([self._resolve_executable(), *args])
        if not result.success:
            raise TerraformRunError(
                f"error running {operation.value.capitalize()}: {result.stderr.strip() or result.stdout.strip()}",
                result=result,
            )
        return result

    def _resolve_executable(self) -> str:
        if self.exec_path:
            path = Path(self.exec_path)
            return str(path / 'terraform') if path.is_dir() else str(path)

        found = shutil.which('terraform')
        if not found:
            raise TerraformRunError("terraform executable not found on PATH; set --exec-dir")
        return found

    def _run_command(self, cmd: List[str]) -> CommandResult:
        """
        Run a terraform command under a spinner.

        Args:
            cmd: Command and arguments

        Returns:
            CommandResult with returncode, stdout, stderr
        """
        logger.debug(f"Running {' '.join(cmd)} in {self.working_dir}")
        start = time.monotonic()
        try:
            with self.console.status(f"Running terraform {cmd[1]}..."):
                completed = subprocess.run(
                    cmd,
                    cwd=self.working_dir,
                    capture_output=True,
                    text=True,
                    timeout=self.timeout,
                )
        except subprocess.TimeoutExpired as e:
            raise TerraformRunError(f"terraform {cmd[1]} timed out after {self.timeout} seconds") from e
        except OSError as e:
            raise TerraformRunError(f"error starting terraform: {e}") from e

        return CommandResult(
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
            duration_seconds=time.monotonic() - start,
        )
