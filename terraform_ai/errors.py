"""Error taxonomy for terraform-ai."""

from typing import List, Optional


class TerraformAIError(Exception):
    """
    Base class for all terraform-ai failures.

    Each error keeps a chain of context labels naming the stages it passed
    through on its way up. ``wrap`` adds a label and returns the same
    instance, so callers can ``raise err.wrap("...")`` without changing the
    error kind.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.context: List[str] = []

    def wrap(self, context: str) -> "TerraformAIError":
        """Prepend a stage label to the context chain."""
        self.context.insert(0, context)
        return self

    def __str__(self) -> str:
        return ": ".join([*self.context, self.message])


class ConfigurationError(TerraformAIError):
    """Missing or invalid configuration (API key, deployment name, ...)."""


class UpstreamError(TerraformAIError):
    """The completion backend failed or answered with something unusable."""


class APIError(UpstreamError):
    """Structured error object returned by a completion backend."""

    def __init__(self, status_code: int, error_type: str, message: str):
        super().__init__(f"{error_type} (HTTP {status_code}): {message}")
        self.status_code = status_code
        self.type = error_type
        self.api_message = message


class UnexpectedChoiceCountError(TerraformAIError):
    """The backend returned zero or several candidate completions."""

    def __init__(self, count: int):
        super().__init__(f"expected choices to be 1 but received: {count}")
        self.count = count


class UnknownModelError(TerraformAIError):
    """The model identifier is missing from the max-token table."""

    def __init__(self, model_id: str):
        super().__init__(f"deploymentName {model_id!r} not found in max tokens map")
        self.model_id = model_id


class InvalidTemplateError(TerraformAIError):
    """Generated HCL failed to parse."""

    def __init__(self, diagnostics: str, template: Optional[str] = None):
        super().__init__(f"invalid terraform template: {diagnostics}")
        self.diagnostics = diagnostics
        self.template = template


class ArtifactIOError(TerraformAIError):
    """Writing the template or running an external process failed."""


class TerraformRunError(ArtifactIOError):
    """A terraform subprocess exited unsuccessfully."""

    def __init__(self, message: str, result=None):
        super().__init__(message)
        self.result = result


class SessionCancelled(TerraformAIError):
    """The user aborted the interactive session."""
