"""Completion backend clients for the direct API and the Azure-style gateway."""

import logging
import re
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import requests
from pydantic import BaseModel, ValidationError

from terraform_ai.errors import (
    APIError,
    ConfigurationError,
    UnexpectedChoiceCountError,
    UpstreamError,
)
from terraform_ai.model.models import Backend
from terraform_ai.model.schema import (
    APIErrorResponse,
    ChatCompletionRequest,
    ChatCompletionResponse,
    ChatMessage,
    CompletionRequest,
    CompletionResponse,
)

if TYPE_CHECKING:
    from terraform_ai.config import AppConfig

logger = logging.getLogger(__name__)

DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"
DEFAULT_API_VERSION = "2023-03-15-preview"
DEFAULT_USER_AGENT = "terraform-ai"
DEFAULT_TIMEOUT_SECONDS = 30.0

USER_ROLE = "user"

DEPLOYMENT_NAME_PATTERN = re.compile(r"[a-zA-Z0-9]+(?:[_-][a-zA-Z0-9]+)*")


class BackendClient(ABC):
    """Abstract base class for completion backends."""

    @abstractmethod
    def run_completion(self, prompt: str, max_tokens: int, temperature: float) -> str:
        """
        Run a legacy completion.

        Args:
            prompt: Full prompt text
            max_tokens: Token budget for the completion
            temperature: Sampling temperature

        Returns:
            Text of the single returned choice
        """
        pass

    @abstractmethod
    def run_chat_completion(self, prompt: str, max_tokens: int, temperature: float) -> str:
        """
        Run a chat completion with the prompt as one user message.

        Args:
            prompt: Full prompt text
            max_tokens: Token budget for the completion
            temperature: Sampling temperature

        Returns:
            Message content of the single returned choice
        """
        pass


class HTTPBackendClient(BackendClient):
    """Shared request and response handling for JSON-over-HTTPS backends."""

    def __init__(
        self,
        api_key: str,
        deployment_name: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: Backend API key
            deployment_name: Model or deployment identifier
            timeout: Socket timeout in seconds
            user_agent: User-Agent header value
            session: Optional requests session (tests inject fakes here)
        """
        self.api_key = api_key
        self.deployment_name = deployment_name
        self.timeout = timeout
        self.user_agent = user_agent
        self.session = session or requests.Session()

    @abstractmethod
    def completion_url(self) -> str:
        """URL of the legacy completion endpoint."""

    @abstractmethod
    def chat_completion_url(self) -> str:
        """URL of the chat completion endpoint."""

    @abstractmethod
    def auth_headers(self) -> Dict[str, str]:
        """Headers carrying the API key."""

    def query_params(self) -> Optional[Dict[str, str]]:
        return None

    def run_completion(self, prompt: str, max_tokens: int, temperature: float) -> str:
        request = CompletionRequest(
            prompt=[prompt],
            max_tokens=max_tokens,
            echo=False,
            n=1,
            temperature=temperature,
        )
        data = self._post(self.completion_url(), request)
        response = _parse(CompletionResponse, data)
        _check_choices(response.choices)
        return response.choices[0].text

    def run_chat_completion(self, prompt: str, max_tokens: int, temperature: float) -> str:
        request = ChatCompletionRequest(
            model=self.deployment_name,
            messages=[ChatMessage(role=USER_ROLE, content=prompt)],
            max_tokens=max_tokens,
            n=1,
            temperature=temperature,
        )
        data = self._post(self.chat_completion_url(), request)
        response = _parse(ChatCompletionResponse, data)
        _check_choices(response.choices)
        return response.choices[0].message.content or ""

    def _post(self, url: str, body: BaseModel) -> Any:
        headers = {
            "Content-Type": "application/json",
            "User-Agent": self.user_agent,
            **self.auth_headers(),
        }
        logger.debug(f"POST {url} (max_tokens={getattr(body, 'max_tokens', None)})")

        try:
            response = self.session.post(
                url,
                params=self.query_params(),
                headers=headers,
                json=body.model_dump(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise UpstreamError(f"request to {url} failed: {e}") from e

        check_for_success(response)

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(f"invalid json response: {e}") from e


class OpenAIClient(HTTPBackendClient):
    """Client for the direct OpenAI API, authenticated with a bearer key."""

    def __init__(self, api_key: str, deployment_name: str, base_url: str = DEFAULT_OPENAI_BASE_URL, **kwargs):
        super().__init__(api_key, deployment_name, **kwargs)
        self.base_url = base_url.rstrip("/")

    def completion_url(self) -> str:
        # Legacy completions address the model as an engine.
        return f"{self.base_url}/engines/{self.deployment_name}/completions"

    def chat_completion_url(self) -> str:
        return f"{self.base_url}/chat/completions"

    def auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}"}


class AzureClient(HTTPBackendClient):
    """Client for an Azure-style OpenAI gateway."""

    def __init__(
        self,
        endpoint: str,
        api_key: str,
        deployment_name: str,
        api_version: str = DEFAULT_API_VERSION,
        **kwargs,
    ):
        super().__init__(api_key, deployment_name, **kwargs)
        self.endpoint = endpoint.rstrip("/")
        self.api_version = api_version

    def completion_url(self) -> str:
        return f"{self.endpoint}/openai/deployments/{self.deployment_name}/completions"

    def chat_completion_url(self) -> str:
        return f"{self.endpoint}/openai/deployments/{self.deployment_name}/chat/completions"

    def auth_headers(self) -> Dict[str, str]:
        return {"api-key": self.api_key}

    def query_params(self) -> Optional[Dict[str, str]]:
        return {"api-version": self.api_version}


def check_for_success(response: requests.Response) -> None:
    """
    Raise an APIError for non-2xx responses.

    The body is decoded as the backend's error envelope when possible;
    otherwise the raw text is reported with type "Unexpected".
    """
    if 200 <= response.status_code < 300:
        return

    try:
        parsed = APIErrorResponse.model_validate(response.json())
    except ValueError:
        raise APIError(response.status_code, "Unexpected", response.text) from None

    raise APIError(
        response.status_code,
        parsed.error.type or "",
        parsed.error.message or "",
    )


def _parse(schema, data: Any):
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise UpstreamError(f"invalid json response: {e}") from e


def _check_choices(choices: List[Any]) -> None:
    if len(choices) != 1:
        raise UnexpectedChoiceCountError(len(choices))


def create_client(config: "AppConfig", session: Optional[requests.Session] = None) -> BackendClient:
    """
    Build the backend client selected by the configuration.

    Args:
        config: Application configuration
        session: Optional requests session shared by the client

    Returns:
        AzureClient when a gateway endpoint is configured, else OpenAIClient

    Raises:
        ConfigurationError: if the API key is missing or the gateway
            deployment name is malformed
    """
    if not config.api_key:
        raise ConfigurationError("Please provide an OpenAI key.")

    common = {
        "timeout": config.timeout,
        "session": session,
    }

    if config.backend == Backend.GATEWAY:
        if not DEPLOYMENT_NAME_PATTERN.fullmatch(config.deployment_name):
            raise ConfigurationError(
                "azure openai deployment can only include alphanumeric characters, "
                "'_,-', and can't end with '_' or '-'"
            )
        logger.debug(f"Using Azure gateway {config.azure_endpoint}")
        return AzureClient(
            config.azure_endpoint,
            config.api_key,
            config.deployment_name,
            api_version=config.api_version,
            **common,
        )

    return OpenAIClient(config.api_key, config.deployment_name, **common)
