from __future__ import annotations

import json
import time
from typing import Any

import pytest
import requests

from terraform_ai.config import AppConfig
from terraform_ai.errors import (
    APIError,
    ConfigurationError,
    UnexpectedChoiceCountError,
    UpstreamError,
)
from terraform_ai.model.client import (
    AzureClient,
    OpenAIClient,
    check_for_success,
    create_client,
)


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str | None = None) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None) -> None:
        self.response = response or FakeResponse()
        self.error = error
        self.calls: list[dict[str, Any]] = []

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response


def completion_payload(*texts: str) -> dict[str, Any]:
    return {"choices": [{"text": text, "index": i} for i, text in enumerate(texts)]}


def chat_payload(*contents: str) -> dict[str, Any]:
    return {
        "choices": [
            {"message": {"role": "assistant", "content": content}, "index": i}
            for i, content in enumerate(contents)
        ]
    }


def test_openai_legacy_completion_request() -> None:
    session = FakeSession(FakeResponse(payload=completion_payload("resource {}")))
    client = OpenAIClient("sk-test", "text-davinci-003", session=session, timeout=12.0)

    text = client.run_completion("prompt text", 321, 0.5)

    assert text == "resource {}"
    call = session.calls[0]
    assert call["url"] == "https://api.openai.com/v1/engines/text-davinci-003/completions"
    assert call["params"] is None
    assert call["timeout"] == 12.0
    assert call["headers"]["Authorization"] == "Bearer sk-test"
    assert call["headers"]["Content-Type"] == "application/json"
    assert call["headers"]["User-Agent"] == "terraform-ai"
    assert call["json"] == {
        "prompt": ["prompt text"],
        "max_tokens": 321,
        "echo": False,
        "n": 1,
        "temperature": 0.5,
    }


def test_openai_chat_completion_request() -> None:
    session = FakeSession(FakeResponse(payload=chat_payload("hcl body")))
    client = OpenAIClient("sk-test", "gpt-4-0314", session=session)

    text = client.run_chat_completion("prompt text", 100, 0.0)

    assert text == "hcl body"
    call = session.calls[0]
    assert call["url"] == "https://api.openai.com/v1/chat/completions"
    assert call["json"] == {
        "model": "gpt-4-0314",
        "messages": [{"role": "user", "content": "prompt text"}],
        "max_tokens": 100,
        "n": 1,
        "temperature": 0.0,
    }


def test_azure_client_addresses_deployment_and_api_version() -> None:
    session = FakeSession(FakeResponse(payload=chat_payload("ok")))
    client = AzureClient("https://example.openai.azure.com/", "az-key", "gpt-35-turbo", session=session)

    client.run_chat_completion("p", 10, 0.0)

    call = session.calls[0]
    assert call["url"] == "https://example.openai.azure.com/openai/deployments/gpt-35-turbo/chat/completions"
    assert call["params"] == {"api-version": "2023-03-15-preview"}
    assert call["headers"]["api-key"] == "az-key"
    assert "Authorization" not in call["headers"]


def test_azure_legacy_completion_url() -> None:
    session = FakeSession(FakeResponse(payload=completion_payload("ok")))
    client = AzureClient("https://gw.example", "az-key", "davinci", api_version="2024-01-01", session=session)

    assert client.run_completion("p", 10, 0.0) == "ok"
    assert session.calls[0]["url"] == "https://gw.example/openai/deployments/davinci/completions"
    assert session.calls[0]["params"] == {"api-version": "2024-01-01"}


@pytest.mark.parametrize("count", [0, 2])
def test_completion_rejects_wrong_choice_count(count: int) -> None:
    texts = ["a", "b"][:count]
    client = OpenAIClient("k", "text-davinci-003", session=FakeSession(FakeResponse(payload=completion_payload(*texts))))

    with pytest.raises(UnexpectedChoiceCountError) as excinfo:
        client.run_completion("p", 10, 0.0)

    assert excinfo.value.count == count
    assert str(excinfo.value) == f"expected choices to be 1 but received: {count}"


@pytest.mark.parametrize("count", [0, 2])
def test_chat_completion_rejects_wrong_choice_count(count: int) -> None:
    contents = ["a", "b"][:count]
    client = OpenAIClient("k", "gpt-4-0314", session=FakeSession(FakeResponse(payload=chat_payload(*contents))))

    with pytest.raises(UnexpectedChoiceCountError):
        client.run_chat_completion("p", 10, 0.0)


def test_structured_api_error_is_surfaced() -> None:
    response = FakeResponse(
        status_code=401,
        payload={"error": {"type": "invalid_request_error", "message": "Incorrect API key provided", "code": None}},
    )
    client = OpenAIClient("bad", "gpt-4-0314", session=FakeSession(response))

    with pytest.raises(APIError) as excinfo:
        client.run_chat_completion("p", 10, 0.0)

    err = excinfo.value
    assert err.status_code == 401
    assert err.type == "invalid_request_error"
    assert err.api_message == "Incorrect API key provided"
    assert "Incorrect API key provided" in str(err)


def test_unparseable_error_body_is_reported_as_unexpected() -> None:
    response = FakeResponse(status_code=502, payload=None, text="<html>Bad Gateway</html>")

    with pytest.raises(APIError) as excinfo:
        check_for_success(response)

    assert excinfo.value.type == "Unexpected"
    assert excinfo.value.status_code == 502
    assert excinfo.value.api_message == "<html>Bad Gateway</html>"


def test_check_for_success_accepts_2xx() -> None:
    check_for_success(FakeResponse(status_code=201, payload={}))


def test_transport_failure_becomes_upstream_error() -> None:
    session = FakeSession(error=requests.ConnectionError("connection refused"))
    client = OpenAIClient("k", "text-davinci-003", session=session)

    with pytest.raises(UpstreamError) as excinfo:
        client.run_completion("p", 10, 0.0)

    assert "connection refused" in str(excinfo.value)


def test_invalid_success_body_becomes_upstream_error() -> None:
    client = OpenAIClient("k", "text-davinci-003", session=FakeSession(FakeResponse(payload=None, text="not json")))

    with pytest.raises(UpstreamError) as excinfo:
        client.run_completion("p", 10, 0.0)

    assert "invalid json response" in str(excinfo.value)


def test_create_client_requires_api_key() -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        create_client(AppConfig(api_key=""))

    assert str(excinfo.value) == "Please provide an OpenAI key."


def test_create_client_selects_direct_backend() -> None:
    client = create_client(AppConfig(api_key="k", deployment_name="gpt-4-0314", timeout=5.0))

    assert isinstance(client, OpenAIClient)
    assert client.deployment_name == "gpt-4-0314"
    assert client.timeout == 5.0


def test_create_client_selects_gateway_backend() -> None:
    config = AppConfig(
        api_key="k",
        deployment_name="gpt-35-turbo",
        azure_endpoint="https://gw.example",
        api_version="2023-05-15",
    )

    client = create_client(config)

    assert isinstance(client, AzureClient)
    assert client.endpoint == "https://gw.example"
    assert client.api_version == "2023-05-15"


@pytest.mark.parametrize("name", ["gpt-35-turbo-", "my deployment", "_leading", "a--b", "gpt35turbo\n"])
def test_create_client_rejects_malformed_gateway_deployment(name: str) -> None:
    config = AppConfig(api_key="k", deployment_name=name, azure_endpoint="https://gw.example")

    with pytest.raises(ConfigurationError):
        create_client(config)


def test_direct_backend_does_not_validate_deployment_name() -> None:
    client = create_client(AppConfig(api_key="k", deployment_name="gpt-3.5-turbo"))

    assert isinstance(client, OpenAIClient)


def test_malformed_gateway_deployment_is_rejected_quickly() -> None:
    config = AppConfig(api_key="k", deployment_name="a1" * 30 + "!", azure_endpoint="https://gw.example")

    start = time.perf_counter()
    with pytest.raises(ConfigurationError):
        create_client(config)

    assert time.perf_counter() - start < 1.0


@pytest.mark.parametrize("name", ["gpt35turbo", "gpt-35-turbo", "my_deployment-2", "a"])
def test_create_client_accepts_well_formed_gateway_deployment(name: str) -> None:
    config = AppConfig(api_key="k", deployment_name=name, azure_endpoint="https://gw.example")

    assert isinstance(create_client(config), AzureClient)


def test_api_error_keeps_type_attribute() -> None:
    err = APIError(429, error_type="rate_limit_exceeded", message="slow down")

    assert err.type == "rate_limit_exceeded"
    assert str(err) == "rate_limit_exceeded (HTTP 429): slow down"
