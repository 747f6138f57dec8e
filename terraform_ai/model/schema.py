"""Wire schemas for the completion and chat completion endpoints."""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class CompletionRequest(BaseModel):
    """Body of a legacy completion request."""

    model_config = ConfigDict(frozen=True)

    prompt: List[str] = Field(..., description="Prompts to complete")
    max_tokens: int = Field(..., description="Token budget for the completion")
    echo: bool = Field(False, description="Echo the prompt back in the completion")
    n: int = Field(1, description="Number of completions to generate")
    temperature: float = Field(0.0, description="Sampling temperature")


class ChatMessage(BaseModel):
    """A single role-tagged chat message."""

    model_config = ConfigDict(frozen=True)

    role: str = Field(..., description="Message author role")
    content: Optional[str] = Field("", description="Message text")


class ChatCompletionRequest(BaseModel):
    """Body of a chat completion request."""

    model_config = ConfigDict(frozen=True)

    model: str = Field(..., description="Model or deployment identifier")
    messages: List[ChatMessage] = Field(..., description="Conversation so far")
    max_tokens: int = Field(..., description="Token budget for the completion")
    n: int = Field(1, description="Number of completions to generate")
    temperature: float = Field(0.0, description="Sampling temperature")


class CompletionChoice(BaseModel):
    text: str = ""
    index: int = 0
    finish_reason: Optional[str] = None


class CompletionResponse(BaseModel):
    """Response of a legacy completion request."""

    id: Optional[str] = None
    model: Optional[str] = None
    choices: List[CompletionChoice] = Field(default_factory=list)


class ChatCompletionChoice(BaseModel):
    message: ChatMessage
    index: int = 0
    finish_reason: Optional[str] = None


class ChatCompletionResponse(BaseModel):
    """Response of a chat completion request."""

    id: Optional[str] = None
    model: Optional[str] = None
    choices: List[ChatCompletionChoice] = Field(default_factory=list)


class APIErrorBody(BaseModel):
    type: Optional[str] = None
    message: Optional[str] = None
    code: Optional[Union[str, int]] = None


class APIErrorResponse(BaseModel):
    """Error envelope returned on non-2xx responses."""

    error: APIErrorBody
