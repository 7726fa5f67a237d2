from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    """Represents a chat message sent to the completion provider."""

    model_config = ConfigDict(frozen=True)

    role: str = Field(description="Role of the message sender: 'user', 'assistant', or 'system'")
    content: str = Field(description="Content of the message")


class LLMResponse(BaseModel):
    """Response from a completion provider."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(description="Generated text content")
    model: str = Field(description="Model that generated the response")
    usage: dict[str, int] | None = Field(
        default=None,
        description="Token usage information"
    )


# Provider response shapes. Only the fields needed to locate the reply text
# are declared; everything else is ignored.


class _ChoiceMessage(BaseModel):
    content: str | None = None


class _Choice(BaseModel):
    message: _ChoiceMessage


class _Usage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ChoicesPayload(BaseModel):
    """OpenAI-style body: ``choices[0].message.content``."""

    choices: list[_Choice] = Field(min_length=1)
    model: str | None = None
    usage: _Usage | None = None

    def reply_text(self) -> str:
        return self.choices[0].message.content or ""

    def usage_dict(self) -> dict[str, int] | None:
        return self.usage.model_dump() if self.usage else None


class _TextContent(BaseModel):
    type: Literal["text"]
    text: str


class _CompletionMessage(BaseModel):
    content: _TextContent


LLAMA_METRIC_NAMES = {
    "num_prompt_tokens": "prompt_tokens",
    "num_completion_tokens": "completion_tokens",
    "num_total_tokens": "total_tokens",
}


class _Metric(BaseModel):
    metric: str
    value: float


class CompletionMessagePayload(BaseModel):
    """Llama API body: ``completion_message.content.text`` with ``type == "text"``."""

    completion_message: _CompletionMessage
    metrics: list[_Metric] = Field(default_factory=list)

    def reply_text(self) -> str:
        return self.completion_message.content.text

    def usage_dict(self) -> dict[str, int] | None:
        usage = {
            LLAMA_METRIC_NAMES[m.metric]: int(m.value)
            for m in self.metrics
            if m.metric in LLAMA_METRIC_NAMES
        }
        return usage or None


ResponsePayload = ChoicesPayload | CompletionMessagePayload


def serialize_messages(messages: list[ChatMessage]) -> list[dict[str, Any]]:
    """Convert chat messages to the provider request format."""
    return [{"role": msg.role, "content": msg.content} for msg in messages]
