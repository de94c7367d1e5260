"""Client boundary for the external text-generation service."""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from openai import OpenAI
from tenacity import retry, stop_after_attempt, wait_exponential

from .config import SpecContextConfig
from .errors import LLMConfigurationError, LLMResponseError

logger = logging.getLogger(__name__)

# OpenAI-compatible chat endpoints per provider
PROVIDER_BASE_URLS = {
    "openai": "https://api.openai.com/v1",
    "mistral": "https://api.mistral.ai/v1",
    "codestral": "https://codestral.mistral.ai/v1",
    "gemini": "https://generativelanguage.googleapis.com/v1beta/openai/",
    "claude": "https://api.anthropic.com/v1/",
}


# ============ Response Content ============

@dataclass
class TextPart:
    text: str


@dataclass
class TextContent:
    """Response content delivered as a single string."""
    text: str


@dataclass
class PartsContent:
    """Response content delivered as a list of text parts."""
    parts: List[TextPart] = field(default_factory=list)


ResponseContent = Union[TextContent, PartsContent]


def normalize_content(raw: Any) -> ResponseContent:
    """
    Normalize a generation response into TextContent or PartsContent.

    Accepts a plain string or a list whose items are strings, dicts with a
    "text" key, or objects with a `text` attribute. Non-text parts (images,
    tool calls) are skipped.

    Raises:
        LLMResponseError: If the response carries no content at all
    """
    if isinstance(raw, str):
        return TextContent(raw)

    if isinstance(raw, (list, tuple)):
        parts = []
        for item in raw:
            if isinstance(item, str):
                parts.append(TextPart(item))
            elif isinstance(item, dict) and isinstance(item.get("text"), str):
                parts.append(TextPart(item["text"]))
            elif isinstance(getattr(item, "text", None), str):
                parts.append(TextPart(item.text))
        return PartsContent(parts)

    raise LLMResponseError(f"Unsupported response content: {type(raw).__name__}")


def collapse_content(content: ResponseContent) -> str:
    """Collapse normalized content to one string."""
    if isinstance(content, TextContent):
        return content.text
    return "".join(part.text for part in content.parts)


def strip_code_fences(text: str) -> str:
    """Strip a surrounding markdown code fence from generated output."""
    cleaned = (text or "").strip()
    match = re.match(r"^```[a-zA-Z0-9_-]*\s*\n(.*?)\n?```$", cleaned, re.DOTALL)
    if match:
        return match.group(1).strip()
    return cleaned


def stringify_context(context: Any) -> str:
    if context is None:
        return ""
    if isinstance(context, str):
        return context
    return json.dumps(context, indent=2, default=str)


def build_messages(context: Any, task: str) -> List[Dict[str, str]]:
    """Role-tagged messages: the context (as-is or as one system message) plus the task."""
    if isinstance(context, list) and all(isinstance(m, dict) and "role" in m for m in context):
        messages = [dict(m) for m in context]
    else:
        messages = [{"role": "system", "content": stringify_context(context)}]
    messages.append({"role": "user", "content": task})
    return messages


# ============ Client ============

class LLMAgentClient:
    """Runs fast/deep generation tasks against an OpenAI-compatible provider."""

    def __init__(self, config: SpecContextConfig, client: Optional[Any] = None):
        if not config.llm_provider:
            raise LLMConfigurationError("LLM provider is not configured (SPECCONTEXT_LLM_PROVIDER).")
        if config.llm_provider not in PROVIDER_BASE_URLS:
            raise LLMConfigurationError(f"Provider {config.llm_provider} is not supported.")
        if not config.llm_api_key:
            raise LLMConfigurationError(f"API key is missing for provider {config.llm_provider}.")
        if not config.fast_model or not config.deep_model:
            raise LLMConfigurationError("Fast and deep model names must be configured.")

        self.provider = config.llm_provider
        self.fast_model = config.fast_model
        self.deep_model = config.deep_model
        self.client = client or OpenAI(
            api_key=config.llm_api_key,
            base_url=PROVIDER_BASE_URLS[self.provider],
        )
        self._complete = retry(
            stop=stop_after_attempt(max(1, config.llm_max_retries)),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            reraise=True,
        )(self._complete_once)

        logger.info(
            "LLM client provider=%s fast_model=%s deep_model=%s",
            self.provider, self.fast_model, self.deep_model,
        )

    def _complete_once(self, model: str, messages: List[Dict[str, str]]) -> str:
        response = self.client.chat.completions.create(model=model, messages=messages)

        choices = getattr(response, "choices", None)
        if not choices or getattr(choices[0], "message", None) is None:
            raise LLMResponseError("Response contained no choices")

        raw = choices[0].message.content
        if raw is None:
            raise LLMResponseError("Response message had no content")
        return collapse_content(normalize_content(raw))

    def do_task(self, mode: str, context: Any, task: str, *, strip_fences: bool = False) -> str:
        """
        Send a task to the generation service.

        Args:
            mode: 'fast' or 'deep' (selects the model)
            context: Role-tagged message list, or any value to send as a system message
            task: Task description appended as the user message
            strip_fences: Remove a surrounding markdown code fence from the output

        Returns:
            Generated text
        """
        model = self.fast_model if mode == "fast" else self.deep_model
        logger.info("Using model %s", model)
        text = self._complete(model, build_messages(context, task))
        return strip_code_fences(text) if strip_fences else text

    def do_task_fast(self, context: Any, task: str, **kwargs) -> str:
        return self.do_task("fast", context, task, **kwargs)

    def do_task_deep(self, context: Any, task: str, **kwargs) -> str:
        return self.do_task("deep", context, task, **kwargs)
