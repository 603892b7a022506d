"""LLM provider interface and implementations."""

import json
import re
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Union

import openai
from openai import OpenAI

from ..errors import GenerationProviderError, GenerationTimeout
from .models import GenerationStats

ProviderOutput = Union[str, Dict[str, Any]]


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    @abstractmethod
    def complete(
        self,
        prompt: str,
        schema: Optional[Dict[str, Any]] = None,
        temperature: float = 0.7,
        max_tokens: int = 8000,
        stats: Optional[GenerationStats] = None,
    ) -> ProviderOutput:
        """
        Run a single completion.

        Args:
            prompt: Full prompt text
            schema: JSON schema the answer must match, if structured output is wanted
            temperature: Sampling temperature
            max_tokens: Maximum output tokens
            stats: Usage accumulator the call records its tokens and cost into

        Returns:
            Raw model text, or an already decoded object
        """
        pass


class OpenAIProvider(LLMProvider):
    """OpenAI (or OpenAI-compatible) implementation of LLM provider."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """
        Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key
            model: Model name to use
            base_url: Custom base URL (for compatible providers)
            timeout: Request timeout passed to the SDK
        """
        self.client = OpenAI(api_key=api_key, base_url=base_url, timeout=timeout, max_retries=0)
        self.timeout = timeout
        self.model = model

        # Token cost estimates (per 1K tokens)
        self.cost_per_1k_tokens = {
            "gpt-4o": {"input": 0.005, "output": 0.015},
            "gpt-4o-mini": {"input": 0.00015, "output": 0.0006},
            "gpt-4.1": {"input": 0.002, "output": 0.008},
            "gpt-4.1-mini": {"input": 0.0004, "output": 0.0016},
        }

    def _build_messages(self, prompt: str, schema: Optional[Dict[str, Any]]) -> List[Dict[str, str]]:
        messages = []
        if schema is not None:
            messages.append({
                "role": "system",
                "content": (
                    "You must respond with ONLY valid JSON matching this schema:\n"
                    f"{json.dumps(schema, indent=2)}\n\n"
                    "Do not include any explanatory text, markdown formatting, or code blocks."
                ),
            })
        messages.append({"role": "user", "content": prompt})
        return messages

    def estimate_cost(self, prompt_tokens: int, completion_tokens: int) -> float:
        """Estimated USD cost of one call; 0.0 for models without a known rate."""
        rates = self.cost_per_1k_tokens.get(self.model)
        if not rates:
            return 0.0
        return (prompt_tokens / 1000) * rates["input"] + (completion_tokens / 1000) * rates["output"]

    def complete(
        self,
        prompt: str,
        schema: Optional[Dict[str, Any]] = None,
        temperature: float = 0.7,
        max_tokens: int = 8000,
        stats: Optional[GenerationStats] = None,
    ) -> ProviderOutput:
        """Run a chat completion."""
        request = {
            "model": self.model,
            "messages": self._build_messages(prompt, schema),
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if schema is not None:
            request["response_format"] = {"type": "json_object"}

        try:
            response = self.client.chat.completions.create(**request)
        except openai.APITimeoutError:
            raise GenerationTimeout(self.timeout or 0)
        except openai.RateLimitError as e:
            raise GenerationProviderError(str(e), kind="rate_limit") from e
        except openai.AuthenticationError as e:
            raise GenerationProviderError(str(e), kind="auth") from e
        except openai.BadRequestError as e:
            raise GenerationProviderError(str(e), kind="bad_request") from e
        except openai.APIConnectionError as e:
            raise GenerationProviderError(str(e), kind="connection") from e
        except openai.OpenAIError as e:
            raise GenerationProviderError(str(e), kind="api") from e

        # Update usage stats
        if stats is not None and response.usage:
            prompt_tokens = response.usage.prompt_tokens
            completion_tokens = response.usage.completion_tokens
            stats.record(prompt_tokens, completion_tokens, self.estimate_cost(prompt_tokens, completion_tokens))

        if not response.choices or response.choices[0].message.content is None:
            raise GenerationProviderError("Empty completion", kind="empty_response")

        return response.choices[0].message.content


MockResponse = Union[str, Dict[str, Any], Exception, Callable[..., ProviderOutput]]


class MockLLMProvider(LLMProvider):
    """Mock LLM provider for testing and offline runs.

    Scripted responses are consumed in order. A response may be a string, a
    dict, an exception instance (raised), or a callable taking the same
    arguments as ``complete`` apart from ``stats``. Once the script is
    exhausted the provider answers with canned payloads.

    Usage is estimated at four characters per token, and every answered call
    costs ``cost_per_call``.
    """

    def __init__(self, responses: Optional[List[MockResponse]] = None, cost_per_call: float = 0.0) -> None:
        """Initialize mock provider."""
        self.responses = list(responses or [])
        self.cost_per_call = cost_per_call
        self.calls = []

    def complete(
        self,
        prompt: str,
        schema: Optional[Dict[str, Any]] = None,
        temperature: float = 0.7,
        max_tokens: int = 8000,
        stats: Optional[GenerationStats] = None,
    ) -> ProviderOutput:
        """Return the next scripted or canned response."""
        self.calls.append({"prompt": prompt, "schema": schema, "temperature": temperature})

        if self.responses:
            response = self.responses.pop(0)
            if isinstance(response, Exception):
                raise response
            if callable(response):
                output = response(prompt, schema=schema, temperature=temperature, max_tokens=max_tokens)
            else:
                output = response
        else:
            output = self._canned_response(prompt, schema)

        if stats is not None:
            text = output if isinstance(output, str) else json.dumps(output, default=str)
            stats.record(len(prompt) // 4, len(text) // 4, self.cost_per_call)
        return output

    def _canned_response(self, prompt: str, schema: Optional[Dict[str, Any]]) -> ProviderOutput:
        if schema is not None and "titles" in schema.get("properties", {}):
            topic = _first_match(r"^Topic: (.+)$", prompt) or "Online Learning"
            return {
                "titles": [
                    {"title": f"{topic}: A Complete Guide", "seo_rationale": "Primary keyword first"},
                    {"title": f"Everything You Need to Know About {topic}", "seo_rationale": "Broad intent"},
                    {"title": f"Understanding {topic}", "seo_rationale": "Short and direct"},
                ]
            }

        if schema is not None:
            title = _first_match(r'about: "(.+)"$', prompt) or "Mock Article"
            urls = re.findall(r"^\d+\. .+ - (https?://\S+)", prompt, flags=re.MULTILINE)
            return mock_article_payload(title, urls)

        # Humanize requests echo the article body back
        return _between(prompt, "ARTICLE TO HUMANIZE:", "HUMANIZATION INSTRUCTIONS:") or prompt


def mock_article_payload(title: str, internal_urls: List[str]) -> Dict[str, Any]:
    """Build a schema-valid draft payload that passes the quality gate."""
    filler = " ".join(["Students weigh cost, flexibility and accreditation before they enroll."] * 18)
    links = "".join(
        f'<p>Read more in <a href="{url}">this related article</a>.</p>' for url in internal_urls[:2]
    )
    sections = "".join(
        f'<h2 id="section-{i}">Section {i}</h2><p>{filler}</p>' for i in range(1, 8)
    )
    content = (
        f"<p>{title} explained for busy adults.</p>{sections}{links}"
        '<p>Source: <a href="https://www.bls.gov/ooh/" target="_blank" rel="noopener">'
        "Bureau of Labor Statistics</a>.</p>"
    )
    return {
        "title": title,
        "excerpt": f"What to know about {title}.",
        "content": content,
        "faqs": [
            {"question": "How long does it take?", "answer": "Most programs take two years."},
            {"question": "Is it accredited?", "answer": "Check regional accreditation first."},
            {"question": "What does it cost?", "answer": "Costs vary widely by school."},
        ],
    }


def _first_match(pattern: str, text: str) -> Optional[str]:
    match = re.search(pattern, text, flags=re.MULTILINE)
    return match.group(1).strip() if match else None


def _between(text: str, start: str, end: str) -> Optional[str]:
    head, sep, tail = text.partition(start)
    if not sep:
        return None
    body, sep, _ = tail.partition(end)
    return body.strip() if sep else None
