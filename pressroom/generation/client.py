"""Generation client: one bounded, cleaned call to the LLM provider."""

import json
import re
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Any, Dict, Optional, Union

from ..errors import (
    GenerationError,
    GenerationProviderError,
    GenerationTimeout,
    InvalidGenerationOutput,
)
from .llm_provider import LLMProvider
from .models import GenerationOptions, GenerationStats

_FENCE_OPEN = re.compile(r"^```[\w+-]*[ \t]*(?:\n|$)")
_FENCE_CLOSE = re.compile(r"(?:^|\n)[ \t]*```[ \t]*$")
# An opener only counts as commentary when it is followed by "!" or leads
# into a colon-terminated introduction, so "Sure-fire ..." is article text.
_META_LINE = re.compile(
    r"^(?:(?:sure|certainly|okay|of course)(?:!|[,.:](?=[^\n<{\[]*:))"
    r"|(?:here(?:'s|’s| is| are)|below is)\b[^\n<{\[]*:"
    r"|i(?:'ve|’ve| have) (?:humanized|rewritten|revised|written|created|updated)\b)"
    r"[^\n<{\[]*?(?:\n|(?=[<{\[])|$)",
    re.IGNORECASE,
)


def _clean_once(text: str) -> str:
    text = text.strip()
    text = _FENCE_OPEN.sub("", text, count=1)
    text = _FENCE_CLOSE.sub("", text, count=1)
    text = text.strip()
    text = _META_LINE.sub("", text, count=1)
    return text.strip()


def clean_output(text: str) -> str:
    """Strip code fences, leading meta-commentary and surrounding whitespace.

    The passes repeat until nothing changes, so cleaning clean output is a
    no-op.
    """
    cleaned = _clean_once(text)
    while True:
        again = _clean_once(cleaned)
        if again == cleaned:
            return cleaned
        cleaned = again


class GenerationClient:
    """Wrap a provider call with a timeout, error mapping and output cleaning.

    The client never retries. A call that outlives ``timeout_seconds`` is
    abandoned: its worker thread may keep running, but its result is never
    read.
    """

    def __init__(self, provider: LLMProvider, timeout_seconds: float = 120.0) -> None:
        self.provider = provider
        self.timeout_seconds = timeout_seconds

    def generate(
        self,
        prompt: str,
        schema: Optional[Dict[str, Any]] = None,
        options: Optional[GenerationOptions] = None,
        stats: Optional[GenerationStats] = None,
    ) -> Union[str, Dict[str, Any]]:
        """
        Run one generation call.

        Args:
            prompt: Prompt text
            schema: JSON schema for structured output; the result is decoded when given
            options: Sampling options
            stats: Usage accumulator; an abandoned call may still record into it

        Returns:
            Cleaned text, or the decoded object when a schema was requested

        Raises:
            GenerationTimeout: the provider did not answer in time
            GenerationProviderError: the provider call failed
            InvalidGenerationOutput: structured output could not be decoded
        """
        options = options or GenerationOptions()
        raw = self._call_with_timeout(prompt, schema, options, stats)

        if isinstance(raw, dict):
            return raw
        if not isinstance(raw, str):
            raise InvalidGenerationOutput(f"Provider returned {type(raw).__name__}, expected text")

        cleaned = clean_output(raw)
        if schema is None:
            return cleaned

        try:
            return json.loads(cleaned)
        except json.JSONDecodeError as e:
            raise InvalidGenerationOutput(f"Output is not valid JSON: {e}") from e

    def _call_with_timeout(
        self,
        prompt: str,
        schema: Optional[Dict[str, Any]],
        options: GenerationOptions,
        stats: Optional[GenerationStats],
    ):
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="generation")
        future = executor.submit(
            self.provider.complete,
            prompt,
            schema=schema,
            temperature=options.temperature,
            max_tokens=options.max_output_tokens,
            stats=stats,
        )
        try:
            return future.result(timeout=self.timeout_seconds)
        except FutureTimeout:
            raise GenerationTimeout(self.timeout_seconds)
        except GenerationError:
            raise
        except Exception as e:
            raise GenerationProviderError(str(e) or type(e).__name__, kind=type(e).__name__) from e
        finally:
            executor.shutdown(wait=False, cancel_futures=True)
