"""Title selection strategies.

The orchestrator takes one of these instead of branching between a "human
picks the title" flow and an "AI picks the title" flow.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from rich.console import Console

from ..errors import InvalidGenerationOutput
from ..models import ContentType
from .client import GenerationClient
from .models import GenerationOptions, GenerationStats
from .prompts import TITLE_SCHEMA, build_title_prompt

console = Console()


class TitleStrategy(ABC):
    """Decide the title an article is generated under."""

    @abstractmethod
    def choose(
        self,
        topic: str,
        content_type: ContentType,
        keywords: List[str],
        target_audience: str = "",
        stats: Optional[GenerationStats] = None,
    ) -> str:
        pass


class HumanTitleChoice(TitleStrategy):
    """Use the title an editor picked."""

    def __init__(self, title: str) -> None:
        if not title or not title.strip():
            raise ValueError("A human-chosen title must not be empty")
        self.title = title.strip()

    def choose(self, topic, content_type, keywords, target_audience="", stats=None):
        return self.title


class AITitleSelection(TitleStrategy):
    """Ask the model for candidate titles and take the best-ranked one."""

    def __init__(
        self,
        client: GenerationClient,
        candidates: int = 3,
        options: GenerationOptions = None,
        site_name: str = "GetEducated.com",
    ) -> None:
        self.client = client
        self.candidates = candidates
        self.options = options or GenerationOptions(temperature=0.7, max_output_tokens=2000)
        self.site_name = site_name

    def choose(self, topic, content_type, keywords, target_audience="", stats=None):
        prompt = build_title_prompt(
            topic,
            content_type,
            keywords,
            target_audience,
            count=self.candidates,
            site_name=self.site_name,
        )
        try:
            result = self.client.generate(prompt, schema=TITLE_SCHEMA, options=self.options, stats=stats)
        except InvalidGenerationOutput as e:
            console.print(f"[yellow]Title generation returned malformed output, using topic: {e}[/yellow]")
            return topic.strip()

        titles = result.get("titles") if isinstance(result, dict) else None
        for entry in titles or []:
            title = entry.get("title") if isinstance(entry, dict) else entry
            if isinstance(title, str) and title.strip():
                return title.strip()

        console.print("[yellow]No usable title candidates, using topic[/yellow]")
        return topic.strip()
