"""Gemini-backed completion client and the prompts sent through it."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from commitsplit.models import ChangeRecord

logger = logging.getLogger(__name__)


class CompletionError(Exception):
    """Raised when the model request fails or times out."""
    pass


class CompletionClient(Protocol):
    """Anything that can turn a prompt into model text."""

    async def complete(
        self,
        prompt: str,
        system_instructions: str,
        max_tokens: int,
        temperature: float,
    ) -> str | None:
        ...


class GeminiCompletionClient:
    """Completion client using google-genai.

    Args:
        api_key: Google API key.
        model: Model to use.
        timeout: Seconds to wait for a response before giving up.
    """

    def __init__(self, api_key: str, model: str = "gemini-2.0-flash", timeout: float = 30.0):
        import google.genai as genai

        self.model = model
        self.timeout = timeout
        self._client = genai.Client(api_key=api_key)

    async def complete(
        self,
        prompt: str,
        system_instructions: str,
        max_tokens: int,
        temperature: float,
    ) -> str | None:
        from google.genai import types

        config = types.GenerateContentConfig(
            system_instruction=system_instructions,
            max_output_tokens=max_tokens,
            temperature=temperature,
            response_mime_type="application/json",
        )
        try:
            response = await asyncio.wait_for(
                self._client.aio.models.generate_content(
                    model=self.model,
                    contents=prompt,
                    config=config,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise CompletionError(f"Model request timed out after {self.timeout}s") from e
        except Exception as e:
            raise CompletionError(f"Model request failed: {e}") from e

        return response.text


def extract_json(text: str) -> str | None:
    """Cut the outermost JSON object out of a model response."""
    start = text.find("{")
    end = text.rfind("}") + 1
    if start == -1 or end <= start:
        return None
    return text[start:end]


BOUNDARY_INSTRUCTIONS = """<role>
You are a senior software engineer analyzing code changes for optimal commit organization.
</role>

<constraints>
- Every changed file MUST be assigned to exactly one boundary
- Each boundary represents a single, focused change that can be committed independently
- Avoid having too many files in one boundary (max 6-8 files)
- priority MUST be one of: high, medium, low
</constraints>

<output_format>
Return ONLY a valid JSON object with this exact structure:

{
  "boundaries": [
    {
      "id": "boundary-1",
      "files": ["file1.py", "file2.py"],
      "theme": "brief description of what this group does",
      "reasoning": "why these files should be grouped together",
      "priority": "high",
      "estimatedComplexity": 3
    }
  ]
}
</output_format>"""


CATEGORY_INSTRUCTIONS = """You are a code analysis expert. Categorize this file into one or more of these categories:
- api: API endpoints, routes, controllers
- ui: User interface, components, views
- business_logic: Core business logic, services, models
- database: Database schemas, migrations, queries
- tests: Test files
- configuration: Config files, settings
- documentation: Documentation, README files
- build: Build scripts, CI/CD, deployment
- utilities: Helper functions, utilities, libraries
- security: Authentication, authorization, security
- performance: Caching, optimization, monitoring

Return JSON: {"categories": ["category1", "category2"]}"""


def build_boundary_prompt(changes: list[ChangeRecord]) -> str:
    file_list = "\n".join(
        f"- {c.path} ({c.kind.value} change: +{c.insertions} -{c.deletions} lines)" for c in changes
    )
    total_insertions = sum(c.insertions for c in changes)
    total_deletions = sum(c.deletions for c in changes)

    return f"""Analyze these code changes and suggest logical commit boundaries.

## Files changed ({len(changes)} files, +{total_insertions} -{total_deletions})
{file_list}

## Task
Group these files into logical commit boundaries based on:
1. **Functional relationships**: files that work together
2. **Impact scope**: UI changes, API changes, database changes, etc.
3. **Dependencies**: changes that other changes rely on
4. **Atomicity**: best practices for atomic commits"""


def build_category_prompt(change: ChangeRecord) -> str:
    return f"""Categorize this code file for commit organization:

File: {change.path}
Change type: {change.kind.value}
Lines changed: +{change.insertions} -{change.deletions}

Based on the file path and change information, what categories does this belong to?"""
