"""Unit tests for agent module."""

import asyncio
from types import SimpleNamespace

import pytest

from commitsplit.agent import (
    CompletionError,
    GeminiCompletionClient,
    build_boundary_prompt,
    build_category_prompt,
    extract_json,
)


class TestExtractJson:
    """Tests for extract_json function."""

    def test_plain(self):
        """Should return a bare object unchanged."""
        assert extract_json('{"a": 1}') == '{"a": 1}'

    def test_surrounding_text(self):
        """Should cut the object out of prose and code fences."""
        text = 'Sure!\n```json\n{"boundaries": [{"id": "x"}]}\n```\nDone.'
        assert extract_json(text) == '{"boundaries": [{"id": "x"}]}'

    def test_no_object(self):
        """Should return None without braces."""
        assert extract_json("no json here") is None
        assert extract_json("} backwards {") is None


class TestPrompts:
    """Tests for prompt builders."""

    def test_boundary_prompt(self, make_change):
        """Should list every file with its counts and the totals."""
        changes = [make_change("src/app.py", insertions=3, deletions=1), make_change("README.md", insertions=2)]

        prompt = build_boundary_prompt(changes)

        assert "## Files changed (2 files, +5 -1)" in prompt
        assert "- src/app.py (modified change: +3 -1 lines)" in prompt
        assert "- README.md" in prompt

    def test_category_prompt(self, make_change):
        """Should describe the single file."""
        prompt = build_category_prompt(make_change("src/app.py", insertions=3))
        assert "File: src/app.py" in prompt
        assert "Lines changed: +3 -0" in prompt


def _fake_genai(generate_content):
    return SimpleNamespace(aio=SimpleNamespace(models=SimpleNamespace(generate_content=generate_content)))


class TestGeminiCompletionClient:
    """Tests for GeminiCompletionClient with the network call replaced."""

    def test_returns_text(self):
        """Should return the response text."""
        seen = {}

        async def generate_content(model, contents, config):
            seen["model"] = model
            seen["config"] = config
            return SimpleNamespace(text='{"categories": []}')

        client = GeminiCompletionClient("test-key", model="gemini-test")
        client._client = _fake_genai(generate_content)

        text = asyncio.run(client.complete("prompt", "instructions", 100, 0.1))

        assert text == '{"categories": []}'
        assert seen["model"] == "gemini-test"
        assert seen["config"].max_output_tokens == 100
        assert seen["config"].system_instruction == "instructions"

    def test_timeout(self):
        """Should raise CompletionError when the model is too slow."""

        async def generate_content(model, contents, config):
            await asyncio.sleep(1)

        client = GeminiCompletionClient("test-key", timeout=0.01)
        client._client = _fake_genai(generate_content)

        with pytest.raises(CompletionError, match="timed out"):
            asyncio.run(client.complete("prompt", "instructions", 100, 0.1))

    def test_failure(self):
        """Should wrap request errors in CompletionError."""

        async def generate_content(model, contents, config):
            raise RuntimeError("quota exceeded")

        client = GeminiCompletionClient("test-key")
        client._client = _fake_genai(generate_content)

        with pytest.raises(CompletionError, match="quota exceeded"):
            asyncio.run(client.complete("prompt", "instructions", 100, 0.1))
