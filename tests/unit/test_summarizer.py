"""Unit tests for TranscriptSummarizer."""

import pytest

from src.core.exceptions import SummarizationError
from src.services.summarization import TranscriptSummarizer


@pytest.fixture
def summarizer(mock_llm):
    return TranscriptSummarizer(mock_llm)


class TestSummarize:
    async def test_parses_llm_json(self, summarizer, mock_llm):
        result = await summarizer.summarize("t-1", "hello world")

        assert result.id == "t-1"
        assert result.summary == "A short greeting."
        assert result.keywords == ["hello", "world"]
        assert result.topic == "greeting"
        mock_llm.summarize.assert_awaited_once_with("hello world")

    async def test_code_fences_stripped(self, summarizer, mock_llm):
        mock_llm.summarize.return_value = '```json\n{"summary": "ok", "keywords": []}\n```'

        result = await summarizer.summarize("t-1", "text")

        assert result.summary == "ok"
        assert result.topic == ""

    async def test_empty_transcript_skips_llm(self, summarizer, mock_llm):
        result = await summarizer.summarize("t-1", "   ")

        assert result.summary == ""
        mock_llm.summarize.assert_not_called()

    async def test_invalid_json(self, summarizer, mock_llm):
        mock_llm.summarize.return_value = "Sure! Here is a summary."

        with pytest.raises(SummarizationError, match="Invalid JSON"):
            await summarizer.summarize("t-1", "text")

    async def test_non_object_json(self, summarizer, mock_llm):
        mock_llm.summarize.return_value = '["a", "b"]'

        with pytest.raises(SummarizationError):
            await summarizer.summarize("t-1", "text")

    async def test_llm_failure(self, summarizer, mock_llm):
        mock_llm.summarize.side_effect = RuntimeError("Claude API error (500)")

        with pytest.raises(SummarizationError, match="LLM call failed"):
            await summarizer.summarize("t-1", "text")
