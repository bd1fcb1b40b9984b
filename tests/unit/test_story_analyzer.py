"""Unit tests for story analysis."""

import pytest

from comicbook.core.errors import EmptyCompletionError
from comicbook.core.modules.story_analyzer import StoryAnalyzer, build_analysis_prompt
from tests.unit.fakes import FAST_RETRY, ScriptedChatClient


def test_prompt_sizes_beats_to_panel_count():
    prompt = build_analysis_prompt("A story.", 6)

    assert "6-panel comic" in prompt
    assert "mature but non-explicit" in prompt
    assert "Story:\nA story.\n" in prompt


@pytest.mark.asyncio
async def test_returns_trimmed_summary():
    chat = ScriptedChatClient(["  Ravi and Meena find a temple.\n"])
    analyzer = StoryAnalyzer(chat, "test-model", policy=FAST_RETRY)

    summary = await analyzer.analyze("story", 4)

    assert summary == "Ravi and Meena find a temple."
    call = chat.calls[0]
    assert call["model"] == "test-model"
    assert call["temperature"] == 0.4
    assert call["max_tokens"] == 900
    assert [m["role"] for m in call["messages"]] == ["system", "user"]


@pytest.mark.asyncio
async def test_retries_transient_failures():
    chat = ScriptedChatClient([RuntimeError("503"), "summary"])
    analyzer = StoryAnalyzer(chat, "test-model", policy=FAST_RETRY)

    assert await analyzer.analyze("story", 4) == "summary"
    assert len(chat.calls) == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("content", [None, "", "   \n"])
async def test_empty_summary_fails(content):
    analyzer = StoryAnalyzer(ScriptedChatClient([content]), "test-model", policy=FAST_RETRY)

    with pytest.raises(EmptyCompletionError, match="empty summary"):
        await analyzer.analyze("story", 4)
