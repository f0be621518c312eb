"""Tests for the conversation memory manager."""

from unittest.mock import AsyncMock

import pytest
from pydantic import ValidationError

from inobot.configs.system import MemoryConfig
from inobot.core.service.memory import ConversationMemoryManager


class TestConversationMemoryManager:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("length", [0, 1, 4])
    async def test_short_history_passes_through(self, make_history, length):
        summarize = AsyncMock(return_value="unused")
        manager = ConversationMemoryManager(summarize, MemoryConfig(recent_window=4))
        history = make_history(length)

        digest = await manager.build(history)

        assert digest.digest == ""
        assert digest.recent_turns == history
        assert digest.summarized is False
        assert digest.summary_failed is False
        summarize.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_long_history_summarized_once(self, make_history):
        summarize = AsyncMock(return_value="  User asked about workshops.  ")
        manager = ConversationMemoryManager(summarize, MemoryConfig(recent_window=4))
        history = make_history(6)

        digest = await manager.build(history)

        summarize.assert_awaited_once_with(history[:2])
        assert digest.digest == "User asked about workshops."
        assert digest.recent_turns == history[2:]
        assert digest.summarized is True
        assert digest.summary_failed is False

    @pytest.mark.asyncio
    async def test_recent_window_size(self, make_history):
        summarize = AsyncMock(return_value="summary")
        manager = ConversationMemoryManager(summarize, MemoryConfig(recent_window=2))
        history = make_history(9)

        digest = await manager.build(history)

        assert [m.content for m in digest.recent_turns] == ["turn 7", "turn 8"]
        assert len(summarize.await_args.args[0]) == 7

    @pytest.mark.asyncio
    async def test_summarizer_failure_degrades(self, make_history):
        summarize = AsyncMock(side_effect=RuntimeError("model down"))
        manager = ConversationMemoryManager(summarize, MemoryConfig(recent_window=4))
        history = make_history(6)

        digest = await manager.build(history)

        assert digest.digest == ""
        assert digest.recent_turns == history[2:]
        assert digest.summarized is False
        assert digest.summary_failed is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("reply", ["", "   \n"])
    async def test_blank_summary_flagged(self, make_history, reply):
        summarize = AsyncMock(return_value=reply)
        manager = ConversationMemoryManager(summarize, MemoryConfig(recent_window=4))
        history = make_history(6)

        digest = await manager.build(history)

        summarize.assert_awaited_once_with(history[:2])
        assert digest.digest == ""
        assert digest.recent_turns == history[2:]
        assert digest.summarized is False
        assert digest.summary_failed is True

    @pytest.mark.parametrize("field", ["recent_window", "suggestion_context_messages"])
    def test_window_must_be_positive(self, field):
        with pytest.raises(ValidationError):
            MemoryConfig(**{field: 0})

    @pytest.mark.asyncio
    async def test_unvalidated_zero_window_never_summarizes_nothing(self, make_history):
        summarize = AsyncMock(return_value="summary")
        config = MemoryConfig.model_construct(recent_window=0)
        manager = ConversationMemoryManager(summarize, config)
        history = make_history(3)

        digest = await manager.build(history)

        summarize.assert_awaited_once_with(history[:2])
        assert digest.recent_turns == history[2:]
