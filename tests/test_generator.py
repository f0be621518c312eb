"""Tests for AnswerGenerator over LangChain chat models."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from inobot.configs.prompt import PromptConfig
from inobot.core.errors import UpstreamError
from inobot.core.service.generator import (
    AnswerGenerator,
    format_transcript,
    to_langchain_messages,
)
from inobot.core.service.models import Message


def _failing_llm() -> MagicMock:
    llm = MagicMock()
    llm.ainvoke = AsyncMock(side_effect=RuntimeError("connection refused"))
    return llm


def _recording_llm(reply: str) -> MagicMock:
    llm = MagicMock()
    llm.ainvoke = AsyncMock(return_value=AIMessage(content=reply))
    return llm


class TestMessageMapping:
    def test_roles(self):
        turns = [
            Message(role="user", content="hi"),
            Message(role="assistant", content="hello"),
        ]

        messages = to_langchain_messages(turns)

        assert isinstance(messages[0], HumanMessage)
        assert isinstance(messages[1], AIMessage)
        assert format_transcript(turns) == "user: hi\nassistant: hello"


class TestAnswer:
    @pytest.mark.asyncio
    async def test_message_layout(self, make_history):
        llm = _recording_llm("<body><p>Hi!</p></body>")
        generator = AnswerGenerator(llm, PromptConfig())
        recent = make_history(2)

        answer = await generator.answer("What is Inovus Labs?", recent, "SYSTEM")

        assert answer == "<body><p>Hi!</p></body>"
        sent = llm.ainvoke.await_args.args[0]
        assert isinstance(sent[0], SystemMessage)
        assert sent[0].content == "SYSTEM"
        assert [m.content for m in sent[1:3]] == ["turn 0", "turn 1"]
        assert isinstance(sent[-1], HumanMessage)
        assert sent[-1].content == "What is Inovus Labs?"

    @pytest.mark.asyncio
    async def test_provider_error_wrapped(self):
        generator = AnswerGenerator(_failing_llm(), PromptConfig())

        with pytest.raises(UpstreamError):
            await generator.answer("What is Inovus Labs?", [], "SYSTEM")

    @pytest.mark.asyncio
    async def test_empty_answer_is_an_error(self):
        generator = AnswerGenerator(_recording_llm("   "), PromptConfig())

        with pytest.raises(UpstreamError):
            await generator.answer("What is Inovus Labs?", [], "SYSTEM")


class TestSummarize:
    @pytest.mark.asyncio
    async def test_transcript_wrapped(self, make_history):
        llm = _recording_llm(" A short summary. ")
        generator = AnswerGenerator(llm, PromptConfig())

        summary = await generator.summarize(make_history(2))

        assert summary == "A short summary."
        system, human = llm.ainvoke.await_args.args[0]
        assert system.content == PromptConfig().summary_instruction
        assert human.content == (
            "<conversation_history>\nuser: turn 0\nassistant: turn 1\n"
            "</conversation_history>"
        )

    @pytest.mark.asyncio
    async def test_nothing_to_summarize(self):
        llm = _recording_llm("unused")
        generator = AnswerGenerator(llm, PromptConfig())

        assert await generator.summarize([]) == ""
        llm.ainvoke.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_blank_summary_is_an_error(self, make_history):
        generator = AnswerGenerator(_recording_llm("   "), PromptConfig())

        with pytest.raises(UpstreamError):
            await generator.summarize(make_history(6))


class TestSuggestFollowUps:
    @pytest.mark.asyncio
    async def test_first_three_lines(self):
        llm = FakeListChatModel(
            responses=["What workshops run?\n\nWho can join?\nHow to apply?\nExtra?"]
        )
        generator = AnswerGenerator(llm, PromptConfig())

        suggestions = await generator.suggest_follow_ups("answer", "user: hi")

        assert suggestions == ["What workshops run?", "Who can join?", "How to apply?"]

    @pytest.mark.asyncio
    async def test_empty_output_uses_defaults(self):
        generator = AnswerGenerator(FakeListChatModel(responses=["\n"]), PromptConfig())

        suggestions = await generator.suggest_follow_ups("answer", "user: hi")

        assert suggestions == PromptConfig().default_suggestions

    @pytest.mark.asyncio
    async def test_failure_uses_error_suggestions(self):
        generator = AnswerGenerator(_failing_llm(), PromptConfig())

        suggestions = await generator.suggest_follow_ups("answer", "user: hi")

        assert suggestions == PromptConfig().error_suggestions
