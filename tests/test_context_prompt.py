"""Tests for context assembly and system prompt rendering."""

import pytest

from inobot.configs.prompt import NO_CONTEXT_MARKER, PromptConfig
from inobot.core.service.context import CHUNK_SEPARATOR, assemble_context, join_chunks
from inobot.core.service.models import ContextChunk
from inobot.core.service.prompt import PromptBuilder, is_follow_up_question


class TestAssembleContext:
    def test_chunks_joined_in_order(self, chunks):
        context = join_chunks(chunks)

        assert context == chunks[0].content + CHUNK_SEPARATOR + chunks[1].content

    def test_no_chunks_gives_marker(self):
        assert join_chunks([]) == NO_CONTEXT_MARKER

    def test_blank_sections_collapse(self):
        payload = assemble_context(
            "What is Inovus Labs?",
            [ContextChunk(content="About us")],
            live_data="   ",
            digest=None,
        )

        assert payload.context == "About us"
        assert payload.live_data == ""
        assert payload.digest == ""
        assert payload.is_follow_up is False


class TestFollowUpDetection:
    indicators = PromptConfig().follow_up_indicators

    @pytest.mark.parametrize(
        "question",
        ["Tell me more", "Can you elaborate?", "What about funding?", "How long is it?"],
    )
    def test_follow_ups(self, question):
        assert is_follow_up_question(question, self.indicators) is True

    def test_initial_question(self):
        assert is_follow_up_question("What is Inovus Labs?", self.indicators) is False

    def test_pronoun_substrings_count(self):
        # "it" inside "submit" is enough
        assert is_follow_up_question("How do I submit ideas?", self.indicators) is True


class TestPromptBuilder:
    def setup_method(self):
        self.config = PromptConfig()
        self.builder = PromptBuilder(self.config)

    def test_section_order(self):
        prompt = self.builder.build(
            "What is Inovus Labs?",
            "Inovus Labs is an IEDC.",
            live_data="Lab open until 6pm",
            digest="User asked about workshops.",
        )

        positions = [
            prompt.index("You are InoBot"),
            prompt.index("<knowledge_base>"),
            prompt.index("<static_context>"),
            prompt.index("<live_data>"),
            prompt.index("<conversation_history>"),
            prompt.index('<user_query type="initial">'),
            prompt.index("<instructions>"),
        ]
        assert positions == sorted(positions)
        assert "Inovus Labs is an IEDC." in prompt
        assert "Lab open until 6pm" in prompt
        assert "User asked about workshops." in prompt

    def test_optional_sections_omitted(self):
        prompt = self.builder.build("What is Inovus Labs?", NO_CONTEXT_MARKER)

        assert "<live_data>" not in prompt
        assert "<conversation_history>" not in prompt
        assert NO_CONTEXT_MARKER in prompt

    def test_mandated_messages_verbatim(self):
        prompt = self.builder.build("What is Inovus Labs?", "context")

        assert f'respond exactly: "{self.config.fallback_message}"' in prompt
        assert f'respond exactly: "{self.config.refusal_message}"' in prompt

    def test_initial_instructions(self):
        rules = self.builder.instructions(is_follow_up=False)

        assert any(rule.startswith("Valid topics: programs") for rule in rules)
        assert any("next steps" in rule for rule in rules)
        assert not any("previous conversation" in rule for rule in rules)

    def test_follow_up_instructions(self):
        prompt = self.builder.build("tell me more", "context", is_follow_up=True)

        assert '<user_query type="follow_up">' in prompt
        assert "- Build naturally on the previous conversation context." in prompt
        assert "Valid topics" not in prompt

    def test_build_from_payload(self, chunks):
        payload = assemble_context("Tell me more", chunks, is_follow_up=True)

        prompt = self.builder.build_from_payload(payload)

        assert chunks[1].content in prompt
        assert '<user_query type="follow_up">\nTell me more\n</user_query>' in prompt
