"""Tests for the live-data trigger and the live-data source."""

import httpx
import pytest

from inobot.configs.system import LiveDataConfig, PatternBonus
from inobot.core.live_data import LiveDataSource
from inobot.core.service.guardrails import LiveDataTrigger
from inobot.core.service.models import (
    LIVE_DATA_EMPTY,
    LIVE_DATA_FAILED,
    LIVE_DATA_NOT_CONFIGURED,
    LIVE_DATA_OK,
)


class TestLiveDataTrigger:
    def setup_method(self):
        self.trigger = LiveDataTrigger(LiveDataConfig())

    def test_present_tense_question_triggers(self):
        # now 0.5 + open 0.1 + "is ... now" 0.3
        decision = self.trigger.evaluate("Is the lab open now?")

        assert decision.score == pytest.approx(0.9)
        assert decision.needs_live_data is True
        assert set(decision.matched_keywords) == {"now", "open"}

    def test_static_question_does_not_trigger(self):
        decision = self.trigger.evaluate("What programs does Inovus Labs offer?")

        assert decision.score == 0.0
        assert decision.needs_live_data is False

    def test_threshold_is_inclusive(self):
        # recent 0.3 + latest 0.3 == 0.6
        assert self.trigger.needs_live_data("Any recent or latest news?") is True

    def test_below_threshold(self):
        # online 0.1 + "is it" 0.2
        decision = self.trigger.evaluate("Is it online?")

        assert decision.score == pytest.approx(0.3)
        assert decision.needs_live_data is False

    def test_keywords_match_as_substrings(self):
        decision = self.trigger.evaluate("Share your knowledge")

        assert decision.matched_keywords == ["now"]

    def test_case_insensitive(self):
        assert self.trigger.needs_live_data("WHAT'S RUNNING TODAY?") is True

    @pytest.mark.parametrize("question", ["", "   "])
    def test_blank_question(self, question):
        decision = self.trigger.evaluate(question)

        assert decision.score == 0.0
        assert decision.needs_live_data is False

    def test_pure_function(self):
        question = "Is the lab open now?"
        assert [self.trigger.needs_live_data(question) for _ in range(3)] == [True] * 3

    def test_tables_come_from_config(self):
        trigger = LiveDataTrigger(
            LiveDataConfig(
                threshold=1.0,
                keyword_weights={"hackathon": 0.4},
                pattern_bonuses=[PatternBonus(pattern=r"\bthis week\b", bonus=0.6)],
            )
        )

        assert trigger.needs_live_data("Is there a hackathon this week?") is True
        assert trigger.needs_live_data("Is the lab open now?") is False


def _source(handler, url="https://status.example.org/live") -> LiveDataSource:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return LiveDataSource(client, url)


class TestLiveDataSource:
    @pytest.mark.asyncio
    async def test_ok(self):
        source = _source(lambda request: httpx.Response(200, text=" Lab open \n"))

        result = await source.fetch()

        assert result.status == LIVE_DATA_OK
        assert result.text == "Lab open"

    @pytest.mark.asyncio
    async def test_empty_body(self):
        source = _source(lambda request: httpx.Response(200, text="  "))

        result = await source.fetch()

        assert result.status == LIVE_DATA_EMPTY
        assert result.text == ""

    @pytest.mark.asyncio
    async def test_http_error_is_reported_not_raised(self):
        source = _source(lambda request: httpx.Response(503))

        result = await source.fetch()

        assert result.status == LIVE_DATA_FAILED
        assert result.text == ""

    @pytest.mark.asyncio
    async def test_not_configured(self):
        def handler(request):
            raise AssertionError("no request expected")

        result = await _source(handler, url="").fetch()

        assert result.status == LIVE_DATA_NOT_CONFIGURED
