"""Tests for JSON extraction, invocation retries and client construction."""

import pytest
from conftest import FakeChatModel
from langchain_openai import ChatOpenAI

from factcheck.llm import (
    JSONExtractionError,
    LLMInvocationError,
    MissingCredentialError,
    extract_json,
    get_planning_llm,
    get_reasoning_llm,
    invoke_llm,
    validate_plan,
    validate_verdict,
)
from factcheck.schemas import DecompositionPlan, VerdictOutput


class TestExtractJson:
    def test_plain(self):
        assert extract_json('{"a": 1}') == {"a": 1}

    def test_fenced(self):
        assert extract_json('Sure!\n```json\n{"a": 1}\n```\nAnything else?') == {"a": 1}

    def test_prose_around_object(self):
        assert extract_json('Result: {"verdict": "False"} hope that helps') == {"verdict": "False"}

    def test_think_block_removed(self):
        assert extract_json('<think>{"draft": true}</think>{"final": true}') == {"final": True}

    def test_skips_unbalanced_brace(self):
        assert extract_json('use {braces wisely} then {"ok": 1}') == {"ok": 1}

    def test_nothing_to_extract(self):
        with pytest.raises(JSONExtractionError) as exc_info:
            extract_json("no json at all")
        assert exc_info.value.raw_output == "no json at all"


class TestInvokeLlm:
    async def test_returns_validated_model(self):
        llm = FakeChatModel({"needs_breakdown": False, "reasoning": "one"})

        plan = await invoke_llm(llm, "sys", "user", DecompositionPlan, retry_delay=0)

        assert isinstance(plan, DecompositionPlan)
        assert llm.calls[0][0].content == "sys"
        assert llm.calls[0][1].content == "user"

    async def test_content_blocks_joined(self):
        class BlockModel(FakeChatModel):
            async def ainvoke(self, messages):
                msg = await super().ainvoke(messages)
                msg.content = [{"type": "text", "text": msg.content}]
                return msg

        plan = await invoke_llm(BlockModel({"needs_breakdown": False}), "s", "u",
                                DecompositionPlan, retry_delay=0)

        assert plan.needs_breakdown is False

    async def test_error_after_retries(self):
        llm = FakeChatModel("garbage")

        with pytest.raises(LLMInvocationError) as exc_info:
            await invoke_llm(llm, "s", "u", DecompositionPlan, max_retries=2, retry_delay=0)

        assert len(llm.calls) == 3
        assert exc_info.value.attempts == 3
        assert exc_info.value.raw_output == "garbage"
        assert "Could not extract" in exc_info.value.cause

    async def test_semantic_failure_retried(self):
        llm = FakeChatModel(
            {"verdict": "False", "explanation": "short", "confidence": 80},
            {"verdict": "False", "explanation": "Long enough explanation.", "confidence": 80},
        )

        out = await invoke_llm(llm, "s", "u", VerdictOutput, max_retries=1, retry_delay=0,
                               semantic_validator=validate_verdict)

        assert out.explanation == "Long enough explanation."
        assert len(llm.calls) == 2

    async def test_call_error_reported(self):
        llm = FakeChatModel(RuntimeError("rate limited"))

        with pytest.raises(LLMInvocationError) as exc_info:
            await invoke_llm(llm, "s", "u", VerdictOutput, max_retries=0, retry_delay=0)

        assert exc_info.value.cause == "RuntimeError: rate limited"


def test_validate_plan_duplicates():
    plan = DecompositionPlan(needs_breakdown=True, sub_queries=["A b", "a B"])
    ok, err = validate_plan(plan)
    assert not ok
    assert "duplicates" in err


def test_validate_plan_single_query_allowed():
    plan = DecompositionPlan(needs_breakdown=True, sub_queries=["only one"])
    assert validate_plan(plan) == (True, "")


class TestClients:
    def test_missing_key(self, no_key_settings):
        with pytest.raises(MissingCredentialError):
            get_planning_llm(no_key_settings)
        with pytest.raises(MissingCredentialError):
            get_reasoning_llm(no_key_settings)

    def test_planning_client(self, settings):
        llm = get_planning_llm(settings)
        assert isinstance(llm, ChatOpenAI)
        assert llm.model_name == "gpt-4o-mini"
        assert llm.temperature == 0.1

    def test_reasoning_client_has_no_temperature(self, settings):
        llm = get_reasoning_llm(settings)
        assert llm.model_name == "o4-mini"
        assert llm.temperature is None
        assert llm.max_tokens == 8192
