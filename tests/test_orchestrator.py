from __future__ import annotations

import pytest
from conftest import FakeReviewer
from conftest import FakeRunner

from claw_review.config import AppConfig
from claw_review.llm.client import CliReviewerClient
from claw_review.llm.client import ReviewerError
from claw_review.llm.client import ReviewerTimeoutError
from claw_review.review.models import ReviewRequest
from claw_review.review.orchestrator import build_review_orchestrator
from claw_review.review.orchestrator import has_reviewable_content
from claw_review.review.orchestrator import run_review


def _request(content: str, label: str = "a.py") -> ReviewRequest:
    return ReviewRequest(content=content, context_label=label, source="file")


def test_has_reviewable_content_rejects_whitespace() -> None:
    assert not has_reviewable_content(_request(""))
    assert not has_reviewable_content(_request(" \n\t "))
    assert has_reviewable_content(_request("x"))


@pytest.mark.anyio
async def test_run_review_sends_prompt_and_returns_text(make_orchestrator) -> None:
    reviewer = FakeReviewer(text="## Looks fine")
    orchestrator = make_orchestrator(FakeRunner({}), reviewer)
    result = await run_review(orchestrator, _request("hello", label="src/hello.py"))
    assert result.ok
    assert result.text == "## Looks fine"
    assert len(reviewer.prompts) == 1
    assert "CONTEXT: src/hello.py" in reviewer.prompts[0]
    assert "```diff\nhello\n```" in reviewer.prompts[0]


@pytest.mark.anyio
async def test_run_review_converts_reviewer_failure(make_orchestrator) -> None:
    reviewer = FakeReviewer(error=ReviewerError("rate limited", kind="exit"))
    orchestrator = make_orchestrator(FakeRunner({}), reviewer)
    result = await run_review(orchestrator, _request("hello"))
    assert not result.ok
    assert result.error == "rate limited"
    assert result.error_kind == "exit"


@pytest.mark.anyio
async def test_run_review_converts_timeout(make_orchestrator) -> None:
    reviewer = FakeReviewer(error=ReviewerTimeoutError("gemini timed out after 1s"))
    orchestrator = make_orchestrator(FakeRunner({}), reviewer)
    result = await run_review(orchestrator, _request("hello"))
    assert result.error_kind == "timeout"


@pytest.mark.anyio
async def test_run_review_refuses_empty_content(make_orchestrator) -> None:
    reviewer = FakeReviewer()
    orchestrator = make_orchestrator(FakeRunner({}), reviewer)
    with pytest.raises(ValueError):
        await run_review(orchestrator, _request("   "))
    assert reviewer.prompts == []


def test_collect_diff_uses_config(make_orchestrator) -> None:
    runner = FakeRunner({("git2", "diff"): "x" * 20})
    config = AppConfig(git_bin="git2", max_content_chars=5)
    orchestrator = make_orchestrator(runner, FakeReviewer(), config=config)
    request = orchestrator.collect_diff()
    assert request is not None
    assert request.truncated
    assert request.content.startswith("xxxxx\n")


def test_build_review_orchestrator_wires_cli_reviewer() -> None:
    orchestrator = build_review_orchestrator(AppConfig(reviewer_command="gemini -m pro"))
    assert isinstance(orchestrator.reviewer, CliReviewerClient)
    assert orchestrator.reviewer.name == "gemini"
