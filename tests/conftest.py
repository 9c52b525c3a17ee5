from __future__ import annotations

from collections.abc import Sequence

import pytest

from claw_review.config import AppConfig
from claw_review.llm.client import ReviewerError
from claw_review.review.orchestrator import ReviewOrchestrator


class FakeRunner:
    """按参数向量返回预设 stdout，记录所有调用。"""

    def __init__(self, outputs: dict[tuple[str, ...], str], inside_repo: bool = True) -> None:
        self.outputs = outputs
        self.inside_repo = inside_repo
        self.calls: list[tuple[str, ...]] = []

    def __call__(
        self,
        args: Sequence[str],
        *,
        cwd: str | None = None,
        timeout: float | None = None,
        ignore_error: bool = False,
    ) -> str:
        key = tuple(args)
        self.calls.append(key)
        if key[1:] == ("rev-parse", "--is-inside-work-tree"):
            return "true" if self.inside_repo else ""
        return self.outputs.get(key, "")


class FakeReviewer:
    """记录收到的 prompt；可配置为失败。"""

    def __init__(self, text: str = "LGTM", error: ReviewerError | None = None) -> None:
        self.text = text
        self.error = error
        self.prompts: list[str] = []

    async def review(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def make_orchestrator():
    def _make(runner: FakeRunner, reviewer: FakeReviewer, config: AppConfig | None = None) -> ReviewOrchestrator:
        return ReviewOrchestrator(config=config or AppConfig(), runner=runner, reviewer=reviewer)

    return _make
