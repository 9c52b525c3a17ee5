"""
Review Orchestrator（流程编排）。

关键思想：
- **流程由工程代码控制**：collect -> build prompt -> call reviewer，线性执行
- **外部工具只负责“思考”**：返回文本原样展示，不做解析

最小闭环：
git diff / file -> ReviewRequest -> prompt -> reviewer CLI -> ReviewResult
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from claw_review.config import AppConfig
from claw_review.infra.shell import CommandRunner, run_command
from claw_review.llm.client import CliReviewerClient, ReviewerError
from claw_review.review.models import ReviewRequest, ReviewResult
from claw_review.review.prompt import build_review_prompt
from claw_review.review.sources import resolve_diff, resolve_file

logger = logging.getLogger(__name__)


class Reviewer(Protocol):
    """外部 reviewer 接口协议（便于测试替换为 fake）。"""

    async def review(self, prompt: str) -> str: ...


@dataclass(frozen=True)
class ReviewOrchestrator:
    """Orchestrator 运行时依赖集合。"""

    config: AppConfig
    runner: CommandRunner
    reviewer: Reviewer

    def collect_diff(self) -> ReviewRequest | None:
        return resolve_diff(
            runner=self.runner,
            git_bin=self.config.git_bin,
            max_chars=self.config.max_content_chars,
            timeout=self.config.git_timeout,
        )

    def collect_file(self, path: str) -> ReviewRequest:
        return resolve_file(path=path, max_chars=self.config.max_content_chars)


def build_review_orchestrator(config: AppConfig) -> ReviewOrchestrator:
    """按配置装配真实依赖（git CLI + 外部 reviewer 命令）。"""
    reviewer = CliReviewerClient(
        command=config.reviewer_command,
        timeout=config.reviewer_timeout,
        max_output_bytes=config.max_output_bytes,
        prompt_transport=config.prompt_transport,
    )
    return ReviewOrchestrator(config=config, runner=run_command, reviewer=reviewer)


def has_reviewable_content(request: ReviewRequest) -> bool:
    """空内容/纯空白不调用外部 reviewer。"""
    return bool(request.content.strip())


async def run_review(orchestrator: ReviewOrchestrator, request: ReviewRequest) -> ReviewResult:
    """
    跑一次 review，返回 ReviewResult。

    - 调用方需先用 `has_reviewable_content` 过滤空内容
    - reviewer 的失败转换为 `ReviewResult.error`，不向上抛
    """
    if not has_reviewable_content(request):
        raise ValueError("request content is empty")

    prompt = build_review_prompt(content=request.content, context_label=request.context_label)
    try:
        text = await orchestrator.reviewer.review(prompt)
    except ReviewerError as exc:
        return ReviewResult(error=str(exc), error_kind=exc.kind)
    return ReviewResult(text=text)
