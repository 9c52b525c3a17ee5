"""
Review 领域模型（Pydantic）。

用途：
- 明确各阶段输入/输出的数据结构
- request 一次调用只创建一次、只消费一次（frozen）
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, model_validator

ReviewSource = Literal["unstaged", "staged", "file"]
ReviewErrorKind = Literal["exit", "spawn", "timeout", "output_too_large"]


class ReviewRequest(BaseModel):
    """一次 review 的输入（由 diff/file resolver 产生）。"""

    model_config = ConfigDict(frozen=True)

    content: str
    context_label: str
    source: ReviewSource
    truncated: bool = False


class ReviewResult(BaseModel):
    """外部 reviewer 的返回：text 与 error 二者恰好有一个。"""

    text: str | None = None
    error: str | None = None
    error_kind: ReviewErrorKind | None = None

    @model_validator(mode="after")
    def _check_exactly_one(self) -> ReviewResult:
        if (self.text is None) == (self.error is None):
            raise ValueError("exactly one of text/error must be set")
        if self.error is None and self.error_kind is not None:
            raise ValueError("error_kind requires error")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None
