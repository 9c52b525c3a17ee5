"""
Content Source（非 AI）。

职责：
- diff 模式：通过 git CLI 取未暂存 diff，为空时回落到已暂存 diff
- file 模式：读取指定文件全文
- 两种模式使用同一个长度上限（超出截断并标记 `truncated`）
"""

from __future__ import annotations

import logging
import os

from claw_review.infra.shell import CommandRunner
from claw_review.review.models import ReviewRequest
from claw_review.review.prompt import truncate_content

logger = logging.getLogger(__name__)


class SourceError(RuntimeError):
    """无法取得待 review 内容（不是 git 仓库、读文件失败等）。"""

    pass


class SourceNotFoundError(SourceError):
    """指定文件不存在。`path` 保留用户传入的原始字符串。"""

    def __init__(self, path: str) -> None:
        super().__init__(f"File not found: {path}")
        self.path = path


def resolve_diff(
    runner: CommandRunner,
    git_bin: str,
    max_chars: int,
    timeout: float | None = None,
    cwd: str | None = None,
) -> ReviewRequest | None:
    """
    取当前工作区的 diff。

    - 优先未暂存（`git diff`），为空再取已暂存（`git diff --cached`）
    - 两者都为空返回 None（工作区干净，不是错误）
    - 失败：不在 git 仓库中抛 `SourceError`；git 命令失败抛 `CommandError`
    """
    inside = runner([git_bin, "rev-parse", "--is-inside-work-tree"], cwd=cwd, timeout=timeout, ignore_error=True)
    if inside != "true":
        where = cwd or os.getcwd()
        logger.error(f"not inside a git work tree: {where}")
        raise SourceError(f"Not a git repository (or git unavailable): {where}")

    diff = runner([git_bin, "diff"], cwd=cwd, timeout=timeout)
    source = "unstaged"
    if not diff:
        diff = runner([git_bin, "diff", "--cached"], cwd=cwd, timeout=timeout)
        source = "staged"
    if not diff:
        logger.info("working tree clean, nothing to review")
        return None

    content, truncated = truncate_content(text=diff, max_chars=max_chars)
    logger.info(f"collected {source} diff: {len(diff)} chars (truncated={truncated})")
    return ReviewRequest(
        content=content,
        context_label=f"Git Diff ({source})",
        source=source,
        truncated=truncated,
    )


def resolve_file(path: str, max_chars: int) -> ReviewRequest:
    """
    读取指定文件全文。

    - context label 等于用户传入的 path（不是绝对路径）
    - 失败：不存在抛 `SourceNotFoundError`；读取/解码失败（包括目录）抛 `SourceError`
    """
    absolute_path = os.path.abspath(path)
    if not os.path.exists(absolute_path):
        logger.error(f"file not found: {absolute_path}")
        raise SourceNotFoundError(path=path)

    try:
        with open(absolute_path, encoding="utf-8") as f:
            raw = f.read()
    except (OSError, UnicodeDecodeError) as exc:
        logger.error(f"failed to read {absolute_path}: {exc}")
        raise SourceError(f"{path}: {exc}") from exc

    content, truncated = truncate_content(text=raw, max_chars=max_chars)
    return ReviewRequest(content=content, context_label=path, source="file", truncated=truncated)
