from __future__ import annotations

"""
Console 输出（确定性，不依赖 LLM）。

注意：
- 用户可控的文本（路径、错误信息）一律 escape，避免被当成 rich markup
- review 正文原样输出（外部工具已经返回 Markdown）
"""

from rich.console import Console
from rich.markup import escape

from claw_review.review.models import ReviewRequest, ReviewResult

stdout_console = Console(soft_wrap=True)
stderr_console = Console(stderr=True, soft_wrap=True)


def render_source(console: Console, request: ReviewRequest) -> None:
    if request.source in ("unstaged", "staged"):
        console.print(f"[dim](Reviewing {request.source} changes)[/dim]")


def render_truncation_warning(console: Console, request: ReviewRequest, max_chars: int) -> None:
    what = "File" if request.source == "file" else "Diff"
    console.print(f"[yellow]{what} is very large (>{max_chars} chars). Truncating...[/yellow]")


def render_notice(console: Console, message: str, style: str = "yellow") -> None:
    console.print(f"[{style}]{escape(message)}[/{style}]")


def render_error(console: Console, label: str, detail: str) -> None:
    """红色 label + 原样 detail（例如 `File not found: src/a.py`）。"""
    console.print(f"[red]{escape(label)}[/red] {escape(detail)}")


def render_pending(console: Console) -> None:
    console.print("[blue]🤖 Analyzing...[/blue]")


def render_review(out: Console, err: Console, result: ReviewResult) -> None:
    """
    输出 review 结果。

    - 成功：`Review Report:` 标题 + 原始文本
    - 失败：红色错误 + 外部工具的 stderr / 启动错误
    """
    if not result.ok:
        render_error(err, "Error calling reviewer:", result.error or "unknown error")
        return
    out.print()
    out.print("[bold underline]Review Report:[/bold underline]")
    out.print()
    out.out(result.text or "", highlight=False)
