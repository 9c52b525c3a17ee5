"""
CLI 入口（`claw-review`）。

这里做三件事：
- 加载配置（环境变量，非法值直接退出）
- 组装外部依赖（git CLI / 外部 reviewer 命令）
- 装配子命令（diff + file），把结果渲染到终端

注意：
- 业务流程不写在这里（由 `review/orchestrator.py` 负责）
- 不带子命令时默认执行 diff（由 callback 决定，不改写 argv）
- 除“文件不存在”外，所有错误都打印后以 0 退出
"""

from __future__ import annotations

import logging
import os

import anyio
import typer

from claw_review.config import load_config_from_env
from claw_review.infra.shell import CommandError
from claw_review.review.models import ReviewRequest
from claw_review.review.orchestrator import ReviewOrchestrator
from claw_review.review.orchestrator import build_review_orchestrator
from claw_review.review.orchestrator import has_reviewable_content
from claw_review.review.orchestrator import run_review
from claw_review.review.report import render_error
from claw_review.review.report import render_notice
from claw_review.review.report import render_pending
from claw_review.review.report import render_review
from claw_review.review.report import render_source
from claw_review.review.report import render_truncation_warning
from claw_review.review.report import stderr_console
from claw_review.review.report import stdout_console
from claw_review.review.sources import SourceError
from claw_review.review.sources import SourceNotFoundError

APP_NAME = "claw-review"
APP_VERSION = "1.0.0"

logger = logging.getLogger(__name__)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"{APP_NAME} {APP_VERSION}")
        raise typer.Exit()


def _review(orchestrator: ReviewOrchestrator, request: ReviewRequest) -> None:
    """空内容直接提示；否则调用外部 reviewer 并输出结果。"""
    if not has_reviewable_content(request):
        render_notice(stdout_console, "No content to review.")
        return
    render_pending(stdout_console)
    result = anyio.run(run_review, orchestrator, request)
    render_review(stdout_console, stderr_console, result)


def _review_diff(orchestrator: ReviewOrchestrator) -> None:
    try:
        request = orchestrator.collect_diff()
    except (SourceError, CommandError) as exc:
        render_error(stderr_console, "Error getting diff:", str(exc))
        return

    if request is None:
        render_notice(stdout_console, "Working tree clean. Nothing to review.", style="green")
        return

    render_source(stdout_console, request)
    if request.truncated:
        render_truncation_warning(stderr_console, request, orchestrator.config.max_content_chars)
    _review(orchestrator, request)


def build_app() -> typer.Typer:
    """创建并返回 Typer app（便于测试/复用）。"""
    app = typer.Typer(
        name=APP_NAME,
        help="AI-powered code reviewer for agents.",
        add_completion=False,
    )

    @app.callback(invoke_without_command=True)
    def main(
        ctx: typer.Context,
        version: bool = typer.Option(
            False,
            "--version",
            "-V",
            callback=_version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ) -> None:
        """Review git changes or a file with an external AI command-line tool."""
        try:
            config = load_config_from_env(os.environ)
        except ValueError as exc:
            render_error(stderr_console, "Invalid configuration:", str(exc))
            raise typer.Exit(code=2)

        logging.basicConfig(
            level=config.log_level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
            force=True,
        )
        logger.info(f"config loaded: reviewer={config.reviewer_command}, transport={config.prompt_transport}")
        ctx.obj = build_review_orchestrator(config)

        if ctx.invoked_subcommand is None:
            _review_diff(ctx.obj)

    @app.command("diff")
    def diff_command(ctx: typer.Context) -> None:
        """Review current git changes (unstaged, falling back to staged)."""
        _review_diff(ctx.obj)

    @app.command("file")
    def file_command(
        ctx: typer.Context,
        path: str = typer.Argument(..., help="Path of the file to review."),
    ) -> None:
        """Review a specific file."""
        orchestrator: ReviewOrchestrator = ctx.obj
        try:
            request = orchestrator.collect_file(path)
        except SourceNotFoundError as exc:
            render_error(stderr_console, "File not found:", exc.path)
            raise typer.Exit(code=1)
        except SourceError as exc:
            render_error(stderr_console, "Error reading file:", str(exc))
            return

        if request.truncated:
            render_truncation_warning(stderr_console, request, orchestrator.config.max_content_chars)
        _review(orchestrator, request)

    return app


app = build_app()


def run() -> None:
    """console script 入口（pyproject 的 [project.scripts]）。"""
    app()
