from __future__ import annotations

"""
同步外部命令执行器。

特点：
- 只接受参数向量（不经过 shell），避免引号/转义问题
- 返回 trim 后的 stdout
- `ignore_error=True` 时失败返回空字符串；超时则一律抛错
"""

import logging
import subprocess
from collections.abc import Sequence
from typing import Protocol

logger = logging.getLogger(__name__)


class CommandError(RuntimeError):
    """外部命令失败（非 0 退出码 / 无法启动）时抛出的错误类型。"""

    def __init__(self, message: str, stderr: str = "") -> None:
        super().__init__(message)
        self.stderr = stderr


class CommandTimeoutError(CommandError):
    """外部命令超时（进程已被 kill）。"""

    pass


class CommandRunner(Protocol):
    """命令执行接口协议（用于依赖倒置，方便测试替换）。"""

    def __call__(
        self,
        args: Sequence[str],
        *,
        cwd: str | None = None,
        timeout: float | None = None,
        ignore_error: bool = False,
    ) -> str: ...


def run_command(
    args: Sequence[str],
    *,
    cwd: str | None = None,
    timeout: float | None = None,
    ignore_error: bool = False,
) -> str:
    """
    同步执行命令并返回 trim 后的 stdout。

    - 失败：非 0 退出 / 启动失败抛 `CommandError`（`ignore_error` 时返回 ""）
    - 超时：抛 `CommandTimeoutError`，不受 `ignore_error` 影响
    """
    cmd = list(args)
    cmd_line = " ".join(cmd)
    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as exc:
        logger.error(f"command timed out after {timeout}s: {cmd_line}")
        raise CommandTimeoutError(f"Command timed out after {timeout}s: {cmd_line}") from exc
    except OSError as exc:
        if ignore_error:
            logger.debug(f"ignoring spawn failure: {cmd_line}: {exc}")
            return ""
        logger.error(f"command could not be started: {cmd_line}: {exc}")
        raise CommandError(f"Command could not be started: {cmd_line}: {exc}") from exc

    if result.returncode != 0:
        if ignore_error:
            logger.debug(f"ignoring exit code {result.returncode}: {cmd_line}")
            return ""
        logger.error(f"command failed: {cmd_line}\nstdout={result.stdout}\nstderr={result.stderr}")
        detail = result.stderr.strip() or f"exit code {result.returncode}"
        raise CommandError(f"Command failed: {cmd_line}: {detail}", stderr=result.stderr)

    return result.stdout.strip()
