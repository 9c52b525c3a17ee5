"""
外部 AI Reviewer Client（调用 `gemini` 之类的命令行工具）。

目标：
- **尽量薄**：只做进程调用与错误归类，不解析返回内容
- **不经过 shell**：prompt 作为单独的 argv 元素（或 stdin）传入，无需任何转义
- **有边界**：超时或 stdout 超过上限都会立即 kill 子进程
"""

from __future__ import annotations

import logging
import shlex
import subprocess

import anyio

from claw_review.review.models import ReviewErrorKind

logger = logging.getLogger(__name__)


class ReviewerError(RuntimeError):
    """外部 reviewer 调用失败。`kind` 用于区分失败原因。"""

    def __init__(self, message: str, kind: ReviewErrorKind) -> None:
        super().__init__(message)
        self.kind = kind


class ReviewerTimeoutError(ReviewerError):
    """外部 reviewer 在限定时间内没有返回（子进程已被 kill）。"""

    def __init__(self, message: str) -> None:
        super().__init__(message, kind="timeout")


class CliReviewerClient:
    """
    单次调用外部 reviewer 命令。

    注意：
    - 不做 retry（失败直接抛异常，由上游转换为 ReviewResult）
    - 同一时间最多只有一个子进程
    """

    def __init__(
        self,
        command: str,
        timeout: float,
        max_output_bytes: int,
        prompt_transport: str = "argv",
    ) -> None:
        """
        - command: reviewer 命令（例如 `gemini` 或 `gemini -m pro`），按 shell 语法拆分但不经过 shell 执行
        - timeout: 秒
        - max_output_bytes: stdout 上限
        - prompt_transport: `argv`（作为最后一个参数）或 `stdin`
        """
        self._argv = shlex.split(command)
        if not self._argv:
            raise ValueError("reviewer command must be non-empty")
        if prompt_transport not in ("argv", "stdin"):
            raise ValueError(f"Unknown prompt transport: {prompt_transport}")
        self._timeout = timeout
        self._max_output_bytes = max_output_bytes
        self._prompt_transport = prompt_transport

    @property
    def name(self) -> str:
        return self._argv[0]

    async def review(self, prompt: str) -> str:
        """调用外部工具并返回 trim 后的 stdout。"""
        if self._prompt_transport == "argv":
            cmd = [*self._argv, prompt]
            stdin_bytes = None
        else:
            cmd = list(self._argv)
            stdin_bytes = prompt.encode("utf-8")

        logger.info(f"reviewer request: cmd={self.name}, prompt={len(prompt)} chars, transport={self._prompt_transport}")
        try:
            with anyio.fail_after(self._timeout):
                returncode, stdout, stderr, overflowed = await self._run(cmd, stdin_bytes)
        except TimeoutError as exc:
            logger.error(f"reviewer timed out after {self._timeout}s: {self.name}")
            raise ReviewerTimeoutError(f"{self.name} timed out after {self._timeout}s") from exc
        except (OSError, ValueError) as exc:
            # ValueError: argv 中含 NUL 等无法传给 exec 的字符
            logger.error(f"reviewer could not be started: {self.name}: {exc}")
            raise ReviewerError(f"{self.name} could not be started: {exc}", kind="spawn") from exc

        return self._handle_result(returncode, stdout, stderr, overflowed)

    async def _run(self, cmd: list[str], stdin_bytes: bytes | None) -> tuple[int, bytes, bytes, bool]:
        """
        启动子进程并流式读取 stdout。

        - stdout 超过 `max_output_bytes` 立即 kill 子进程，不再继续读取
        - 超时/取消时由 anyio 的 Process.aclose 负责 kill + 回收
        """
        stdout_chunks: list[bytes] = []
        stderr_chunks: list[bytes] = []
        overflowed = False

        async with await anyio.open_process(
            cmd,
            stdin=subprocess.PIPE if stdin_bytes is not None else subprocess.DEVNULL,
        ) as process:

            async def feed_stdin() -> None:
                if process.stdin is None or stdin_bytes is None:
                    return
                try:
                    await process.stdin.send(stdin_bytes)
                    await process.stdin.aclose()
                except (anyio.BrokenResourceError, anyio.ClosedResourceError):
                    logger.debug(f"reviewer closed stdin early: {self.name}")

            async def drain_stderr() -> None:
                if process.stderr is None:
                    return
                async for chunk in process.stderr:
                    stderr_chunks.append(chunk)

            async with anyio.create_task_group() as tg:
                tg.start_soon(feed_stdin)
                tg.start_soon(drain_stderr)
                size = 0
                if process.stdout is not None:
                    async for chunk in process.stdout:
                        size += len(chunk)
                        if size > self._max_output_bytes:
                            overflowed = True
                            process.kill()
                            break
                        stdout_chunks.append(chunk)
                returncode = await process.wait()

        return returncode, b"".join(stdout_chunks), b"".join(stderr_chunks), overflowed

    def _handle_result(self, returncode: int, stdout: bytes, stderr_raw: bytes, overflowed: bool) -> str:
        if overflowed:
            logger.error(f"reviewer output too large: > {self._max_output_bytes} bytes, process killed")
            raise ReviewerError(
                f"{self.name} output exceeded {self._max_output_bytes} bytes",
                kind="output_too_large",
            )

        stderr = stderr_raw.decode("utf-8", errors="replace").strip()
        if returncode != 0:
            logger.error(f"reviewer failed: {self.name} exit={returncode}\nstderr={stderr}")
            raise ReviewerError(stderr or f"{self.name} exited with code {returncode}", kind="exit")

        text = stdout.decode("utf-8", errors="replace").strip()
        logger.info(f"reviewer response: {len(text)} chars")
        return text
