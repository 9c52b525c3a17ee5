"""
应用配置加载。

设计目标：
- **有默认值**：不配置任何环境变量也能直接跑（默认调用 `gemini`）
- **类型安全**：使用 Pydantic 校验数值/枚举，非法值直接报错
- **可测试**：核心加载函数接收 `environ` 显式输入，便于单元测试
"""

from __future__ import annotations

import shlex
from collections.abc import Mapping
from typing import Literal

from pydantic import BaseModel, Field, ValidationError, field_validator

DEFAULT_MAX_CONTENT_CHARS = 50_000
DEFAULT_MAX_OUTPUT_BYTES = 10 * 1024 * 1024


class AppConfig(BaseModel):
    """CLI 运行所需的配置集合（全部可选，带默认值）。"""

    reviewer_command: str = Field(default="gemini", min_length=1)
    prompt_transport: Literal["argv", "stdin"] = "argv"
    reviewer_timeout: float = Field(default=600.0, gt=0)
    max_output_bytes: int = Field(default=DEFAULT_MAX_OUTPUT_BYTES, gt=0)
    max_content_chars: int = Field(default=DEFAULT_MAX_CONTENT_CHARS, gt=0)
    git_bin: str = Field(default="git", min_length=1)
    git_timeout: float = Field(default=60.0, gt=0)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"

    @field_validator("reviewer_command")
    @classmethod
    def _check_reviewer_command(cls, value: str) -> str:
        """命令按 shell 语法拆分后必须非空（例如引号未闭合直接拒绝）。"""
        try:
            argv = shlex.split(value)
        except ValueError as exc:
            raise ValueError(f"reviewer command is not valid shell syntax: {exc}") from exc
        if not argv:
            raise ValueError("reviewer command must be non-empty")
        return value


_ENV_FIELDS: tuple[tuple[str, str], ...] = (
    ("CLAW_REVIEW_COMMAND", "reviewer_command"),
    ("CLAW_REVIEW_PROMPT_TRANSPORT", "prompt_transport"),
    ("CLAW_REVIEW_TIMEOUT", "reviewer_timeout"),
    ("CLAW_REVIEW_MAX_OUTPUT_BYTES", "max_output_bytes"),
    ("CLAW_REVIEW_MAX_CHARS", "max_content_chars"),
    ("CLAW_REVIEW_GIT_BIN", "git_bin"),
    ("CLAW_REVIEW_GIT_TIMEOUT", "git_timeout"),
    ("CLAW_REVIEW_LOG_LEVEL", "log_level"),
)


def load_config_from_env(environ: Mapping[str, str]) -> AppConfig:
    """
    从环境变量加载并校验配置。

    - **输入**：`environ`（例如 `os.environ`）
    - **输出**：`AppConfig`
    - **失败**：取值非法（例如超时为负数）则抛 `ValueError`
    """
    values: dict[str, str] = {}
    for env_key, field_name in _ENV_FIELDS:
        raw = environ.get(env_key)
        # 空字符串视为未配置，回落到默认值
        if raw is None or not raw.strip():
            continue
        values[field_name] = raw.strip()

    if "log_level" in values:
        values["log_level"] = values["log_level"].upper()

    try:
        return AppConfig.model_validate(values)
    except ValidationError as exc:
        raise ValueError(f"Invalid claw-review configuration: {exc}") from exc
