"""
本地 Mock 外部 reviewer（代替 `gemini` 命令）。

用途：
- 没有安装/登录真实 AI CLI 时，本地跑通 diff/file -> review 的闭环
- 测试里作为真实子进程被调用

启动：
  CLAW_REVIEW_COMMAND="python -m claw_review.dev.mock_reviewer" claw-review file README.md

行为：
- prompt 取自最后一个参数；没有参数时读 stdin
- `MOCK_REVIEWER_FAIL=1` 时写 stderr 并以 2 退出
"""

from __future__ import annotations

import os
import sys


def _extract_context_from_prompt(prompt: str) -> str:
    for line in prompt.splitlines():
        stripped = line.strip()
        if stripped.startswith("CONTEXT: "):
            return stripped.removeprefix("CONTEXT: ").strip()
    raise ValueError("Cannot find `CONTEXT: ...` in review prompt")


def _build_mock_report(context: str, prompt: str) -> str:
    lines: list[str] = []
    lines.append(f"## Review of {context}")
    lines.append("")
    lines.append("- **[MOCK]** Consider stricter error handling and boundary checks.")
    lines.append(f"- Prompt size: {len(prompt)} chars")
    lines.append("")
    lines.append("LGTM (Looks Good To Me) ✨")
    return "\n".join(lines)


def main(argv: list[str]) -> int:
    if os.environ.get("MOCK_REVIEWER_FAIL"):
        print("[MOCK] reviewer failure requested", file=sys.stderr)
        return 2

    prompt = argv[-1] if argv else sys.stdin.read()
    try:
        context = _extract_context_from_prompt(prompt=prompt)
    except ValueError as exc:
        print(f"[MOCK] {exc}", file=sys.stderr)
        return 1

    print(_build_mock_report(context=context, prompt=prompt))
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
