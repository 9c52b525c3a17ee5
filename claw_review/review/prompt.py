from __future__ import annotations

SYSTEM_PROMPT = (
    "You are a senior software engineer conducting a code review.\n"
    "Analyze the provided code/diff and identify:\n"
    "1. Critical Bugs 🐛\n"
    "2. Security Vulnerabilities 🔓\n"
    "3. Performance Issues 🐌\n"
    "4. Best Practices/Refactoring 💡\n"
    "\n"
    "Be concise. Do not explain what the code does unless it's unclear.\n"
    'If the code is good, say "LGTM (Looks Good To Me) ✨".\n'
    "Format your response in Markdown."
)

TRUNCATION_MARKER = "\n... (truncated)"


def truncate_content(text: str, max_chars: int) -> tuple[str, bool]:
    """控制输入长度，避免超出外部工具的参数/上下文限制。返回 (text, 是否截断)。"""
    if max_chars <= 0:
        raise ValueError("max_chars must be > 0")
    if len(text) <= max_chars:
        return text, False
    return text[:max_chars] + TRUNCATION_MARKER, True


def build_review_prompt(content: str, context_label: str) -> str:
    return f"{SYSTEM_PROMPT}\n\nCONTEXT: {context_label}\n\nCODE:\n```diff\n{content}\n```"
