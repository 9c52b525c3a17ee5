from __future__ import annotations

import pytest

from claw_review.review.prompt import SYSTEM_PROMPT
from claw_review.review.prompt import TRUNCATION_MARKER
from claw_review.review.prompt import build_review_prompt
from claw_review.review.prompt import truncate_content


def test_build_review_prompt_layout() -> None:
    prompt = build_review_prompt(content="+x = 1", context_label="Git Diff (unstaged)")
    assert prompt == f"{SYSTEM_PROMPT}\n\nCONTEXT: Git Diff (unstaged)\n\nCODE:\n```diff\n+x = 1\n```"


def test_build_review_prompt_keeps_content_verbatim() -> None:
    content = 'echo "$HOME" `id` \\n'
    prompt = build_review_prompt(content=content, context_label="a.sh")
    assert f"```diff\n{content}\n```" in prompt


def test_truncate_content_short_text_untouched() -> None:
    assert truncate_content(text="abc", max_chars=3) == ("abc", False)


def test_truncate_content_cuts_and_marks() -> None:
    text = "a" * 50_001
    truncated, was_truncated = truncate_content(text=text, max_chars=50_000)
    assert was_truncated
    assert truncated == "a" * 50_000 + TRUNCATION_MARKER


def test_truncate_content_rejects_invalid_limit() -> None:
    with pytest.raises(ValueError):
        truncate_content(text="abc", max_chars=0)
