"""Prompts sent to the model when asking for commit messages."""

from __future__ import annotations

from gitty.core.diff_summarizer import DEFAULT_MAX_LENGTH, truncate_diff

STYLE_PROMPTS = {
    "concise": "You write clear, concise commit messages that are straight to the point.",
    "detailed": "You write detailed commit messages that explain what changed and why.",
    "funny": "You write humorous but informative commit messages with wit and personality.",
}

DEFAULT_STYLE = "concise"


def build_system_prompt(style: str, language: str, prepend: str | None = None) -> str:
    """Build the system prompt.

    An unknown style falls back to the concise wording. When a prefix will
    be added afterwards, the model is told not to write its own
    conventional-commit type.
    """
    style_prompt = STYLE_PROMPTS.get(style, STYLE_PROMPTS[DEFAULT_STYLE])
    if prepend:
        convention = (
            "Do not include prefixes like feat:, fix:, docs: in your messages "
            "since a custom prefix will be added."
        )
    else:
        convention = "Follow conventional commit format when appropriate (feat:, fix:, docs:, etc)."

    return (
        "You are a helpful assistant that generates git commit messages.\n"
        f"{style_prompt}\n"
        f"Generate commit messages in {language}.\n"
        f"{convention}"
    )


def build_user_prompt(diff: str, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Build the user prompt around a size-bounded diff."""
    truncated = truncate_diff(diff, max_length)
    return f"""Based on this git diff, generate 3 different commit message options:

{truncated}

Return ONLY a JSON array with exactly this structure:
[
  {{"message": "first commit message here", "confidence": 0.9}},
  {{"message": "second commit message here", "confidence": 0.8}},
  {{"message": "third commit message here", "confidence": 0.7}}
]

Important: Return ONLY the JSON array, no other text, no explanations, no markdown."""
