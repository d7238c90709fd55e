"""Prompt templates."""

from __future__ import annotations

from typing import Any

from wizard_mcp.types import CallContext, Prompt

GREETING_STYLES = {
    "formal": "Good day, {name}. How may I assist you?",
    "casual": "Hey {name}, what's up?",
}


def _user_message(text: str) -> dict[str, Any]:
    return {"role": "user", "content": {"type": "text", "text": text}}


def greeting_prompt() -> Prompt:
    """Create the greeting prompt."""

    def handler(arguments: dict[str, Any], _context: CallContext) -> dict[str, Any]:
        style = arguments.get("style") or "casual"
        if style not in GREETING_STYLES:
            raise ValueError(f"Unknown greeting style '{style}'")
        return {
            "description": "Greeting",
            "messages": [
                _user_message(GREETING_STYLES[style].format(name=arguments["name"]))
            ],
        }

    return Prompt(
        name="greeting",
        handler=handler,
        argument_schema={
            "name": {"description": "Who to greet.", "required": True},
            "style": {"description": "Either 'formal' or 'casual'."},
        },
        description="Greet someone by name.",
    )


def code_review_prompt() -> Prompt:
    """Create the code review prompt."""

    def handler(arguments: dict[str, Any], _context: CallContext) -> dict[str, Any]:
        language = arguments.get("language") or "the given language"
        return {
            "description": "Code review",
            "messages": [
                _user_message(
                    f"Review the following code written in {language}:\n\n"
                    f"{arguments['code']}"
                )
            ],
        }

    return Prompt(
        name="code_review",
        handler=handler,
        argument_schema={
            "code": {"description": "Source code to review.", "required": True},
            "language": {"description": "Programming language of the code."},
        },
        description="Ask for a review of a code snippet.",
    )
