"""
Training record types for the JSONL dataset.

Records follow the OpenAI chat fine-tuning format, so the turns are typed with
the message params from ``openai.types.chat``.
"""

from __future__ import annotations

from typing import List, TypedDict

from openai.types.chat import (
    ChatCompletionAssistantMessageParam,
    ChatCompletionMessageParam,
    ChatCompletionSystemMessageParam,
    ChatCompletionUserMessageParam,
)


class ConversationRecord(TypedDict):
    """One training example: exactly a system, a user and an assistant turn."""

    messages: List[ChatCompletionMessageParam]


def build_conversation_record(system_prompt: str, user_content: str, assistant_content: str) -> ConversationRecord:
    """Assemble the three role-tagged turns of a record."""
    system_turn: ChatCompletionSystemMessageParam = {"role": "system", "content": system_prompt}
    user_turn: ChatCompletionUserMessageParam = {"role": "user", "content": user_content}
    assistant_turn: ChatCompletionAssistantMessageParam = {"role": "assistant", "content": assistant_content}
    return {"messages": [system_turn, user_turn, assistant_turn]}
