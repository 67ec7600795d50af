# tests/mcp_console/conftest.py
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import pytest

from mcp_console.llm.providers.base import BaseLLMClient
from mcp_console.ui.operator import Choice, Operator


class ScriptedOperator(Operator):
    """Plays back canned answers and records everything shown."""

    def __init__(
        self,
        *,
        answers: Sequence[str] = (),
        confirms: Sequence[bool] = (),
        selections: Sequence[str] = (),
    ) -> None:
        self.answers = list(answers)
        self.confirms = list(confirms)
        self.selections = list(selections)
        self.said: List[str] = []
        self.previews: List[str] = []
        self.questions: List[str] = []

    def say(self, text: str, *, style: Optional[str] = None) -> None:
        self.said.append(text)

    def preview(self, text: str, *, title: str = "Prompt") -> None:
        self.previews.append(text)

    async def ask(self, question: str) -> str:
        self.questions.append(question)
        return self.answers.pop(0)

    async def confirm(self, question: str, *, default: bool = True) -> bool:
        self.questions.append(question)
        return self.confirms.pop(0) if self.confirms else default

    async def select(self, question: str, choices: Sequence[Choice]) -> str:
        self.questions.append(question)
        wanted = self.selections.pop(0)
        for choice in choices:
            if wanted in (choice.value, choice.title):
                return choice.value
        raise AssertionError(f"{wanted!r} not offered in {[c.title for c in choices]}")


Reply = Union[Dict[str, Any], Exception, Callable[..., Dict[str, Any]]]


class FakeLLM(BaseLLMClient):
    """Returns queued completions; records every call."""

    def __init__(self, replies: Sequence[Reply] = (), model: str = "fake-model") -> None:
        self.model = model
        self.replies = list(replies)
        self.calls: List[Dict[str, Any]] = []

    async def create_completion(self, messages, tools=None, *, max_tokens=None):
        self.calls.append({"messages": [dict(m) for m in messages], "tools": tools, "max_tokens": max_tokens})
        reply = self.replies.pop(0) if self.replies else {"response": None, "tool_calls": []}
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(messages)
        return reply


@pytest.fixture
def fake_llm_factory():
    return FakeLLM


@pytest.fixture
def operator_factory():
    return ScriptedOperator


@pytest.fixture
def users_file(tmp_path):
    path = tmp_path / "users.jsonl"
    path.write_text(
        '{"id": 1, "name": "Grace Hopper", "email": "grace@example.com"}\n'
        '{"id": 2, "name": "Alan Turing", "email": "alan@example.com"}\n'
    )
    return path


@pytest.fixture
def user_store(users_file):
    from mcp_console.server.store import UserStore

    return UserStore(users_file)
