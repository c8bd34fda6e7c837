import pytest

from src.db.schemas import Message
from src.graph.policies import get_profile
from src.session.context import build_context


def _transcript(n: int):
    roles = ("user", "assistant")
    return [Message(role=roles[i % 2], content=f"m{i}") for i in range(n)]


def test_window_keeps_last_12_in_order():
    transcript = _transcript(20)
    context = build_context(get_profile("chat"), "", transcript, 12)

    assert len(context) == 13
    assert context[0].role == "system"
    assert [m.content for m in context[1:]] == [f"m{i}" for i in range(8, 20)]
    assert [m.role for m in context[1:]] == [m.role for m in transcript[8:]]
    assert sum(1 for m in context if m.role == "system") == 1


def test_short_transcript_is_sent_whole():
    context = build_context(get_profile("chat"), "", _transcript(3))
    assert [m.content for m in context[1:]] == ["m0", "m1", "m2"]


def test_instruction_embeds_preamble_and_memory():
    profile = get_profile("exam")
    context = build_context(profile, "last thing the user said", _transcript(1))

    instruction = context[0].content
    assert instruction.startswith(profile.preamble)
    assert instruction.endswith("last thing the user said")


def test_empty_memory_uses_none_placeholder():
    context = build_context(get_profile("chat"), "", _transcript(1))
    assert context[0].content.endswith("\nNone")


def test_transcript_is_not_mutated():
    transcript = _transcript(20)
    build_context(get_profile("chat"), "", transcript, 5)
    assert len(transcript) == 20


def test_invalid_window():
    with pytest.raises(ValueError):
        build_context(get_profile("chat"), "", _transcript(2), 0)
