"""测试 WingmanAgent 各编排入口。"""

import base64
import json

import pytest

from wingman_core.agents.wingman_agent import WingmanAgent
from wingman_core.domain.conversation import ConversationState
from wingman_core.domain.exceptions import (
    ApiError,
    EncodingFailure,
    InvocationFailure,
    MalformedResponse,
    NetworkError,
)
from wingman_core.domain.models import ExtractionResult, MediaPart, TextPart


class FakeClient:
    name = "fake"

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    async def generate(self, parts, *, grounding=False, json_output=False):
        self.calls.append({"parts": list(parts), "grounding": grounding, "json_output": json_output})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def api_error():
    return ApiError(code="API_ERROR", message="grounding unsupported")


EXTRACTION = {
    "problem_statement": "Reply to the recruiter",
    "context": "Email thread",
    "suggested_responses": ["Accept", "Decline"],
    "reasoning": "Because",
}

SOLUTION = {"solution": {"code": "Dear recruiter,", "reasoning": "polite"}}


def write_images(tmp_path, count):
    paths = []
    for i in range(count):
        p = tmp_path / f"{i}.png"
        p.write_bytes(f"png-{i}".encode())
        paths.append(str(p))
    return paths


@pytest.mark.asyncio
async def test_extract_problem_parts_follow_image_order(tmp_path):
    client = FakeClient("```json\n" + json.dumps(EXTRACTION) + "\n```")
    agent = WingmanAgent(client)
    paths = write_images(tmp_path, 3)
    res = await agent.extract_problem_from_images(paths)

    assert isinstance(res, ExtractionResult)
    assert res.problem_statement == "Reply to the recruiter"
    assert res.suggested_responses == ["Accept", "Decline"]
    assert res.used_grounding is True

    sent = client.calls[0]["parts"]
    assert isinstance(sent[0], TextPart) and sent[0].value.startswith("You are AI Wingman")
    assert "problem_statement" in sent[1].value
    media = [p for p in sent if isinstance(p, MediaPart)]
    assert [base64.b64decode(m.data).decode() for m in media] == ["png-0", "png-1", "png-2"]
    assert all(m.mime_type == "image/png" for m in media)


@pytest.mark.asyncio
async def test_extract_problem_malformed_on_fallback(tmp_path):
    client = FakeClient(api_error(), "I think the problem is {")
    agent = WingmanAgent(client)
    with pytest.raises(MalformedResponse) as ei:
        await agent.extract_problem_from_images(write_images(tmp_path, 1))
    assert ei.value.raw_text == "I think the problem is {"


@pytest.mark.asyncio
async def test_extract_problem_missing_file_is_encoding_failure(tmp_path):
    client = FakeClient()
    with pytest.raises(EncodingFailure):
        await WingmanAgent(client).extract_problem_from_images([str(tmp_path / "nope.png")])
    assert client.calls == []


@pytest.mark.asyncio
async def test_extract_problem_grounded_missing_field_falls_back(tmp_path):
    client = FakeClient('{"context": "no statement"}', json.dumps(EXTRACTION))
    res = await WingmanAgent(client).extract_problem_from_images(write_images(tmp_path, 1))
    assert res.used_grounding is False
    assert len(client.calls) == 2


@pytest.mark.asyncio
async def test_generate_solution_embeds_problem_json():
    client = FakeClient(json.dumps(SOLUTION))
    problem = ExtractionResult(problem_statement="Reply to the recruiter")
    res = await WingmanAgent(client).generate_solution(problem)
    assert res.code == "Dear recruiter,"
    assert res.used_grounding is True
    prompt_text = client.calls[0]["parts"][1].value
    assert '"problem_statement": "Reply to the recruiter"' in prompt_text
    assert client.calls[0]["grounding"] is True


@pytest.mark.asyncio
async def test_generate_solution_fallback_succeeds():
    client = FakeClient(api_error(), json.dumps(SOLUTION))
    res = await WingmanAgent(client).generate_solution(EXTRACTION)
    assert res.used_grounding is False
    assert client.calls[0]["parts"] == client.calls[1]["parts"]


@pytest.mark.asyncio
async def test_debug_solution_uses_prior_answer_as_text(tmp_path):
    client = FakeClient(json.dumps(SOLUTION))
    await WingmanAgent(client).debug_solution_with_images(EXTRACTION, "print('old')", write_images(tmp_path, 2))
    parts = client.calls[0]["parts"]
    assert "The current response or approach: print('old')" in parts[1].value
    assert sum(isinstance(p, MediaPart) for p in parts) == 2


@pytest.mark.asyncio
async def test_analyze_audio_from_base64_freeform():
    client = FakeClient("  Sounds like a standup. {unbalanced  ")
    data = base64.b64encode(b"audio").decode("ascii")
    res = await WingmanAgent(client).analyze_audio_from_base64(data, "audio/webm")
    assert res.text == "Sounds like a standup. {unbalanced"
    assert res.kind == "freeform"
    assert res.timestamp.tzinfo is not None
    media = client.calls[0]["parts"][-1]
    assert media == MediaPart(mime_type="audio/webm", data=data)
    assert client.calls[0]["json_output"] is False


@pytest.mark.asyncio
async def test_analyze_audio_file_defaults_to_mp3(tmp_path):
    audio = tmp_path / "clip.mp3"
    audio.write_bytes(b"id3")
    client = FakeClient(api_error(), "A short clip")
    res = await WingmanAgent(client).analyze_audio_file(audio)
    assert res.text == "A short clip"
    assert res.used_grounding is False
    assert client.calls[1]["parts"][-1].mime_type == "audio/mp3"


@pytest.mark.asyncio
async def test_analyze_audio_bytes_and_image(tmp_path):
    client = FakeClient("audio ok", "image ok")
    agent = WingmanAgent(client)
    assert (await agent.analyze_audio_bytes(b"raw", "audio/ogg")).text == "audio ok"
    img = write_images(tmp_path, 1)[0]
    assert (await agent.analyze_image_file(img)).text == "image ok"
    assert "Describe the content of this image" in client.calls[1]["parts"][1].value


@pytest.mark.asyncio
async def test_freeform_both_attempts_fail():
    client = FakeClient(api_error(), NetworkError(code="NETWORK_ERROR", message="down"))
    with pytest.raises(InvocationFailure):
        await WingmanAgent(client).analyze_audio_bytes(b"raw", "audio/ogg")


@pytest.mark.asyncio
async def test_follow_up_builds_history():
    client = FakeClient("4", "12")
    agent = WingmanAgent(client)
    state = ConversationState(original_content="Math homework")

    await agent.ask_follow_up(state, "What is 2+2?")
    await agent.ask_follow_up(state, "And times 3?")

    assert [(t.role, t.content) for t in state.turns] == [
        ("user", "What is 2+2?"),
        ("assistant", "4"),
        ("user", "And times 3?"),
        ("assistant", "12"),
    ]
    second_prompt = client.calls[1]["parts"][1].value
    assert second_prompt.startswith("Original content: Math homework\n\nPrevious conversation:\nuser: What is 2+2?\nassistant: 4\n")
    assert "User's follow-up question: And times 3?" in second_prompt


@pytest.mark.asyncio
async def test_follow_up_failure_leaves_state_untouched():
    client = FakeClient(api_error(), NetworkError(code="NETWORK_ERROR", message="down"))
    state = ConversationState(original_content="topic")
    state.append_exchange("q", "a")
    with pytest.raises(InvocationFailure):
        await WingmanAgent(client).ask_follow_up(state, "next?")
    assert len(state) == 2


@pytest.mark.asyncio
async def test_grounding_disabled_single_plain_call():
    client = FakeClient("plain")
    res = await WingmanAgent(client, enable_grounding=False).analyze_audio_bytes(b"raw", "audio/ogg")
    assert res.used_grounding is False
    assert client.calls[0]["grounding"] is False
