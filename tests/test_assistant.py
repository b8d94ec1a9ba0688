from __future__ import annotations

import pytest
from httpx import AsyncClient

from kissan.schemas.chat import CommandKind, Language
from kissan.services.assistant import (
	COMMAND_ROUTES,
	NETWORK_ERROR,
	NO_ANSWER,
	CommandInterpreter,
	match_route,
)
from kissan.services.chat_service import ChatService
from kissan.services.errors import UpstreamError


class RecordingChat:
	def __init__(self, reply: str = "Urea: 50 kg per acre in two splits.", fail: bool = False) -> None:
		self.reply = reply
		self.fail = fail
		self.calls: list[str] = []

	async def __call__(self, message: str) -> str:
		self.calls.append(message)
		if self.fail:
			raise UpstreamError(code="ai_unavailable", detail="AI unavailable")
		return self.reply


@pytest.mark.parametrize(
	("utterance", "route"),
	[
		("what's the weather today", "/weather"),
		("mandi bhav", "/market"),
		("Aaj ka MAUSAM", "/weather"),
		("open fasal doctor", "/crop-health"),
		("mujhe madad chahiye", "/expert-chat"),
		("sarkari yojana dikhao", "/schemes"),
		("go home", "/"),
		("open my profile", "/profile"),
	],
)
def test_keyword_groups_route(utterance: str, route: str) -> None:
	matched = match_route(utterance)
	assert matched is not None
	assert matched.route == route


def test_first_group_wins_over_later_groups() -> None:
	# mentions both weather and market; weather is checked first
	assert match_route("market weather").route == "/weather"


def test_group_order_is_stable() -> None:
	assert [route.group for route in COMMAND_ROUTES] == [
		"weather",
		"market",
		"crop_health",
		"chat",
		"schemes",
		"dashboard",
		"profile",
	]


@pytest.mark.asyncio
async def test_navigation_speaks_in_active_language() -> None:
	chat = RecordingChat()
	interpreter = CommandInterpreter(chat)

	result = await interpreter.handle("mandi bhav", Language.hi)

	assert result.kind == CommandKind.navigate
	assert result.route == "/market"
	assert result.speech == COMMAND_ROUTES[1].speech[Language.hi]
	assert chat.calls == []


@pytest.mark.asyncio
async def test_unmatched_utterance_forwarded_verbatim() -> None:
	chat = RecordingChat()
	utterance = "How much Urea per acre?"

	result = await CommandInterpreter(chat).handle(utterance)

	assert chat.calls == [utterance]
	assert result.kind == CommandKind.answer
	assert result.speech == chat.reply
	assert result.route is None


@pytest.mark.asyncio
async def test_blank_model_reply_uses_no_answer_text() -> None:
	result = await CommandInterpreter(RecordingChat(reply="  ")).handle("kya karun", Language.hi)
	assert result.speech == NO_ANSWER[Language.hi]


@pytest.mark.asyncio
async def test_network_failure_is_spoken() -> None:
	result = await CommandInterpreter(RecordingChat(fail=True)).handle("kya karun")

	assert result.kind == CommandKind.error
	assert result.speech == NETWORK_ERROR[Language.en]


@pytest.mark.asyncio
async def test_command_route_navigates(client: AsyncClient) -> None:
	response = await client.post(
		"/api/assistant/command",
		json={"utterance": "what's the weather today", "language": "en"},
	)

	assert response.status_code == 200
	body = response.json()
	assert body["kind"] == "navigate"
	assert body["route"] == "/weather"
	assert body["group"] == "weather"


@pytest.mark.asyncio
async def test_command_route_forwards_to_chat(client: AsyncClient, monkeypatch: pytest.MonkeyPatch) -> None:
	seen: list[str] = []

	async def fake_ask(self: ChatService, message: str) -> str:
		seen.append(message)
		return "Sow mustard in October."

	monkeypatch.setattr(ChatService, "ask_model", fake_ask)

	response = await client.post("/api/assistant/command", json={"utterance": "When to sow sarson?"})

	assert response.status_code == 200
	assert response.json() == {
		"kind": "answer",
		"speech": "Sow mustard in October.",
		"route": None,
		"group": None,
	}
	assert seen == ["When to sow sarson?"]


@pytest.mark.asyncio
async def test_command_route_reports_network_issue(client: AsyncClient) -> None:
	response = await client.post(
		"/api/assistant/command",
		json={"utterance": "kya karun", "language": "hi"},
	)

	assert response.status_code == 200
	body = response.json()
	assert body["kind"] == "error"
	assert body["speech"] == NETWORK_ERROR[Language.hi]
