"""Voice/text command interpreter.

Utterances are matched against an ordered table of keyword groups.  The first
group with any keyword inside the lower-cased utterance wins (table order is
the tie-break, not match length).  Unmatched utterances go verbatim to the
chat model and its reply is spoken back.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import structlog

from kissan.schemas.chat import CommandKind, CommandResult, Language
from kissan.services.errors import UpstreamError

logger = structlog.get_logger("kissan.assistant")

ChatCollaborator = Callable[[str], Awaitable[str]]


@dataclass(frozen=True, slots=True)
class CommandRoute:
	group: str
	keywords: tuple[str, ...]
	route: str
	speech: dict[Language, str]

	def matches(self, lowered: str) -> bool:
		return any(keyword in lowered for keyword in self.keywords)


COMMAND_ROUTES: tuple[CommandRoute, ...] = (
	CommandRoute(
		group="weather",
		keywords=("weather", "forecast", "mausam", "mosam"),
		route="/weather",
		speech={Language.en: "Opening weather information", Language.hi: "Mausam ki jankari khul rahi hai"},
	),
	CommandRoute(
		group="market",
		keywords=("mandi", "market", "price", "rate", "bhav", "bhaav"),
		route="/market",
		speech={Language.en: "Opening market rates", Language.hi: "Mandi ke bhav khul rahe hain"},
	),
	CommandRoute(
		group="crop_health",
		keywords=("doctor", "health", "fasal", "bimari"),
		route="/crop-health",
		speech={Language.en: "Opening crop health doctor", Language.hi: "Fasal doctor khul raha hai"},
	),
	CommandRoute(
		group="chat",
		keywords=("chat", "sahayak", "help", "madad"),
		route="/expert-chat",
		speech={Language.en: "Opening kisan assistant", Language.hi: "Kisan sahayak khul raha hai"},
	),
	CommandRoute(
		group="schemes",
		keywords=("scheme", "yojana", "sarkari"),
		route="/schemes",
		speech={Language.en: "Opening government schemes", Language.hi: "Sarkari yojanaein khul rahi hain"},
	),
	CommandRoute(
		group="dashboard",
		keywords=("home", "dashboard", "shuruat"),
		route="/",
		speech={Language.en: "Going to dashboard", Language.hi: "Dashboard par jaa rahe hain"},
	),
	CommandRoute(
		group="profile",
		keywords=("profile", "meri profile"),
		route="/profile",
		speech={Language.en: "Opening your profile", Language.hi: "Aapki profile khul rahi hai"},
	),
)

NO_ANSWER = {
	Language.en: "Sorry, I cannot help right now.",
	Language.hi: "Maaf kijiye, main abhi madad nahi kar sakta.",
}
NETWORK_ERROR = {
	Language.en: "There is a network issue",
	Language.hi: "Net ki samasya hai",
}


def match_route(utterance: str, routes: tuple[CommandRoute, ...] = COMMAND_ROUTES) -> CommandRoute | None:
	lowered = utterance.lower()
	for route in routes:
		if route.matches(lowered):
			return route
	return None


class CommandInterpreter:
	"""Maps one utterance to exactly one action; overlapping calls are not serialized."""

	def __init__(self, chat: ChatCollaborator, routes: tuple[CommandRoute, ...] = COMMAND_ROUTES):
		self.chat = chat
		self.routes = routes

	async def handle(self, utterance: str, language: Language = Language.en) -> CommandResult:
		route = match_route(utterance, self.routes)
		if route is not None:
			logger.info("command_navigate", group=route.group, route=route.route)
			return CommandResult(
				kind=CommandKind.navigate,
				speech=route.speech[language],
				route=route.route,
				group=route.group,
			)

		try:
			reply = await self.chat(utterance)
		except UpstreamError as exc:
			logger.warning("command_chat_failed", error=exc.code)
			return CommandResult(kind=CommandKind.error, speech=NETWORK_ERROR[language])

		return CommandResult(kind=CommandKind.answer, speech=reply.strip() or NO_ANSWER[language])
