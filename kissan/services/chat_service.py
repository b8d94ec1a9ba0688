"""Chat replies with keyword fallback, and the ephemeral per-connection chat log."""

from __future__ import annotations

import itertools
from datetime import UTC, datetime

import structlog

from kissan.schemas.chat import ChatMessage, ChatReply, ChatSender, ReplySource
from kissan.services.errors import UpstreamError
from kissan.services.llm_service import LLMService
from kissan.services.smart_answers import DEFAULT_HELP, get_smart_answer

logger = structlog.get_logger("kissan.chat")

GREETING = "Namaste! I am Kisan Sahayak. How can I assist you today?"


class ChatService:
	def __init__(self, llm: LLMService | None = None):
		self.llm = llm or LLMService()

	async def ask_model(self, message: str) -> str:
		"""Forward verbatim to the model; raises ``UpstreamError`` on any failure."""
		return await self.llm.chat(message)

	async def reply(self, message: str) -> ChatReply:
		"""Model answer, or a keyword answer when the model is unavailable.

		Raises ``UpstreamError`` only when neither source has an answer.
		"""
		try:
			return ChatReply(reply=await self.ask_model(message), source=ReplySource.model)
		except UpstreamError as exc:
			fallback = get_smart_answer(message)
			if fallback is None:
				raise
			logger.info("chat_smart_answer_fallback", error=exc.code)
			return ChatReply(reply=fallback, source=ReplySource.smart_answer)


class ChatSession:
	"""Append-only message history for one conversation; never persisted."""

	def __init__(self, service: ChatService | None = None):
		self.service = service or ChatService()
		self._ids = itertools.count(1)
		self._messages: list[ChatMessage] = []
		self._append(GREETING, ChatSender.bot)

	@property
	def messages(self) -> tuple[ChatMessage, ...]:
		return tuple(self._messages)

	def _append(self, text: str, sender: ChatSender) -> ChatMessage:
		message = ChatMessage(
			id=next(self._ids),
			text=text,
			sender=sender,
			timestamp=datetime.now(UTC),
		)
		self._messages.append(message)
		return message

	async def send(self, text: str) -> ChatMessage:
		if not text.strip():
			raise ValueError("message must not be blank")
		self._append(text, ChatSender.user)
		try:
			reply = (await self.service.reply(text)).reply
		except UpstreamError:
			reply = DEFAULT_HELP
		return self._append(reply, ChatSender.bot)
