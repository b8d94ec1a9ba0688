"""Pydantic schemas for the chat assistant and the voice/text command endpoint."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class Language(StrEnum):
	en = "en"
	hi = "hi"


class ChatSender(StrEnum):
	user = "user"
	bot = "bot"


class ReplySource(StrEnum):
	model = "model"
	smart_answer = "smart_answer"
	default = "default"


class ChatRequest(BaseModel):
	message: str = Field(min_length=1, max_length=4000)


class ChatReply(BaseModel):
	reply: str
	source: ReplySource


class ChatMessage(BaseModel):
	id: int
	text: str
	sender: ChatSender
	timestamp: datetime


class CommandKind(StrEnum):
	navigate = "navigate"
	answer = "answer"
	error = "error"


class CommandRequest(BaseModel):
	utterance: str = Field(min_length=1, max_length=2000)
	language: Language = Language.en


class CommandResult(BaseModel):
	kind: CommandKind
	speech: str
	route: str | None = None
	group: str | None = None
