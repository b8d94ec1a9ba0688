"""Voice/text command route."""

from __future__ import annotations

from fastapi import APIRouter

from kissan.schemas.chat import CommandRequest, CommandResult
from kissan.services.assistant import CommandInterpreter
from kissan.services.chat_service import ChatService

router = APIRouter(prefix="/assistant", tags=["assistant"])


@router.post("/command", response_model=CommandResult)
async def interpret_command(payload: CommandRequest) -> CommandResult:
	interpreter = CommandInterpreter(ChatService().ask_model)
	return await interpreter.handle(payload.utterance, payload.language)
