"""Pydantic request/response models for API endpoints."""

from pydantic import BaseModel


class CommandBody(BaseModel):
    member_id: str
    text: str


class CommandReply(BaseModel):
    reply: str


class UpsertMember(BaseModel):
    tag: str
    nickname: str | None = None
    roles: list[str] = []
    voice_channel: str | None = None
