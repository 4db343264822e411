"""Storage table definition and the persisted study-state payloads"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic import Field as PydanticField
from pydantic.alias_generators import to_camel
from sqlalchemy import Column, DateTime, Text
from sqlmodel import Field, SQLModel


class StorageEntry(SQLModel, table=True):
    """One key of the key-value store; value is a JSON envelope"""
    __tablename__ = "storage_entries"
    key: str = Field(primary_key=True)
    value: str = Field(..., sa_column=Column(Text, nullable=False))
    updated_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))


class _CamelModel(BaseModel):
    """Persisted payloads keep the camelCase field names of the stored JSON."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StudyProgress(_CamelModel):
    last_studied:   str = ""        # ISO date of the last studied day, "" before first use
    total_cards:    int = PydanticField(default=0, ge=0)
    mastered_cards: int = PydanticField(default=0, ge=0)
    streak:         int = PydanticField(default=0, ge=0)


class StudySession(_CamelModel):
    cards_studied: int = PydanticField(default=0, ge=0)
    correct:       int = PydanticField(default=0, ge=0)
    incorrect:     int = PydanticField(default=0, ge=0)
    start_time:    int = 0          # epoch milliseconds


class Theme(str, Enum):
    light = "light"
    dark = "dark"


@dataclass
class DocumentRoot:
    """Class list of the document element the theme is applied to."""
    classes: set[str] = field(default_factory=set)
