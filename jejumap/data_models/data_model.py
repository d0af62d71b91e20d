from datetime import datetime
from typing import Any, Optional
from uuid import uuid4

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


def new_object_id() -> str:
    return uuid4().hex


class StoredDocument(SQLModel, table=True):
    """컬렉션별 문서 한 건. list/schedule/accommodations 컬렉션은 항상 최대 한 건만 유지."""

    __tablename__ = "stored_document"
    id: str = Field(default_factory=new_object_id, primary_key=True, max_length=32)
    collection: str = Field(index=True, max_length=50)
    body: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    def to_response(self) -> dict[str, Any]:
        return {"_id": self.id, **self.body}


class Post(SQLModel, table=True):
    __tablename__ = "post"
    id: str = Field(default_factory=new_object_id, primary_key=True, max_length=32)
    category: str = Field(max_length=50)
    title: str = Field(max_length=255)
    content: str
    date: str = Field(index=True, max_length=50)
    created_at: Optional[datetime] = Field(default_factory=datetime.now)

    def to_response(self) -> dict[str, Any]:
        return {
            "_id": self.id,
            "category": self.category,
            "title": self.title,
            "content": self.content,
            "date": self.date,
        }
