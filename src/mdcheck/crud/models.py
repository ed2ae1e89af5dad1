"""Database table definitions for indexed documents and their taxonomy terms"""

from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any
from uuid import UUID, uuid4

from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, DateTime, JSON, Text, String


class Document(SQLModel, table=True):
    """A content file's front matter as last seen on disk"""
    __tablename__ = "documents"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    path: str = Field(..., sa_column=Column(Text, nullable=False, unique=True))
    slug: str = Field(..., index=True, nullable=False)
    title: str = Field(..., sa_column=Column(Text, nullable=False))
    date: datetime = Field(..., sa_column=Column(DateTime(timezone=False), nullable=False))
    draft: bool = Field(default=False, nullable=False)
    hash: str = Field(..., sa_column=Column(String(64), nullable=False))
    frontmatter: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
    updated_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
    terms: List["DocumentTerm"] = Relationship(back_populates="document")


class TermKindEnum(str, Enum):
    """Taxonomies the site generator builds listing pages for"""
    tag = "tag"
    category = "category"


class DocumentTerm(SQLModel, table=True):
    """A tag or category attached to a document, in front matter order"""
    __tablename__ = "document_terms"
    document_id: UUID = Field(foreign_key="documents.id", primary_key=True)
    kind: TermKindEnum = Field(primary_key=True)
    term: str = Field(primary_key=True)
    position: int = Field(..., nullable=False)
    document: Optional["Document"] = Relationship(back_populates="terms")
