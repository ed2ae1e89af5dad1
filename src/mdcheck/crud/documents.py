"""Document persistence: upsert by path, term replacement, taxonomy queries"""

import datetime as dt
from typing import Any

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import func
from sqlmodel import Session, select

from mdcheck.core.models import FrontMatter, ParsedDoc
from mdcheck.core.site import doc_slug
from mdcheck.crud.models import Document, DocumentTerm, TermKindEnum


_JSON_ADAPTER = TypeAdapter(dict[str, Any])


def _naive(value: dt.date) -> dt.datetime:
    """Front matter date as a naive datetime, keeping the author's wall-clock time."""
    if isinstance(value, dt.datetime):
        return value.replace(tzinfo=None)
    return dt.datetime.combine(value, dt.time.min)


def get_by_path(session: Session, path: str) -> Document | None:
    """Return the Document with the given content path, or None if not found."""
    return session.exec(select(Document).where(Document.path == path)).one_or_none()


def get_terms(session: Session, document: Document, kind: TermKindEnum) -> list[str]:
    """Terms of one kind for a document, in front matter order."""
    rows = session.exec(
        select(DocumentTerm)
        .where(DocumentTerm.document_id == document.id)
        .where(DocumentTerm.kind == kind)
        .order_by(DocumentTerm.position)
    ).all()
    return [r.term for r in rows]


def _replace_terms(session: Session, doc_id, fm: FrontMatter) -> None:
    """Delete all existing terms for a document and insert the current ones."""
    for row in session.exec(select(DocumentTerm).where(DocumentTerm.document_id == doc_id)).all():
        session.delete(row)
    session.flush()

    for kind, values in ((TermKindEnum.tag, fm.tags), (TermKindEnum.category, fm.categories)):
        # duplicates are reported by the front matter check; keep the first
        for position, term in enumerate(dict.fromkeys(v.strip() for v in values if v.strip())):
            session.add(DocumentTerm(document_id=doc_id, kind=kind, term=term, position=position))
    session.flush()


def commit_doc(session: Session, parsed: ParsedDoc) -> tuple[Document | None, str]:
    """Upsert a parsed document by content path.

    Returns (doc, status) where status is 'created', 'updated', 'unchanged',
    or 'skipped' (front matter missing or invalid; doc is None).
    Flushes but does not commit; caller controls the transaction.
    """
    if parsed.fm_error or parsed.fm_format is None:
        return None, 'skipped'
    try:
        fm = FrontMatter.model_validate(parsed.frontmatter)
    except ValidationError:
        return None, 'skipped'

    doc = get_by_path(session, parsed.rel_path)
    if doc and doc.hash == parsed.hash:
        return doc, 'unchanged'

    fields = dict(
        slug=doc_slug(parsed),
        title=fm.title.strip(),
        date=_naive(fm.date),
        draft=fm.draft,
        hash=parsed.hash,
        frontmatter=_JSON_ADAPTER.dump_python(parsed.frontmatter, mode="json"),
    )
    if doc:
        for key, value in fields.items():
            setattr(doc, key, value)
        doc.updated_at = dt.datetime.now()
        status = 'updated'
    else:
        doc = Document(path=parsed.rel_path, **fields)
        status = 'created'

    session.add(doc)
    session.flush()
    _replace_terms(session, doc.id, fm)
    return doc, status


def _under(path: str, prefix: str) -> bool:
    if prefix in ('', '.'):
        return True
    return path == prefix or path.startswith(prefix.rstrip('/') + '/')


def prune_missing(session: Session, keep: set[str], prefix: str = '') -> list[str]:
    """Delete documents under prefix whose path is not in keep. Returns removed paths."""
    removed = []
    for doc in session.exec(select(Document)).all():
        if doc.path in keep or not _under(doc.path, prefix):
            continue
        for row in session.exec(select(DocumentTerm).where(DocumentTerm.document_id == doc.id)).all():
            session.delete(row)
        session.delete(doc)
        removed.append(doc.path)
    session.flush()
    return sorted(removed)


def term_counts(session: Session, kind: TermKindEnum, include_drafts: bool = False) -> list[tuple[str, int]]:
    """Return (term, document count) pairs, most used first, then alphabetical."""
    n = func.count(DocumentTerm.document_id)
    stmt = (
        select(DocumentTerm.term, n)
        .join(Document, Document.id == DocumentTerm.document_id)
        .where(DocumentTerm.kind == kind)
        .group_by(DocumentTerm.term)
        .order_by(n.desc(), DocumentTerm.term)
    )
    if not include_drafts:
        stmt = stmt.where(Document.draft == False)  # noqa: E712
    return [(term, count) for term, count in session.exec(stmt).all()]


def find_documents(
    session: Session,
    tag: str | None = None,
    category: str | None = None,
    include_drafts: bool = False,
    ) -> list[Document]:
    """Documents carrying the given tag and/or category, newest first."""
    stmt = select(Document)
    if not include_drafts:
        stmt = stmt.where(Document.draft == False)  # noqa: E712
    for kind, term in ((TermKindEnum.tag, tag), (TermKindEnum.category, category)):
        if term is None:
            continue
        matching = select(DocumentTerm.document_id).where(DocumentTerm.kind == kind).where(DocumentTerm.term == term)
        stmt = stmt.where(Document.id.in_(matching))
    stmt = stmt.order_by(Document.date.desc(), Document.path)
    return list(session.exec(stmt).all())
