"""Keyset-пагинация списков документов.

Курсор это строковое представление идентификатора последнего документа на
странице. Следующая страница начинается строго после него, поэтому вставки
документов между запросами не сдвигают уже выданные элементы (в отличие от offset).
"""

import uuid
from dataclasses import dataclass, field
from typing import Generic, List, Optional, Sequence, Tuple, TypeVar

from docvault.domains.exceptions import InvalidCursorError

DEFAULT_LIMIT = 10
MIN_LIMIT = 1
MAX_LIMIT = 50

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    items: List[T] = field(default_factory=list)
    next_cursor: Optional[str] = None


def clamp_limit(limit: Optional[int]) -> int:
    if limit is None:
        return DEFAULT_LIMIT
    return max(MIN_LIMIT, min(MAX_LIMIT, limit))


def encode_cursor(document_id: uuid.UUID) -> str:
    return str(document_id)


def decode_cursor(cursor: Optional[str]) -> Optional[uuid.UUID]:
    """Разбор курсора; пустой курсор означает начало списка"""
    if cursor is None or cursor == "":
        return None
    try:
        return uuid.UUID(cursor)
    except (ValueError, AttributeError, TypeError) as exc:
        raise InvalidCursorError(cursor) from exc


def build_page(rows: Sequence[Tuple[T, uuid.UUID]], limit: int) -> Page[T]:
    """Сборка страницы из ``limit + 1`` строк.

    ``rows`` это пары (элемент, ключ сортировки). Если пришла лишняя строка,
    страница полная: лишняя отбрасывается, курсор указывает на последний
    оставленный элемент.
    """
    if len(rows) > limit:
        kept = rows[:limit]
        return Page(items=[item for item, _ in kept], next_cursor=encode_cursor(kept[-1][1]))
    return Page(items=[item for item, _ in rows], next_cursor=None)
