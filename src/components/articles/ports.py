from __future__ import annotations

from typing import Protocol
from uuid import UUID

from src.components.listing.ports import ListQueryPort
from src.core.ports.storage import ImageStoragePort
from src.core.ports.time import TimePort
from src.domain.entities import Article, ArticleCategory


class ArticleRepoPort(ListQueryPort[Article], Protocol):
    def get_by_id(self, article_id: UUID) -> Article | None: ...
    def get_by_slug(self, slug: str) -> Article | None: ...
    def save(self, article: Article) -> Article: ...
    def delete(self, article_id: UUID) -> None: ...


class CategoryLookupPort(Protocol):
    def get_by_id(self, item_id: UUID) -> ArticleCategory | None: ...


__all__ = ["ArticleRepoPort", "CategoryLookupPort", "ImageStoragePort", "TimePort"]
