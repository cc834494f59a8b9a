"""
Articles component - Blog article management.
"""

from .component import run_create, run_delete, run_get, run_update
from .models import (
    ARTICLE_LISTING,
    PUBLIC_ARTICLE_LISTING,
    ArticleForm,
    ArticleOutput,
    CreateArticleInput,
    DeleteArticleInput,
    DeleteArticleOutput,
    GetArticleInput,
    UpdateArticleInput,
)
from .ports import ArticleRepoPort, CategoryLookupPort

__all__ = [
    "run_create",
    "run_update",
    "run_delete",
    "run_get",
    "ARTICLE_LISTING",
    "PUBLIC_ARTICLE_LISTING",
    "ArticleForm",
    "ArticleOutput",
    "CreateArticleInput",
    "DeleteArticleInput",
    "DeleteArticleOutput",
    "GetArticleInput",
    "UpdateArticleInput",
    "ArticleRepoPort",
    "CategoryLookupPort",
]
