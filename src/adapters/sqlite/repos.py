import sqlite3
from datetime import date, datetime
from typing import Any
from uuid import UUID

from src.adapters.sqlite.query import build_order_by, build_where, register_functions
from src.components.listing.models import Predicate
from src.domain.entities import (
    SITE_SETTINGS_ID,
    Article,
    ArticleCategory,
    PackageImage,
    PackageType,
    SiteSettings,
    TravelPackage,
    User,
)


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


class _SQLiteRepo:
    def __init__(self, db_path: str, timeout: float = 5.0):
        self.db_path = db_path
        # Seconds to wait on a locked database before sqlite3 gives up
        self.timeout = timeout

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, timeout=self.timeout)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        register_functions(conn)
        return conn


# --- Packages ---

PACKAGE_COLUMNS = {
    "id": "id",
    "code": "code",
    "title": "title",
    "slug": "slug",
    "description": "description",
    "location": "location",
    "price": "price",
    "start_date": "start_date",
    "end_date": "end_date",
    "status": "status",
    "type_id": "type_id",
    "contact_count": "contact_count",
    "created_at": "created_at",
    "updated_at": "updated_at",
}


class SQLitePackageRepo(_SQLiteRepo):
    def save(self, package: TravelPackage) -> TravelPackage:
        """Upsert the package and replace its image rows in one transaction."""
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO travel_packages (
                    id, code, title, slug, description, location, price,
                    start_date, end_date, max_guests, dormitories, suites,
                    bathrooms, number_of_days, status, type_id, image_url,
                    contact_count, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    code=excluded.code,
                    title=excluded.title,
                    slug=excluded.slug,
                    description=excluded.description,
                    location=excluded.location,
                    price=excluded.price,
                    start_date=excluded.start_date,
                    end_date=excluded.end_date,
                    max_guests=excluded.max_guests,
                    dormitories=excluded.dormitories,
                    suites=excluded.suites,
                    bathrooms=excluded.bathrooms,
                    number_of_days=excluded.number_of_days,
                    status=excluded.status,
                    type_id=excluded.type_id,
                    image_url=excluded.image_url,
                    contact_count=excluded.contact_count,
                    updated_at=excluded.updated_at
            """,
                (
                    str(package.id),
                    package.code,
                    package.title,
                    package.slug,
                    package.description,
                    package.location,
                    package.price,
                    package.start_date.isoformat(),
                    package.end_date.isoformat(),
                    package.max_guests,
                    package.dormitories,
                    package.suites,
                    package.bathrooms,
                    package.number_of_days,
                    package.status,
                    str(package.type_id),
                    package.image_url,
                    package.contact_count,
                    package.created_at.isoformat(),
                    package.updated_at.isoformat(),
                ),
            )

            conn.execute("DELETE FROM package_images WHERE package_id = ?", (str(package.id),))
            for position, image in enumerate(package.images):
                conn.execute(
                    """
                    INSERT INTO package_images (
                        id, package_id, url, is_main, position, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                    (
                        str(image.id),
                        str(package.id),
                        image.url,
                        int(image.is_main),
                        position,
                        image.created_at.isoformat(),
                    ),
                )

            conn.commit()
            return package
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get_by_id(self, package_id: UUID) -> TravelPackage | None:
        return self._get_one("SELECT * FROM travel_packages WHERE id = ?", (str(package_id),))

    def get_by_slug(self, slug: str) -> TravelPackage | None:
        return self._get_one("SELECT * FROM travel_packages WHERE slug = ?", (slug,))

    def delete(self, package_id: UUID) -> None:
        """Remove the package and its image rows in one transaction."""
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM package_images WHERE package_id = ?", (str(package_id),))
            conn.execute("DELETE FROM travel_packages WHERE id = ?", (str(package_id),))
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def count(self, predicate: Predicate) -> int:
        where, params = build_where(predicate, PACKAGE_COLUMNS)
        conn = self._get_conn()
        try:
            row = conn.execute(
                f"SELECT COUNT(*) AS n FROM travel_packages {where}", params
            ).fetchone()
            return int(row["n"])
        finally:
            conn.close()

    def find_page(
        self,
        predicate: Predicate,
        *,
        sort_field: str,
        descending: bool,
        offset: int,
        limit: int,
    ) -> list[TravelPackage]:
        where, params = build_where(predicate, PACKAGE_COLUMNS)
        order_by = build_order_by(sort_field, descending, PACKAGE_COLUMNS)
        conn = self._get_conn()
        try:
            rows = conn.execute(
                f"SELECT * FROM travel_packages {where} {order_by} LIMIT ? OFFSET ?",
                [*params, limit, offset],
            ).fetchall()
            images = self._images_for(conn, [r["id"] for r in rows])
            return [self._map_row(r, images.get(r["id"], [])) for r in rows]
        finally:
            conn.close()

    def total_contacts(self) -> int:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT COALESCE(SUM(contact_count), 0) AS n FROM travel_packages"
            ).fetchone()
            return int(row["n"])
        finally:
            conn.close()

    def _get_one(self, query: str, params: tuple[Any, ...]) -> TravelPackage | None:
        conn = self._get_conn()
        try:
            row = conn.execute(query, params).fetchone()
            if not row:
                return None
            images = self._images_for(conn, [row["id"]])
            return self._map_row(row, images.get(row["id"], []))
        finally:
            conn.close()

    def _images_for(
        self, conn: sqlite3.Connection, package_ids: list[str]
    ) -> dict[str, list[PackageImage]]:
        if not package_ids:
            return {}
        placeholders = ",".join("?" for _ in package_ids)
        rows = conn.execute(
            f"SELECT * FROM package_images WHERE package_id IN ({placeholders}) "
            "ORDER BY position",
            package_ids,
        ).fetchall()

        result: dict[str, list[PackageImage]] = {}
        for r in rows:
            result.setdefault(r["package_id"], []).append(
                PackageImage(
                    id=UUID(r["id"]),
                    url=r["url"],
                    is_main=bool(r["is_main"]),
                    created_at=datetime.fromisoformat(r["created_at"]),
                )
            )
        return result

    def _map_row(self, row: dict[str, Any], images: list[PackageImage]) -> TravelPackage:
        return TravelPackage(
            id=UUID(row["id"]),
            code=row["code"],
            title=row["title"],
            slug=row["slug"],
            description=row["description"],
            location=row["location"],
            price=row["price"],
            start_date=date.fromisoformat(row["start_date"]),
            end_date=date.fromisoformat(row["end_date"]),
            max_guests=row["max_guests"],
            dormitories=row["dormitories"],
            suites=row["suites"],
            bathrooms=row["bathrooms"],
            number_of_days=row["number_of_days"],
            status=row["status"],
            type_id=UUID(row["type_id"]),
            image_url=row["image_url"],
            contact_count=row["contact_count"],
            images=images,
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )


# --- Articles ---

ARTICLE_COLUMNS = {
    "id": "id",
    "title": "title",
    "slug": "slug",
    "excerpt": "excerpt",
    "content": "content",
    "published": "published",
    "category_id": "category_id",
    "created_at": "created_at",
    "updated_at": "updated_at",
}


class SQLiteArticleRepo(_SQLiteRepo):
    def save(self, article: Article) -> Article:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO articles (
                    id, title, slug, content, excerpt, image_url,
                    published, category_id, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    title=excluded.title,
                    slug=excluded.slug,
                    content=excluded.content,
                    excerpt=excluded.excerpt,
                    image_url=excluded.image_url,
                    published=excluded.published,
                    category_id=excluded.category_id,
                    updated_at=excluded.updated_at
            """,
                (
                    str(article.id),
                    article.title,
                    article.slug,
                    article.content,
                    article.excerpt,
                    article.image_url,
                    int(article.published),
                    str(article.category_id),
                    article.created_at.isoformat(),
                    article.updated_at.isoformat(),
                ),
            )
            conn.commit()
            return article
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get_by_id(self, article_id: UUID) -> Article | None:
        return self._get_one("SELECT * FROM articles WHERE id = ?", (str(article_id),))

    def get_by_slug(self, slug: str) -> Article | None:
        return self._get_one("SELECT * FROM articles WHERE slug = ?", (slug,))

    def delete(self, article_id: UUID) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM articles WHERE id = ?", (str(article_id),))
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def count(self, predicate: Predicate) -> int:
        where, params = build_where(predicate, ARTICLE_COLUMNS)
        conn = self._get_conn()
        try:
            row = conn.execute(f"SELECT COUNT(*) AS n FROM articles {where}", params).fetchone()
            return int(row["n"])
        finally:
            conn.close()

    def find_page(
        self,
        predicate: Predicate,
        *,
        sort_field: str,
        descending: bool,
        offset: int,
        limit: int,
    ) -> list[Article]:
        where, params = build_where(predicate, ARTICLE_COLUMNS)
        order_by = build_order_by(sort_field, descending, ARTICLE_COLUMNS)
        conn = self._get_conn()
        try:
            rows = conn.execute(
                f"SELECT * FROM articles {where} {order_by} LIMIT ? OFFSET ?",
                [*params, limit, offset],
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            conn.close()

    def _get_one(self, query: str, params: tuple[Any, ...]) -> Article | None:
        conn = self._get_conn()
        try:
            row = conn.execute(query, params).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> Article:
        return Article(
            id=UUID(row["id"]),
            title=row["title"],
            slug=row["slug"],
            content=row["content"],
            excerpt=row["excerpt"],
            image_url=row["image_url"],
            published=bool(row["published"]),
            category_id=UUID(row["category_id"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )


# --- Taxonomies ---


class _SQLiteTaxonomyRepo(_SQLiteRepo):
    """Shared storage for the name/description lookup tables."""

    table: str
    usage_table: str
    usage_column: str
    entity: type[PackageType] | type[ArticleCategory]

    def save(self, item: Any) -> Any:
        conn = self._get_conn()
        try:
            conn.execute(
                f"""
                INSERT INTO {self.table} (id, name, description, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name=excluded.name,
                    description=excluded.description,
                    updated_at=excluded.updated_at
            """,
                (
                    str(item.id),
                    item.name,
                    item.description,
                    item.created_at.isoformat(),
                    item.updated_at.isoformat(),
                ),
            )
            conn.commit()
            return item
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get_by_id(self, item_id: UUID) -> Any | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                f"SELECT * FROM {self.table} WHERE id = ?", (str(item_id),)
            ).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def list_all(self) -> list[Any]:
        conn = self._get_conn()
        try:
            rows = conn.execute(f"SELECT * FROM {self.table} ORDER BY name").fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            conn.close()

    def list_with_counts(self) -> list[tuple[Any, int]]:
        """Every entry with the number of records referencing it."""
        conn = self._get_conn()
        try:
            rows = conn.execute(
                f"""
                SELECT t.*, COUNT(u.id) AS usage_count
                FROM {self.table} t
                LEFT JOIN {self.usage_table} u ON u.{self.usage_column} = t.id
                GROUP BY t.id
                ORDER BY t.name
            """
            ).fetchall()
            return [(self._map_row(r), int(r["usage_count"])) for r in rows]
        finally:
            conn.close()

    def count_usage(self, item_id: UUID) -> int:
        conn = self._get_conn()
        try:
            row = conn.execute(
                f"SELECT COUNT(*) AS n FROM {self.usage_table} WHERE {self.usage_column} = ?",
                (str(item_id),),
            ).fetchone()
            return int(row["n"])
        finally:
            conn.close()

    def delete(self, item_id: UUID) -> None:
        conn = self._get_conn()
        try:
            conn.execute(f"DELETE FROM {self.table} WHERE id = ?", (str(item_id),))
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> Any:
        return self.entity(
            id=UUID(row["id"]),
            name=row["name"],
            description=row["description"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )


class SQLitePackageTypeRepo(_SQLiteTaxonomyRepo):
    table = "package_types"
    usage_table = "travel_packages"
    usage_column = "type_id"
    entity = PackageType


class SQLiteArticleCategoryRepo(_SQLiteTaxonomyRepo):
    table = "article_categories"
    usage_table = "articles"
    usage_column = "category_id"
    entity = ArticleCategory


# --- Users ---


class SQLiteUserRepo(_SQLiteRepo):
    def save(self, user: User) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO users (
                    id, email, name, password_hash, role, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    email=excluded.email,
                    name=excluded.name,
                    password_hash=excluded.password_hash,
                    role=excluded.role,
                    updated_at=excluded.updated_at
            """,
                (
                    str(user.id),
                    user.email,
                    user.name,
                    user.password_hash,
                    user.role,
                    user.created_at.isoformat(),
                    user.updated_at.isoformat(),
                ),
            )
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get_by_email(self, email: str) -> User | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def get_by_id(self, user_id: UUID) -> User | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (str(user_id),)).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def list_all(self) -> list[User]:
        conn = self._get_conn()
        try:
            rows = conn.execute("SELECT * FROM users ORDER BY created_at DESC").fetchall()
            return [self._map_row(row) for row in rows]
        finally:
            conn.close()

    def delete(self, user_id: UUID) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM users WHERE id = ?", (str(user_id),))
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> User:
        return User(
            id=UUID(row["id"]),
            email=row["email"],
            name=row["name"],
            password_hash=row["password_hash"],
            role=row["role"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )


# --- Site settings ---


class SQLiteSiteSettingsRepo(_SQLiteRepo):
    """SQLite adapter for SiteSettings (single-row table)."""

    def get(self) -> SiteSettings | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM site_settings WHERE id = ?", (SITE_SETTINGS_ID,)
            ).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def save(self, settings: SiteSettings) -> SiteSettings:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO site_settings (
                    id, name, description, logo, status,
                    smtp_host, smtp_port, smtp_user, smtp_pass, smtp_from,
                    facebook_url, instagram_url, twitter_url, linkedin_url, youtube_url,
                    updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name=excluded.name,
                    description=excluded.description,
                    logo=excluded.logo,
                    status=excluded.status,
                    smtp_host=excluded.smtp_host,
                    smtp_port=excluded.smtp_port,
                    smtp_user=excluded.smtp_user,
                    smtp_pass=excluded.smtp_pass,
                    smtp_from=excluded.smtp_from,
                    facebook_url=excluded.facebook_url,
                    instagram_url=excluded.instagram_url,
                    twitter_url=excluded.twitter_url,
                    linkedin_url=excluded.linkedin_url,
                    youtube_url=excluded.youtube_url,
                    updated_at=excluded.updated_at
            """,
                (
                    settings.id,
                    settings.name,
                    settings.description,
                    settings.logo,
                    int(settings.status),
                    settings.smtp_host,
                    settings.smtp_port,
                    settings.smtp_user,
                    settings.smtp_pass,
                    settings.smtp_from,
                    settings.facebook_url,
                    settings.instagram_url,
                    settings.twitter_url,
                    settings.linkedin_url,
                    settings.youtube_url,
                    settings.updated_at.isoformat(),
                ),
            )
            conn.commit()
            return settings
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> SiteSettings:
        return SiteSettings(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            logo=row["logo"],
            status=bool(row["status"]),
            smtp_host=row["smtp_host"],
            smtp_port=row["smtp_port"],
            smtp_user=row["smtp_user"],
            smtp_pass=row["smtp_pass"],
            smtp_from=row["smtp_from"],
            facebook_url=row["facebook_url"],
            instagram_url=row["instagram_url"],
            twitter_url=row["twitter_url"],
            linkedin_url=row["linkedin_url"],
            youtube_url=row["youtube_url"],
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
