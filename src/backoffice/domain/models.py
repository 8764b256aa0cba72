"""Domain models for the backoffice collections."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from backoffice.domain.paths import newsletter_folder

DEFAULT_NEWSLETTER_COLOR = "#3F51B5"
DEFAULT_IMAGE_TYPE = "image/jpeg"


def utc_timestamp() -> str:
    """Return the current time as an ISO-8601 UTC string."""
    stamp = datetime.now(tz=UTC).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


@dataclass(frozen=True)
class Employee:
    """A staff member listed on the public roster."""

    id: str
    name: str
    start_year: str
    start_date: str
    end_date: str | None = None
    department: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_remote(cls, key: str, value: dict[str, object]) -> "Employee":
        """Build an employee from a database child keyed by its push id."""
        return cls(
            id=key,
            name=_text(value.get("name")),
            start_year=_text(value.get("startYear")),
            start_date=_text(value.get("startDate")),
            end_date=_optional_text(value.get("endDate")),
            department=_optional_text(value.get("department")),
            created_at=_optional_text(value.get("createdAt")),
            updated_at=_optional_text(value.get("updatedAt")),
        )


@dataclass(frozen=True)
class NewsItem:
    """A short message shown in the site footer."""

    id: str
    title: str
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_remote(cls, key: str, value: dict[str, object]) -> "NewsItem":
        return cls(
            id=key,
            title=_text(value.get("title")),
            created_at=_optional_text(value.get("createdAt")),
            updated_at=_optional_text(value.get("updatedAt")),
        )


@dataclass(frozen=True)
class NewsletterIssue:
    """A single published edition of a newsletter."""

    id: str
    title: str
    description: str
    published_at: str
    url: str
    cover_image_path: str
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_remote(cls, key: str, value: dict[str, object]) -> "NewsletterIssue":
        return cls(
            id=key,
            title=_text(value.get("title")),
            description=_text(value.get("description")),
            published_at=_text(value.get("publishedAt")),
            url=_text(value.get("url")),
            cover_image_path=_text(value.get("coverImagePath")),
            created_at=_optional_text(value.get("createdAt")),
            updated_at=_optional_text(value.get("updatedAt")),
        )


@dataclass(frozen=True)
class Newsletter:
    """A newsletter and the issues published under it."""

    id: str
    name: str
    display_name: str
    color: str = DEFAULT_NEWSLETTER_COLOR
    issues: dict[str, NewsletterIssue] = field(default_factory=dict)
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_remote(cls, key: str, value: dict[str, object]) -> "Newsletter":
        raw_issues = value.get("issues")
        issues: dict[str, NewsletterIssue] = {}
        if isinstance(raw_issues, dict):
            for issue_id, issue in raw_issues.items():
                if isinstance(issue, dict):
                    issues[issue_id] = NewsletterIssue.from_remote(issue_id, issue)
        return cls(
            id=key,
            name=_text(value.get("name")) or key,
            display_name=_text(value.get("displayName")),
            color=_text(value.get("color")) or DEFAULT_NEWSLETTER_COLOR,
            issues=issues,
            created_at=_optional_text(value.get("createdAt")),
            updated_at=_optional_text(value.get("updatedAt")),
        )

    @property
    def folder_path(self) -> str:
        """Storage folder holding this newsletter's images."""
        return newsletter_folder(self.name)


@dataclass(frozen=True)
class ImageItem:
    """An object in the storage bucket, derived from its metadata."""

    id: str
    name: str
    url: str
    path: str
    size: int
    content_type: str = DEFAULT_IMAGE_TYPE
    created_at: str | None = None
    updated_at: str | None = None


@dataclass(frozen=True)
class StoredObject:
    """Metadata of an object listed from a storage folder."""

    name: str
    path: str
    size: int
    content_type: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


@dataclass(frozen=True)
class UploadCandidate:
    """A file picked by the operator, not yet validated or uploaded."""

    file_name: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def _text(value: object) -> str:
    if value is None:
        return ""
    return str(value)


def _optional_text(value: object) -> str | None:
    if value is None or value == "":
        return None
    return str(value)
