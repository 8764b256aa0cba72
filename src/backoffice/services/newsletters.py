"""Newsletters and their issues backed by a live collection."""

from dataclasses import dataclass, replace

from backoffice.adapters.firebase_realtime_database import RealtimeDatabase
from backoffice.domain.models import (
    DEFAULT_NEWSLETTER_COLOR,
    Newsletter,
    NewsletterIssue,
    utc_timestamp,
)
from backoffice.domain.paths import NEWSLETTERS_PATH, issues_path
from backoffice.errors import ValidationError
from backoffice.services.subscriptions import LiveCollection

BUILT_IN_NEWSLETTERS = (
    ("raiz_digital", "Raiz Digital"),
    ("em_rede", "Em Rede"),
)


@dataclass(frozen=True)
class IssueForm:
    """Fields typed by the operator for a newsletter issue."""

    title: str
    published_at: str
    description: str = ""
    url: str = ""
    cover_image_path: str = ""

    def validate(self) -> None:
        """Require a title and a publication date."""
        if not self.title.strip() or not self.published_at.strip():
            raise ValidationError("Issue title and publication date are required")

    def payload(self) -> dict[str, object]:
        return {
            "title": self.title.strip(),
            "description": self.description.strip(),
            "publishedAt": self.published_at.strip(),
            "url": self.url.strip(),
            "coverImagePath": self.cover_image_path.strip(),
        }


class NewsletterCatalog(LiveCollection[Newsletter]):
    """Every newsletter, including the built-in ones not yet stored."""

    def __init__(self, database: RealtimeDatabase) -> None:
        super().__init__(database, NEWSLETTERS_PATH, Newsletter.from_remote)

    def arrange(self, items: list[Newsletter]) -> list[Newsletter]:
        """Fill in built-in newsletters missing from the snapshot."""
        built_in = dict(BUILT_IN_NEWSLETTERS)
        merged = [
            replace(newsletter, display_name=built_in[newsletter.name])
            if not newsletter.display_name and newsletter.name in built_in
            else newsletter
            for newsletter in items
        ]
        names = {newsletter.name for newsletter in merged}
        for name, display_name in BUILT_IN_NEWSLETTERS:
            if name not in names:
                now = utc_timestamp()
                merged.append(
                    Newsletter(
                        id=name,
                        name=name,
                        display_name=display_name,
                        created_at=now,
                        updated_at=now,
                    )
                )
        return merged

    def issue_count(self, newsletter_id: str) -> int:
        newsletter = self.get(newsletter_id)
        return len(newsletter.issues) if newsletter else 0

    async def add(
        self, name: str, display_name: str, color: str = DEFAULT_NEWSLETTER_COLOR
    ) -> str:
        """Create a newsletter."""
        if not name.strip() or not display_name.strip():
            raise ValidationError("Name and display name are required")
        now = utc_timestamp()
        return await self.create(
            {
                "name": name.strip(),
                "displayName": display_name.strip(),
                "color": color.strip() or DEFAULT_NEWSLETTER_COLOR,
                "createdAt": now,
                "updatedAt": now,
            }
        )

    async def edit(
        self, newsletter_id: str, display_name: str, color: str = DEFAULT_NEWSLETTER_COLOR
    ) -> None:
        """Rename or recolor a newsletter; its name stays fixed."""
        if not display_name.strip():
            raise ValidationError("Display name is required")
        await self.update(
            newsletter_id,
            {
                "displayName": display_name.strip(),
                "color": color.strip() or DEFAULT_NEWSLETTER_COLOR,
                "updatedAt": utc_timestamp(),
            },
        )

    async def remove(self, newsletter_id: str) -> None:
        """Delete a newsletter together with all of its issues."""
        await self.delete(newsletter_id)


class IssueList(LiveCollection[NewsletterIssue]):
    """Live issues of one newsletter, latest publication first."""

    def __init__(self, database: RealtimeDatabase, newsletter_id: str | None) -> None:
        path = issues_path(newsletter_id) if newsletter_id else None
        super().__init__(database, path, NewsletterIssue.from_remote)
        self.newsletter_id = newsletter_id

    def arrange(self, items: list[NewsletterIssue]) -> list[NewsletterIssue]:
        return sorted(items, key=lambda issue: issue.published_at, reverse=True)

    async def add(self, form: IssueForm) -> str:
        form.validate()
        now = utc_timestamp()
        return await self.create({**form.payload(), "createdAt": now, "updatedAt": now})

    async def edit(self, issue_id: str, form: IssueForm) -> None:
        form.validate()
        await self.update(issue_id, {**form.payload(), "updatedAt": utc_timestamp()})

    async def remove(self, issue_id: str) -> None:
        await self.delete(issue_id)
