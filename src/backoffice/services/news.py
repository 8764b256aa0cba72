"""Footer news messages backed by a live collection."""

from backoffice.adapters.firebase_realtime_database import RealtimeDatabase
from backoffice.domain.models import NewsItem, utc_timestamp
from backoffice.domain.paths import NEWS_PATH
from backoffice.errors import ValidationError
from backoffice.services.subscriptions import LiveCollection


class NewsFeed(LiveCollection[NewsItem]):
    """Footer news, newest first."""

    def __init__(self, database: RealtimeDatabase) -> None:
        super().__init__(database, NEWS_PATH, NewsItem.from_remote)

    def arrange(self, items: list[NewsItem]) -> list[NewsItem]:
        return sorted(items, key=lambda item: item.created_at or "", reverse=True)

    async def add(self, title: str) -> str:
        """Publish a new footer message."""
        cleaned = _require_title(title)
        now = utc_timestamp()
        return await self.create({"title": cleaned, "createdAt": now, "updatedAt": now})

    async def edit(self, news_id: str, title: str) -> None:
        """Change the text of a footer message."""
        cleaned = _require_title(title)
        await self.update(news_id, {"title": cleaned, "updatedAt": utc_timestamp()})

    async def remove(self, news_id: str) -> None:
        await self.delete(news_id)


def _require_title(title: str) -> str:
    cleaned = title.strip()
    if not cleaned:
        raise ValidationError("News text is required")
    return cleaned
