"""Footer news screen."""

from backoffice.adapters.firebase_realtime_database import RealtimeDatabase
from backoffice.screens.feedback import Feedback, run_action
from backoffice.services.news import NewsFeed
from backoffice.services.subscriptions import SubscriptionManager


class NewsScreen:
    def __init__(self, database: RealtimeDatabase) -> None:
        self.subscriptions = SubscriptionManager()
        self.feed = NewsFeed(database)

    def mount(self) -> None:
        self.subscriptions.acquire("news", self.feed)

    def unmount(self) -> None:
        self.subscriptions.release_all()

    async def save(self, title: str, news_id: str | None = None) -> Feedback:
        operation = self.feed.edit(news_id, title) if news_id else self.feed.add(title)
        return await run_action(
            operation,
            success="Notícia atualizada." if news_id else "Notícia adicionada.",
            failure="Não foi possível guardar a notícia. Tente novamente.",
            invalid="Introduza o texto da notícia.",
        )

    async def delete(self, news_id: str) -> Feedback:
        return await run_action(
            self.feed.remove(news_id),
            success="A notícia foi removida.",
            failure="Não foi possível remover a notícia.",
            invalid="Notícia inválida.",
        )
