"""Newsletter manager screen."""

import time
from collections.abc import Callable

from backoffice.adapters.firebase_realtime_database import RealtimeDatabase
from backoffice.adapters.supabase_object_storage import ObjectStorage
from backoffice.domain.models import DEFAULT_NEWSLETTER_COLOR, Newsletter, UploadCandidate
from backoffice.screens.feedback import Feedback, run_action
from backoffice.screens.images import upload_with_feedback
from backoffice.services.images import ImageGallery, UploadPolicy
from backoffice.services.newsletters import IssueForm, IssueList, NewsletterCatalog
from backoffice.services.subscriptions import SubscriptionManager


class NewslettersScreen:
    """Manages newsletters and the issues of the selected one.

    Selecting a newsletter moves the ``issues`` subscription and the cover
    image gallery to that newsletter; the previous issues listener is released
    before the new one opens.
    """

    def __init__(
        self,
        database: RealtimeDatabase,
        storage: ObjectStorage,
        policy: UploadPolicy,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.database = database
        self.subscriptions = SubscriptionManager()
        self.catalog = NewsletterCatalog(database)
        self.issues = IssueList(database, None)
        self.gallery = ImageGallery(storage, policy, clock=clock)
        self.selected_id: str | None = None

    def mount(self) -> None:
        self.subscriptions.acquire("newsletters", self.catalog)
        self.subscriptions.acquire("issues", self.issues)

    def unmount(self) -> None:
        self.subscriptions.release_all()
        self.selected_id = None
        self.issues = IssueList(self.database, None)
        self.gallery.clear()

    @property
    def selected(self) -> Newsletter | None:
        if self.selected_id is None:
            return None
        return self.catalog.get(self.selected_id)

    async def select_newsletter(self, newsletter_id: str | None) -> Feedback:
        """Point the issue list and the cover gallery at a newsletter."""
        newsletter = self.catalog.get(newsletter_id) if newsletter_id else None
        if newsletter_id and newsletter is None:
            return Feedback.failure("Newsletter não encontrada.")
        self.selected_id = newsletter.id if newsletter else None
        self.issues = self.subscriptions.acquire(
            "issues", IssueList(self.database, self.selected_id)
        )
        await self.gallery.set_folder(newsletter.folder_path if newsletter else None)
        if newsletter is None:
            return Feedback.success("Nenhuma newsletter selecionada.")
        return Feedback.success(f"Newsletter {newsletter.display_name} selecionada.")

    async def save_newsletter(
        self,
        name: str,
        display_name: str,
        color: str = DEFAULT_NEWSLETTER_COLOR,
        newsletter_id: str | None = None,
    ) -> Feedback:
        if newsletter_id:
            return await run_action(
                self.catalog.edit(newsletter_id, display_name, color),
                success="Newsletter atualizada.",
                failure="Erro ao salvar newsletter.",
                invalid="Nome de exibição é obrigatório.",
            )
        return await run_action(
            self.catalog.add(name, display_name, color),
            success="Newsletter criada.",
            failure="Erro ao salvar newsletter.",
            invalid="Nome e nome de exibição são obrigatórios.",
        )

    async def delete_newsletter(self, newsletter_id: str) -> Feedback:
        """Delete a newsletter; all of its issues go with it."""
        feedback = await run_action(
            self.catalog.remove(newsletter_id),
            success="Newsletter apagada.",
            failure="Erro ao apagar newsletter.",
            invalid="Newsletter inválida.",
        )
        if feedback.ok and self.selected_id == newsletter_id:
            await self.select_newsletter(None)
        return feedback

    async def save_issue(self, form: IssueForm, issue_id: str | None = None) -> Feedback:
        if self.selected_id is None:
            return Feedback.failure("Selecione uma newsletter primeiro.")
        operation = (
            self.issues.edit(issue_id, form) if issue_id else self.issues.add(form)
        )
        return await run_action(
            operation,
            success="Issue atualizado." if issue_id else "Issue criado.",
            failure="Erro ao salvar issue.",
            invalid="Título e data de publicação são obrigatórios.",
        )

    async def delete_issue(self, issue_id: str) -> Feedback:
        if self.selected_id is None:
            return Feedback.failure("Selecione uma newsletter primeiro.")
        return await run_action(
            self.issues.remove(issue_id),
            success="Issue apagado.",
            failure="Erro ao apagar issue.",
            invalid="Issue inválido.",
        )

    async def upload_cover(self, candidate: UploadCandidate) -> Feedback:
        """Upload a cover image; the feedback ref is the path for the issue form."""
        newsletter = self.selected
        prefix = f"{newsletter.name}_" if newsletter else ""
        return await upload_with_feedback(
            self.gallery,
            candidate,
            prefix=prefix,
            success="Imagem carregada e caminho preenchido automaticamente.",
        )
