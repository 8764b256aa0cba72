"""Image manager screen and shared upload feedback."""

import time
from collections.abc import Callable
from typing import Literal

from backoffice.adapters.firebase_realtime_database import RealtimeDatabase
from backoffice.adapters.supabase_object_storage import ObjectStorage
from backoffice.domain.models import UploadCandidate
from backoffice.domain.paths import GALLERY_FOLDER, HIGHLIGHTS_FOLDER, newsletter_folder
from backoffice.errors import MutationError
from backoffice.screens.feedback import Feedback, run_action
from backoffice.services.images import (
    ImageGallery,
    ImageTooLarge,
    NoFolderSelected,
    UnsupportedImageType,
    UploadPolicy,
)
from backoffice.services.newsletters import NewsletterCatalog
from backoffice.services.subscriptions import SubscriptionManager

ImageTab = Literal["gallery", "highlights", "newsletters"]


async def upload_with_feedback(
    gallery: ImageGallery, candidate: UploadCandidate, prefix: str, success: str
) -> Feedback:
    """Upload through a gallery and describe the outcome to the operator."""
    try:
        path = await gallery.upload(candidate, prefix=prefix)
    except UnsupportedImageType as exc:
        return Feedback.failure("Apenas imagens JPG e PNG são permitidas.", exc)
    except ImageTooLarge as exc:
        limit_mb = gallery.policy.max_bytes / (1024 * 1024)
        return Feedback.failure(f"A imagem deve ter no máximo {limit_mb:g}MB.", exc)
    except NoFolderSelected as exc:
        return Feedback.failure("Selecione uma newsletter primeiro.", exc)
    except MutationError as exc:
        return Feedback.failure("Erro ao carregar imagem.", exc)
    return Feedback.success(success, ref=path)


class ImagesScreen:
    """Photo gallery, library highlights and per-newsletter image folders."""

    def __init__(
        self,
        database: RealtimeDatabase,
        storage: ObjectStorage,
        policy: UploadPolicy,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.subscriptions = SubscriptionManager()
        self.catalog = NewsletterCatalog(database)
        self.gallery = ImageGallery(storage, policy, GALLERY_FOLDER, clock=clock)
        self.active_tab: ImageTab = "gallery"
        self.selected_newsletter: str | None = None
        self._loaded = False

    def mount(self) -> None:
        self.subscriptions.acquire("newsletters", self.catalog)

    def unmount(self) -> None:
        self.subscriptions.release_all()

    @staticmethod
    def folder_for(tab: ImageTab, newsletter_name: str | None = None) -> str | None:
        """Storage folder shown by a tab; None until a newsletter is picked."""
        if tab == "gallery":
            return GALLERY_FOLDER
        if tab == "highlights":
            return HIGHLIGHTS_FOLDER
        return newsletter_folder(newsletter_name) if newsletter_name else None

    async def select_tab(
        self, tab: ImageTab, newsletter_name: str | None = None
    ) -> None:
        """Switch tabs and load the matching folder."""
        self.active_tab = tab
        self.selected_newsletter = newsletter_name if tab == "newsletters" else None
        self._loaded = True
        await self.gallery.set_folder(self.folder_for(tab, self.selected_newsletter))

    async def ensure_loaded(self) -> None:
        """Load the current folder once after mounting."""
        if not self._loaded:
            self._loaded = True
            await self.gallery.reload()

    async def upload(self, candidate: UploadCandidate) -> Feedback:
        return await upload_with_feedback(
            self.gallery, candidate, prefix="", success="Imagem carregada com sucesso."
        )

    async def delete(self, path: str) -> Feedback:
        return await run_action(
            self.gallery.delete(path),
            success="Imagem apagada com sucesso.",
            failure="Erro ao apagar imagem.",
            invalid="Imagem inválida.",
        )
