"""Backoffice endpoints over the mounted screens."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, HTTPException, Request, UploadFile, status

from backoffice.api.models import (  # noqa: TC001
    EmployeeRequest,
    ImageFolderRequest,
    IssueRequest,
    NewsletterRequest,
    NewsletterSelection,
    NewsRequest,
)
from backoffice.domain.models import UploadCandidate
from backoffice.errors import MutationError, ValidationError
from backoffice.screens.shell import BackofficeScreens  # noqa: TC001

if TYPE_CHECKING:
    from backoffice.containers import AppContainer
    from backoffice.screens.feedback import Feedback
    from backoffice.services.subscriptions import LiveCollection

router = APIRouter(tags=["backoffice"])


def require_session(request: Request) -> BackofficeScreens:
    """Return the mounted screens or reject the request."""
    container: AppContainer = request.app.state.container
    screens = container.shell.screens
    if screens is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return screens


def _respond(feedback: Feedback) -> dict[str, object]:
    if feedback.ok:
        return {"message": feedback.message, "ref": feedback.ref}
    if isinstance(feedback.error, ValidationError):
        code = status.HTTP_422_UNPROCESSABLE_CONTENT
    elif isinstance(feedback.error, MutationError):
        code = status.HTTP_502_BAD_GATEWAY
    else:
        code = status.HTTP_409_CONFLICT
    raise HTTPException(status_code=code, detail=feedback.message)


def _state(collection: LiveCollection) -> dict[str, object]:
    return {
        "loading": collection.loading,
        "error": str(collection.error) if collection.error else None,
    }


async def _candidate(file: UploadFile) -> UploadCandidate:
    return UploadCandidate(
        file_name=file.filename or "upload",
        content_type=file.content_type or "",
        data=await file.read(),
    )


@router.get("/employees")
async def list_employees(
    screens: BackofficeScreens = Depends(require_session),
) -> dict[str, object]:
    """Return the roster grouped by department."""
    roster = screens.employees.roster
    return {
        **_state(roster),
        "total": roster.total,
        "employees": [asdict(employee) for employee in roster.items],
        "departments": {
            department: [employee.id for employee in members]
            for department, members in roster.by_department().items()
        },
    }


@router.post("/employees")
async def create_employee(
    body: EmployeeRequest, screens: BackofficeScreens = Depends(require_session)
) -> dict[str, object]:
    return _respond(await screens.employees.save(body.to_form()))


@router.put("/employees/{employee_id}")
async def update_employee(
    employee_id: str,
    body: EmployeeRequest,
    screens: BackofficeScreens = Depends(require_session),
) -> dict[str, object]:
    return _respond(await screens.employees.save(body.to_form(), employee_id))


@router.delete("/employees/{employee_id}")
async def delete_employee(
    employee_id: str, screens: BackofficeScreens = Depends(require_session)
) -> dict[str, object]:
    return _respond(await screens.employees.delete(employee_id))


@router.get("/news")
async def list_news(
    screens: BackofficeScreens = Depends(require_session),
) -> dict[str, object]:
    """Return footer news, newest first."""
    feed = screens.news.feed
    return {**_state(feed), "news": [asdict(item) for item in feed.items]}


@router.post("/news")
async def create_news(
    body: NewsRequest, screens: BackofficeScreens = Depends(require_session)
) -> dict[str, object]:
    return _respond(await screens.news.save(body.title))


@router.put("/news/{news_id}")
async def update_news(
    news_id: str, body: NewsRequest, screens: BackofficeScreens = Depends(require_session)
) -> dict[str, object]:
    return _respond(await screens.news.save(body.title, news_id))


@router.delete("/news/{news_id}")
async def delete_news(
    news_id: str, screens: BackofficeScreens = Depends(require_session)
) -> dict[str, object]:
    return _respond(await screens.news.delete(news_id))


@router.get("/newsletters")
async def list_newsletters(
    screens: BackofficeScreens = Depends(require_session),
) -> dict[str, object]:
    """Return every newsletter with its issue count."""
    screen = screens.newsletters
    catalog = screen.catalog
    return {
        **_state(catalog),
        "selected_id": screen.selected_id,
        "newsletters": [
            {
                "id": newsletter.id,
                "name": newsletter.name,
                "display_name": newsletter.display_name,
                "color": newsletter.color,
                "folder_path": newsletter.folder_path,
                "issue_count": catalog.issue_count(newsletter.id),
            }
            for newsletter in catalog.items
        ],
    }


@router.post("/newsletters")
async def create_newsletter(
    body: NewsletterRequest, screens: BackofficeScreens = Depends(require_session)
) -> dict[str, object]:
    return _respond(
        await screens.newsletters.save_newsletter(
            body.name, body.display_name, body.color
        )
    )


@router.put("/newsletters/selection")
async def select_newsletter(
    body: NewsletterSelection, screens: BackofficeScreens = Depends(require_session)
) -> dict[str, object]:
    """Point the issue list and cover gallery at a newsletter."""
    return _respond(await screens.newsletters.select_newsletter(body.newsletter_id))


@router.get("/newsletters/issues")
async def list_issues(
    screens: BackofficeScreens = Depends(require_session),
) -> dict[str, object]:
    """Return issues of the selected newsletter, latest first."""
    screen = screens.newsletters
    return {
        **_state(screen.issues),
        "newsletter_id": screen.selected_id,
        "issues": [asdict(issue) for issue in screen.issues.items],
        "images": [asdict(image) for image in screen.gallery.items],
    }


@router.post("/newsletters/issues")
async def create_issue(
    body: IssueRequest, screens: BackofficeScreens = Depends(require_session)
) -> dict[str, object]:
    return _respond(await screens.newsletters.save_issue(body.to_form()))


@router.put("/newsletters/issues/{issue_id}")
async def update_issue(
    issue_id: str,
    body: IssueRequest,
    screens: BackofficeScreens = Depends(require_session),
) -> dict[str, object]:
    return _respond(await screens.newsletters.save_issue(body.to_form(), issue_id))


@router.delete("/newsletters/issues/{issue_id}")
async def delete_issue(
    issue_id: str, screens: BackofficeScreens = Depends(require_session)
) -> dict[str, object]:
    return _respond(await screens.newsletters.delete_issue(issue_id))


@router.post("/newsletters/cover")
async def upload_cover(
    file: UploadFile, screens: BackofficeScreens = Depends(require_session)
) -> dict[str, object]:
    """Upload a cover image; ``ref`` is the path to put in the issue form."""
    return _respond(await screens.newsletters.upload_cover(await _candidate(file)))


@router.put("/newsletters/{newsletter_id}")
async def update_newsletter(
    newsletter_id: str,
    body: NewsletterRequest,
    screens: BackofficeScreens = Depends(require_session),
) -> dict[str, object]:
    return _respond(
        await screens.newsletters.save_newsletter(
            body.name, body.display_name, body.color, newsletter_id
        )
    )


@router.delete("/newsletters/{newsletter_id}")
async def delete_newsletter(
    newsletter_id: str, screens: BackofficeScreens = Depends(require_session)
) -> dict[str, object]:
    return _respond(await screens.newsletters.delete_newsletter(newsletter_id))


@router.get("/images")
async def list_images(
    screens: BackofficeScreens = Depends(require_session),
) -> dict[str, object]:
    """Return the images of the active tab's folder."""
    screen = screens.images
    await screen.ensure_loaded()
    gallery = screen.gallery
    return {
        "tab": screen.active_tab,
        "folder": gallery.folder_path,
        "loading": gallery.loading,
        "error": str(gallery.error) if gallery.error else None,
        "images": [asdict(image) for image in gallery.items],
        "newsletters": [newsletter.name for newsletter in screen.catalog.items],
    }


@router.put("/images/folder")
async def select_image_folder(
    body: ImageFolderRequest, screens: BackofficeScreens = Depends(require_session)
) -> dict[str, object]:
    await screens.images.select_tab(body.tab, body.newsletter_name)
    return {"tab": screens.images.active_tab, "folder": screens.images.gallery.folder_path}


@router.post("/images")
async def upload_image(
    file: UploadFile, screens: BackofficeScreens = Depends(require_session)
) -> dict[str, object]:
    return _respond(await screens.images.upload(await _candidate(file)))


@router.delete("/images")
async def delete_image(
    path: str, screens: BackofficeScreens = Depends(require_session)
) -> dict[str, object]:
    return _respond(await screens.images.delete(path))

