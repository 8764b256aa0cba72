"""Pydantic models for backoffice request bodies."""

from typing import Literal

from pydantic import BaseModel

from backoffice.domain.models import DEFAULT_NEWSLETTER_COLOR
from backoffice.services.employees import EmployeeForm
from backoffice.services.newsletters import IssueForm


class LoginRequest(BaseModel):
    """Credentials typed on the login screen."""

    email: str = ""
    password: str = ""


class EmployeeRequest(BaseModel):
    """Employee form payload."""

    name: str = ""
    start_year: str = ""
    start_date: str = ""
    end_date: str = ""
    department: str = ""

    def to_form(self) -> EmployeeForm:
        return EmployeeForm(
            name=self.name,
            start_year=self.start_year,
            start_date=self.start_date,
            end_date=self.end_date,
            department=self.department,
        )


class NewsRequest(BaseModel):
    title: str = ""


class NewsletterRequest(BaseModel):
    """Newsletter form payload; name is ignored on edit."""

    name: str = ""
    display_name: str = ""
    color: str = DEFAULT_NEWSLETTER_COLOR


class NewsletterSelection(BaseModel):
    newsletter_id: str | None = None


class IssueRequest(BaseModel):
    """Issue form payload."""

    title: str = ""
    published_at: str = ""
    description: str = ""
    url: str = ""
    cover_image_path: str = ""

    def to_form(self) -> IssueForm:
        return IssueForm(
            title=self.title,
            published_at=self.published_at,
            description=self.description,
            url=self.url,
            cover_image_path=self.cover_image_path,
        )


class ImageFolderRequest(BaseModel):
    """Tab switch on the image manager."""

    tab: Literal["gallery", "highlights", "newsletters"] = "gallery"
    newsletter_name: str | None = None
