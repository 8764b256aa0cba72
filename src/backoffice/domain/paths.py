"""Realtime database paths (schema-in-code).

The database has no schema: nodes appear on first write. These constants are
the single source of truth for where each collection lives.
"""

EMPLOYEES_PATH = "/employees"
NEWS_PATH = "/news"
NEWSLETTERS_PATH = "/newsletters"

# Storage folders, relative to the bucket root.
GALLERY_FOLDER = "photos"
HIGHLIGHTS_FOLDER = "destaques_biblio"
NEWSLETTER_FOLDER_ROOT = "newsletters"


def child_path(parent: str, key: str) -> str:
    """Join a collection path and a child key."""
    return f"{parent.rstrip('/')}/{key.strip('/')}"


def newsletter_path(newsletter_id: str) -> str:
    return child_path(NEWSLETTERS_PATH, newsletter_id)


def issues_path(newsletter_id: str) -> str:
    """Path of the issues map under a newsletter."""
    return child_path(newsletter_path(newsletter_id), "issues")


def newsletter_folder(newsletter_name: str) -> str:
    """Storage folder holding a newsletter's images."""
    return f"{NEWSLETTER_FOLDER_ROOT}/{newsletter_name}"


def split_path(path: str) -> list[str]:
    """Split a slash-delimited path into its non-empty segments."""
    return [segment for segment in path.split("/") if segment]
