"""FieldReport class for user-submitted photos awaiting moderation."""
import re
from typing import Iterable, Optional

from .status import ReportStatus


class FieldReport:
    """A photo with caption, reviewed in Intel Command before publication."""

    def __init__(
            self,
            id: str,
            user_id: str,
            image_url: str,
            caption: str,
            status: ReportStatus = ReportStatus.PENDING,
            admin_notes: Optional[str] = None,
            slug: Optional[str] = None,
            seo_title: Optional[str] = None,
            created_at: Optional[str] = None,
            published_at: Optional[str] = None,
    ):
        self.id = id
        self.user_id = user_id
        self.image_url = image_url
        self.caption = caption
        self.status = status
        self.admin_notes = admin_notes
        self.slug = slug
        self.seo_title = seo_title
        self.created_at = created_at
        self.published_at = published_at


WEEKLY_PUBLISH_LIMIT = 3


def make_slug(title: str, taken: Iterable[str] = ()) -> str:
    """URL slug from a title, suffixed with -2, -3, ... to avoid collisions."""
    base = re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-") or "report"
    taken = set(taken)
    slug = base
    n = 2
    while slug in taken:
        slug = f"{base}-{n}"
        n += 1
    return slug
