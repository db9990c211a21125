import math
from dataclasses import dataclass, field
from typing import List, Optional

NO_DESCRIPTION = "No description."


@dataclass
class Link:
    name: str
    url: str

    def to_dict(self):
        return {"name": self.name, "url": self.url}


@dataclass
class PageResult:
    """Metadata scraped from a single thread page."""

    id: str
    name: Optional[str] = None
    version: Optional[str] = None
    developer: Optional[str] = None
    description: str = NO_DESCRIPTION
    labels: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    rating: float = math.nan
    images: Optional[List[str]] = None
    links: List[Link] = field(default_factory=list)

    @property
    def has_rating(self):
        return not math.isnan(self.rating)

    def to_dict(self):
        """JSON-safe representation; an unknown rating becomes None."""
        return {
            "id": self.id,
            "name": self.name,
            "version": self.version,
            "developer": self.developer,
            "description": self.description,
            "labels": self.labels,
            "tags": self.tags,
            "rating": self.rating if self.has_rating else None,
            "images": self.images,
            "links": [link.to_dict() for link in self.links],
        }


@dataclass
class SearchResult:
    link: str
    name: str

    def to_dict(self):
        return {"link": self.link, "name": self.name}
