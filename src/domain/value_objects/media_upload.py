"""Media upload value object."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MediaUpload:
    """Binary content supplied by the caller for one media slot."""

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)
