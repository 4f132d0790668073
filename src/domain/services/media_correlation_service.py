"""Matches uploaded files to questions and answers by correlation id."""

from collections.abc import Iterable

from src.domain.value_objects.media_upload import MediaUpload


class MediaCorrelationService:
    """Assigns caller files to the rows they were uploaded for.

    Server-side IDs do not exist when the caller uploads images, so a
    question or answer image is tied to its owner by the owner's external
    correlation id appearing in the file name.
    """

    def match(
        self, files: Iterable[MediaUpload], correlation_ids: Iterable[str]
    ) -> dict[str, MediaUpload]:
        """Map correlation ids to their files.

        A file belongs to the longest correlation id contained in its name,
        so ``q1`` never claims ``q10.png`` when ``q10`` is also an owner.
        Each owner keeps the first file that belongs to it.

        Args:
            files: Uploaded files in arrival order
            correlation_ids: External ids of the candidate owners

        Returns:
            Correlation id to file, only for owners that received one
        """
        candidates = sorted(
            {cid for cid in correlation_ids if cid}, key=len, reverse=True
        )
        matched: dict[str, MediaUpload] = {}

        for upload in files:
            owner = next((cid for cid in candidates if cid in upload.filename), None)
            if owner is not None and owner not in matched:
                matched[owner] = upload

        return matched
