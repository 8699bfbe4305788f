"""Pipeline exceptions."""


class MissingArtifactError(FileNotFoundError):
    """A required upstream artifact is absent.

    Raised before any processing starts so the run aborts cleanly.
    """

    def __init__(self, artifact: str, hint: str) -> None:
        self.artifact = artifact
        super().__init__(f"{artifact} not found. {hint}")


class ChapterExtractionError(Exception):
    """A single chapter could not be read or decoded."""

    def __init__(self, chapter_id: str, reason: str) -> None:
        self.chapter_id = chapter_id
        super().__init__(f"chapter {chapter_id!r}: {reason}")
