from pathlib import Path


class GenerationError(Exception):
    """Base class for failures that abort processing of a single file."""

    def __init__(self, path: str | Path, message: str) -> None:
        self.path = str(path)
        self.message = message
        super().__init__(f"{self.path}: {message}")


class SourceReadError(GenerationError):
    pass


class SourceParseError(GenerationError):
    pass


class ExtractionError(GenerationError):
    pass


class SourceWriteError(GenerationError):
    pass
