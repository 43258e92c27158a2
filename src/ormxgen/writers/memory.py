from pathlib import Path


class InMemorySourceWriter:
    """Collect writes instead of touching the filesystem (dry runs, tests)."""

    def __init__(self) -> None:
        self.files: dict[Path, bytes] = {}

    def write(self, path: Path, content: bytes) -> None:
        self.files[path] = content

    def text(self, path: Path) -> str:
        return self.files[path].decode("utf-8")
