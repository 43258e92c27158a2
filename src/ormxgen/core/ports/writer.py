from pathlib import Path
from typing import Protocol


class SourceWriter(Protocol):
    def write(self, path: Path, content: bytes) -> None: ...
