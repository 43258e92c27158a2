from ormxgen.writers.filesystem import FileSystemSourceWriter
from ormxgen.writers.memory import InMemorySourceWriter

__all__ = [
    "FileSystemSourceWriter",
    "InMemorySourceWriter",
]
