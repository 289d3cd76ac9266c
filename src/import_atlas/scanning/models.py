"""Reference records emitted by the scanner."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class RefKind(str, Enum):
    """The syntactic form a module reference was written in."""

    IMPORT = "import"
    REEXPORT = "reexport"
    DYNAMIC_IMPORT = "dynamic-import"
    REQUIRE = "require"
    IMPORT_EQUALS = "import-equals"
    IMPORT_TYPE = "import-type"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Reference:
    """One module-reference construct found in a file.

    Attributes:
        file: Absolute path of the file containing the reference
        kind: Syntactic form of the reference
        specifier: Module specifier exactly as written (quotes stripped)
        detail: Form-specific annotation, e.g. the bindings of an import
        line: 1-indexed line of the construct's first token
        col: 1-indexed column (in characters) of the construct's first token
    """

    file: str
    kind: RefKind
    specifier: str
    line: int
    col: int
    detail: Optional[str] = None

    def to_dict(self, file: Optional[str] = None) -> dict:
        """Flat record: ``{file, kind, from, detail, line, col}``.

        ``file`` replaces the stored absolute path, typically with a
        relativized one.
        """
        return {
            "file": file if file is not None else self.file,
            "kind": self.kind.value,
            "from": self.specifier,
            "detail": self.detail,
            "line": self.line,
            "col": self.col,
        }
