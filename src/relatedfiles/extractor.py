"""Content extraction for emitted files.

With smart pruning, a structured file is rebuilt from its outline: package
declaration, imports, then every top-level declaration with its leading
doc comment. Anything between declarations that belongs to none of them
(stray comments, blank runs, license banners) is dropped. Declaration
bodies are always kept whole.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .models import SourceFile

if TYPE_CHECKING:
    from .backends import FileOutline
    from .file_access import SmartFileAccess


class ContentExtractor:
    """Turn a source file into the text emitted for it.

    Library classes never come through here: their text is produced by the
    symbol resolver's decompiler.
    """

    def __init__(self, access: SmartFileAccess) -> None:
        self._access = access

    def read_text(self, file: SourceFile) -> str | None:
        return self._access.read_text(file.path)

    def extract(self, file: SourceFile, include_javadoc: bool = True, smart_pruning: bool = True) -> str:
        """Return the text to emit for *file*.

        Raises:
            ValueError: *file* is not a source file.
            OSError: the file vanished or cannot be read.
        """
        if not file.is_source:
            raise ValueError(f"Not a source file: {file.path}")

        text = self.read_text(file)
        if text is None:
            raise OSError(f"Cannot read {file.path}")
        if not smart_pruning:
            return text

        outline = self._access.get_outline(file.path)
        if outline is None or not outline.is_structured:
            return text
        return self._pruned(outline, include_javadoc)

    def _pruned(self, outline: FileOutline, include_javadoc: bool) -> str:
        sections: list[str] = []

        if include_javadoc and outline.module_doc:
            sections.append(outline.module_doc)
        if outline.package_text:
            sections.append(outline.package_text)

        import_lines: list[str] = []
        seen_lines: set[int] = set()
        for imp in outline.imports:
            # "from a import b, c" yields two imports sharing one statement
            if imp.nested or imp.line in seen_lines:
                continue
            seen_lines.add(imp.line)
            import_lines.append(imp.text)
        if import_lines:
            sections.append("\n".join(import_lines))

        for decl in outline.declarations:
            if include_javadoc and decl.doc_comment:
                sections.append(f"{decl.doc_comment}\n{decl.text}")
            else:
                sections.append(decl.text)

        return "\n\n".join(sections)
