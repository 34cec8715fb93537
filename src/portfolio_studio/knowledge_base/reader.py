"""Markdown knowledge base reader."""

from __future__ import annotations

from pathlib import Path, PurePosixPath

from portfolio_studio.config import KnowledgeBaseConfig
from portfolio_studio.types import KnowledgeBaseDocument


class MarkdownDocumentParser:
    """Parser for knowledge base markdown documents."""

    extensions = (".md",)

    def parse(self, path: Path, *, relative_path: str) -> KnowledgeBaseDocument:
        content = path.read_text(encoding="utf-8")
        return KnowledgeBaseDocument(
            id=to_doc_id(relative_path),
            title=infer_title(content, PurePosixPath(relative_path).name),
            relative_path=relative_path,
            content=content,
        )


class KnowledgeBaseReader:
    """Reads the fixed set of knowledge base documents from disk.

    Documents are read fresh on every call. The root documents listed in the
    configuration must exist; every markdown file under `projects/` is added
    after them, and the combined list is sorted by title.
    """

    def __init__(
        self,
        config: KnowledgeBaseConfig | None = None,
        parser: MarkdownDocumentParser | None = None,
    ) -> None:
        self.config = config or KnowledgeBaseConfig()
        self.parser = parser or MarkdownDocumentParser()

    def list_documents(self) -> list[KnowledgeBaseDocument]:
        documents: list[KnowledgeBaseDocument] = []

        for file_name in self.config.root_documents:
            documents.append(
                self.parser.parse(self.config.root_dir / file_name, relative_path=file_name)
            )

        for path in sorted(self.config.projects_dir.iterdir()):
            if not path.is_file() or path.suffix not in self.parser.extensions:
                continue
            relative_path = f"projects/{path.name}"
            documents.append(self.parser.parse(path, relative_path=relative_path))

        return sorted(documents, key=lambda doc: doc.title.casefold())


def to_doc_id(relative_path: str) -> str:
    return relative_path.replace("\\", "/")


def infer_title(markdown: str, fallback: str) -> str:
    """Return the first level-one heading, or `fallback` when there is none."""

    for line in markdown.splitlines():
        stripped = line.strip()
        if stripped.startswith("# "):
            return stripped[2:].strip() or fallback
    return fallback
