from pathlib import Path

import pytest

from portfolio_studio.config import KnowledgeBaseConfig, LlmProviderId
from portfolio_studio.knowledge_base.reader import KnowledgeBaseReader
from portfolio_studio.llm.types import GenerateParams, LlmRunResult

NEUTRAL_ROOT_DOCS = {
    "about.md": "# About\n\nBackend engineer based in Berlin.\n",
    "overview.md": "# Overview\n\nPortfolio notes for recruiters.\n",
    "experience.md": "# Experience\n\nFive years building Python services.\n",
    "education.md": "# Education\n\nComputer science degree.\n",
    "skills.md": "# Skills\n\nPython and SQL.\n",
}


def write_knowledge_base(
    root: Path,
    overrides: dict[str, str] | None = None,
    projects: dict[str, str] | None = None,
) -> Path:
    (root / "projects").mkdir(parents=True, exist_ok=True)
    for name, content in {**NEUTRAL_ROOT_DOCS, **(overrides or {})}.items():
        (root / name).write_text(content, encoding="utf-8")
    for name, content in (projects or {}).items():
        (root / "projects" / name).write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def kb_root(tmp_path: Path) -> Path:
    return tmp_path / "knowledge_base"


@pytest.fixture
def make_reader(kb_root: Path):
    def _make(
        overrides: dict[str, str] | None = None,
        projects: dict[str, str] | None = None,
    ) -> KnowledgeBaseReader:
        write_knowledge_base(kb_root, overrides, projects)
        return KnowledgeBaseReader(KnowledgeBaseConfig(root_dir=kb_root))

    return _make


class RecordingGenerator:
    """Stands in for the LLM client and remembers every request."""

    def __init__(self, text: str = "Grounded answer.") -> None:
        self.text = text
        self.calls: list[GenerateParams] = []

    async def __call__(self, params: GenerateParams) -> LlmRunResult:
        self.calls.append(params)
        return LlmRunResult(text=self.text, provider=LlmProviderId.CLAUDE, model="test-model")


@pytest.fixture
def generator() -> RecordingGenerator:
    return RecordingGenerator()
