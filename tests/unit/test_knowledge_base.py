import pytest

from portfolio_studio.config import KnowledgeBaseConfig
from portfolio_studio.knowledge_base.reader import KnowledgeBaseReader, infer_title


def test_infer_title_uses_first_level_one_heading() -> None:
    markdown = "intro line\n## Not this\n#   Platform Work  \n# Later"
    assert infer_title(markdown, "fallback.md") == "Platform Work"
    assert infer_title("## Only second level", "fallback.md") == "fallback.md"
    assert infer_title("#\n", "fallback.md") == "fallback.md"


def test_reader_loads_root_and_project_documents(make_reader) -> None:
    reader = make_reader(
        overrides={"education.md": "No heading in this file.\n"},
        projects={
            "zeta.md": "# Zeta Tracker\n\nShipment tracking.",
            "notes.txt": "# Ignored\n",
        },
    )

    docs = reader.list_documents()
    by_id = {doc.id: doc for doc in docs}

    assert set(by_id) == {
        "about.md",
        "overview.md",
        "experience.md",
        "education.md",
        "skills.md",
        "projects/zeta.md",
    }
    assert by_id["education.md"].title == "education.md"
    assert by_id["projects/zeta.md"].title == "Zeta Tracker"
    assert by_id["projects/zeta.md"].relative_path == "projects/zeta.md"
    assert by_id["projects/zeta.md"].content == "# Zeta Tracker\n\nShipment tracking."


def test_reader_sorts_by_title_case_insensitively(make_reader) -> None:
    reader = make_reader(projects={"lower.md": "# apollo notes\n"})

    titles = [doc.title for doc in reader.list_documents()]

    assert titles == sorted(titles, key=str.casefold)
    assert titles[0] == "About"
    assert titles[1] == "apollo notes"


def test_reader_reads_fresh_on_every_call(make_reader, kb_root) -> None:
    reader = make_reader()
    assert "Redis" not in next(d for d in reader.list_documents() if d.id == "skills.md").content

    (kb_root / "skills.md").write_text("# Skills\n\nRedis.\n", encoding="utf-8")

    skills = next(d for d in reader.list_documents() if d.id == "skills.md")
    assert skills.content == "# Skills\n\nRedis.\n"


def test_reader_fails_when_a_root_document_is_missing(tmp_path) -> None:
    (tmp_path / "projects").mkdir()
    reader = KnowledgeBaseReader(KnowledgeBaseConfig(root_dir=tmp_path))

    with pytest.raises(FileNotFoundError):
        reader.list_documents()


def test_config_reads_root_dir_from_environment(tmp_path) -> None:
    config = KnowledgeBaseConfig.from_env({"PORTFOLIO_KB_DIR": str(tmp_path)})

    assert config.root_dir == tmp_path
    assert config.projects_dir == tmp_path / "projects"
