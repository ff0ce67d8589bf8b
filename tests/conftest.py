from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path_factory, monkeypatch):
    """
    Keep tests away from the real user settings file.
    """
    config_dir = tmp_path_factory.mktemp("config")
    monkeypatch.setenv("FS_SNAPSHOT_CONFIG_DIR", str(config_dir))
    return config_dir


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """
    root/
      a.txt          "hello"
      b.txt          "hello"
      docs/
        readme.md    "# docs"
        empty/
      link -> /tmp/x
    """
    root = tmp_path / "root"
    root.mkdir()
    (root / "a.txt").write_text("hello")
    (root / "b.txt").write_text("hello")
    (root / "docs").mkdir()
    (root / "docs" / "readme.md").write_text("# docs")
    (root / "docs" / "empty").mkdir()
    (root / "link").symlink_to("/tmp/x")
    return root
