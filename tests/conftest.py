import os

import pytest

HERE = os.path.dirname(__file__)
SAMPLE_ROOT = os.path.abspath(os.path.join(HERE, "..", "sample_code_repo_test", "react"))
COMPONENTS_DIR = os.path.join(SAMPLE_ROOT, "src", "components")


@pytest.fixture(scope="session")
def sample_root():
    return SAMPLE_ROOT


@pytest.fixture(scope="session")
def read_sample():
    def _read(rel_path):
        with open(os.path.join(COMPONENTS_DIR, rel_path), encoding="utf-8") as f:
            return f.read()
    return _read


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    monkeypatch.delenv("COMPONENTMETA_CONFIG", raising=False)
    monkeypatch.delenv("ROOT_DIR", raising=False)
