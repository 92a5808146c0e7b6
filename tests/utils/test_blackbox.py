import pytest

from componentmeta.main import collect_source_files, create_component_data
from componentmeta.path import find_path
from componentmeta.utils import blackbox

FORM = "src/components/Form/Form.tsx"
GALLERY = "src/components/ImageGallery/ImageGallery.tsx"
BUTTON = "src/components/Button/Button.tsx"


@pytest.fixture(scope="module")
def outputs(sample_root, tmp_path_factory):
    out = tmp_path_factory.mktemp("component_data")
    output_base = str(out / "components")
    graph_dir = str(out / "graph")
    summary = create_component_data(sample_root, output_base, graph_dir)
    return summary, output_base


def test_collect_respects_gitignore(sample_root):
    files = [p.relative_to(sample_root).as_posix() for p in collect_source_files(sample_root)]
    assert len(files) == 7
    assert FORM in files
    assert not any(f.startswith("legacy/") for f in files)


def test_summary(outputs):
    summary, _ = outputs
    assert summary["processed"] == 7
    assert summary["failed"] == 0
    assert summary["graphml"].endswith("component_graph.graphml")


def test_all_components(outputs):
    summary, _ = outputs
    components = blackbox.getAllComponents(summary["gpickle"])
    assert f"{FORM}::Form" in components
    assert f"{BUTTON}::Button" in components
    assert len(components) == 7


def test_component_info(outputs):
    _, output_base = outputs
    [form] = blackbox.getComponentInfo(output_base, "Form")
    assert form["file_path"] == FORM
    assert form["jsxElements"] == ["form", "div", "Input", "Icons.Spinner", "Button"]

    assert blackbox.getComponentInfo(output_base, "Form", file_path=GALLERY)["error"] is True
    assert blackbox.getComponentInfo(output_base + "-missing", "Form")["error"] is True


def test_children_and_parents(outputs):
    summary, _ = outputs
    graph = summary["graphml"]
    children = {row[0] for row in blackbox.getComponentChildren(graph, FORM, "Form")}
    assert "src/components/Input/Input.tsx::Input" in children
    assert f"{BUTTON}::Button" in children
    assert "react" in children

    parents = blackbox.getComponentParents(graph, BUTTON, "Button")
    assert sorted(row[0] for row in parents) == [f"{FORM}::Form", f"{GALLERY}::ImageGallery"]
    assert all(row[3] == 1 for row in parents)

    missing = blackbox.getComponentChildren(graph, FORM, "Nope")
    assert missing["error"] is True


def test_depth_bounds_traversal(outputs):
    summary, _ = outputs
    assert blackbox.getComponentChildren(summary["gpickle"], GALLERY, "ImageGallery", depth=0) == []
    deep = blackbox.getComponentChildren(summary["gpickle"], GALLERY, "ImageGallery", depth=3)
    ids = [row[0] for row in deep]
    assert len(ids) == len(set(ids))
    assert "next/image::Image" in ids


def test_render_path(outputs):
    summary, _ = outputs
    path = find_path(summary["gpickle"], f"{BUTTON}::Button", source=f"{FORM}::Form", return_obj=True)
    assert path == [f"{FORM}::Form", f"{BUTTON}::Button"]
    assert find_path(summary["gpickle"], f"{FORM}::Form", source=f"{BUTTON}::Button", return_obj=True) is None
