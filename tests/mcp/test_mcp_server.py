import pytest

from componentmeta.mcp import server

FORM = "src/components/Form/Form.tsx"
BUTTON = "src/components/Button/Button.tsx"


@pytest.fixture(scope="module")
def component_data(sample_root, tmp_path_factory):
    out = tmp_path_factory.mktemp("mcp_component_data")
    output_path = str(out / "components")
    graph_output_path = str(out / "graph")
    result = server.mcp_create_component_data(sample_root, output_path, graph_output_path)
    return result, output_path


def test_extract_component_returns_descriptor_dict():
    code = "export const Chip = ({ label }) => <span className=\"chip\">{label}</span>;\n"
    result = server.mcp_extract_component(code)
    assert result["name"] == "Chip"
    assert result["props"][0]["name"] == "label"
    assert result["cssClasses"] == ["chip"]
    assert result["jsxElements"] == ["span"]
    assert "file_path" not in result


def test_extract_component_parse_failure():
    result = server.mcp_extract_component("const Broken = () => <div>;\n")
    assert result == {"status": "failure", "message": "failed to parse"}


def test_extract_component_bad_dialect():
    result = server.mcp_extract_component("const a = 1;", dialect="flow")
    assert result["status"] == "failure"
    assert "flow" in result["message"]


def test_create_component_data(component_data):
    result, output_path = component_data
    assert result["status"] == "success"
    assert result["output_path"] == output_path
    assert result["processed"] == 7
    assert result["failed"] == 0


def test_component_details(component_data):
    _, output_path = component_data
    [button] = server.mcp_get_component_details(output_path, "Button")
    assert button["file_path"] == BUTTON
    assert server.mcp_get_component_details(output_path, "Button", FORM)["error"] is True


def test_children_and_parents_are_node_ids(component_data):
    result, _ = component_data
    children = server.mcp_get_component_children(result["gpickle"], FORM, "Form")
    assert f"{BUTTON}::Button" in children
    parents = server.mcp_get_component_parents(result["gpickle"], BUTTON, "Button")
    assert f"{FORM}::Form" in parents
    assert server.mcp_get_component_parents(result["gpickle"], BUTTON, "Nope")["error"] is True


def test_find_render_path_runs_from_source_to_target(component_data):
    result, _ = component_data
    path = server.mcp_find_render_path(result["graphml"], f"{FORM}::Form", f"{BUTTON}::Button")
    assert path == {"path": f"{FORM}::Form -> {BUTTON}::Button"}

    backwards = server.mcp_find_render_path(result["graphml"], f"{BUTTON}::Button", f"{FORM}::Form")
    assert backwards == {"output": None}
