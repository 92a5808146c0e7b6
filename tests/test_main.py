import json
import os

from componentmeta.main import extract_file, main


def test_extract_prints_descriptor(capsys, sample_root):
    path = os.path.join(sample_root, "src", "components", "Card", "Card.jsx")
    assert main(["extract", path]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["name"] == "Card"
    assert out["exports"] == ["named"]
    assert out["file_path"].endswith("Card/Card.jsx")


def test_extract_plain_typescript(tmp_path):
    path = tmp_path / "types.ts"
    path.write_text("export type ChipProps = { label: string; count?: number };\n", encoding="utf-8")
    descriptor = extract_file(str(path))
    assert [p.name for p in descriptor.props] == ["label", "count"]
    assert descriptor.name is None


def test_extract_broken_file_fails(capsys, sample_root):
    path = os.path.join(sample_root, "legacy", "Ignored.jsx")
    assert main(["extract", path]) == 1
    assert "failed to parse" in capsys.readouterr().err


def test_bad_config_fails(capsys, tmp_path, sample_root):
    config = tmp_path / "bad.toml"
    config.write_text("[extractor]\nnope = true\n", encoding="utf-8")
    path = os.path.join(sample_root, "src", "components", "Card", "Card.jsx")
    assert main(["--config", str(config), "extract", path]) == 1
    assert "Unknown extractor settings" in capsys.readouterr().err


def test_create_component_data_command(tmp_path, sample_root):
    output_base = tmp_path / "components"
    graph_dir = tmp_path / "graph"
    code = main([
        "create_component_data", sample_root,
        "--output_base", str(output_base),
        "--graph_dir", str(graph_dir),
    ])
    assert code == 0
    written = output_base / "src" / "components" / "Counter" / "Counter.json"
    data = json.loads(written.read_text(encoding="utf-8"))
    assert data["file_path"] == "src/components/Counter/Counter.jsx"
    assert [m["name"] for m in data["methods"]] == ["increment", "render"]
    assert (graph_dir / "component_graph.gpickle").exists()
    assert not (output_base / "legacy").exists()


def test_skip_graph(tmp_path, sample_root):
    graph_dir = tmp_path / "graph"
    assert main([
        "create_component_data", sample_root,
        "--output_base", str(tmp_path / "components"),
        "--graph_dir", str(graph_dir),
        "--skip_graph",
    ]) == 0
    assert not graph_dir.exists()


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "usage" in capsys.readouterr().out
