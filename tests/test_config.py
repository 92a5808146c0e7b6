import pytest

from componentmeta.config import CONFIG_ENV_VAR, DEFAULT_CONFIG, ExtractorConfig, load_config
from componentmeta.exceptions import ConfigError
from componentmeta import extract_component_descriptor


def write_toml(tmp_path, body):
    path = tmp_path / "componentmeta.toml"
    path.write_text(body, encoding="utf-8")
    return str(path)


def test_defaults_without_file():
    assert load_config() is DEFAULT_CONFIG
    assert DEFAULT_CONFIG.is_alias_contract("FormField")
    assert DEFAULT_CONFIG.is_interface_contract("ModalProps")
    assert not DEFAULT_CONFIG.is_interface_contract("Store")


def test_toml_overrides_selected_keys(tmp_path):
    path = write_toml(tmp_path, """
[extractor]
interface_contract_markers = ["Props", "Options"]
style_object = "tw"
""")
    config = ExtractorConfig.from_toml(path)
    assert config.interface_contract_markers == ("Props", "Options")
    assert config.style_object == "tw"
    assert config.class_helpers == DEFAULT_CONFIG.class_helpers


def test_env_var_points_at_config(tmp_path, monkeypatch):
    path = write_toml(tmp_path, '[extractor]\nclass_attribute = "class"\n')
    monkeypatch.setenv(CONFIG_ENV_VAR, path)
    assert load_config().class_attribute == "class"


def test_explicit_path_beats_env(tmp_path, monkeypatch):
    monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "missing.toml"))
    path = write_toml(tmp_path, "[extractor]\n")
    assert load_config(path) == DEFAULT_CONFIG


@pytest.mark.parametrize("body, message", [
    ('[extractor]\nunknown_key = 1\n', "Unknown extractor settings"),
    ('[extractor]\nclass_helpers = "cn"\n', "list of strings"),
    ('[extractor]\nstyle_object = ""\n', "non-empty string"),
    ('extractor = 3\n', "must be a table"),
    ('[extractor\n', "Invalid TOML"),
])
def test_invalid_config(tmp_path, body, message):
    path = write_toml(tmp_path, body)
    with pytest.raises(ConfigError, match=message):
        ExtractorConfig.from_toml(path)


def test_missing_file_is_config_error(tmp_path):
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "nope.toml"))


def test_custom_markers_change_contract_detection():
    code = """
interface PanelOptions {
  title: string;
}
const Panel = ({ title }: PanelOptions) => <h1>{title}</h1>;
"""
    assert extract_component_descriptor(code).prop("title").source.value == "arrow-function-param"

    config = ExtractorConfig(interface_contract_markers=("Options",))
    descriptor = extract_component_descriptor(code, config=config)
    assert descriptor.prop("title").source.value == "interface"
    assert descriptor.is_typescript is True
