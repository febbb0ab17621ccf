import pytest

from sp_inventory.config.config_manager import ConfigManager
from sp_inventory.config.config_validator import ConfigValidator
from sp_inventory.core.models import RunConfiguration


@pytest.fixture
def no_default_locations(monkeypatch):
    monkeypatch.setattr(ConfigManager, "DEFAULT_CONFIG_LOCATIONS", [])


def write_config(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding='utf-8')
    return str(path)


def test_defaults_without_config_file(no_default_locations):
    manager = ConfigManager()

    config = manager.build_run_configuration()

    assert manager.loaded_from is None
    assert config == RunConfiguration()
    assert manager.get_logging_config()["level"] == "WARNING"


def test_explicit_missing_file_is_an_error(tmp_path):
    with pytest.raises(FileNotFoundError):
        ConfigManager(str(tmp_path / "nope.yaml")).load_config()


def test_file_values_are_used(tmp_path):
    path = write_config(tmp_path, """
tenant:
  name: contoso
  client_id: app-id
inventory:
  site_filter: "Url -like 'sites/hr'"
  include_personal_sites: true
output:
  console: false
  log_directory: /var/log/sp
  files_file: files.csv
""")

    config = ConfigManager(path).build_run_configuration()

    assert config.tenant_name == "contoso"
    assert config.client_id == "app-id"
    assert config.site_filter == "Url -like 'sites/hr'"
    assert config.include_personal_sites is True
    assert config.console_output is False
    assert config.persist_to_disk is True
    assert str(config.files_path) == "/var/log/sp/files.csv"
    assert config.admin_url == "https://contoso-admin.sharepoint.com"


def test_overrides_win_and_none_is_ignored(tmp_path):
    path = write_config(tmp_path, "tenant:\n  name: contoso\noutput:\n  persist: true\n")

    config = ConfigManager(path).build_run_configuration({
        "tenant_name": "fabrikam",
        "persist_to_disk": False,
        "site_filter": None,
    })

    assert config.tenant_name == "fabrikam"
    assert config.persist_to_disk is False
    assert config.site_filter == ""


def test_empty_file_uses_defaults(tmp_path):
    config = ConfigManager(write_config(tmp_path, "")).build_run_configuration()

    assert config == RunConfiguration()


def test_invalid_yaml(tmp_path):
    path = write_config(tmp_path, "tenant: [unclosed")

    with pytest.raises(ValueError, match="Invalid YAML"):
        ConfigManager(path).load_config()


@pytest.mark.parametrize("config, message", [
    ({"tenant": "contoso"}, "must be a mapping"),
    ({"email": {}}, "Unknown configuration sections"),
    ({"output": {"console": "yes"}}, "must be true or false"),
    ({"output": {"files_file": "../files.csv"}}, "file name inside the log directory"),
    ({"output": {"sites_file": ""}}, "non-empty file name"),
    ({"logging": {"level": "LOUD"}}, "logging.level"),
])
def test_validator_rejects(config, message):
    with pytest.raises(ValueError, match=message):
        ConfigValidator().validate(config)


def test_validator_accepts_complete_config():
    ConfigValidator().validate({
        "tenant": {"name": "contoso"},
        "inventory": {"include_personal_sites": False, "register_consent": True},
        "output": {"console": True, "persist": False, "execution_log": "run.log"},
        "logging": {"level": "debug"},
    })


def test_run_values_rejects_non_boolean_toggle():
    with pytest.raises(ValueError, match="include_personal_sites"):
        ConfigValidator().validate_run_values({"include_personal_sites": "true"})
