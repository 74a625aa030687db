import pytest

from jira_kpis.core.config_loader import load_settings, parse_cron_section, parse_jira_section
from jira_kpis.core.errors import ConfigurationError
from jira_kpis.core.models import ServerEndpoint, WindowKind

YAML_TEXT = """
jira_kpis:
  servers:
    - https://jira.example.com/
    - https://jira2.example.com
  project: OPS
  username: bot
  password: secret
  gather_weekly: true
  gather_monthly: true
cron_kpis:
  location: /tmp/syslog
  cron_job: WatchDogTimer.check
  host: den-1
  cron_count: ["3", "4", "5", "6", "7", "0", "0"]
"""


def test_load_settings(tmp_path):
    path = tmp_path / "kpis.yaml"
    path.write_text(YAML_TEXT)
    settings = load_settings(path, env={})
    jira = settings.jira
    assert jira.project == "OPS"
    assert jira.servers == ["https://jira.example.com", "https://jira2.example.com"]
    assert jira.enabled_kinds() == [WindowKind.WEEKLY, WindowKind.MONTHLY]
    assert jira.endpoints()[0] == ServerEndpoint("https://jira.example.com", "bot", "secret")
    assert settings.cron.cron_count == [3, 4, 5, 6, 7, 0, 0]
    assert settings.cron.host == "den-1"


def test_missing_file(tmp_path):
    with pytest.raises(ConfigurationError):
        load_settings(tmp_path / "nope.yaml")


def test_invalid_yaml(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("jira_kpis: [unclosed")
    with pytest.raises(ConfigurationError):
        load_settings(path)


def test_credentials_fall_back_to_env():
    cfg = parse_jira_section({"project": "OPS"}, env={"JIRA_USERNAME": "u", "JIRA_API_TOKEN": "tok"})
    assert cfg.username == "u"
    assert cfg.password == "tok"
    assert cfg.servers == []
    assert cfg.default_endpoint().url == "http://localhost:8080"


@pytest.mark.parametrize(
    "section",
    [
        {},
        {"project": ""},
        {"project": "OPS OR project = SECRET"},
        {"project": "OPS", "servers": [""]},
        {"project": "OPS", "servers": 5},
        {"project": "OPS", "gather_weekly": "yes"},
        {"project": "OPS", "timezone": "Mars/Olympus"},
        "not-a-mapping",
    ],
)
def test_invalid_jira_sections(section):
    with pytest.raises(ConfigurationError):
        parse_jira_section(section, env={})


def test_descriptor_flag_is_not_a_yearly_alias(caplog):
    cfg = parse_jira_section({"project": "OPS", "gather_descriptive_descriptor": True}, env={})
    assert cfg.enabled_kinds() == []
    assert "gather_descriptive_descriptor" in caplog.text


def test_duplicate_servers_collapsed():
    cfg = parse_jira_section({"project": "OPS", "servers": ["https://a/", "https://a"]}, env={})
    assert cfg.servers == ["https://a"]


@pytest.mark.parametrize(
    "section",
    [
        {"location": "/tmp/x"},
        {"cron_job": "job", "cron_count": [1, 2, 3]},
        {"cron_job": "job", "cron_count": [1, 2, 3, 4, 5, 6, "x"]},
        {"cron_job": "job", "cron_count": [1, 2, 3, 4, 5, 6, -1]},
        {"cron_job": "job", "timezone": "Mars/Olympus"},
    ],
)
def test_invalid_cron_sections(section):
    with pytest.raises(ConfigurationError):
        parse_cron_section(section)


def test_cron_defaults():
    cfg = parse_cron_section({"cron_job": "job"})
    assert cfg.location == "/var/log/syslog"
    assert cfg.cron_count == [0] * 7
    assert cfg.timezone is None


def test_cron_timezone():
    assert parse_cron_section({"cron_job": "job", "timezone": "Europe/Berlin"}).timezone == "Europe/Berlin"
