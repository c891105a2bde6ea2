from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from drupalci.cli import cli
from drupalci.step_workflows import base


@pytest.fixture
def fake_commands(monkeypatch, make_runners):
    """Route every step's commands to a recording fake; returns the factory."""
    def install(exit_codes=None):
        factory = make_runners(exit_codes)
        monkeypatch.setattr(base, "CommandRunner", factory)
        return factory
    return install


def invoke(*args):
    return CliRunner().invoke(cli, list(args))


def test_provision_success(workspace, fake_commands):
    runners = fake_commands()

    result = invoke("provision", "--db", "mysql://u:p@host/db", "--coder", "--workspace", str(workspace))

    assert result.exit_code == 0, result.output
    assert runners.subcommands == ["clone", "checkout", "site-install", "pm-download", "pm-enable", "coder-review"]
    assert "provision: SUCCESS" in result.output


def test_provision_empty_db_is_configuration_error(workspace, fake_commands):
    runners = fake_commands()

    result = invoke("provision", "--db", "", "--workspace", str(workspace))

    assert result.exit_code == 2
    assert "Please set a database URL" in result.output
    assert runners.calls == []


def test_provision_failure_exit_code(workspace, fake_commands):
    fake_commands({"clone": 128})

    result = invoke("provision", "--db", "sqlite://x", "--workspace", str(workspace))

    assert result.exit_code == 1
    assert "JOB FAILED: provision" in result.output


def test_config_file_with_overrides(workspace, tmp_path, fake_commands):
    runners = fake_commands()
    config = tmp_path / "job.json"
    config.write_text(json.dumps({"db": "mysql://file/db", "coder": True}))

    result = invoke("provision", "--config", str(config), "--no-coder", "--workspace", str(workspace))

    assert result.exit_code == 0, result.output
    assert "coder-review" not in runners.subcommands
    assert runners.calls[2][-1] == "--db-url=mysql://file/db"


def test_review_command(workspace, fake_commands):
    runners = fake_commands()
    info = workspace / "drupal" / "sites" / "all" / "modules" / "foo" / "foo.info"
    info.parent.mkdir(parents=True)
    info.write_text("name = Foo\n")

    result = invoke("review", "--style", "--sql", "--except", "profiles/**", "--workspace", str(workspace))

    assert result.exit_code == 0, result.output
    assert runners.calls[-1][1:] == ("coder-review", "--checkstyle", "--reviews=sql,style", "foo")


def test_review_failure_fails_build(workspace, fake_commands):
    fake_commands({"coder-review": 1})
    (workspace / "drupal").mkdir()

    result = invoke("review", "--workspace", str(workspace))

    assert result.exit_code == 1


def test_make_command(workspace, fake_commands):
    runners = fake_commands()
    (workspace / "site.make").write_text("core = 7.x\n")

    result = invoke("make", "--makefile", "site.make", "--workspace", str(workspace))

    assert result.exit_code == 0, result.output
    assert runners.subcommands == ["make"]


def test_validate_good_and_bad(tmp_path):
    good = tmp_path / "review.json"
    good.write_text(json.dumps({"root": "drupal", "security": True}))
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"root": "/var/www"}))

    ok = invoke("validate", "review", str(good))
    assert ok.exit_code == 0
    assert "valid review configuration" in ok.output

    fail = invoke("validate", "review", str(bad))
    assert fail.exit_code == 2
    assert "root: must be a path relative to the workspace" in fail.output


def test_validate_rejects_non_json(tmp_path):
    broken = tmp_path / "job.json"
    broken.write_text("{not json")

    result = invoke("validate", "provision", str(broken))

    assert result.exit_code == 2
