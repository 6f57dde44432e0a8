"""Functional tests for ``sitesync option``."""

from __future__ import annotations

from sitesync.entrypoints.cli.main import sitesync


def test_set_get_list_delete(invoke):
    assert "Option 'blogname' updated." in invoke(["option", "set", "blogname", "My Site"]).output
    assert "unchanged" in invoke(["option", "set", "blogname", "My Site"]).output
    assert invoke(["option", "get", "blogname"]).output.strip() == '"My Site"'

    invoke(["option", "set", "user_roles", '{"editor": ["edit_posts"]}', "--json"])
    assert invoke(["option", "list"]).output.split() == ["blogname", "user_roles"]

    assert "deleted" in invoke(["option", "delete", "blogname"]).output
    assert "did not exist" in invoke(["option", "delete", "blogname"]).output


def test_get_missing_option(runner):
    result = runner.invoke(sitesync, ["option", "get", "nope"])
    assert result.exit_code == 1
    assert "Option 'nope' does not exist." in result.output


def test_invalid_json(runner):
    result = runner.invoke(sitesync, ["option", "set", "x", "{oops", "--json"])
    assert result.exit_code == 2
    assert "not valid JSON" in result.output


def test_invalid_name(runner):
    result = runner.invoke(sitesync, ["option", "set", "x" * 192, "1"])
    assert result.exit_code == 1
    assert "at most 191 characters" in result.output
