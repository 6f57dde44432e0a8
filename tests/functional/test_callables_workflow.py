"""Functional tests for a site operator driving callables syncs from the CLI.

The operator sets options, runs passes in different execution contexts,
inspects the queue and sends it. Every invocation bootstraps from scratch,
so state is carried only by the database.
"""

from __future__ import annotations

import json
import re

import pytest

# pylint: disable=redefined-outer-name


def _enqueued(output: str) -> int:
    match = re.search(r"Enqueued (\d+) changed callable", output)
    return int(match.group(1)) if match else 0


def _json_lines(output: str) -> list[dict]:
    return [json.loads(line) for line in output.splitlines() if line.startswith("{")]


def test_sync_then_send(invoke):
    invoke(["option", "set", "home", "http://example.com"])
    invoke(["option", "set", "timezone_string", "Europe/Paris"])

    # a plain request never checks callables
    assert "No callables enqueued." in invoke(["callables", "sync"]).output

    first = invoke(["--admin", "callables", "sync"])
    assert _enqueued(first.output) > 0

    # the debounce lock holds back the next pass
    assert "No callables enqueued." in invoke(["--admin", "callables", "sync"]).output

    listing = invoke(["queue", "list", "-n", "100"]).output
    assert "sync_callable" in listing
    assert '["timezone", "Europe/Paris"]' in listing

    sent = invoke(["queue", "send"])
    documents = _json_lines(sent.output)
    assert {"id", "action", "payload"} <= set(documents[0])
    payloads = {d["payload"][0]: d["payload"][1] for d in documents}
    assert payloads["home_url"] == "http://example.com"
    assert payloads["timezone"] == "Europe/Paris"
    assert f"Sent {len(documents)} action(s)." in sent.output

    assert "Queue is empty." in invoke(["queue", "list"]).output


def test_home_change_is_sent_despite_the_lock(invoke):
    invoke(["option", "set", "home", "http://example.com"])
    invoke(["--admin", "callables", "sync"])
    invoke(["queue", "clear", "--yes"])

    invoke(["option", "set", "home", "https://example.com"])
    assert _enqueued(invoke(["--admin", "callables", "sync"]).output) == 1

    (document,) = _json_lines(invoke(["queue", "send"]).output)
    assert document["payload"] == ["home_url", "https://example.com"]


def test_unlock_and_force(invoke):
    invoke(["--admin", "callables", "sync"])
    invoke(["option", "set", "locale", "de_DE"])
    assert "Lock    : active" in invoke(["callables", "status"]).output

    # --force ignores the lock and the context
    assert _enqueued(invoke(["callables", "sync", "--force"]).output) == 1

    invoke(["callables", "unlock"])
    assert "Lock    : inactive" in invoke(["callables", "status"]).output


def test_cron_only_checks_always_send_callables(invoke):
    invoke(["option", "set", "locale", "de_DE"])
    invoke(["option", "set", "active_modules", '["stats"]', "--json"])

    invoke(["--cron", "callables", "sync"])
    listing = invoke(["queue", "list", "-n", "100"]).output

    assert '["active_modules", ["stats"]]' in listing
    assert "locale" not in listing


def test_code_change_unlocks(invoke):
    invoke(["--admin", "callables", "sync"])
    result = invoke(["callables", "code-changed", "--kind", "theme"])
    assert "Recorded theme upgrade" in result.output
    assert "Lock    : inactive" in invoke(["callables", "status"]).output


def test_reset_resends_everything(invoke):
    first = _enqueued(invoke(["--admin", "callables", "sync"]).output)
    invoke(["queue", "clear", "--yes"])
    invoke(["callables", "reset", "--yes"])

    status = invoke(["callables", "status"]).output
    assert "Tracked : 0 callable(s)" in status
    assert _enqueued(invoke(["--admin", "callables", "sync"]).output) == first


def test_reset_asks_first(runner):
    from sitesync.entrypoints.cli.main import sitesync  # pylint: disable=import-outside-toplevel

    result = runner.invoke(sitesync, ["callables", "reset"], input="n\n")
    assert result.exit_code == 1
    assert "re-sent on the next sync" in result.output


def test_full_sync_is_expanded_when_sent(invoke):
    invoke(["option", "set", "locale", "de_DE"])
    result = invoke(["callables", "full-sync"])
    assert "functions: 1 action(s) enqueued (done)" in result.output

    documents = _json_lines(invoke(["queue", "send"]).output)
    (full,) = [d for d in documents if d["action"] == "full_sync_callables"]
    assert full["payload"]["locale"] == "de_DE"
    assert "Tracked : 0" not in invoke(["callables", "status"]).output


def test_status_values_do_not_store_anything(invoke):
    invoke(["option", "set", "siteurl", "http://example.com"])
    result = invoke(["callables", "status", "--values"])
    assert '"site_url": "http://example.com"' in result.output
    assert "sync_https_history_site_url" not in invoke(["option", "list"]).output


@pytest.mark.parametrize("args", [["--module", "posts"], ["-m", "functions", "-m", "posts"]])
def test_full_sync_unknown_module(runner, args):
    from sitesync.entrypoints.cli.main import sitesync  # pylint: disable=import-outside-toplevel

    result = runner.invoke(sitesync, ["callables", "full-sync", *args])
    assert result.exit_code == 1
    assert "Unknown sync module: posts" in result.output
