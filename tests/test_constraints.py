import pytest
from py_app_dev.core.logging import logger

from nativefetch.constraints import check_constraints, evaluate_constraint
from tests.helpers import make_facts

LINUX_X64 = make_facts(platform="linux", arch="x64")


@pytest.mark.parametrize(
    ("name", "args", "expected"),
    [
        ("platform", ["linux"], True),
        ("platform", ["darwin", "linux"], True),
        ("platform", ["win32"], False),
        ("platform", [], False),
        ("arch", ["x64"], True),
        ("arch", ["arm64"], False),
        ("platform-arch", ["linux-x64"], True),
        ("platform-arch", ["linux-arm64", "darwin-x64"], False),
    ],
)
def test_evaluate_constraint(name, args, expected):
    assert evaluate_constraint(name, args, LINUX_X64) is expected


@pytest.mark.parametrize("args", [[], ["linux"], ["linux-x64", "x64"]])
def test_unknown_constraint_fails_closed(args):
    assert evaluate_constraint("libc", args, LINUX_X64) is False


def test_unknown_constraint_logs_warning():
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(str(message)), level="WARNING")
    try:
        evaluate_constraint("os", ["linux"], LINUX_X64)
    finally:
        logger.remove(handler_id)

    assert any("Unknown constraint name: os, pass: false" in message for message in messages)


@pytest.mark.parametrize("constraints", [None, {}])
def test_check_constraints_empty_passes(constraints):
    assert check_constraints(constraints, LINUX_X64) is True


def test_check_constraints_all_must_pass():
    assert check_constraints({"platform": ["linux"], "arch": ["x64"]}, LINUX_X64) is True
    assert check_constraints({"platform": ["linux"], "arch": ["arm64"]}, LINUX_X64) is False


def test_check_constraints_stops_at_first_failure(monkeypatch):
    evaluated: list[str] = []

    def fake_evaluate(name, args, facts):
        evaluated.append(name)
        return name != "platform"

    monkeypatch.setattr("nativefetch.constraints.evaluate_constraint", fake_evaluate)

    assert check_constraints({"arch": ["x64"], "platform": ["win32"], "platform-arch": ["linux-x64"]}, LINUX_X64) is False
    assert evaluated == ["arch", "platform"]
