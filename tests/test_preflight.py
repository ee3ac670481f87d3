import json

import pytest

from fakes import FakeRunner
from site_deployer.config import DEFAULT_IDENTITY_COMMAND, DEFAULT_REQUIRED_TOOLS
from site_deployer.errors import InvalidCredentials, MissingTool
from site_deployer.preflight import CallerIdentity, PreflightChecker
from site_deployer.preflight.checker import parse_identity

IDENTITY = json.dumps(
    {
        "UserId": "AIDAEXAMPLE",
        "Account": "123456789012",
        "Arn": "arn:aws:iam::123456789012:user/deployer",
    }
)


def make_checker(runner: FakeRunner) -> PreflightChecker:
    return PreflightChecker(runner, DEFAULT_REQUIRED_TOOLS, DEFAULT_IDENTITY_COMMAND)


class TestToolChecks:
    def test_missing_tool_is_named(self):
        runner = FakeRunner(tools=["terraform", "aws", "git"])

        with pytest.raises(MissingTool) as excinfo:
            make_checker(runner).check_prerequisites()

        assert excinfo.value.name == "ansible-playbook"
        assert "ansible-playbook" in str(excinfo.value)

    def test_credentials_not_checked_when_tool_missing(self):
        runner = FakeRunner(tools=[])

        with pytest.raises(MissingTool):
            make_checker(runner).check_prerequisites()

        assert runner.calls == []


class TestCredentialChecks:
    def test_valid_identity(self):
        runner = FakeRunner().on("sts", "get-caller-identity", stdout=IDENTITY)

        identity = make_checker(runner).check_prerequisites()

        assert identity == CallerIdentity(
            arn="arn:aws:iam::123456789012:user/deployer",
            account="123456789012",
            user_id="AIDAEXAMPLE",
        )
        assert runner.calls[0].args == DEFAULT_IDENTITY_COMMAND
        assert runner.calls[0].stream_output is False

    def test_failed_identity_surfaces_raw_output_and_hints(self):
        raw = "Unable to locate credentials. You can configure credentials by running \"aws configure\"."
        runner = FakeRunner().on("sts", exit_status=255, stderr=raw)

        with pytest.raises(InvalidCredentials) as excinfo:
            make_checker(runner).check_prerequisites()

        assert excinfo.value.diagnostic == raw
        assert any("aws configure" in hint for hint in excinfo.value.hints)
        assert any("AWS_PROFILE" in hint for hint in excinfo.value.hints)

    def test_unparsable_identity_is_invalid(self):
        runner = FakeRunner().on("sts", stdout="<html>proxy error</html>")

        with pytest.raises(InvalidCredentials) as excinfo:
            make_checker(runner).check_prerequisites()

        assert "<html>proxy error</html>" in excinfo.value.diagnostic

    def test_identity_without_arn_is_invalid(self):
        with pytest.raises(InvalidCredentials):
            parse_identity(json.dumps({"Account": "1"}))


def test_preflight_is_repeatable():
    runner = FakeRunner().on("sts", stdout=IDENTITY)
    checker = make_checker(runner)

    first = checker.check_prerequisites()
    second = checker.check_prerequisites()

    assert first == second
    assert len(runner.calls) == 2
    assert runner.calls[0].args == runner.calls[1].args


def test_preflight_failure_is_repeatable():
    runner = FakeRunner(tools=["terraform"])
    checker = make_checker(runner)
    outcomes = []
    for _ in range(2):
        with pytest.raises(MissingTool) as excinfo:
            checker.check_prerequisites()
        outcomes.append(excinfo.value.name)

    assert outcomes == ["ansible-playbook", "ansible-playbook"]
