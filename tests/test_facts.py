import pytest

from fakes import FakeRunner
from site_deployer.errors import OutputNotFound
from site_deployer.provisioning import FactExtractor, InfrastructureFacts, TerraformClient


def make_extractor(runner, tmp_path):
    return FactExtractor(TerraformClient(runner, tmp_path))


def test_reads_raw_output(tmp_path):
    runner = FakeRunner().on("output", "instance_public_ip", stdout="203.0.113.5")

    value = make_extractor(runner, tmp_path).get_output("instance_public_ip")

    assert value == "203.0.113.5"
    args = runner.calls[0].args
    assert args[2:] == ["output", "-raw", "instance_public_ip"]
    assert runner.calls[0].stream_output is False


def test_repeated_reads_are_identical(tmp_path):
    runner = FakeRunner().on("output", "instance_public_ip", stdout="203.0.113.5")
    extractor = make_extractor(runner, tmp_path)

    assert extractor.get_output("instance_public_ip") == extractor.get_output("instance_public_ip")
    assert all(call.args[2] == "output" for call in runner.calls)


@pytest.mark.parametrize("stdout", ["", "   \n"])
def test_empty_value_is_not_found(tmp_path, stdout):
    runner = FakeRunner().on("output", stdout=stdout)

    with pytest.raises(OutputNotFound) as excinfo:
        make_extractor(runner, tmp_path).get_output("instance_public_ip")

    assert excinfo.value.name == "instance_public_ip"


def test_missing_output_surfaces_terraform_error(tmp_path):
    raw = 'Error: Output "instance_public_ip" not found'
    runner = FakeRunner().on("output", exit_status=1, stderr=raw)

    with pytest.raises(OutputNotFound) as excinfo:
        make_extractor(runner, tmp_path).get_output("instance_public_ip")

    assert excinfo.value.diagnostic == raw
    assert not excinfo.value.echoed


def test_collect_skips_unavailable_optional_outputs(tmp_path):
    runner = (
        FakeRunner()
        .on("output", "instance_public_ip", stdout="203.0.113.5")
        .on("output", "instance_id", stdout="i-0abc")
        .on("output", "public_dns", exit_status=1, stderr="not found")
    )

    facts = make_extractor(runner, tmp_path).collect(
        ["instance_public_ip"], ["instance_id", "public_dns"]
    )

    assert dict(facts) == {"instance_public_ip": "203.0.113.5", "instance_id": "i-0abc"}


def test_collect_fails_on_required_output(tmp_path):
    runner = FakeRunner().on("output", "instance_public_ip", stdout="")

    with pytest.raises(OutputNotFound):
        make_extractor(runner, tmp_path).collect(["instance_public_ip"])


def test_facts_are_read_only():
    facts = InfrastructureFacts({"instance_public_ip": "203.0.113.5"})

    with pytest.raises(TypeError):
        facts["instance_public_ip"] = "198.51.100.1"  # type: ignore[index]
    assert facts["instance_public_ip"] == "203.0.113.5"
    assert len(facts) == 1
