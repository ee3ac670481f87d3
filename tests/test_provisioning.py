"""Provisioning stage: init, plan, confirmation gate, apply, plan artifact lifetime."""

from pathlib import Path

import pytest

from fakes import FakeRunner, create_plan_file
from site_deployer.errors import ApplyFailed, InitFailed, PlanFailed, UserAborted
from site_deployer.interaction import AutoConfirmationProvider
from site_deployer.paths import plan_path
from site_deployer.provisioning import APPLY_QUESTION, ProvisioningStage, TerraformClient


@pytest.fixture
def terraform_dir(tmp_path):
    path = tmp_path / "terraform"
    path.mkdir()
    return path


@pytest.fixture
def runner():
    return FakeRunner().on("terraform", "plan", effect=create_plan_file)


def make_stage(runner, terraform_dir, answer="y") -> ProvisioningStage:
    return ProvisioningStage(
        TerraformClient(runner, terraform_dir),
        AutoConfirmationProvider(answer),
        plan_path(terraform_dir),
    )


def subcommands(runner):
    return [call.args[2] for call in runner.calls]


class TestSuccessfulRun:
    def test_runs_init_plan_apply_in_order(self, runner, terraform_dir):
        make_stage(runner, terraform_dir).run()

        assert subcommands(runner) == ["init", "plan", "apply"]
        init, plan, apply = (call.args for call in runner.calls)
        assert init[:2] == ["terraform", f"-chdir={terraform_dir}"]
        assert "-input=false" in init
        expected_plan = str(plan_path(terraform_dir).resolve())
        assert f"-out={expected_plan}" in plan
        assert apply[-1] == expected_plan

    def test_streams_terraform_output(self, runner, terraform_dir):
        make_stage(runner, terraform_dir).run()

        assert all(call.stream_output for call in runner.calls)

    def test_plan_artifact_removed_after_success(self, runner, terraform_dir):
        stage = make_stage(runner, terraform_dir)
        stage.run()

        assert stage.applied
        assert not plan_path(terraform_dir).exists()

    def test_asks_the_apply_question(self, runner, terraform_dir):
        stage = make_stage(runner, terraform_dir)
        stage.run()

        assert stage.confirmation.questions == [APPLY_QUESTION]
        assert stage.apply_confirmed


class TestFailures:
    def test_apply_failure_removes_plan_and_raises(self, runner, terraform_dir):
        runner.on("terraform", "apply", exit_status=1, stderr="Error: creating EC2 Instance")
        stage = make_stage(runner, terraform_dir)

        with pytest.raises(ApplyFailed) as excinfo:
            stage.run()

        assert excinfo.value.diagnostic == "Error: creating EC2 Instance"
        assert excinfo.value.echoed
        assert not plan_path(terraform_dir).exists()
        assert not stage.applied

    def test_plan_failure_stops_before_confirmation(self, terraform_dir):
        runner = FakeRunner().on(
            "terraform", "plan", exit_status=1, stderr="Error: Invalid reference", effect=create_plan_file
        )
        stage = make_stage(runner, terraform_dir)

        with pytest.raises(PlanFailed) as excinfo:
            stage.run()

        assert "Invalid reference" in excinfo.value.diagnostic
        assert stage.confirmation.questions == []
        assert "apply" not in subcommands(runner)
        assert not plan_path(terraform_dir).exists()

    def test_init_failure_stops_everything(self, terraform_dir):
        runner = FakeRunner().on("terraform", "init", exit_status=1, stderr="Failed to query providers")

        with pytest.raises(InitFailed):
            make_stage(runner, terraform_dir).run()

        assert subcommands(runner) == ["init"]

    def test_stale_plan_from_interrupted_run_is_replaced(self, terraform_dir):
        stale = plan_path(terraform_dir)
        stale.write_text("stale", encoding="utf-8")
        seen = []
        runner = FakeRunner().on(
            "terraform", "plan", effect=lambda args: seen.append(stale.exists())
        )

        make_stage(runner, terraform_dir).run()

        assert seen == [False]
        assert not stale.exists()


class TestConfirmationGate:
    @pytest.mark.parametrize("answer", ["n", "", "No", "nope", "  "])
    def test_non_affirmative_answers_abort_without_apply(self, runner, terraform_dir, answer):
        stage = make_stage(runner, terraform_dir, answer=answer)

        with pytest.raises(UserAborted):
            stage.run()

        assert "apply" not in subcommands(runner)
        assert not stage.apply_confirmed
        assert not plan_path(terraform_dir).exists()

    @pytest.mark.parametrize("answer", ["y", "Y", "yes", "YES"])
    def test_affirmative_answers_apply_exactly_once(self, runner, terraform_dir, answer):
        make_stage(runner, terraform_dir, answer=answer).run()

        assert subcommands(runner).count("apply") == 1


def test_destroy_hint_points_at_terraform_dir(terraform_dir):
    client = TerraformClient(FakeRunner(), Path(terraform_dir))

    assert client.destroy_hint() == f"cd {terraform_dir} && terraform destroy"
