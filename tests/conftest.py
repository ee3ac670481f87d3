import io
import os

import pytest

from site_deployer.config import AppConfig, EnvironmentConfig, PathsConfig, SummaryConfig
from site_deployer.reporting import SummaryReporter


@pytest.fixture
def app_config(tmp_path):
    terraform_dir = tmp_path / "terraform"
    ansible_dir = tmp_path / "ansible"
    terraform_dir.mkdir()
    ansible_dir.mkdir()
    return AppConfig(
        paths=PathsConfig(terraform_dir=str(terraform_dir), ansible_dir=str(ansible_dir)),
        summary=SummaryConfig(verify_http=False),
        environment=EnvironmentConfig(variables={"PATH": os.defpath}),
    )


@pytest.fixture
def report_stream():
    return io.StringIO()


@pytest.fixture
def reporter(report_stream):
    return SummaryReporter(stream=report_stream)
