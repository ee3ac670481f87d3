"""Configuration loading utilities for site-deployer."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from .configure.stages import DEFAULT_DEPLOY_STAGES, StageDescriptor, parse_stages
from .paths import (
    ANSIBLE_DIR,
    DEFAULT_CONFIG_PATH,
    SSH_KEY_FILENAME,
    TERRAFORM_DIR,
    inventory_path,
)

# Load .env file if it exists
load_dotenv()

DEFAULT_REQUIRED_TOOLS = ["terraform", "ansible-playbook", "aws", "git"]
DEFAULT_IDENTITY_COMMAND = ["aws", "sts", "get-caller-identity", "--output", "json"]


@dataclass
class PathsConfig:
    """Where the Terraform and Ansible collaborators live."""

    terraform_dir: str = str(TERRAFORM_DIR)
    ansible_dir: str = str(ANSIBLE_DIR)
    inventory_path: Optional[str] = None  # 默认 <ansible_dir>/inventory.ini

    @property
    def terraform(self) -> Path:
        return Path(self.terraform_dir)

    @property
    def ansible(self) -> Path:
        return Path(self.ansible_dir)

    @property
    def inventory(self) -> Path:
        if self.inventory_path:
            return Path(self.inventory_path)
        return inventory_path(self.ansible)


@dataclass
class ProvisioningConfig:
    required_tools: List[str] = field(default_factory=lambda: list(DEFAULT_REQUIRED_TOOLS))
    identity_command: List[str] = field(default_factory=lambda: list(DEFAULT_IDENTITY_COMMAND))
    address_output: str = "instance_public_ip"
    extra_outputs: List[str] = field(default_factory=list)  # 可选输出，缺失时仅告警
    auto_approve: bool = False


@dataclass
class SSHConfig:
    username: str = "ubuntu"
    port: int = 22
    key_path: Optional[str] = None  # 默认 <ansible_dir>/ssh-key.pem


@dataclass
class ReadinessConfig:
    """SSH readiness polling. Worst-case wait is max_attempts x interval."""

    max_attempts: int = 30
    interval: float = 5.0
    connect_timeout: int = 5


@dataclass
class ConfigurationConfig:
    host_group: str = "webservers"
    write_inventory: bool = True
    stages: List[StageDescriptor] = field(default_factory=lambda: list(DEFAULT_DEPLOY_STAGES))


@dataclass
class SummaryConfig:
    verify_http: bool = True
    http_timeout: int = 10


@dataclass
class RefreshConfig:
    """Content refresh of an already-provisioned host."""

    repo_url: Optional[str] = None
    host_pattern: str = "webservers"
    checkout_dir: str = "/tmp/website-repo"
    web_root: str = "/var/www/html"
    stages: List[StageDescriptor] = field(
        default_factory=lambda: [DEFAULT_DEPLOY_STAGES[-1]]
    )


@dataclass
class EnvironmentConfig:
    """Explicit process environment handed to every external command."""

    aws_profile: Optional[str] = None
    aws_region: Optional[str] = None
    variables: Dict[str, str] = field(default_factory=dict)

    def process_env(self) -> Dict[str, str]:
        env = dict(self.variables)
        if self.aws_profile:
            env["AWS_PROFILE"] = self.aws_profile
        if self.aws_region:
            env["AWS_REGION"] = self.aws_region
            env["AWS_DEFAULT_REGION"] = self.aws_region
        return env

    @property
    def search_path(self) -> Optional[str]:
        return self.process_env().get("PATH")


@dataclass
class AppConfig:
    """Top-level configuration."""

    paths: PathsConfig = field(default_factory=PathsConfig)
    provisioning: ProvisioningConfig = field(default_factory=ProvisioningConfig)
    ssh: SSHConfig = field(default_factory=SSHConfig)
    readiness: ReadinessConfig = field(default_factory=ReadinessConfig)
    configuration: ConfigurationConfig = field(default_factory=ConfigurationConfig)
    summary: SummaryConfig = field(default_factory=SummaryConfig)
    refresh: RefreshConfig = field(default_factory=RefreshConfig)
    environment: EnvironmentConfig = field(default_factory=EnvironmentConfig)

    @property
    def ssh_key_path(self) -> Path:
        if self.ssh.key_path:
            return Path(self.ssh.key_path)
        return self.paths.ansible / SSH_KEY_FILENAME

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "AppConfig":
        def section(name: str) -> Dict[str, Any]:
            # 过滤掉以下划线开头的注释字段
            raw = payload.get(name, {}) or {}
            return {k: v for k, v in raw.items() if not k.startswith("_")}

        configuration_payload = section("configuration")
        if "stages" in configuration_payload:
            configuration_payload["stages"] = parse_stages(configuration_payload["stages"])

        refresh_payload = section("refresh")
        if "stages" in refresh_payload:
            refresh_payload["stages"] = parse_stages(refresh_payload["stages"])

        return cls(
            paths=PathsConfig(**section("paths")),
            provisioning=ProvisioningConfig(**section("provisioning")),
            ssh=SSHConfig(**section("ssh")),
            readiness=ReadinessConfig(**section("readiness")),
            configuration=ConfigurationConfig(**configuration_payload),
            summary=SummaryConfig(**section("summary")),
            refresh=RefreshConfig(**refresh_payload),
            environment=EnvironmentConfig(**section("environment")),
        )


def load_config(path: Optional[str] = None) -> AppConfig:
    """Load configuration from `path`, the default location, or built-in defaults.

    An explicit `path` that does not exist is an error; a missing default file
    is not.

    Environment variables (higher priority than config file):
    - SITE_DEPLOYER_TERRAFORM_DIR: Terraform root module directory
    - SITE_DEPLOYER_ANSIBLE_DIR: Ansible playbook directory
    - SITE_DEPLOYER_SSH_USER: SSH username on the provisioned host
    - SITE_DEPLOYER_SSH_KEY_PATH: Path to the SSH private key
    - SITE_DEPLOYER_AWS_PROFILE: AWS profile passed to terraform/aws
    - SITE_DEPLOYER_AWS_REGION: AWS region passed to terraform/aws
    """

    data: Dict[str, Any] = {}
    if path:
        candidate = Path(path)
        if not candidate.is_file():
            raise FileNotFoundError(f"Could not find configuration file: {candidate}")
        with candidate.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    elif DEFAULT_CONFIG_PATH.is_file():
        with DEFAULT_CONFIG_PATH.open("r", encoding="utf-8") as handle:
            data = json.load(handle)

    config = AppConfig.from_dict(data)

    env_terraform_dir = os.getenv("SITE_DEPLOYER_TERRAFORM_DIR")
    if env_terraform_dir:
        config.paths.terraform_dir = env_terraform_dir

    env_ansible_dir = os.getenv("SITE_DEPLOYER_ANSIBLE_DIR")
    if env_ansible_dir:
        config.paths.ansible_dir = env_ansible_dir

    env_user = os.getenv("SITE_DEPLOYER_SSH_USER")
    if env_user:
        config.ssh.username = env_user

    env_key_path = os.getenv("SITE_DEPLOYER_SSH_KEY_PATH")
    if env_key_path:
        config.ssh.key_path = env_key_path

    env_profile = os.getenv("SITE_DEPLOYER_AWS_PROFILE")
    if env_profile:
        config.environment.aws_profile = env_profile

    env_region = os.getenv("SITE_DEPLOYER_AWS_REGION")
    if env_region:
        config.environment.aws_region = env_region

    # Snapshot the process environment once; commands never read os.environ later
    config.environment.variables = {**os.environ, **config.environment.variables}

    return config
