"""Refresh the site content on an already-provisioned host."""

from __future__ import annotations

import shlex
from typing import List, Optional

from .config import AppConfig
from .configure import ConfigurationRunner
from .errors import ConfigError
from .execution import CommandRunner
from .preflight import PreflightChecker
from .utils.logging import get_logger

logger = get_logger(__name__)

REFRESH_TOOLS = ["ansible", "ansible-playbook"]


class ContentRefresh:
    """Pulls the content repo onto the host, copies it to the web root, rebuilds."""

    def __init__(self, config: AppConfig, *, runner: Optional[CommandRunner] = None) -> None:
        self.config = config
        self.runner = runner or CommandRunner(env=config.environment.process_env())

    def refresh(self) -> List[str]:
        settings = self.config.refresh
        if not settings.repo_url:
            raise ConfigError("refresh.repo_url is not configured")

        inventory = self.config.paths.inventory
        PreflightChecker(self.runner, REFRESH_TOOLS, identity_command=[]).check_tools()
        if not inventory.is_file():
            raise ConfigError(
                f"Inventory not found at {inventory}; run a deployment first"
            )

        logger.info("🔄 Refreshing website content from %s", settings.repo_url)
        configuration = ConfigurationRunner(self.runner, self.config.paths.ansible, inventory)
        checkout = shlex.quote(settings.checkout_dir)
        web_root = shlex.quote(settings.web_root)

        configuration.run_module(
            settings.host_pattern,
            "git",
            f"repo={settings.repo_url} dest={settings.checkout_dir} "
            "clone=yes update=yes force=yes",
            become=True,
            name="fetch-content",
        )
        configuration.run_module(
            settings.host_pattern,
            "shell",
            f"cp -r {checkout}/* {web_root}/ && rm -rf {checkout}",
            become=True,
            name="publish-content",
        )
        completed = configuration.run_stages(settings.stages)
        logger.info("✅ Website content refreshed.")
        return completed
