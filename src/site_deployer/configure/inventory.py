"""Generated Ansible inventory for the provisioned host."""

from __future__ import annotations

from pathlib import Path

from ..utils.logging import get_logger

logger = get_logger(__name__)

SSH_COMMON_ARGS = "-o StrictHostKeyChecking=no"


class InventoryWriter:
    """Writes the INI inventory consumed by every configuration stage."""

    def __init__(
        self,
        path: Path,
        *,
        group: str = "webservers",
        username: str = "ubuntu",
        key_path: Path,
    ) -> None:
        self.path = Path(path)
        self.group = group
        self.username = username
        self.key_path = Path(key_path)

    def render(self, address: str) -> str:
        if not address:
            raise ValueError("Cannot write an inventory without a host address")
        host_line = (
            f"{address} ansible_user={self.username} "
            f"ansible_ssh_private_key_file={self.key_path.resolve()} "
            f"ansible_ssh_common_args='{SSH_COMMON_ARGS}'"
        )
        return f"[{self.group}]\n{host_line}\n"

    def write(self, address: str) -> Path:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(self.render(address), encoding="utf-8")
        logger.info("📄 Inventory written to: %s", self.path)
        return self.path
