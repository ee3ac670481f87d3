"""Path constants for site-deployer.

Repository layout expected next to the working directory:
- terraform/              # Terraform root module, plan artifact lives here
- ansible/                # Playbooks, generated inventory, SSH key
"""

from pathlib import Path

TERRAFORM_DIR = Path("terraform")
ANSIBLE_DIR = Path("ansible")

PLAN_FILENAME = "tfplan"
INVENTORY_FILENAME = "inventory.ini"
SSH_KEY_FILENAME = "ssh-key.pem"

DEFAULT_CONFIG_PATH = Path("config/default_config.json")


def plan_path(terraform_dir: Path) -> Path:
    """Location of the Deployment Plan artifact for a Terraform directory."""
    return Path(terraform_dir) / PLAN_FILENAME


def inventory_path(ansible_dir: Path) -> Path:
    return Path(ansible_dir) / INVENTORY_FILENAME
