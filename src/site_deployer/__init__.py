"""site-deployer: provision a single web server with Terraform and configure it with Ansible."""

__version__ = "0.1.0"
