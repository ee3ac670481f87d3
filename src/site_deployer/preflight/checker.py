"""Prerequisite checks run before anything mutates infrastructure."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import List, Sequence

from ..errors import InvalidCredentials, MissingTool
from ..execution import CommandRunner
from ..utils.logging import get_logger

logger = get_logger(__name__)

CREDENTIAL_HINTS = [
    "aws configure",
    "export AWS_ACCESS_KEY_ID=... && export AWS_SECRET_ACCESS_KEY=...",
    "export AWS_PROFILE=<profile-name>",
]


@dataclass(frozen=True)
class CallerIdentity:
    arn: str
    account: str = ""
    user_id: str = ""


class PreflightChecker:
    """Verifies tools and cloud credentials. Read-only and safe to repeat."""

    def __init__(
        self,
        runner: CommandRunner,
        required_tools: Sequence[str],
        identity_command: Sequence[str],
    ) -> None:
        self.runner = runner
        self.required_tools = list(required_tools)
        self.identity_command = list(identity_command)

    def check_prerequisites(self) -> CallerIdentity:
        logger.info("🔍 Checking prerequisites...")
        self.check_tools()
        identity = self.check_credentials()
        logger.info("   AWS identity: %s", identity.arn)
        logger.info("✅ All prerequisites satisfied.")
        return identity

    def check_tools(self) -> List[str]:
        found = []
        for name in self.required_tools:
            location = self.runner.which(name)
            if not location:
                raise MissingTool(name)
            logger.debug("   %s -> %s", name, location)
            found.append(location)
        return found

    def check_credentials(self) -> CallerIdentity:
        result = self.runner.run(self.identity_command, stream_output=False)
        if not result.ok:
            raise InvalidCredentials(result.diagnostic, hints=CREDENTIAL_HINTS)
        return parse_identity(result.stdout)


def parse_identity(payload: str) -> CallerIdentity:
    """Parse `aws sts get-caller-identity` JSON output."""
    try:
        data = json.loads(payload)
    except json.JSONDecodeError:
        raise InvalidCredentials(
            f"Unparsable identity response:\n{payload}", hints=CREDENTIAL_HINTS
        ) from None
    if not isinstance(data, dict) or not data.get("Arn"):
        raise InvalidCredentials(
            f"Identity response has no Arn:\n{payload}", hints=CREDENTIAL_HINTS
        )
    return CallerIdentity(
        arn=data["Arn"],
        account=str(data.get("Account", "")),
        user_id=str(data.get("UserId", "")),
    )
