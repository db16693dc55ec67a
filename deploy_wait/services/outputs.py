"""Step outputs and failure annotations in the GitHub Actions format."""

import sys
import uuid
from pathlib import Path
from typing import TextIO

import structlog

from deploy_wait.core.logging import get_logger


def escape_command_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class ActionOutputs:
    def __init__(
        self,
        output_path: str | None = None,
        stream: TextIO | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        self.output_path = Path(output_path) if output_path else None
        self.stream = stream or sys.stdout
        self.logger = logger or get_logger(__name__)
        self.values: dict[str, str] = {}
        self.failures: list[str] = []

    @property
    def failed(self) -> bool:
        return bool(self.failures)

    def set_output(self, name: str, value: str) -> None:
        self.values[name] = value
        if self.output_path is None:
            self.logger.info("outputs.set", name=name, value=value)
            return
        if "\n" in value or "\r" in value:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            line = f"{name}<<{delimiter}\n{value}\n{delimiter}\n"
        else:
            line = f"{name}={value}\n"
        with self.output_path.open("a", encoding="utf-8") as handle:
            handle.write(line)

    def set_failed(self, message: str) -> None:
        self.failures.append(message)
        self.stream.write(f"::error::{escape_command_data(message)}\n")
        self.stream.flush()
