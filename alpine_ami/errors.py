from __future__ import annotations

from typing import Sequence


class ProvisionError(RuntimeError):
    """Base class for every fatal provisioning failure."""


class ConfigError(ProvisionError):
    pass


class PreconditionError(ProvisionError):
    pass


class FetchError(ProvisionError):
    pass


class IntegrityError(ProvisionError):
    def __init__(self, path: str, expected: str, actual: str) -> None:
        super().__init__(f"Checksum mismatch for {path}: expected {expected}, got {actual}")
        self.path = path
        self.expected = expected
        self.actual = actual


class CommandError(ProvisionError):
    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        msg = f"Command failed ({returncode}): {' '.join(self.argv)}"
        if stderr:
            msg += f"\n{stderr.strip()}"
        super().__init__(msg)
