from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Dict, NoReturn, Optional

from .config import load_config
from .context import ProvisionCtx
from .errors import ProvisionError
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import run_pipeline
from .state_store import new_run_record, save_state
from .steps import (
    CleanupStep,
    ConfigureNtpStep,
    ConfigureSystemStep,
    CreateUserStep,
    FetchApkToolsStep,
    InstallBaseStep,
    InstallBootloaderStep,
    InstallPackagesStep,
    MakeFilesystemStep,
    SetupChrootStep,
    SetupRepositoriesStep,
    ValidateDeviceStep,
)

logger = logging.getLogger(__name__)


def build_steps():
    return [
        ValidateDeviceStep(),
        FetchApkToolsStep(),
        MakeFilesystemStep(),
        SetupRepositoriesStep(),
        InstallBaseStep(),
        SetupChrootStep(),
        InstallPackagesStep(),
        InstallBootloaderStep(),
        ConfigureSystemStep(),
        CreateUserStep(),
        ConfigureNtpStep(),
        CleanupStep(),
    ]


def run(
    device: str,
    *,
    config_path: Optional[str] = None,
    state_path: Optional[str] = None,
    dry_run: bool = False,
    **overrides: Any,
) -> Dict[str, Any]:
    """Provision device into a bootable Alpine image. Returns the run record."""

    state = new_run_record(device=device, config={}, dry_run=dry_run)

    try:
        cfg = load_config(config_path, **overrides)
        state["config"] = cfg.as_dict()
        ctx = ProvisionCtx(cfg=cfg, device=device, dry_run=dry_run)
        result = run_pipeline(ctx=ctx, steps=build_steps(), state=state)
        state["execution"]["summary"] = {"ran_steps": result.ran_steps}
        return state
    except Exception as e:
        state["execution"]["errors"].append(
            {
                "step": state["execution"].get("current_step"),
                "error": str(e),
            }
        )
        raise
    finally:
        if state_path:
            save_state(state_path, state)


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def main(argv: Optional[list[str]] = None) -> int:
    p = _ArgumentParser(prog="alpine-ami", description="Provision a blank block device as an Alpine Linux AMI root.")
    p.add_argument("device", help="Target block device (must have no filesystem)")
    p.add_argument("--config", default=None, help="YAML file overriding built-in defaults")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to build log")
    p.add_argument("--state", default=None, help="Write a run record (json|yaml) here")
    p.add_argument("--dry-run", action="store_true", help="Log commands and writes without performing them")
    p.add_argument("-v", "--verbose", action="store_true")

    args = p.parse_args(argv)

    configure_logging(log_path=args.log, level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        run(
            args.device,
            config_path=args.config,
            state_path=args.state,
            dry_run=bool(args.dry_run),
        )
    except ProvisionError as e:
        logger.error("%s", e)
        return 1
    except OSError as e:
        logger.exception("Provisioning failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
