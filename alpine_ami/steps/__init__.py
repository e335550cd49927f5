from .step_10_validate_device import ValidateDeviceStep
from .step_15_fetch_apk_tools import FetchApkToolsStep
from .step_20_make_filesystem import MakeFilesystemStep
from .step_25_setup_repositories import SetupRepositoriesStep
from .step_30_install_base import InstallBaseStep
from .step_35_setup_chroot import SetupChrootStep
from .step_40_install_packages import InstallPackagesStep
from .step_50_install_bootloader import InstallBootloaderStep
from .step_60_configure_system import ConfigureSystemStep
from .step_70_create_user import CreateUserStep
from .step_75_configure_ntp import ConfigureNtpStep
from .step_90_cleanup import CleanupStep

__all__ = [
    "ValidateDeviceStep",
    "FetchApkToolsStep",
    "MakeFilesystemStep",
    "SetupRepositoriesStep",
    "InstallBaseStep",
    "SetupChrootStep",
    "InstallPackagesStep",
    "InstallBootloaderStep",
    "ConfigureSystemStep",
    "CreateUserStep",
    "ConfigureNtpStep",
    "CleanupStep",
]
