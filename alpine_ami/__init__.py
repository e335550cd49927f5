"""Alpine Linux AMI builder.

Provisions a bootable Alpine root filesystem onto a blank block device:
- Verified downloads of the static apk tools and signing keys
- Ordered, fail-fast provisioning steps
- Mounts torn down on every exit path
- Centralized logging
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
