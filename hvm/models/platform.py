"""
Host platform description in the vocabulary used by Hugo release assets.
"""

from __future__ import annotations

import platform as _platform
import sys
from dataclasses import dataclass
from typing import Optional


EXEC_BASE_NAME = "hugo"

_ARCH_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "x64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv8l": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "armv6l": "arm",
    "armv7l": "arm",
    "ppc64le": "ppc64le",
    "s390x": "s390x",
}


def normalize_os(name: str) -> str:
    """Map a ``sys.platform`` value to ``linux``, ``darwin`` or ``windows``."""

    name = name.lower()
    if name.startswith("linux"):
        return "linux"
    if name.startswith("win") or name.startswith("cygwin") or name.startswith("msys"):
        return "windows"
    return name


def normalize_arch(machine: str) -> str:
    """Map a ``platform.machine()`` value to a Go-style architecture name."""

    machine = machine.lower()
    return _ARCH_ALIASES.get(machine, machine)


@dataclass(frozen=True)
class Platform:
    """Operating system and architecture of a release asset."""

    os: str
    arch: str

    @classmethod
    def current(cls, system: Optional[str] = None, machine: Optional[str] = None) -> "Platform":
        return cls(
            os=normalize_os(system if system is not None else sys.platform),
            arch=normalize_arch(machine if machine is not None else _platform.machine()),
        )

    @property
    def exec_name(self) -> str:
        if self.os == "windows":
            return f"{EXEC_BASE_NAME}.exe"
        return EXEC_BASE_NAME

    def __str__(self) -> str:
        return f"{self.os}/{self.arch}"


__all__ = [
    "EXEC_BASE_NAME",
    "Platform",
    "normalize_os",
    "normalize_arch",
]
