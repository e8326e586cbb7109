"""Runtime fact detection for native artifact resolution."""

from __future__ import annotations

import ctypes.util
import functools
import platform
import sys

from nativefetch.domain import RuntimeFacts

# Manifests use Node naming for platforms and architectures
_PLATFORM_MAP: dict[str, str] = {
    "win32": "win32",
    "cygwin": "win32",
    "linux": "linux",
    "darwin": "darwin",
    "aix": "aix",
    "sunos5": "sunos",
}

_ARCH_MAP: dict[str, str] = {
    "x86_64": "x64",
    "amd64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "ia32",
    "i686": "ia32",
    "x86": "ia32",
    "armv7l": "arm",
    "armv6l": "arm",
    "ppc64le": "ppc64",
    "ppc64": "ppc64",
    "s390x": "s390x",
    "riscv64": "riscv64",
}


def get_current_platform() -> tuple[str, str]:
    """
    Return the current ``(platform, arch)`` using Node naming conventions.

    Values without a known mapping are passed through lower-cased, so they
    simply fail any constraint that does not list them.
    """
    raw_platform = sys.platform
    raw_arch = platform.machine().lower()
    if raw_platform.startswith("freebsd"):
        node_platform = "freebsd"
    elif raw_platform.startswith("openbsd"):
        node_platform = "openbsd"
    else:
        node_platform = _PLATFORM_MAP.get(raw_platform, raw_platform)
    return node_platform, _ARCH_MAP.get(raw_arch, raw_arch)


def detect_libc() -> str:
    """Return ``gnu`` when the interpreter is linked against glibc, ``other`` otherwise."""
    lib, _version = platform.libc_ver()
    return "gnu" if lib == "glibc" else "other"


def resolve_libc(current_platform: str) -> str:
    """Map the detected libc onto the family name used in download URLs."""
    if current_platform == "linux":
        return "glibc" if detect_libc() == "gnu" else "musl"
    return "unknown"


def library_exists(name: str) -> bool:
    """
    Check whether a shared library such as ``libpython3.9`` is installed.

    The ``lib`` prefix is optional.
    """
    short_name = name[3:] if name.startswith("lib") else name
    return ctypes.util.find_library(short_name) is not None


@functools.cache
def get_runtime_facts() -> RuntimeFacts:
    """Gather the runtime facts of the current process, once."""
    current_platform, current_arch = get_current_platform()
    return RuntimeFacts(
        platform=current_platform,
        arch=current_arch,
        libc=resolve_libc(current_platform),
        library_exists=library_exists,
    )
