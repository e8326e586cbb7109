"""Domain models for native artifact manifests and resolution results."""

from __future__ import annotations

import json
import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from mashumaro.config import BaseConfig
from mashumaro.mixins.json import DataClassJSONMixin

#: Constraint name -> accepted values, e.g. ``{"platform": ["linux", "darwin"]}``
Constraints = dict[str, list[str]]


@dataclass
class NativeJsonMixin(DataClassJSONMixin):
    """Shared mixin providing mashumaro config and JSON file I/O."""

    class Config(BaseConfig):
        omit_none = True

    @classmethod
    def from_json_file(cls, file_path: Path) -> Self:
        return cls.from_dict(json.loads(file_path.read_text()))

    def to_json_string(self) -> str:
        return json.dumps(self.to_dict(), indent=2)


@dataclass(frozen=True)
class LibpythonProbe:
    """Pick the first ``libpython<version>`` installed on the host."""

    versions: tuple[str, ...]


@dataclass(frozen=True)
class LibcProbe:
    """Use the detected libc family."""


@dataclass(frozen=True)
class UnknownValue:
    """A value directive nobody knows how to resolve."""

    raw: Any


ValueDirective = LibpythonProbe | LibcProbe | UnknownValue


def parse_value_directive(raw: Any) -> ValueDirective:
    """
    Turn the raw ``value`` of a variable into a tagged directive.

    ``["libpython", ["3.9", "3.8"]]`` becomes :class:`LibpythonProbe`, the
    literal ``"libc"`` becomes :class:`LibcProbe`. Everything else is kept as
    :class:`UnknownValue` so the caller can warn about it.
    """
    if isinstance(raw, list) and len(raw) == 2:
        kind, versions = raw
        if kind == "libpython" and isinstance(versions, list):
            return LibpythonProbe(versions=tuple(str(v) for v in versions))
    if raw == "libc":
        return LibcProbe()
    return UnknownValue(raw=raw)


@dataclass
class VariableSpec(NativeJsonMixin):
    """A named substitution variable declared in ``resources.vars``."""

    constraints: Constraints | None = None
    value: Any = None
    default: str | None = None

    @property
    def directive(self) -> ValueDirective | None:
        # An empty string or empty list means "no value", same as absent
        if not self.value:
            return None
        return parse_value_directive(self.value)


@dataclass
class FileSpec(NativeJsonMixin):
    """A candidate download location declared in ``resources.files``."""

    host: str
    path: str = ""
    name: str | None = None
    constraints: Constraints | None = None


@dataclass
class Resources(NativeJsonMixin):
    """The ``resources`` section of a manifest."""

    vars: dict[str, VariableSpec] = field(default_factory=dict)
    files: list[FileSpec] = field(default_factory=list)


@dataclass
class NativeManifest(NativeJsonMixin):
    """
    Manifest describing the native artifacts of one package.

    Usually this is the package's own ``package.json``; keys other than
    ``version`` and ``resources`` are ignored.
    """

    version: str
    resources: Resources | None = None


@dataclass(frozen=True)
class ResolvedArtifact:
    """A concrete download location for a single file entry."""

    #: Fully substituted download URL
    url: str
    #: Identifier used for logging and for matching CI artifacts
    name: str
    #: Archive format hint for URLs that carry no file suffix
    archive_format: str | None = None


@dataclass(frozen=True)
class RuntimeFacts:
    """Read-only facts about the host the artifacts are resolved for."""

    #: Platform in Node naming, e.g. ``linux``, ``darwin``, ``win32``
    platform: str
    #: Architecture in Node naming, e.g. ``x64``, ``arm64``
    arch: str
    #: ``glibc`` or ``musl`` on Linux, ``unknown`` elsewhere
    libc: str
    #: Probe for an installed shared library, e.g. ``libpython3.9``
    library_exists: Callable[[str], bool] = field(default=lambda name: False, compare=False, repr=False)
