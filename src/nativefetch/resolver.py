"""Token substitution for URL and artifact name templates."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from nativefetch.domain import RuntimeFacts
from nativefetch.variables import VariableSubstituter


def resolve_path(
    template: str,
    version: str,
    facts: RuntimeFacts,
    substituters: Sequence[VariableSubstituter] = (),
) -> str:
    """
    Substitute the known tokens in *template*.

    Tokens are replaced in a fixed order: ``${version}``, ``${platform}``,
    ``${arch}``, ``${libc}`` and then every resolved variable. Each token is
    replaced once only, so a template repeating a token keeps its later
    occurrences.
    """
    path = template.replace("${version}", version, 1)
    path = path.replace("${platform}", facts.platform, 1)
    path = path.replace("${arch}", facts.arch, 1)
    path = path.replace("${libc}", facts.libc, 1)
    for substituter in substituters:
        path = substituter.apply(path)
    return path


@dataclass(frozen=True)
class PathResolver:
    """:func:`resolve_path` bound to one manifest version and its resolved variables."""

    version: str
    facts: RuntimeFacts
    substituters: tuple[VariableSubstituter, ...] = field(default=())

    def resolve(self, template: str) -> str:
        return resolve_path(template, self.version, self.facts, self.substituters)
