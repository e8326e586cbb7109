"""Resolution of manifest variables into template substituters."""

from __future__ import annotations

from dataclasses import dataclass

from py_app_dev.core.logging import logger

from nativefetch.constraints import check_constraints
from nativefetch.domain import LibcProbe, LibpythonProbe, RuntimeFacts, ValueDirective, VariableSpec
from nativefetch.exceptions import UnresolvableVariableError


@dataclass(frozen=True)
class VariableSubstituter:
    """A resolved variable bound to its ``${name}`` token."""

    name: str
    value: str

    @property
    def token(self) -> str:
        return "${" + self.name + "}"

    def apply(self, template: str) -> str:
        """Replace the first occurrence of the token in *template*."""
        return template.replace(self.token, self.value, 1)


def resolve_variable_value(directive: ValueDirective, facts: RuntimeFacts) -> str | None:
    """Resolve a value directive, returning None when it yields nothing."""
    if isinstance(directive, LibpythonProbe):
        for version in directive.versions:
            if facts.library_exists(f"libpython{version}"):
                return version
        return None
    if isinstance(directive, LibcProbe):
        return facts.libc
    logger.warning(f"Unable to resolve value, unknown value {directive.raw!r}")
    return None


def resolve_variable(name: str, spec: VariableSpec, facts: RuntimeFacts) -> VariableSubstituter:
    """
    Resolve one variable.

    The value directive is only consulted when the variable's constraints
    pass. Otherwise, or when the directive yields nothing, the default is used.

    Raises:
        UnresolvableVariableError: If there is no value and no default.

    """
    value: str | None = None
    if check_constraints(spec.constraints, facts):
        directive = spec.directive
        if directive is not None:
            value = resolve_variable_value(directive, facts)

    if not value:
        if spec.default is None:
            raise UnresolvableVariableError(f"Unable to resolve variable {name}")
        value = spec.default

    logger.debug(f"Resolved variable {name!r} to {value!r}")
    return VariableSubstituter(name=name, value=value)


def resolve_variables(vars_spec: dict[str, VariableSpec], facts: RuntimeFacts) -> list[VariableSubstituter]:
    """Resolve all variables in declaration order."""
    return [resolve_variable(name, spec, facts) for name, spec in vars_spec.items()]
