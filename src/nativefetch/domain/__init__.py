from nativefetch.domain.models import (
    Constraints,
    FileSpec,
    LibcProbe,
    LibpythonProbe,
    NativeManifest,
    ResolvedArtifact,
    Resources,
    RuntimeFacts,
    UnknownValue,
    ValueDirective,
    VariableSpec,
    parse_value_directive,
)

__all__ = [
    "Constraints",
    "FileSpec",
    "LibcProbe",
    "LibpythonProbe",
    "NativeManifest",
    "ResolvedArtifact",
    "Resources",
    "RuntimeFacts",
    "UnknownValue",
    "ValueDirective",
    "VariableSpec",
    "parse_value_directive",
]
