import pytest

from nativefetch.resolver import PathResolver, resolve_path
from nativefetch.variables import VariableSubstituter
from tests.helpers import make_facts

FACTS = make_facts(platform="linux", arch="arm64", libc="musl")


@pytest.mark.parametrize(
    ("template", "expected"),
    [
        ("pkg-${version}.tgz", "pkg-1.2.3.tgz"),
        ("${platform}-${arch}", "linux-arm64"),
        ("native-${version}-${platform}-${arch}-${libc}.tar.gz", "native-1.2.3-linux-arm64-musl.tar.gz"),
        ("${unknown} stays", "${unknown} stays"),
        ("no placeholders", "no placeholders"),
        ("", ""),
    ],
)
def test_resolve_path_builtin_tokens(template, expected):
    assert resolve_path(template, "1.2.3", FACTS) == expected


def test_resolve_path_applies_variables_after_builtins():
    substituters = [VariableSubstituter(name="python", value="3.9"), VariableSubstituter(name="channel", value="beta")]
    result = resolve_path("https://x/${channel}/py${python}/${version}.tgz", "2.0.0", FACTS, substituters)
    assert result == "https://x/beta/py3.9/2.0.0.tgz"


def test_duplicate_tokens_are_only_partially_substituted():
    result = resolve_path("${version}/${version}-${platform}-${platform}", "1.0.0", FACTS)
    assert result == "1.0.0/${version}-linux-${platform}"


def test_variable_value_containing_builtin_token_stays_literal():
    # Builtins are substituted first, so a variable value is never re-scanned for them
    substituters = [VariableSubstituter(name="suffix", value="${version}")]
    assert resolve_path("${suffix}", "1.0.0", FACTS, substituters) == "${version}"


def test_variable_may_fill_token_left_by_previous_variable():
    substituters = [VariableSubstituter(name="a", value="${b}"), VariableSubstituter(name="b", value="B")]
    assert resolve_path("${a}", "1.0.0", FACTS, substituters) == "B"


def test_path_resolver_binds_context():
    resolver = PathResolver(version="0.9.1", facts=FACTS, substituters=(VariableSubstituter(name="python", value="3.10"),))
    assert resolver.resolve("${version}-${platform}-py${python}") == "0.9.1-linux-py3.10"
