"""Tests for package initialization and basic imports."""


def test_package_imports():
    """Verify the main package can be imported."""
    import scope_sentinel

    assert scope_sentinel is not None


def test_version_defined():
    """Verify __version__ is set and follows semver format."""
    from scope_sentinel import __version__

    assert isinstance(__version__, str)
    parts = __version__.split(".")
    assert len(parts) == 3, f"Expected semver (X.Y.Z), got {__version__}"
    for part in parts:
        assert part.isdigit(), f"Version part '{part}' is not a digit in {__version__}"


def test_version_value():
    from scope_sentinel import __version__

    assert __version__ == "0.1.0"


def test_subpackages_importable():
    """Verify all subpackages can be imported."""
    import scope_sentinel.cli
    import scope_sentinel.engine
    import scope_sentinel.mcp
    import scope_sentinel.models

    assert scope_sentinel.models is not None
    assert scope_sentinel.engine is not None
    assert scope_sentinel.mcp is not None
    assert scope_sentinel.cli is not None


def test_public_api_exports():
    from scope_sentinel import (
        AnalysisResult,
        ProjectContext,
        RiskLevel,
        ScopeAnalyzer,
        SentinelConfig,
        analyze,
    )

    assert callable(analyze)
    assert ScopeAnalyzer is not None
    assert SentinelConfig is not None
    assert {level.value for level in RiskLevel} == {
        "LIKELY_IN_SCOPE",
        "POSSIBLY_SCOPE_CREEP",
        "HIGH_RISK_SCOPE_CREEP",
    }
    assert AnalysisResult is not None
    assert ProjectContext is not None


def test_cli_group_exists():
    from scope_sentinel.cli.main import cli

    assert callable(cli)
