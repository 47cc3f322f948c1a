"""
Package Resolution
Decides where a generated import comes from and whether it is a dependency.
"""

import re
from dataclasses import dataclass

from ..core.config import DependencyStrategy

DEFAULT_CDN_BASE_URL = "https://esm.sh"

_URL = re.compile(r"^https?://", re.IGNORECASE)


@dataclass(frozen=True)
class ImportResolution:
    """Final import source plus dependency bookkeeping."""

    import_source: str
    package_name: str | None
    version: str | None
    declare_dependency: bool


def is_bare_import(source: str) -> bool:
    """Library-style specifier: not relative, not absolute, not a URL."""
    return not source.startswith((".", "/")) and not _URL.match(source)


def package_name_of(source: str) -> str | None:
    """
    Package part of a bare specifier.

    ``"@scope/name/sub"`` -> ``"@scope/name"``; ``"lodash/fp"`` -> ``"lodash"``.
    """
    if not is_bare_import(source) or not source:
        return None
    segments = source.split("/")
    if source.startswith("@"):
        return "/".join(segments[:2]) if len(segments) >= 2 else source
    return segments[0]


def resolve_import(
    source: str,
    strategy: DependencyStrategy = "workspace",
    version: str | None = None,
    cdn_base_url: str = DEFAULT_CDN_BASE_URL,
) -> ImportResolution:
    """
    Resolve one import specifier.

    Args:
        source: Import specifier as written by the generator
        strategy: ``workspace``, ``package-registry`` or ``cdn-style``
        version: Known package version, if any
        cdn_base_url: Base for ``cdn-style`` URLs

    Returns:
        ImportResolution; non-bare specifiers pass through untouched
    """
    package_name = package_name_of(source)
    if package_name is None:
        return ImportResolution(source, None, None, declare_dependency=False)

    if strategy == "cdn-style":
        base = cdn_base_url.rstrip("/")
        subpath = source[len(package_name):]
        suffix = f"@{version}" if version else ""
        return ImportResolution(
            import_source=f"{base}/{package_name}{suffix}{subpath}",
            package_name=package_name,
            version=version,
            declare_dependency=False,
        )

    # workspace resolves like package-registry: the workspace links packages
    # by name, so the manifest still has to list them
    return ImportResolution(
        import_source=source,
        package_name=package_name,
        version=version,
        declare_dependency=True,
    )
