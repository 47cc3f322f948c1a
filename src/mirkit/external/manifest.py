"""Manifest overrides applied to canonical components and palette groups."""

from dataclasses import replace

from .types import CanonicalExternalComponent, CanonicalGroup, LibraryManifest


def apply_manifest_to_components(
    components: list[CanonicalExternalComponent],
    manifest: LibraryManifest | None,
) -> list[CanonicalExternalComponent]:
    """Merge per-path overrides (display name, default props, tags, codegen hints)."""
    if manifest is None:
        return list(components)

    result = []
    for item in components:
        override = manifest.component_overrides.get(item.path)
        if override is None:
            result.append(item)
            continue
        result.append(
            replace(
                item,
                component_name=override.display_name or item.component_name,
                default_props={**item.default_props, **override.default_props},
                behavior_tags=tuple(override.behavior_tags) if override.behavior_tags is not None else item.behavior_tags,
                codegen_hints={**item.codegen_hints, **override.codegen_hints},
            )
        )
    return result


def apply_manifest_to_groups(
    components: list[CanonicalExternalComponent],
    groups: list[CanonicalGroup],
    manifest: LibraryManifest | None,
) -> list[CanonicalGroup]:
    """
    Regroup components using manifest group reassignments and titles.

    Existing group order is kept; groups only introduced by the manifest
    follow in first-seen order. Components in no group land in
    ``<libraryId>-other``.
    """
    if manifest is None:
        return list(groups)

    existing_group_by_path: dict[str, str] = {}
    existing_titles: dict[str, str] = {}
    for group in groups:
        existing_titles[group.id] = group.title
        for item in group.items:
            existing_group_by_path[item.path] = group.id

    overridden_group_by_path: dict[str, str] = {}
    overridden_titles: dict[str, str] = {}
    for path, override in manifest.component_overrides.items():
        if not override.group_id:
            continue
        overridden_group_by_path[path] = override.group_id
        if override.group_title:
            overridden_titles[override.group_id] = override.group_title

    grouped: dict[str, tuple[str, list[CanonicalExternalComponent]]] = {}
    for item in components:
        group_id = (
            overridden_group_by_path.get(item.path)
            or existing_group_by_path.get(item.path)
            or f"{item.library_id}-other"
        )
        group_override = manifest.group_overrides.get(group_id)
        title = (
            (group_override.title if group_override else None)
            or overridden_titles.get(group_id)
            or existing_titles.get(group_id)
            or group_id
        )
        grouped.setdefault(group_id, (title, []))[1].append(item)

    order = [group.id for group in groups] + [gid for gid in grouped if gid not in existing_titles]
    return [
        CanonicalGroup(id=gid, title=grouped[gid][0], items=tuple(grouped[gid][1]))
        for gid in order
        if gid in grouped
    ]
