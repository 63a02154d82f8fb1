"""
Schema migration for persisted mod data.

Every historical layout of the mod data file has its own record type. A
parsed record is upgraded one version at a time by an ordered list of pure
upgrade functions until it becomes the current ModData.

Version history:
    0.0.0  Profiles hold a flat list of mod configs. Documents written before
           versioning existed have no ``version`` key and are treated as 0.0.0.
    0.1.0  Profiles hold mods mixed with folder references; folders live in a
           single mapping shared by every profile.
    0.2.0  Every profile owns its folders.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Union

from .errors import SchemaError
from .models import (
    CURRENT_VERSION,
    DEFAULT_PROFILE,
    GroupEntry,
    IndividualEntry,
    ModConfig,
    ModData,
    ModGroup,
    ModOrGroup,
    ModProfile,
)
from .serialization import (
    expect_type,
    expect_object,
    entry_from_dict,
    groups_from_dict,
    mod_config_from_dict,
    profile_from_dict,
)
from ..infrastructure.logging_config import get_logger


logger = get_logger(__name__)


KNOWN_VERSIONS = ("0.0.0", "0.1.0", "0.2.0")


@dataclass
class ModDataV0_0_0:
    """Mod data as written before folders existed."""

    active_profile: str = DEFAULT_PROFILE
    profiles: dict[str, list[ModConfig]] = field(default_factory=lambda: {DEFAULT_PROFILE: []})
    version: str = "0.0.0"


@dataclass
class ModDataV0_1_0:
    """Mod data with a single folder mapping shared across profiles."""

    active_profile: str = DEFAULT_PROFILE
    profiles: dict[str, list[ModOrGroup]] = field(default_factory=lambda: {DEFAULT_PROFILE: []})
    groups: dict[str, ModGroup] = field(default_factory=dict)
    version: str = "0.1.0"


VersionedModData = Union[ModDataV0_0_0, ModDataV0_1_0, ModData]


@dataclass
class MigrationWarning:
    """A recoverable problem found while upgrading a record."""

    profile: str
    """Profile in which the problem was found."""

    group_name: str
    """Folder reference that was dropped."""

    reason: str
    """Either 'dangling' (no such folder) or 'duplicate' (already referenced)."""

    def __str__(self) -> str:
        if self.reason == "duplicate":
            return f"Profile '{self.profile}': dropped repeated reference to folder '{self.group_name}'"
        return f"Profile '{self.profile}': dropped reference to missing folder '{self.group_name}'"


@dataclass
class MigrationResult:
    """Outcome of migrating a record to the current version."""

    data: ModData
    """The current-version record."""

    source_version: str
    """Version tag of the record before migration."""

    warnings: list[MigrationWarning] = field(default_factory=list)
    """Recoverable problems, in the order they were found."""

    @property
    def dropped_references(self) -> int:
        """Number of folder references removed during migration."""
        return len(self.warnings)

    @property
    def was_upgraded(self) -> bool:
        """Whether any upgrade step ran."""
        return self.source_version != CURRENT_VERSION


def upgrade_v0_0_0(record: ModDataV0_0_0, warnings: list[MigrationWarning]) -> ModDataV0_1_0:
    """
    Upgrade a 0.0.0 record to 0.1.0.

    Every mod becomes an individual root entry and an empty shared folder
    mapping is introduced.
    """
    profiles = {
        name: [IndividualEntry(mod=copy.deepcopy(mod)) for mod in mods]
        for name, mods in record.profiles.items()
    }
    return ModDataV0_1_0(active_profile=record.active_profile, profiles=profiles, groups={})


def _filter_references(
    profile_name: str,
    entries: list[ModOrGroup],
    available: dict[str, ModGroup],
    warnings: list[MigrationWarning],
) -> list[ModOrGroup]:
    """
    Copy a root list, dropping folder references that cannot be kept.

    A reference is dropped when ``available`` has no folder of that name or
    when an earlier entry already references it. Every drop is logged and
    appended to ``warnings``.
    """
    kept: list[ModOrGroup] = []
    referenced = set()
    for entry in entries:
        if isinstance(entry, IndividualEntry):
            kept.append(copy.deepcopy(entry))
            continue

        if entry.group_name not in available:
            warning = MigrationWarning(profile=profile_name, group_name=entry.group_name, reason="dangling")
        elif entry.group_name in referenced:
            warning = MigrationWarning(profile=profile_name, group_name=entry.group_name, reason="duplicate")
        else:
            referenced.add(entry.group_name)
            kept.append(GroupEntry(group_name=entry.group_name, enabled=entry.enabled))
            continue

        logger.warning(str(warning))
        warnings.append(warning)

    return kept


def upgrade_v0_1_0(record: ModDataV0_1_0, warnings: list[MigrationWarning]) -> ModData:
    """
    Upgrade a 0.1.0 record to 0.2.0.

    Each profile receives its own copy of every shared folder it references.
    References to folders missing from the shared mapping, and repeated
    references to the same folder, are dropped and reported in ``warnings``.
    The shared mapping is discarded.
    """
    profiles = {}
    for name, entries in record.profiles.items():
        mods = _filter_references(name, entries, record.groups, warnings)
        groups = {
            entry.group_name: copy.deepcopy(record.groups[entry.group_name])
            for entry in mods if isinstance(entry, GroupEntry)
        }
        profiles[name] = ModProfile(mods=mods, groups=groups)

    return ModData(active_profile=record.active_profile, profiles=profiles, version=CURRENT_VERSION)


def repair_references(record: ModData, warnings: list[MigrationWarning]) -> ModData:
    """
    Drop dangling and repeated folder references from a current record.

    Folders themselves are kept, including folders no entry references.

    Returns:
        ``record`` itself if every reference is valid, otherwise a repaired
        copy. Dropped references are reported in ``warnings``.
    """
    found: list[MigrationWarning] = []
    profiles = {
        name: ModProfile(
            mods=_filter_references(name, profile.mods, profile.groups, found),
            groups=profile.groups,
        )
        for name, profile in record.profiles.items()
    }
    if not found:
        return record

    warnings.extend(found)
    repaired = ModData(active_profile=record.active_profile, profiles=profiles, version=record.version)
    return copy.deepcopy(repaired)


UPGRADE_STEPS: list[tuple[type, Callable[[Any, list[MigrationWarning]], Any]]] = [
    (ModDataV0_0_0, upgrade_v0_0_0),
    (ModDataV0_1_0, upgrade_v0_1_0),
]
"""Upgrade functions in strictly increasing version order."""


def migrate(record: VersionedModData) -> MigrationResult:
    """
    Upgrade a record of any known version to the current version.

    Steps already satisfied by the record's version are skipped. A record
    that is already current is returned unchanged unless it holds dangling
    or repeated folder references, which are dropped as in the 0.1.0 upgrade.

    Args:
        record: A parsed record of any known version.

    Returns:
        MigrationResult holding the current-version ModData.

    Raises:
        SchemaError: If the record carries an unknown version tag.
    """
    source_version = record.version
    if source_version not in KNOWN_VERSIONS:
        raise SchemaError(f"Unsupported mod data version: {source_version!r}", source_version)

    warnings: list[MigrationWarning] = []
    for record_type, upgrade in UPGRADE_STEPS:
        if isinstance(record, record_type):
            logger.info(f"Upgrading mod data from version {record.version}")
            record = upgrade(record, warnings)

    if not isinstance(record, ModData) or record.version != CURRENT_VERSION:
        raise SchemaError(f"Record did not reach version {CURRENT_VERSION}", record.version)

    if source_version == CURRENT_VERSION:
        record = repair_references(record, warnings)

    if warnings:
        logger.warning(f"Migration dropped {len(warnings)} folder reference(s)")

    return MigrationResult(data=record, source_version=source_version, warnings=warnings)


def _version_tuple(version: str) -> tuple[int, ...]:
    return tuple(int(part) for part in version.split("."))


def _check_version(version: Any) -> str:
    if not isinstance(version, str):
        raise SchemaError(f"Malformed mod data version: {version!r}", version)
    if version in KNOWN_VERSIONS:
        return version

    try:
        newer = _version_tuple(version) > _version_tuple(CURRENT_VERSION)
    except ValueError:
        raise SchemaError(f"Malformed mod data version: {version!r}", version)

    if newer:
        raise SchemaError(f"Mod data version {version} was written by a newer release", version)
    raise SchemaError(f"Unsupported mod data version: {version}", version)


def _profiles_of(document: dict) -> dict:
    profiles = expect_object(document.get("profiles", {}), "profiles")
    if not profiles:
        raise SchemaError("Mod data contains no profiles")
    return profiles


def _raw_mods(profile: Any) -> list:
    return expect_type(expect_object(profile, "profile").get("mods", []), list, "profile mods")


def parse_document(document: Any) -> VersionedModData:
    """
    Parse a decoded JSON document into the record type of its version.

    Args:
        document: The decoded document.

    Returns:
        A ModDataV0_0_0, ModDataV0_1_0 or ModData record.

    Raises:
        SchemaError: If the version tag is unknown or malformed, or if the
            document does not match the layout of its version.
    """
    document = expect_object(document, "mod data document")
    version = _check_version(document.get("version", "0.0.0"))
    active_profile = expect_type(document.get("active_profile"), str, "active_profile")
    profiles = _profiles_of(document)

    if active_profile not in profiles:
        raise SchemaError(f"Active profile '{active_profile}' does not exist", version)

    if version == "0.0.0":
        return ModDataV0_0_0(
            active_profile=active_profile,
            profiles={
                name: [mod_config_from_dict(item) for item in _raw_mods(profile)]
                for name, profile in profiles.items()
            },
        )

    if version == "0.1.0":
        return ModDataV0_1_0(
            active_profile=active_profile,
            profiles={
                name: [entry_from_dict(item) for item in _raw_mods(profile)]
                for name, profile in profiles.items()
            },
            groups=groups_from_dict(document.get("groups", {})),
        )

    return ModData(
        active_profile=active_profile,
        profiles={name: profile_from_dict(profile) for name, profile in profiles.items()},
        version=CURRENT_VERSION,
    )


def migrate_document(document: Any) -> MigrationResult:
    """Parse a decoded document and migrate it to the current version."""
    return migrate(parse_document(document))
