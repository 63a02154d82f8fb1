"""
JSON persistence for mod data.

The store reads the mod data file, hands the decoded document to the
migration engine and writes current-version documents back atomically.
Backups are plain copies of the serialized document with a timestamp in
the file name.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from ..core.errors import SchemaError
from ..core.migration import MigrationResult, migrate_document
from ..core.models import CURRENT_VERSION, ModData
from ..core.serialization import mod_data_to_document
from .logging_config import get_logger
from .paths import ensure_directory, get_legacy_profiles_file_path, get_mod_data_file_path


logger = get_logger(__name__)


BACKUP_PREFIX = "mod_data_"
BACKUP_TIMESTAMP_FORMAT = "%Y-%m-%d-%H-%M-%S"


class ModDataStore:
    """
    Loads and saves the mod data file.
    """

    def __init__(self, data_file: Optional[Path] = None, legacy_file: Optional[Path] = None):
        """
        Initialize the store.

        Args:
            data_file: Path to the mod data file. If None, uses the default location.
            legacy_file: Path to a pre-versioning profiles file consulted when
                the mod data file does not exist. If None, uses the default
                location next to the default data file.
        """
        if data_file is None:
            data_file = get_mod_data_file_path()
            if legacy_file is None:
                legacy_file = get_legacy_profiles_file_path()

        self.data_file = Path(data_file)
        self.legacy_file = Path(legacy_file) if legacy_file is not None else None

    @staticmethod
    def read_document(path: Path) -> Any:
        """
        Read and decode a JSON document.

        Raises:
            SchemaError: If the file is not valid JSON.
            OSError: If the file cannot be read.
        """
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise SchemaError(f"{path.name} is not valid JSON: {e}") from e

    def load(self) -> MigrationResult:
        """
        Load mod data, migrating it to the current version.

        Falls back to the legacy profiles file when the data file is missing;
        a successfully migrated legacy file is saved to the data file and
        then deleted. When neither exists, a default ModData is returned.

        Returns:
            The MigrationResult, including any migration warnings.

        Raises:
            SchemaError: If the stored data is unreadable or has an unknown version.
        """
        if self.data_file.exists():
            logger.info(f"Loading mod data from {self.data_file}")
            return migrate_document(self.read_document(self.data_file))

        if self.legacy_file is not None and self.legacy_file.exists():
            logger.info(f"Importing legacy profiles from {self.legacy_file}")
            result = migrate_document(self.read_document(self.legacy_file))
            self.save(result.data)
            self.legacy_file.unlink()
            return result

        logger.info(f"Mod data file not found at {self.data_file}, using defaults")
        return MigrationResult(data=ModData(), source_version=CURRENT_VERSION)

    def save(self, data: ModData) -> None:
        """
        Write mod data to the data file.

        Args:
            data: The current-version mod data.
        """
        self.data_file.parent.mkdir(parents=True, exist_ok=True)

        # Atomic write: write to temp file, then rename
        temp_file = self.data_file.with_suffix('.tmp')
        with open(temp_file, 'w', encoding='utf-8') as f:
            json.dump(mod_data_to_document(data), f, indent=2, ensure_ascii=False)
        temp_file.replace(self.data_file)

        logger.debug(f"Mod data saved to {self.data_file}")

    def backup(self, data: ModData, backup_dir: Path, now: Optional[datetime] = None) -> Path:
        """
        Serialize mod data to a new timestamped file.

        Args:
            data: The mod data to back up.
            backup_dir: Directory receiving the backup. Created if missing.
            now: Timestamp to use. Defaults to the current local time.

        Returns:
            Path of the written backup.
        """
        ensure_directory(backup_dir)
        stamp = (now or datetime.now()).strftime(BACKUP_TIMESTAMP_FORMAT)

        backup_file = backup_dir / f"{BACKUP_PREFIX}{stamp}.json"
        counter = 1
        while backup_file.exists():
            backup_file = backup_dir / f"{BACKUP_PREFIX}{stamp}_{counter}.json"
            counter += 1

        with open(backup_file, 'w', encoding='utf-8') as f:
            json.dump(mod_data_to_document(data), f, indent=2, ensure_ascii=False)

        logger.info(f"Backup written to {backup_file}")
        return backup_file

    @staticmethod
    def find_latest_backup(backup_dir: Path) -> Optional[Path]:
        """
        Find the most recent backup in a directory.

        Returns:
            Path of the newest backup, or None if there is none.
        """
        if not backup_dir.is_dir():
            return None
        backups = sorted(backup_dir.glob(f"{BACKUP_PREFIX}*.json"), key=_backup_sort_key)
        return backups[-1] if backups else None

    def load_backup(self, backup_file: Path) -> MigrationResult:
        """
        Load and migrate a backup file.

        The result is not saved; call save() to make it the current data.

        Raises:
            SchemaError: If the backup is unreadable or has an unknown version.
        """
        logger.info(f"Loading backup {backup_file}")
        return migrate_document(self.read_document(backup_file))


def _backup_sort_key(path: Path) -> tuple[str, int]:
    # Names are <prefix><timestamp>.json or <prefix><timestamp>_<counter>.json
    stamp, _, counter = path.stem[len(BACKUP_PREFIX):].partition("_")
    return stamp, int(counter) if counter.isdigit() else 0
