"""
Extension Scanner Module
Walks a browser's user data directory for extension manifests and resolves
their display names, including __MSG_<key>__ names from the en locale table
"""

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "manifest.json"
LOCALE_MESSAGES = Path("_locales") / "en" / "messages.json"

_MSG_PATTERN = re.compile(r'^__MSG_(.+)__$')


@dataclass(frozen=True)
class ExtensionRecord:
    """One installed extension as reported"""
    extension_id: str
    display_name: str
    browser_name: str

    def to_row(self) -> Dict[str, str]:
        """Convert to a report row"""
        return {
            'ExtensionID': self.extension_id,
            'Name': self.display_name,
            'Browser': self.browser_name,
        }


def _read_json(path: Path) -> dict:
    # utf-8-sig: some extension packers write a BOM
    with open(path, 'r', encoding='utf-8-sig') as f:
        return json.load(f)


def resolve_locale_name(raw_name: str, manifest_dir: Path) -> str:
    """
    Resolve a __MSG_<key>__ name against <manifest_dir>/_locales/en/messages.json

    Args:
        raw_name: Name field from the manifest
        manifest_dir: Directory containing the manifest

    Returns:
        str: The resolved message, or raw_name if it cannot be resolved
    """
    match = _MSG_PATTERN.match(raw_name)
    if not match:
        return raw_name

    messages_path = manifest_dir / LOCALE_MESSAGES
    if not messages_path.is_file():
        return raw_name

    key = match.group(1)
    messages = _read_json(messages_path)
    entry = messages.get(key)
    if entry is None:
        # Chrome matches message keys case-insensitively
        lowered = key.lower()
        entry = next(
            (value for name, value in messages.items() if name.lower() == lowered),
            None
        )

    message = entry.get('message') if isinstance(entry, dict) else None
    if isinstance(message, str) and message:
        return message
    return raw_name


class ExtensionScanner:
    """Finds extensions under one browser root"""

    def __init__(self, ignored_ids: Optional[Iterable[str]] = None):
        """
        Initialize ExtensionScanner

        Args:
            ignored_ids: Extension ids that are never reported
        """
        self.ignored_ids = frozenset(ignored_ids or ())

    def find_manifests(self, root_path: Path) -> List[Path]:
        """Return all manifest.json files under root_path, descending by path"""
        manifests = [p for p in root_path.rglob(MANIFEST_FILENAME) if p.is_file()]
        return sorted(manifests, key=str, reverse=True)

    def scan(self, root_path: Union[str, Path], browser_name: str) -> List[ExtensionRecord]:
        """
        Scan a browser root for installed extensions

        Args:
            root_path: Browser extensions directory (may not exist)
            browser_name: Label stored on each record

        Returns:
            List of ExtensionRecord in descending manifest path order
        """
        root_path = Path(root_path)
        if not root_path.exists():
            logger.debug(f"{browser_name}: {root_path} not found, skipping")
            return []

        manifests = self.find_manifests(root_path)
        if not manifests:
            logger.debug(f"{browser_name}: no manifests under {root_path}")
            return []

        records = []
        for manifest_path in manifests:
            record = self._process_manifest(root_path, manifest_path, browser_name)
            if record is not None:
                records.append(record)

        logger.info(f"{browser_name}: {len(records)} extension manifest(s) read from {root_path}")
        return records

    def _process_manifest(self, root_path: Path, manifest_path: Path,
                          browser_name: str) -> Optional[ExtensionRecord]:
        # <root>/.../<extension id>/<version>/manifest.json, the id never lies above root
        parts = manifest_path.relative_to(root_path).parts
        if len(parts) < 3:
            logger.debug(f"Skipping {manifest_path}: too shallow for an extension id")
            return None
        extension_id = parts[-3]
        if extension_id in self.ignored_ids:
            return None

        try:
            manifest = _read_json(manifest_path)
            raw_name = manifest['name']
            if not isinstance(raw_name, str):
                return None
            name = resolve_locale_name(raw_name, manifest_path.parent)
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.debug(f"Skipping {manifest_path}: {e}")
            return None

        if not name:
            return None
        return ExtensionRecord(extension_id, name, browser_name)


def scan(root_path: Union[str, Path], ignored_ids: Iterable[str], browser_name: str) -> List[ExtensionRecord]:
    """Scan one browser root with a fresh scanner"""
    return ExtensionScanner(ignored_ids).scan(root_path, browser_name)
