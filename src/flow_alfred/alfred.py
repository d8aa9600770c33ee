"""
Alfred Script Filter output model.

Dataclasses mirroring Alfred's Script Filter JSON format, plus the glue that
turns discovered repositories into ranked result items.

Usage:
    from flow_alfred.alfred import Item, Output

    items = [
        Item("Title", subtitle="subtitle", arg="/path/to/file"),
        Item("Another", subtitle="item", valid=False),
    ]
    print(Output(items).to_json())
"""

import json
from collections.abc import Iterable
from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any, Optional

from .discovery import RepositoryEntry
from .matching import filter_and_rank

ALERT_ICON = "/System/Library/CoreServices/CoreTypes.bundle/Contents/Resources/AlertStopIcon.icns"
FOLDER_ICON = "/System/Library/CoreServices/CoreTypes.bundle/Contents/Resources/GenericFolderIcon.icns"


def _to_json_dict(obj: Any) -> dict[str, Any]:
    """Serialize a dataclass, dropping None fields and applying JSON key names."""
    result: dict[str, Any] = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if value is None:
            continue
        if is_dataclass(value):
            value = _to_json_dict(value)
        elif isinstance(value, list):
            value = [_to_json_dict(v) if is_dataclass(v) else v for v in value]
        result[f.metadata.get("json", f.name)] = value
    return result


@dataclass
class Icon:
    """Item icon: an image path, a file whose icon to use, or a UTI."""

    path: str
    icon_type: Optional[str] = field(default=None, metadata={"json": "type"})

    @classmethod
    def fileicon(cls, path: str) -> "Icon":
        return cls(path=path, icon_type="fileicon")

    @classmethod
    def filetype(cls, uti: str) -> "Icon":
        return cls(path=uti, icon_type="filetype")


@dataclass
class ModItem:
    """Modifier key override for an item."""

    valid: Optional[bool] = None
    arg: Optional[str] = None
    subtitle: Optional[str] = None


@dataclass
class Mods:
    cmd: Optional[ModItem] = None
    alt: Optional[ModItem] = None
    ctrl: Optional[ModItem] = None
    shift: Optional[ModItem] = None


@dataclass
class Text:
    """Text for copy (Cmd+C) and large type (Cmd+L)."""

    copy: Optional[str] = None
    largetype: Optional[str] = None


@dataclass
class Item:
    """A single Script Filter result."""

    title: str
    subtitle: Optional[str] = None
    uid: Optional[str] = None
    arg: Optional[str] = None
    icon: Optional[Icon] = None
    valid: Optional[bool] = None
    autocomplete: Optional[str] = None
    match: Optional[str] = None
    item_type: Optional[str] = field(default=None, metadata={"json": "type"})
    mods: Optional[Mods] = None
    text: Optional[Text] = None
    quicklookurl: Optional[str] = None

    def set_mod(self, key: str, arg: str, subtitle: str) -> None:
        """Set a modifier action, e.g. key="cmd" for Cmd+Return."""
        if key not in ("cmd", "alt", "ctrl", "shift"):
            raise ValueError(f"Unknown modifier: {key}")
        if self.mods is None:
            self.mods = Mods()
        setattr(self.mods, key, ModItem(valid=True, arg=arg, subtitle=subtitle))

    def to_dict(self) -> dict[str, Any]:
        return _to_json_dict(self)


@dataclass
class Output:
    """Top-level Script Filter response.

    rerun asks Alfred to re-run the script filter after that many seconds.
    """

    items: list[Item] = field(default_factory=list)
    rerun: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        return _to_json_dict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)


# =============================================================================
# Repository search results
# =============================================================================


def missing_root_item(root_label: str, setting: str) -> Item:
    """Message item shown when the configured root does not exist."""
    return Item(
        f"No directory found at {root_label}",
        subtitle=f"Check your {setting} setting",
        valid=False,
        icon=Icon(ALERT_ICON),
    )


def no_repositories_item(root_label: str) -> Item:
    """Message item shown when discovery found nothing."""
    return Item(
        "No git repositories found",
        subtitle=f"in {root_label}",
        valid=False,
        icon=Icon(FOLDER_ICON),
    )


def repository_item(entry: RepositoryEntry, root_label: str, as_file: bool = True) -> Item:
    """Build the result item for one repository.

    Args:
        entry: Discovered repository
        root_label: Root as the user wrote it (e.g. "~/code"), used for copy text
        as_file: Mark the item as a file so Alfred's file actions apply
    """
    path = str(entry.path)
    return Item(
        entry.display,
        uid=path,
        arg=path,
        match=entry.display,
        autocomplete=entry.display,
        item_type="file" if as_file else None,
        icon=Icon.fileicon(path),
        quicklookurl=path,
        text=Text(copy=f"{root_label}/{entry.display}"),
    )


def repository_items(
    entries: Iterable[RepositoryEntry],
    query: str,
    root_label: str,
    as_file: bool = True,
) -> list[Item]:
    """Filter entries by query, build items, and rank them by title."""
    items = [repository_item(entry, root_label, as_file) for entry in entries]
    return filter_and_rank(items, query, key=lambda item: item.title)
