"""
Alfred workflow management.

Linking a workflow directory into Alfred's preferences for development,
reloading it, and packing it into an installable .alfredworkflow archive.
"""

import logging
import os
import subprocess
import zipfile
from pathlib import Path
from typing import Optional

from .config import expand_path

logger = logging.getLogger(__name__)

ALFRED_PREFS_DOMAIN = "com.runningwithcrayons.Alfred-Preferences"


class WorkflowError(Exception):
    """Raised when a workflow operation cannot be completed."""
    pass


def get_sync_folder() -> Optional[Path]:
    """Read Alfred's preferences sync folder, if one is configured."""
    try:
        result = subprocess.run(
            ["defaults", "read", ALFRED_PREFS_DOMAIN, "syncfolder"],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (subprocess.TimeoutExpired, FileNotFoundError):
        return None

    if result.returncode != 0:
        return None
    folder = result.stdout.strip()
    return expand_path(folder) if folder else None


def workflows_dir() -> Optional[Path]:
    """
    Locate Alfred's workflows directory.

    Prefers the sync folder when set; otherwise the default location under
    ~/Library/Application Support/Alfred, created when its parent exists.

    Returns:
        Path to the workflows directory, or None if Alfred is not set up
    """
    sync_folder = get_sync_folder()
    if sync_folder:
        path = sync_folder / "Alfred.alfredpreferences" / "workflows"
        if path.exists():
            return path

    path = (
        Path.home()
        / "Library"
        / "Application Support"
        / "Alfred"
        / "Alfred.alfredpreferences"
        / "workflows"
    )
    if path.exists():
        return path

    if path.parent.exists():
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Cannot create workflows directory {path}: {e}")
            return None
        return path
    return None


def _require_workflows_dir() -> Path:
    workflows = workflows_dir()
    if workflows is None:
        raise WorkflowError("Alfred workflows directory not found")
    return workflows


def link_workflow(workflow_dir: Path, bundle_id: str) -> Path:
    """
    Symlink a workflow directory into Alfred.

    An existing symlink for the bundle is replaced; a real directory is not.

    Args:
        workflow_dir: Workflow source directory
        bundle_id: Bundle ID used as the link name

    Returns:
        Path of the created symlink

    Raises:
        WorkflowError: If the link cannot be created
    """
    dest = _require_workflows_dir() / bundle_id

    if dest.is_symlink():
        try:
            dest.unlink()
        except OSError as e:
            raise WorkflowError(f"Failed to remove symlink: {e}")
    elif dest.exists():
        raise WorkflowError(f"Destination exists and is not a symlink: {dest}")

    try:
        os.symlink(workflow_dir, dest)
    except OSError as e:
        raise WorkflowError(f"Failed to create symlink: {e}")

    logger.info(f"Linked {workflow_dir} -> {dest}")
    return dest


def unlink_workflow(bundle_id: str) -> None:
    """Remove a workflow symlink from Alfred. Missing links are not an error."""
    dest = _require_workflows_dir() / bundle_id

    if dest.is_symlink():
        try:
            dest.unlink()
        except OSError as e:
            raise WorkflowError(f"Failed to remove symlink: {e}")
        logger.info(f"Unlinked {dest}")


def reload_workflow(bundle_id: str) -> None:
    """Ask Alfred to reload a workflow (refreshes the canvas without restart)."""
    script = f'tell application "Alfred" to reload workflow "{bundle_id}"'
    try:
        subprocess.run(["osascript", "-e", script], capture_output=True, check=True)
    except (OSError, subprocess.CalledProcessError) as e:
        raise WorkflowError(f"Failed to reload workflow: {e}")


def pack_workflow(workflow_dir: Path, output_path: Path) -> Path:
    """
    Pack a workflow directory into an .alfredworkflow archive.

    Archive members are relative to workflow_dir, as Alfred expects.

    Raises:
        WorkflowError: If the directory is missing or the archive cannot be written
    """
    workflow_dir = Path(workflow_dir)
    output_path = Path(output_path)
    if not workflow_dir.is_dir():
        raise WorkflowError(f"Workflow directory not found: {workflow_dir}")

    output_resolved = output_path.resolve()
    try:
        with zipfile.ZipFile(output_path, "w", zipfile.ZIP_DEFLATED) as archive:
            for file_path in sorted(workflow_dir.rglob("*")):
                if not file_path.is_file() or file_path.resolve() == output_resolved:
                    continue
                archive.write(file_path, file_path.relative_to(workflow_dir))
    except OSError as e:
        raise WorkflowError(f"Failed to create workflow package: {e}")

    logger.info(f"Packed {workflow_dir} into {output_path}")
    return output_path


def install_workflow(workflow_path: Path) -> None:
    """Open an .alfredworkflow file so Alfred installs it."""
    try:
        subprocess.run(["open", str(workflow_path)], capture_output=True, check=True)
    except (OSError, subprocess.CalledProcessError) as e:
        raise WorkflowError(f"Failed to open workflow: {e}")
