"""
Path utility module for the Gmail Fluent API.

Relative file paths given to attachments and embeds are resolved against the
configured storage directory, which itself may be relative to the project
root.
"""
from pathlib import Path
from typing import Optional, Union


def get_project_root() -> Path:
    """
    Returns the absolute path to the project's root directory.

    The root is the nearest directory, starting at the current working
    directory, that contains a 'setup.py' file or a '.git' directory.
    """
    current_path = Path.cwd()
    for parent in [current_path] + list(current_path.parents):
        if (parent / "setup.py").exists() or (parent / ".git").is_dir():
            return parent.resolve()
    # Fallback to current working directory if no project root is found
    return current_path.resolve()


def resolve_path(
    path: Union[str, Path], base_path: Optional[Path] = None
) -> Path:
    """
    Resolves a given path relative to a base path.

    Args:
        path: The path to resolve (can be a string or Path object).
        base_path: Optional base path to resolve against. If None,
                   `get_project_root()` is used.

    Returns:
        An absolute Path object.
    """
    p = Path(path).expanduser()
    if p.is_absolute():
        return p.resolve()

    if base_path is None:
        base_path = get_project_root()

    return (Path(base_path) / p).resolve()


def get_storage_dir(settings) -> Path:
    """Absolute storage directory from the application settings."""
    return resolve_path(settings.app.storage_dir)


def resolve_storage_path(path: Union[str, Path], settings) -> Path:
    """Resolve ``path`` against the storage directory."""
    return resolve_path(path, base_path=get_storage_dir(settings))
