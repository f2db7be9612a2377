"""Forward-slash path manipulation helpers."""

from __future__ import annotations

from .text import starts_with, substr


def get_file_name(path: str) -> str:
    """Part after the last slash, ignoring a slash in the final position."""
    index = path[:-1].rfind("/")
    if index >= 0:
        return path[index + 1:]
    return path


def get_path_no_ext(path: str) -> str:
    """Path up to (not including) its first dot."""
    index = path.find(".")
    if index >= 0:
        return path[:index]
    return path


def get_file_name_no_ext(path: str) -> str:
    """File name with everything from its first dot removed."""
    return get_path_no_ext(get_file_name(path))


def get_directory_name(path: str) -> str:
    """Directory part of the path, keeping its trailing slash."""
    directory = path
    while directory.endswith("/"):
        directory = substr(directory, 0, -1)
    last = directory.rfind("/")
    if last >= 0:
        directory = directory[:last + 1]
    return directory


def get_path_after(path: str, after: str) -> str:
    """Text following the first occurrence of ``after``, or the whole path."""
    for i in range(len(path)):
        if starts_with(path[i:], after, False):
            return path[i + len(after):]
    return path


def normalize(path: str) -> str:
    """Collapse slashes to single '/' and resolve '..' where possible."""
    normalized = ""
    length = len(path)
    n = 0
    while n < length:
        ch = path[n]
        if ch in "\\/":
            if not normalized or normalized[-1] != "/":
                normalized += "/"
        elif ch == "." and n < length - 1 and path[n + 1] == ".":
            k = normalized[:-1].rfind("/")
            if k >= 0:
                normalized = normalized[:k]
                n += 1
            else:
                normalized += "."
        else:
            normalized += ch
        n += 1
    return normalized


def join(a: str, b: str) -> str:
    """Join two paths with a slash and normalize the result."""
    return normalize(f"{a}/{b}")