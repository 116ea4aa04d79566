TRAVERSAL_TOKEN = ".."

# characters that would turn a key into a path or truncate it at the OS layer
_FORBIDDEN = ("/", "\\", "\x00")


def is_safe(name: str) -> bool:
    """
    Return True when ``name`` can be used verbatim as a key of the flat
    storage directory. Pure string check, never touches the filesystem.
    """
    if not name or name == ".":
        return False
    if TRAVERSAL_TOKEN in name:
        return False
    return not any(ch in name for ch in _FORBIDDEN)
