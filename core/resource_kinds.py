"""Run-time kind checks for automation resources

The engine's exported classes are not stable across releases, so values are
recognized by the name of their class, never by class identity.
"""

from typing import Any


BROWSER = "Browser"
PAGE = "Page"


def is_instance_of(value: Any, class_name: str) -> bool:
    """Check if a value is an instance of a class named `class_name`.

    Args:
        value: Any value produced by an instruction
        class_name: Expected class name, e.g. "Browser"

    Returns:
        True if value and its class are present and the class name matches
    """
    if value is None:
        return False

    constructor = getattr(value, "__class__", None)
    if constructor is None:
        return False

    return getattr(constructor, "__name__", None) == class_name
