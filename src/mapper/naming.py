"""
Column Naming
=============

Field names are declared in mixed case (``userName``) and stored in
snake_case columns (``user_name``). Every uppercase letter after the first
character starts a new word; consecutive capitals are not grouped, so
``URLPath`` becomes ``u_r_l_path``.
"""

from typing import Optional

COLUMN_SEPARATOR = "_"


def convert_camel(name: Optional[str], separator: str) -> Optional[str]:
    """
    Lowercase every uppercase letter, prefixing it with ``separator``
    unless it is the first character.

    Blank input (None, empty, whitespace only) is returned unchanged.
    """
    if not name or name.isspace():
        return name

    out = []
    for index, char in enumerate(name):
        if char.isupper():
            if index != 0:
                out.append(separator)
            out.append(char.lower())
            continue
        out.append(char)
    return "".join(out)


def camel_to_underscore(name: Optional[str]) -> Optional[str]:
    """
    Convert a field name to its column name.

    Example:
        >>> camel_to_underscore("createdTime")
        'created_time'
        >>> camel_to_underscore("id")
        'id'
    """
    return convert_camel(name, COLUMN_SEPARATOR)
