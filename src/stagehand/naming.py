"""Resource name derivation."""

from __future__ import annotations

NAME_SEPARATOR = "-"


def concat_optional(*parts: str | None) -> str:
    """Join the non-empty parts with the name separator.

    Examples:
        concat_optional("", "mysql", "") → mysql
        concat_optional("prod", "mysql", "root") → prod-mysql-root
    """
    return NAME_SEPARATOR.join(part for part in parts if part)
