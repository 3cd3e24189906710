"""Member roles.

Two flat roles: USER for regular members and ADMIN for operators. Admins
manage notices and their post views are not counted.
"""

from enum import Enum


class MemberRole(str, Enum):
    """Member roles."""

    USER = "USER"
    ADMIN = "ADMIN"


def is_admin(role: MemberRole | str) -> bool:
    """Check if the role is ADMIN.

    Examples:
        >>> is_admin(MemberRole.ADMIN)
        True
        >>> is_admin("USER")
        False
    """
    try:
        return MemberRole(role) == MemberRole.ADMIN
    except ValueError:
        return False


def counts_post_view(role: MemberRole | str | None) -> bool:
    """Whether a read by a member with this role bumps a post's view counter.

    Anonymous readers (``None``) and USER members count; ADMIN reads do not.
    """
    if role is None:
        return True
    return not is_admin(role)
