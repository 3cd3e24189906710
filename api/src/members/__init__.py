"""Member accounts module.

Note: Service and router are not exported here to avoid circular imports.
Import directly from src.members.service / src.members.router when needed.
"""

from .models import MEMBERS_TABLES_CQL, Member, create_member


__all__ = ["MEMBERS_TABLES_CQL", "Member", "create_member"]
