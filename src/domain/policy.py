from src.domain.entities import User
from src.rules.models import Rules


class PolicyEngine:
    def __init__(self, rules: Rules):
        self.rules = rules

    def check_permission(self, user: User | None, action: str) -> bool:
        """
        Check if the user is allowed to perform the action.

        Order of precedence:
        1. Public Permissions (Global)
        2. Role-Based Access Control (RBAC)
        """
        # 1. Public Permissions
        if action in self.rules.rbac.public_permissions:
            return True

        # If not public, we need a user
        if not user:
            return False

        # 2. RBAC
        allowed_actions = self.rules.rbac.roles.get(user.role, [])
        if "*" in allowed_actions:
            return True
        if action in allowed_actions:
            return True

        # Scoped wildcards ("packages:*" matches "packages:edit")
        if ":" in action:
            scope = action.split(":")[0]
            if f"{scope}:*" in allowed_actions:
                return True

        return False

    def can_manage_users(self, user: User) -> bool:
        return self.check_permission(user, "users:manage")

    def can_manage_settings(self, user: User) -> bool:
        return self.check_permission(user, "settings:manage")
