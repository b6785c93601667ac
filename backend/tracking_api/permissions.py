from rest_framework import permissions

from accounts.models import User
from accounts.policy import has_capability


class HasCapability(permissions.BasePermission):
    """
    Grants access when the signed-in user's role carries view.required_capability.
    """
    message = "You do not have permission to perform this action."

    def has_permission(self, request, view):
        user = request.user if isinstance(request.user, User) else None
        capability = getattr(view, "required_capability", None)
        if capability is None:
            return user is not None
        return has_capability(user, capability)
