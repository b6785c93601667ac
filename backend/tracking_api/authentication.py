from rest_framework import authentication, exceptions

from . import services


class BearerTokenAuthentication(authentication.BaseAuthentication):
    """
    Resolves "Authorization: Bearer <access token>" through the hosted auth provider.
    No header -> anonymous; a token the provider rejects -> 401.
    """
    keyword = "Bearer"

    def authenticate(self, request):
        header = authentication.get_authorization_header(request).split()
        if not header or header[0].lower() != self.keyword.lower().encode():
            return None

        if len(header) != 2:
            raise exceptions.AuthenticationFailed("Invalid Authorization header.")

        try:
            token = header[1].decode()
        except UnicodeError:
            raise exceptions.AuthenticationFailed(
                "Invalid token header. Token string should not contain invalid characters."
            )

        # NetworkError propagates and is answered with 503 by the exception handler
        user = services.get_auth_service().get_current_user(token)
        if user is None:
            raise exceptions.AuthenticationFailed("Invalid or expired token.")
        return (user, token)

    def authenticate_header(self, request):
        return self.keyword
