from rest_framework.authentication import TokenAuthentication


class BearerTokenAuthentication(TokenAuthentication):
    """Token authentication reading ``Authorization: Bearer <token>``."""
    keyword = 'Bearer'
