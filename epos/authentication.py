import hmac

from rest_framework.authentication import BaseAuthentication
from rest_framework.exceptions import AuthenticationFailed
from django.conf import settings


class APIKeyAuthentication(BaseAuthentication):
    """
    API key authentication for till and kitchen devices using the X-API-Key header
    """
    header = 'X-API-Key'

    def authenticate(self, request):
        api_key = request.META.get('HTTP_X_API_KEY')

        if not api_key:
            return None

        expected_api_key = getattr(settings, 'API_KEY', 'demo')

        if not hmac.compare_digest(api_key.encode(), expected_api_key.encode()):
            raise AuthenticationFailed('Invalid API key')

        # Devices are not users; request.user stays None
        return (None, api_key)

    def authenticate_header(self, request):
        return self.header
