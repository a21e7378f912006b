from rest_framework.authentication import BaseAuthentication, get_authorization_header
from rest_framework.exceptions import AuthenticationFailed
from .firebase import verify_id_token


class FirebaseAuthentication(BaseAuthentication):
    keyword = b'bearer'

    def authenticate(self, request):
        auth = get_authorization_header(request).split()
        if not auth or auth[0].lower() != self.keyword:
            return None  # no bearer token; anonymous

        if len(auth) != 2:
            raise AuthenticationFailed('Missing token')

        try:
            raw_token = auth[1].decode()
        except UnicodeError:
            raise AuthenticationFailed('Invalid token')

        user = verify_id_token(raw_token)
        return (user, raw_token)

    def authenticate_header(self, request):
        # Makes DRF answer 401 (not 403) for unauthenticated calls
        return 'Bearer'
