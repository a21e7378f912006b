import logging
import requests as _req
import cachecontrol
from django.conf import settings
from google.auth.transport import requests as g_requests
from google.oauth2 import id_token
from rest_framework.exceptions import AuthenticationFailed

logger = logging.getLogger(__name__)

# Cache Google's securetoken certs between verifications
_cached_session = cachecontrol.CacheControl(_req.session())
_google_request = g_requests.Request(session=_cached_session)


class FirebaseUser:
    """
    Caller identity taken from a verified Firebase ID token.
    Stands in for request.user; there is no local auth.User row behind it.
    """
    is_authenticated = True
    is_anonymous = False

    def __init__(self, uid, email=None, display_name=None):
        self.uid = uid
        self.email = email
        self.display_name = display_name

    @property
    def pk(self):
        return self.uid

    def default_username(self):
        if self.email and "@" in self.email:
            return self.email.split("@")[0]
        return "New User"

    def __eq__(self, other):
        return isinstance(other, FirebaseUser) and other.uid == self.uid

    def __hash__(self):
        return hash(self.uid)

    def __str__(self):
        return self.uid


def verify_id_token(token):
    """Verify a Firebase ID token and return the caller identity."""
    if not settings.FIREBASE_PROJECT_ID:
        logger.error("FIREBASE_PROJECT_ID is not set; refusing to accept ID tokens.")
        raise AuthenticationFailed("Authentication is not configured")

    try:
        claims = id_token.verify_firebase_token(
            token,
            _google_request,
            audience=settings.FIREBASE_PROJECT_ID,
        )
    except Exception as exc:
        logger.warning(f"Firebase token verification failed: {exc}")
        raise AuthenticationFailed("Invalid token")

    uid = (claims or {}).get("user_id") or (claims or {}).get("sub")
    if not uid:
        raise AuthenticationFailed("Invalid token")

    return FirebaseUser(uid=uid, email=claims.get("email"), display_name=claims.get("name"))
