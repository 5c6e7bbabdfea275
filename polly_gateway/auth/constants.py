from enum import Enum


class AuthProviderName(str, Enum):
    """Supported credential backends."""

    SUPABASE = "supabase"
    COGNITO = "cognito"
    MEMORY = "memory"


class CookieNames(str, Enum):
    """Cookie names used in the authentication system."""

    SESSION_TOKEN = "session_token"
    REFRESH_TOKEN = "refresh_token"


class SameSite(str, Enum):
    """SameSite cookie settings."""

    LAX = "lax"
    STRICT = "strict"
    NONE = "none"


class TimeInSeconds(int):
    """Time constants in seconds."""

    ONE_HOUR = 3600
    THIRTY_DAYS = 2592000


class SupabaseEndpoints(str, Enum):
    """Supabase GoTrue endpoints, relative to ``{supabase_url}/auth/v1``."""

    PASSWORD_GRANT = "/token?grant_type=password"
    REFRESH_GRANT = "/token?grant_type=refresh_token"
    SIGNUP = "/signup"
    LOGOUT = "/logout?scope=global"
    USER = "/user"


# Shown when the provider could not be reached at all
GENERIC_AUTH_ERROR = "Something went wrong. Please try again."
