from .cognito import CognitoAuthProvider
from .memory import InMemoryAuthProvider
from .supabase import SupabaseAuthProvider

__all__ = ["CognitoAuthProvider", "InMemoryAuthProvider", "SupabaseAuthProvider"]
