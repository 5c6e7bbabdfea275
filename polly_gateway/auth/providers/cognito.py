"""
AWS Cognito authentication provider.

This module implements the AuthProvider interface using AWS Cognito User Pools
for password sign-in, registration and session management.
"""

import asyncio
import base64
import hashlib
import hmac
from datetime import UTC, datetime, timedelta
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from polly_gateway.auth import schemas
from polly_gateway.auth.base import AuthProvider
from polly_gateway.auth.config import AuthSettings, get_auth_settings
from polly_gateway.auth.constants import TimeInSeconds
from polly_gateway.auth.dataclasses import ProviderResult, RegistrationData
from polly_gateway.auth.exceptions import AuthProviderUnavailableError
from polly_gateway.utils.logger import logger

# Cognito error codes raised for a token that is no longer a session
_STALE_TOKEN_CODES = {"NotAuthorizedException", "UserNotFoundException"}


class CognitoAuthProvider(AuthProvider):
    """AWS Cognito implementation of the AuthProvider interface."""

    def __init__(self, settings: AuthSettings | None = None, cognito_client=None):
        """Initialize the Cognito auth provider."""
        settings = settings or get_auth_settings()
        self.region = settings.aws_region
        self.user_pool_id = settings.cognito_user_pool_id
        self.client_id = settings.cognito_client_id
        self.client_secret = settings.cognito_client_secret

        if not all([self.user_pool_id, self.client_id]):
            raise ValueError("COGNITO_USER_POOL_ID and COGNITO_CLIENT_ID must be set")

        logger.info(
            "CognitoAuthProvider initialized",
            client_id=self.client_id,
            has_client_secret=bool(self.client_secret),
        )

        # boto3 picks up AWS credentials from environment/profile
        self.cognito_client = cognito_client or boto3.client(
            "cognito-idp", region_name=self.region
        )

    async def _call(self, operation: str, **params: Any) -> dict:
        """Run a blocking Cognito API call off the event loop.

        ``ClientError`` is left to the caller; transport-level failures are
        raised as ``AuthProviderUnavailableError``.
        """
        method = getattr(self.cognito_client, operation)
        try:
            return await asyncio.to_thread(method, **params)
        except BotoCoreError as e:
            logger.error("Cognito call failed", operation=operation, error=str(e))
            raise AuthProviderUnavailableError(
                f"Cognito is unreachable: {e}"
            ) from e

    async def sign_in_with_password(self, email: str, password: str) -> ProviderResult:
        """Sign in a user with email and password."""
        auth_parameters = {"USERNAME": email, "PASSWORD": password}
        if self.client_secret:
            auth_parameters["SECRET_HASH"] = self._calculate_secret_hash(email)

        try:
            response = await self._call(
                "initiate_auth",
                AuthFlow="USER_PASSWORD_AUTH",
                ClientId=self.client_id,
                AuthParameters=auth_parameters,
            )
        except ClientError as e:
            return self._client_error_result(e, "sign in")

        auth_result = response.get("AuthenticationResult")
        if not auth_result:
            # A challenge (MFA, new password) is not something this flow answers
            challenge = response.get("ChallengeName", "unknown")
            return ProviderResult(error=f"Additional verification required ({challenge})")

        session = await self._session_from_auth_result(auth_result)
        return ProviderResult(session=session, user=session.user)

    async def sign_up(self, data: RegistrationData) -> ProviderResult:
        """Register a new user with the display name as the ``name`` attribute."""
        params = {
            "ClientId": self.client_id,
            "Username": data.email,
            "Password": data.password,
            "UserAttributes": [
                {"Name": "email", "Value": data.email},
                {"Name": "name", "Value": data.name},
            ],
        }
        if self.client_secret:
            params["SecretHash"] = self._calculate_secret_hash(data.email)

        try:
            response = await self._call("sign_up", **params)
        except ClientError as e:
            return self._client_error_result(e, "sign up")

        # Cognito issues no tokens until the account is confirmed
        user = schemas.User(
            id=response["UserSub"],
            email=data.email,
            user_metadata={"name": data.name},
            email_confirmed=bool(response.get("UserConfirmed")),
            created_at=datetime.now(UTC),
        )
        return ProviderResult(user=user)

    async def sign_out(self, access_token: str) -> ProviderResult:
        """Sign out a user."""
        try:
            await self._call("global_sign_out", AccessToken=access_token)
        except ClientError as e:
            if e.response["Error"]["Code"] in _STALE_TOKEN_CODES:
                return ProviderResult()
            return self._client_error_result(e, "sign out")
        return ProviderResult()

    async def get_user(self, access_token: str) -> schemas.User | None:
        """Get the user behind an access token."""
        try:
            response = await self._call("get_user", AccessToken=access_token)
        except ClientError as e:
            logger.debug(
                "Cognito rejected access token", code=e.response["Error"]["Code"]
            )
            return None
        return self._create_user_from_cognito_response(response)

    async def get_session(self, access_token: str) -> schemas.Session | None:
        """Get session information from access token."""
        user = await self.get_user(access_token)
        if not user:
            return None
        return schemas.Session(access_token=access_token, user=user)

    async def refresh_session(self, refresh_token: str) -> ProviderResult:
        """Refresh an expired session using GetTokensFromRefreshToken."""
        params = {"RefreshToken": refresh_token, "ClientId": self.client_id}
        if self.client_secret:
            params["ClientSecret"] = self.client_secret

        try:
            response = await self._call("get_tokens_from_refresh_token", **params)
        except ClientError as e:
            return self._client_error_result(e, "refresh")

        auth_result = response.get("AuthenticationResult", {})
        if not auth_result.get("AccessToken"):
            logger.warning("No access token obtained from Cognito refresh response.")
            return ProviderResult(
                error="Failed to obtain new access token from refresh token"
            )

        # Cognito keeps the refresh token unless rotation is enabled
        auth_result.setdefault("RefreshToken", refresh_token)
        session = await self._session_from_auth_result(auth_result)
        return ProviderResult(session=session, user=session.user)

    # Helper methods

    @staticmethod
    def _client_error_result(error: ClientError, action: str) -> ProviderResult:
        code = error.response["Error"]["Code"]
        message = error.response["Error"].get("Message") or code
        logger.info("Cognito rejected request", action=action, code=code)
        return ProviderResult(error=message)

    async def _session_from_auth_result(self, auth_result: dict) -> schemas.Session:
        access_token = auth_result["AccessToken"]
        return schemas.Session(
            access_token=access_token,
            refresh_token=auth_result.get("RefreshToken"),
            token_type=auth_result.get("TokenType", "Bearer").lower(),
            expires_at=datetime.now(UTC)
            + timedelta(seconds=auth_result.get("ExpiresIn", TimeInSeconds.ONE_HOUR)),
            user=await self.get_user(access_token),
        )

    def _calculate_secret_hash(self, username: str) -> str:
        """Calculate the secret hash for Cognito API calls."""
        if not self.client_secret:
            return ""

        message = str(username) + str(self.client_id)
        dig = hmac.new(
            self.client_secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256
        )
        return base64.b64encode(dig.digest()).decode()

    @staticmethod
    def _create_user_from_cognito_response(response: dict) -> schemas.User | None:
        """Create a User object from a Cognito GetUser response."""
        attributes = {
            attr["Name"]: attr["Value"] for attr in response.get("UserAttributes", [])
        }
        user_id = attributes.get("sub") or response.get("Username")
        if not user_id:
            return None

        metadata = {}
        if attributes.get("name"):
            metadata["name"] = attributes["name"]

        return schemas.User(
            id=user_id,
            email=attributes.get("email", ""),
            user_metadata=metadata,
            email_confirmed=attributes.get("email_verified", "false").lower() == "true",
        )
