import asyncio
import logging
import time
from typing import Optional

import httpx
from authlib.jose import JsonWebKey, jwt
from authlib.jose.errors import (
    BadSignatureError,
    DecodeError,
    ExpiredTokenError,
    InvalidClaimError,
)
from workos import WorkOSClient

from app.core.config import settings

logger = logging.getLogger(__name__)


class AuthService:
    """
    Verifies WorkOS access tokens.

    Caller identities are issued elsewhere; this service only checks that a
    bearer token was signed by the identity provider and has not expired.
    """

    def __init__(self):
        self.workos_client = WorkOSClient(
            api_key=settings.WORKOS_API_KEY, client_id=settings.WORKOS_CLIENT_ID
        )
        # Cache JWKS to avoid repeated fetches
        self._jwks_cache: Optional[dict] = None
        self._jwks_cache_expiry: Optional[float] = None

    async def _get_jwks(self) -> dict:
        """
        Fetch the JWKS document, reusing the cached copy until it expires.

        Reference: https://workos.com/docs/reference/authkit/session-tokens/jwks
        """
        current_time = time.time()
        if self._jwks_cache and self._jwks_cache_expiry and current_time <= self._jwks_cache_expiry:
            return self._jwks_cache

        # Get JWKS URL from WorkOS SDK
        jwks_url = await asyncio.to_thread(
            self.workos_client.user_management.get_jwks_url
        )
        async with httpx.AsyncClient() as client:
            response = await client.get(jwks_url, timeout=10.0)
            response.raise_for_status()
            self._jwks_cache = response.json()
        self._jwks_cache_expiry = current_time + settings.JWKS_CACHE_TTL
        logger.debug(
            f"JWKS fetched and cached. Keys: {len(self._jwks_cache.get('keys', []))}"
        )
        return self._jwks_cache

    async def verify_session(self, access_token: str) -> dict:
        """
        Verify a WorkOS JWT access token with full signature verification.

        Args:
            access_token: JWT token from WorkOS

        Returns:
            Dict with the verified claims the API relies on:
            - user_id: User ID (sub claim)
            - session_id: Session ID (sid claim)
            - exp: Expiration timestamp
            - iat: Issued at timestamp

        Raises:
            ValueError: If token is invalid, expired, or signature verification fails
        """
        try:
            jwk_set = JsonWebKey.import_key_set(await self._get_jwks())
            claims = jwt.decode(
                access_token,
                jwk_set,
                claims_options={"exp": {"essential": True}, "iat": {"essential": True}},
            )
            # Validate claims (expiration, issued at, etc.)
            claims.validate()
        except ExpiredTokenError:
            logger.warning("Token has expired")
            raise ValueError("Token has expired")
        except BadSignatureError:
            logger.warning("Invalid token signature")
            raise ValueError(
                "Invalid token signature - token may have been tampered with"
            )
        except DecodeError as e:
            logger.warning(f"Failed to decode token: {e}")
            raise ValueError(f"Invalid token format: {e}")
        except InvalidClaimError as e:
            logger.warning(f"Invalid token claim: {e}")
            raise ValueError(f"Invalid token claim: {e}")
        except Exception as e:
            logger.error(
                f"Error verifying session: {type(e).__name__}: {e}", exc_info=True
            )
            raise ValueError(f"Token verification failed: {str(e)}")

        logger.debug(f"Token verified successfully. User: {claims.get('sub')}")
        return {
            "user_id": claims.get("sub"),
            "session_id": claims.get("sid"),
            "exp": claims.get("exp"),
            "iat": claims.get("iat"),
        }
