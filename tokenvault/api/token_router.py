"""
API Router for TokenVault token management
"""

from typing import Optional

from fastapi import APIRouter, Depends, status

from tokenvault.auth.api_key import verify_api_key
from tokenvault.services.crypto import (
    NewTokenRequest,
    NewTokenResponse,
    GetTokenResponse,
)
from tokenvault.services.vault import BadRequest, VaultService

router = APIRouter(prefix="/token", tags=["tokens"], dependencies=[Depends(verify_api_key)])

_TOKEN_ERRORS = {
    400: {"description": "Token is missing"},
    401: {"description": "API key required"},
    403: {"description": "API key invalid"},
    404: {"description": "Token not found"},
}


# Global vault service instance, installed by the app at import time
_vault_service: Optional[VaultService] = None


def set_vault_service(service: VaultService) -> None:
    """Install the global vault service instance"""
    global _vault_service
    _vault_service = service


def get_vault_service() -> VaultService:
    """Get the global vault service instance"""
    global _vault_service
    if _vault_service is None:
        _vault_service = VaultService()
    return _vault_service


@router.post(
    "",
    response_model=NewTokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new token",
    description="Tokenize and encrypt a payload, returning only the token",
    responses={k: v for k, v in _TOKEN_ERRORS.items() if k != 404},
)
async def create_token(
    request: NewTokenRequest,
    service: VaultService = Depends(get_vault_service),
) -> NewTokenResponse:
    """
    Create a token

    - **data.payload**: Sensitive content to tokenize
    - **data.token_type**: Classification, e.g. access or refresh
    - **data.ttl**: Time-to-live hint
    - **data.metadata**: Arbitrary attributes stored with the token

    Identical payloads always map to the same token; creating one again
    replaces the stored record.
    """
    token = await service.create_token(request.data)
    return NewTokenResponse(token=token)


@router.get(
    "/{token}",
    response_model=GetTokenResponse,
    summary="Get an encrypted token properties",
    description="Return the token record with its payload blanked",
    responses=_TOKEN_ERRORS,
)
async def get_encrypted_token(
    token: str,
    service: VaultService = Depends(get_vault_service),
) -> GetTokenResponse:
    stored = await service.get_encrypted_token(token)
    return GetTokenResponse(encrypted_token=stored)


@router.get(
    "/{token}/decrypt",
    response_model=GetTokenResponse,
    summary="Get a decrypted token and properties",
    description="Return the token record with its payload decrypted",
    responses=_TOKEN_ERRORS,
)
async def get_decrypted_token(
    token: str,
    service: VaultService = Depends(get_vault_service),
) -> GetTokenResponse:
    stored = await service.get_decrypted_token(token)
    return GetTokenResponse(encrypted_token=stored)


@router.delete(
    "/{token}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a token",
    description="Delete a stored token",
    responses=_TOKEN_ERRORS,
)
async def delete_token(
    token: str,
    service: VaultService = Depends(get_vault_service),
) -> None:
    await service.delete_token(token)


@router.get("/", include_in_schema=False)
@router.delete("/", include_in_schema=False)
@router.get("//decrypt", include_in_schema=False)
async def missing_token() -> None:
    """Empty token path segment is a client error, not a lookup miss"""
    raise BadRequest("token is required")
