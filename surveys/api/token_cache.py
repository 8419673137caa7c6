"""
Token cache API endpoints.

Lets the signed-in user discard their cached tokens (e.g. on sign-out).
"""
from fastapi import APIRouter, Depends, HTTPException, Response, status

from surveys.api.deps import get_current_principal, get_token_cache_service
from surveys.token_storage import ClaimsPrincipal, MissingClaimError, TokenCacheService

router = APIRouter(prefix="/token-cache", tags=["token-cache"])


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def clear_my_token_cache(
    principal: ClaimsPrincipal = Depends(get_current_principal),
    service: TokenCacheService = Depends(get_token_cache_service),
):
    try:
        await service.clear_cache(principal)
    except MissingClaimError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
