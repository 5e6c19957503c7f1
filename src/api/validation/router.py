from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from src.api.core.dependencies import ApiKeyValidationServiceDep
from src.api.core.exceptions.base import KeyHubException
from src.api.core.messages import MessageCode
from src.api.core.rate_limit import public_rate_limit
from src.api.validation.schemas import ValidateKeyRequest, ValidateKeyResponse

router = APIRouter(tags=["validation"])


@router.post(
    "/validate-key",
    response_model=ValidateKeyResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(public_rate_limit)],
)
async def validate_key(
    request: Request,
    body: ValidateKeyRequest,
    service: ApiKeyValidationServiceDep,
):
    """Check a submitted API key without consuming usage."""
    try:
        api_key = await service.validate_api_key(body.api_key)
    except KeyHubException as e:
        # Storage failures keep the same envelope with the generic message
        response = ValidateKeyResponse(
            valid=False, message_code=e.message_code, error=e.message
        )
        return JSONResponse(
            status_code=e.status_code,
            content=response.model_dump(mode="json", exclude_none=True),
        )

    request.state.api_key_id = str(api_key.id)
    return ValidateKeyResponse(
        valid=True, message_code=MessageCode.API_KEY_VALID, data=api_key
    )
