from fastapi import APIRouter, Depends, Request, status

from src.api.core.dependencies import GatewayServiceDep, GithubSummarizerDep
from src.api.core.exceptions.base import KeyHubException
from src.api.core.messages import MessageCode, get_default_message
from src.api.core.rate_limit import public_rate_limit
from src.api.summarizer.schemas import SummarizeRequest, SummarizeResponse
from src.modules.keys.models import ValidatedKey
from src.modules.summarizer.github import is_valid_github_url
from src.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["summarizer"])


@router.post(
    "/github-summarizer",
    response_model=SummarizeResponse,
    dependencies=[Depends(public_rate_limit)],
)
async def summarize_repository(
    request: Request,
    body: SummarizeRequest,
    gateway: GatewayServiceDep,
    summarizer: GithubSummarizerDep,
) -> SummarizeResponse:
    """Summarize a GitHub repository, charging one usage unit to the key."""
    if not is_valid_github_url(body.github_url):
        raise KeyHubException(
            MessageCode.INVALID_GITHUB_URL,
            status.HTTP_400_BAD_REQUEST,
            {"github_url": body.github_url},
        )

    async def summarize(api_key: ValidatedKey):
        return await summarizer.summarize(api_key, body.github_url)

    gated = await gateway.run(body.api_key, summarize)
    request.state.api_key_id = gated.api_key_id

    logger.info(
        "Repository summarized",
        repository=gated.result.repository,
        usage_current=gated.usage.current,
        usage_limit=gated.usage.limit,
    )
    return SummarizeResponse(
        message_code=MessageCode.SUMMARY_CREATED,
        message=get_default_message(MessageCode.SUMMARY_CREATED),
        result=gated.result,
        usage=gated.usage,
    )
