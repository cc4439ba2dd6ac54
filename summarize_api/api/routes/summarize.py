from typing import Annotated

from fastapi import APIRouter, Depends, Request

from summarize_api.api.dependencies import get_admission_pipeline
from summarize_api.schemas.summarize import ErrorResponse, SummaryRequest, SummaryResponse
from summarize_api.services.admission_service import AdmissionPipeline, InboundRequest

router = APIRouter(tags=["Summarize"])

# Every other method is routed to the pipeline too, so the method gate decides
_OTHER_METHODS = ["GET", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]

_ERROR_RESPONSES: dict[int | str, dict] = {
    400: {"model": ErrorResponse, "description": "Invalid text or content blocked by safety filters"},
    405: {"model": ErrorResponse, "description": "Method other than POST"},
    413: {"model": ErrorResponse, "description": "Text longer than the maximum"},
    429: {"model": ErrorResponse, "description": "Too many requests from this client"},
    500: {"model": ErrorResponse, "description": "Summarization provider failure"},
}


def _to_inbound(request: Request) -> InboundRequest:
    return InboundRequest(
        method=request.method,
        headers=request.headers,
        read_body=request.body,
    )


@router.post(
    "/summarize",
    response_model=SummaryResponse,
    responses=_ERROR_RESPONSES,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": SummaryRequest.model_json_schema()}},
        }
    },
)
async def summarize(
    request: Request,
    pipeline: Annotated[AdmissionPipeline, Depends(get_admission_pipeline)],
) -> SummaryResponse:
    """Summarize submitted text.

    The body is handed to the admission pipeline unread; it is only read once
    the method and rate-limit gates pass.

    Returns:
        SummaryResponse: The model's summary.
    """
    return await pipeline.handle(_to_inbound(request))


@router.api_route("/summarize", methods=_OTHER_METHODS, include_in_schema=False)
async def summarize_other_methods(
    request: Request,
    pipeline: Annotated[AdmissionPipeline, Depends(get_admission_pipeline)],
) -> SummaryResponse:
    return await pipeline.handle(_to_inbound(request))
