from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse

from app.dispatch import process_report
from app.errors import WebhookError
from app.settings import get_settings

router = APIRouter()

SUCCESS_MESSAGE = "Vulnerabilities processed and imported to Security Hub"


@router.post("/trivy-webhook", response_class=PlainTextResponse)
async def trivy_webhook(request: Request) -> PlainTextResponse:
    body = await request.body()
    settings = getattr(request.app.state, "settings", None) or get_settings()
    flags = getattr(request.app.state, "flags", None) or settings.feature_flags()

    try:
        # STS and Security Hub calls block, keep them off the event loop.
        await run_in_threadpool(process_report, body, flags, batch_size=settings.batch_size)
    except WebhookError as exc:
        return PlainTextResponse(exc.detail, status_code=exc.status_code)

    return PlainTextResponse(SUCCESS_MESSAGE)
