"""
HTTP entry point for the Telegram webhook.

Run with:

    uvicorn beanbot.webhook.app:app

Telegram POSTs each update to ``/webhook``. The reply is returned in the
response body as a Bot API method call, so no outbound call to Telegram
is needed.
"""

from functools import lru_cache

from fastapi import Depends, FastAPI, Request, Response
from starlette.concurrency import run_in_threadpool

from beanbot.audit import configure_logging
from beanbot.config import get_settings
from beanbot.orchestrator import TransactionFlow, create_app_components
from beanbot.webhook.telegram import handle_update


@lru_cache
def get_flow() -> TransactionFlow:
    """Application flow, built once per process."""
    configure_logging(get_settings().app.log_level)
    flow, _ = create_app_components(use_storage=True)
    return flow


def create_app() -> FastAPI:
    app = FastAPI(title="Beanbot webhook")

    @app.post("/webhook")
    async def telegram_webhook(
        request: Request,
        flow: TransactionFlow = Depends(get_flow),
    ) -> Response:
        body = await request.body()
        # The flow makes blocking calls to the content store
        reply = await run_in_threadpool(handle_update, body, flow)
        if reply is None:
            return Response(status_code=200)
        return Response(
            content=reply.model_dump_json(),
            media_type="application/json",
        )

    return app


app = create_app()
