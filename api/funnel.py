"""
API Endpoints for the SEO Lead Funnel

FastAPI app that:
1. Runs a website audit (single response or streamed in two stages)
2. Streams the interim PageSpeed result before AI enrichment completes
3. Forwards contact details from the funnel's form to the leads API
"""

import asyncio
import json
import logging
import sys
from functools import lru_cache
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, EmailStr, Field

from seo_funnel import __version__
from seo_funnel.audit import AuditError, StagedAuditOrchestrator
from seo_funnel.clients import FunnelClients, create_leads_client
from seo_funnel.leads import LeadsClient, LeadSubmissionError
from seo_funnel.models import LeadData
from seo_funnel.utils import format_url, get_settings, is_valid_url

# Configure logging to stdout
logging.basicConfig(
    level=get_settings().LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stdout,
    force=True,
)
logger = logging.getLogger(__name__)

# Quiet down chatty loggers
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

app = FastAPI(
    title="SEO Lead Funnel",
    description="Website audits powered by PageSpeed Insights and DeepSeek",
    version=__version__,
)

INVALID_URL_MESSAGE = "Ange en giltig webbadress"


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class AuditRequest(BaseModel):
    """Request to audit a website."""
    url: str = Field(..., description="Website address, scheme optional (e.g. 'exempel.se')")


class LeadRequest(BaseModel):
    """Contact details from the funnel's form."""
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., min_length=1)
    source: Optional[str] = None
    company: Optional[str] = None

    def to_lead(self) -> LeadData:
        return LeadData(
            name=self.name,
            email=str(self.email),
            phone=self.phone,
            source=self.source,
            company=self.company,
        )


class LeadResponse(BaseModel):
    success: bool = True


# ============================================================================
# DEPENDENCIES
# ============================================================================

@lru_cache
def get_funnel_clients() -> FunnelClients:
    """Process-wide audit clients, created on first use."""
    clients = FunnelClients(get_settings())
    clients.log_status()
    return clients


def get_orchestrator() -> StagedAuditOrchestrator:
    return get_funnel_clients().orchestrator


async def get_leads_client():
    client = create_leads_client(get_settings())
    try:
        yield client
    finally:
        await client.close()


def _normalized_url(url: str) -> str:
    url = url.strip()
    if not is_valid_url(url):
        raise HTTPException(status_code=422, detail=INVALID_URL_MESSAGE)
    return format_url(url)


@app.on_event("startup")
async def startup_event():
    """Create the audit clients and log configuration status once."""
    get_funnel_clients()


@app.on_event("shutdown")
async def shutdown_event():
    """Close HTTP clients if they were created."""
    if get_funnel_clients.cache_info().currsize:
        await get_funnel_clients().close()
        get_funnel_clients.cache_clear()


# ============================================================================
# ENDPOINTS
# ============================================================================

@app.get("/health")
async def health():
    """Health check with the active enrichment mode."""
    return {
        "status": "healthy",
        "enrichment": "ai" if get_settings().has_enrichment else "fallback",
    }


@app.post("/api/audit")
async def run_audit(
    request: AuditRequest,
    orchestrator: StagedAuditOrchestrator = Depends(get_orchestrator),
):
    """Run a complete audit and return the final result."""
    url = _normalized_url(request.url)

    try:
        result = await orchestrator.run_full_audit(url)
    except AuditError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return result.to_dict()


@app.get("/api/audit/stream")
async def stream_audit(
    url: str,
    orchestrator: StagedAuditOrchestrator = Depends(get_orchestrator),
):
    """
    Stream a staged audit using Server-Sent Events (SSE).

    Events:
    - interim: PageSpeed scores with placeholder suggestions
    - complete: final result with AI (or fallback) suggestions
    - error: the fast audit failed
    """
    target = _normalized_url(url)

    async def event_stream():
        queue: asyncio.Queue = asyncio.Queue()

        async def on_interim(result):
            await queue.put(("interim", result.to_dict()))

        async def run():
            try:
                final = await orchestrator.run_staged_audit(target, on_interim)
                await queue.put(("complete", final.to_dict()))
            except AuditError as e:
                await queue.put(("error", {"message": str(e)}))
            except Exception as e:
                logger.exception(f"Unexpected error in audit stream for {target}: {e}")
                await queue.put(("error", {"message": "Ett oväntat fel inträffade"}))

        task = asyncio.create_task(run())
        try:
            while True:
                event, data = await queue.get()
                yield f"event: {event}\ndata: {json.dumps(data, ensure_ascii=False)}\n\n"
                if event != "interim":
                    break
        finally:
            # Client disconnects close the generator; abandon the run with it
            if not task.done():
                task.cancel()
                logger.info(f"Audit stream for {target} closed, run cancelled")

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


@app.post("/api/leads", status_code=201, response_model=LeadResponse)
async def submit_lead(
    request: LeadRequest,
    client: LeadsClient = Depends(get_leads_client),
):
    """Forward a lead to the intake API."""
    try:
        await client.submit(request.to_lead())
    except LeadSubmissionError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return LeadResponse()


# ============================================================================
# RUN SERVER
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.funnel:app",
        host="0.0.0.0",
        port=8000,
        reload=get_settings().ENVIRONMENT == "development",
    )
