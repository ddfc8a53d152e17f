# quotation_pdf/api_main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Body, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from quotation_pdf.config import load_settings
from quotation_pdf.errors import DocumentRenderError, InvalidInputError
from quotation_pdf.logging_config import setup_logging
from quotation_pdf.rendering.assembler import QuotationDocumentAssembler
from quotation_pdf.services.keys import safe_download_name
from quotation_pdf.services.quotation_input import request_from_json


logger = logging.getLogger(__name__)

SETTINGS = load_settings()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    setup_logging(SETTINGS.log_level, json_output=SETTINGS.log_json)
    yield


app = FastAPI(title="Quotation PDF API", lifespan=lifespan)

# CORS for the admin frontend in local dev
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)


@app.get("/api/health")
def health():
    return {"ok": True}


@app.post("/api/quotations/pdf")
def render_quotation_pdf(payload: dict = Body(...)):
    try:
        req = request_from_json(payload)
    except InvalidInputError as e:
        raise HTTPException(status_code=422, detail={"errors": e.problems})

    try:
        rendered = QuotationDocumentAssembler(settings=SETTINGS).render(
            req.quotation, req.items, req.context, req.selected_terms
        )
    except DocumentRenderError as e:
        logger.error("PDF generation failed: %s", e)
        raise HTTPException(status_code=500, detail="Failed to generate document, please retry")

    filename = safe_download_name(rendered.filename)
    return Response(
        content=rendered.pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "X-Page-Count": str(rendered.page_count),
        },
    )
