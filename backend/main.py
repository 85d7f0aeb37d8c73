"""
FastAPI backend service for statement parsing.
"""
from fastapi import FastAPI, File, UploadFile, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
import logging

from statement_parser import (
    DocumentFormatError,
    StatementParseError,
    Strictness,
    detect_template,
    extract_raw_text,
    parse_statement,
    to_csv,
)
from statement_parser.core.detectors import TemplateDetector, resolve_template

app = FastAPI(title="Bank Statement Parser", version="1.0.0")

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:3000"],  # Vite and other dev servers
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def _read_statement_text(file: UploadFile) -> str:
    """Raw text of an uploaded statement PDF."""
    if not file.filename or not file.filename.lower().endswith('.pdf'):
        raise HTTPException(status_code=400, detail="File must be a PDF")

    content = await file.read()
    logger.info(f"Processing PDF: {file.filename} ({len(content)} bytes)")

    try:
        return extract_raw_text(content)
    except DocumentFormatError as e:
        logger.error(f"Unreadable PDF {file.filename}: {e}")
        raise HTTPException(status_code=400, detail=str(e))


def _parse(raw_text: str, template: str, strictness: Strictness):
    if template == "auto":
        detected_template = resolve_template(raw_text)
        if not detected_template:
            raise HTTPException(status_code=400, detail="Could not detect template for this PDF")
        template = detected_template
        logger.info(f"Detected template: {template}")

    try:
        return parse_statement(raw_text, template, strictness)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StatementParseError as e:
        logger.error(f"Error parsing statement: {e}")
        raise HTTPException(status_code=422, detail=f"Error parsing statement: {e}")


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"message": "Bank Statement Parser API", "status": "healthy"}


@app.post("/parse")
async def parse_pdf(file: UploadFile = File(...), template: str = "auto",
                    strictness: Strictness = Strictness.FAIL_FAST):
    """
    Parse a statement PDF and return structured data.

    Args:
        file: Uploaded PDF file
        template: Template ID to use, or "auto" to detect it

    Returns:
        Parsed statement data as JSON
    """
    raw_text = await _read_statement_text(file)
    result = _parse(raw_text, template, strictness)

    data = result.model_dump(mode="json", by_alias=True)
    logger.info(f"Successfully parsed PDF: {len(result.transactions)} transactions found")

    return JSONResponse(content={
        "success": True,
        "data": data,
        "template_used": result.template_id,
        "summary": {
            "transactions_count": len(result.transactions),
            "period_start": result.header.period_start.isoformat(),
            "period_end": result.header.period_end.isoformat(),
            "opening_balance": result.header.opening_balance,
            "closing_balance": result.header.closing_balance
        }
    })


@app.post("/parse/csv")
async def parse_pdf_to_csv(file: UploadFile = File(...), template: str = "auto",
                           strictness: Strictness = Strictness.FAIL_FAST):
    """Parse a statement PDF and return its transactions as CSV."""
    raw_text = await _read_statement_text(file)
    result = _parse(raw_text, template, strictness)

    return Response(content=to_csv(result), media_type="text/csv")


@app.post("/detect-template")
async def detect_pdf_template(file: UploadFile = File(...)):
    """
    Detect which template matches a PDF file.

    Args:
        file: Uploaded PDF file

    Returns:
        Detected template ID
    """
    raw_text = await _read_statement_text(file)

    template = detect_template(raw_text)
    if not template:
        raise HTTPException(status_code=400, detail="No matching template found")

    return JSONResponse(content={
        "success": True,
        "template": template
    })


@app.get("/templates")
async def list_templates():
    """List all available templates."""
    detector = TemplateDetector()
    templates = []
    for template_id in detector.list_templates():
        template = detector.get_template(template_id)
        templates.append({
            "id": template_id,
            "bank": template.get("bank", ""),
            "description": template.get("description", "")
        })

    return JSONResponse(content={
        "success": True,
        "templates": templates
    })


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
