from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import PlainTextResponse, Response

from toolshelf.commands import csv_list, read_csv, read_json_file, read_type, setup_logging
from toolshelf.config import RESOURCE_DIR
from toolshelf.logging_setup import shutdown_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Log file goes under the resource root, like the desktop shell does at start-up
    setup_logging(RESOURCE_DIR)
    yield
    shutdown_logging()


app = FastAPI(
    title="toolshelf catalogue bridge",
    description="Local HTTP bridge to the catalogue data layer (CSV records, tag sets, config files).",
    version="1.0.0",
    lifespan=lifespan,
)


def _envelope(text: str) -> Response:
    # Errors travel inside the envelope, so the status is always 200
    return Response(content=text, media_type="application/json")


@app.get("/health", summary="Health check", response_description="API health status")
async def health_check():
    """
    Checks the health of the API.
    """
    return {"status": "ok"}


@app.get("/records/{filename}", summary="Catalogue records", response_description="Envelope with the records of one CSV file")
def records(filename: str, keyword: Optional[str] = Query(default=None)):
    """
    Returns the records of `document/<filename>` as `{"result": [...]}`, or
    `{"error": "..."}` when the file is missing or a row fails to decode.
    """
    return _envelope(read_csv(RESOURCE_DIR, filename, keyword=keyword))


@app.get("/types/{filename}", summary="Distinct types", response_description="Envelope with the distinct Type tags")
def type_tags(filename: str):
    return _envelope(read_type(RESOURCE_DIR, filename))


@app.get("/files", summary="Catalogue files", response_description="Envelope with the sorted document/ listing")
def files():
    return _envelope(csv_list(RESOURCE_DIR))


@app.get("/config/{filename}", summary="Config file", response_description="Raw text of config/<filename>")
def config_file(filename: str):
    loaded = read_json_file(RESOURCE_DIR, filename)
    if not loaded.ok:
        raise HTTPException(status_code=404, detail=loaded.error)
    return PlainTextResponse(loaded.result)
