from __future__ import annotations
from fastapi import FastAPI, File, HTTPException, Query, Response, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
import logging, typing as t

# ---- Engine imports ----
from remap_core.config import (
    load_config,
    seed_rng,
    make_rng,
    GENERIC_ERROR,
    NO_FILE_ERROR,
    OUTPUT_EXT,
    XLSX_MEDIA_TYPE,
)
from remap_core.job import JobBusyError, ProcessingError, RemapJob
from remap_core.remapper import AnswerKeyRemapper
from remap_core.legend import to_json as legend_to_json

log = logging.getLogger(__name__)

CFG = load_config()
seed_rng(CFG)
JOB = RemapJob(AnswerKeyRemapper.from_config(CFG))

app = FastAPI(title="Answer Key Remapper API")


@app.get("/")
def root():
    return {"status": "ok", "service": "answer-key-remapper"}


ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
    allow_credentials=False,
)

# ---- Schemas ----
class StatusResp(BaseModel):
    status: str
    filename: str | None = None
    error: str | None = None

class LegendResp(BaseModel):
    filename: str
    answer_key: str
    respondents: int
    columns: list[dict[str, t.Any]]

# ---- Helpers ----
def _read_upload(file: UploadFile | None) -> bytes:
    if file is None or not file.filename:
        raise HTTPException(400, NO_FILE_ERROR)
    if not file.filename.lower().endswith(OUTPUT_EXT):
        raise HTTPException(400, f"Please select a {OUTPUT_EXT} file")
    return file.file.read()


def _remapper_for(seed: int | None) -> AnswerKeyRemapper | None:
    if seed is None:
        return None
    return AnswerKeyRemapper.from_config(CFG, rng=make_rng(seed))


def _run(file: UploadFile | None, seed: int | None):
    data = _read_upload(file)
    try:
        return JOB.run(data, remapper=_remapper_for(seed))
    except JobBusyError:
        raise HTTPException(409, "Processing in progress, please wait.")
    except ProcessingError as e:
        raise HTTPException(422, e.message or GENERIC_ERROR)

# ---- Health ----
@app.get("/health")
def health():
    return {
        "combined_header": bool(CFG.get("COMBINED_HEADER")),
        "strict_shape": bool(CFG.get("STRICT_SHAPE")),
        "overflow": CFG.get("OVERFLOW"),
        "score_label": CFG.get("SCORE_LABEL"),
        "seeded": CFG.get("SEED") is not None,
    }


@app.get("/status", response_model=StatusResp)
def status():
    return StatusResp(**JOB.snapshot())

# ---- Processing ----
@app.post("/process")
def process(
    file: UploadFile | None = File(None),
    seed: int | None = Query(None, description="Fix the random letter draw for this run"),
):
    out = _run(file, seed)
    return Response(
        content=out.content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename=\"{out.filename}\""},
    )


@app.post("/process/legend", response_model=LegendResp)
def process_legend(
    file: UploadFile | None = File(None),
    seed: int | None = Query(None, description="Fix the random letter draw for this run"),
):
    out = _run(file, seed)
    return LegendResp(filename=out.filename, **legend_to_json(out.result))
