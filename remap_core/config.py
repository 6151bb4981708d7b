from __future__ import annotations
import os, json, pathlib, random


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int | None) -> int | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


LETTERS: tuple[str, ...] = ("A", "B", "C", "D", "E")
ID_COLUMNS: int = 2  # name, class

WIDTH_PADDING: int = 2

OUTPUT_PREFIX: str = "ANABUT_"
OUTPUT_EXT: str = ".xlsx"
TIMESTAMP_LEN: int = 15
SHEET_NAME: str = "Processed Data"
XLSX_MEDIA_TYPE: str = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

SCORE_LABEL: str = "NILAI"
COMBINED_HEADER: bool = True
STRICT_SHAPE: bool = False
OVERFLOW_MODES: tuple[str, ...] = ("wrap", "error")
OVERFLOW: str = "wrap"
SEED: int | None = None

GENERIC_ERROR: str = "Error processing file. Please try again."
NO_FILE_ERROR: str = "Please select a file first"

# // env overrides; defaults reproduce the original sheet layout.
COMBINED_HEADER = _env_bool("COMBINED_HEADER", COMBINED_HEADER)
STRICT_SHAPE = _env_bool("STRICT_SHAPE", STRICT_SHAPE)
SCORE_LABEL = _env_str("SCORE_LABEL", SCORE_LABEL)
OVERFLOW = _env_str("OVERFLOW", OVERFLOW).lower()
if OVERFLOW not in OVERFLOW_MODES:
    OVERFLOW = "wrap"
SEED = _env_int("SEED", SEED)


def _env_true(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1","true","yes","on")
def load_config() -> dict:
    cfg = {
        "COMBINED_HEADER": COMBINED_HEADER,
        "STRICT_SHAPE": STRICT_SHAPE,
        "OVERFLOW": OVERFLOW,
        "SCORE_LABEL": SCORE_LABEL,
        "SEED": SEED,
    }
    p = pathlib.Path("config.json")
    if p.exists():
        try: cfg.update(json.loads(p.read_text(encoding="utf-8")))
        except Exception: pass
    e = os.environ
    if e.get("COMBINED_HEADER"): cfg["COMBINED_HEADER"] = _env_true("COMBINED_HEADER")
    if e.get("STRICT_SHAPE"): cfg["STRICT_SHAPE"] = _env_true("STRICT_SHAPE")
    if e.get("OVERFLOW"): cfg["OVERFLOW"] = e.get("OVERFLOW").strip().lower()
    if e.get("SCORE_LABEL"): cfg["SCORE_LABEL"] = e.get("SCORE_LABEL")
    if e.get("SEED"): cfg["SEED"] = int(e.get("SEED"))
    if cfg.get("OVERFLOW") not in OVERFLOW_MODES:
        cfg["OVERFLOW"] = "wrap"
    return cfg
def seed_rng(cfg: dict):
    s = cfg.get("SEED")
    if s is not None:
        random.seed(int(s))
def make_rng(seed: int | None = None):
    """Return a private Random for a seeded run, or the shared module RNG."""
    if seed is None:
        return random
    return random.Random(int(seed))
