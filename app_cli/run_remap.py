# app_cli/run_remap.py
from __future__ import annotations
import argparse, json, logging, os, sys
from typing import List, Optional

from remap_core.config import load_config, make_rng, NO_FILE_ERROR, OUTPUT_EXT, OVERFLOW_MODES
from remap_core.job import ProcessingError, RemapJob
from remap_core.remapper import AnswerKeyRemapper
from remap_core.legend import to_csv as legend_to_csv


def _parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Remap answer text to A-E codes and score each respondent.")
    ap.add_argument("input", nargs="?", help="workbook: names, classes, then one column per question")
    ap.add_argument("--out-dir", default="reports")
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--no-combined-header", action="store_true")
    ap.add_argument("--strict", action="store_true")
    ap.add_argument("--overflow", choices=list(OVERFLOW_MODES), default=None)
    ap.add_argument("--legend", action="store_true", help="also write the letter legend as CSV")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    a = _parser().parse_args(argv)

    if not a.input:
        print(NO_FILE_ERROR, file=sys.stderr)
        return 2
    if not a.input.lower().endswith(OUTPUT_EXT) or not os.path.isfile(a.input):
        print(f"Please select a {OUTPUT_EXT} file", file=sys.stderr)
        return 2

    cfg = load_config()
    if a.seed is not None: cfg["SEED"] = a.seed
    if a.no_combined_header: cfg["COMBINED_HEADER"] = False
    if a.strict: cfg["STRICT_SHAPE"] = True
    if a.overflow: cfg["OVERFLOW"] = a.overflow

    job = RemapJob(AnswerKeyRemapper.from_config(cfg, rng=make_rng(cfg.get("SEED"))))
    with open(a.input, "rb") as f:
        data = f.read()
    try:
        out = job.run(data)
    except ProcessingError as e:
        print(e.message, file=sys.stderr)
        return 1

    os.makedirs(a.out_dir, exist_ok=True)
    path = os.path.join(a.out_dir, out.filename)
    with open(path, "wb") as f:
        f.write(out.content)
    print(f"Done. Saved to: {path}")

    if a.legend:
        legend_path = os.path.splitext(path)[0] + "_legend.csv"
        with open(legend_path, "w", encoding="utf-8", newline="") as f:
            f.write(legend_to_csv(out.result))
        print(f"Legend: {legend_path}")
        print(json.dumps({"answer_key": out.result.answer_key, "scores": out.result.scores}))
    return 0


if __name__ == "__main__":
    sys.exit(main())
