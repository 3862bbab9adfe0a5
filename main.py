from __future__ import annotations
import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path
from dotenv import load_dotenv
BASE_DIR = Path(__file__).parent.resolve()
sys.path.insert(0, str(BASE_DIR))
from resumelens.orchestrator import AnalysisOrchestrator
from resumelens.agents.report_agent import render_markdown
from resumelens.errors import PreconditionError
from resumelens.utils import load_document


def main() -> int:
    load_dotenv()  # load .env if exists
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    parser = argparse.ArgumentParser(description="ResumeLens: score a resume against a target role (Gemini/Mistral)")
    parser.add_argument("--cv", required=True, help="Path to CV file (.pdf, .docx, .txt or .md)")
    parser.add_argument("--role", default="", help="Target role title, e.g. 'Data Analyst'")
    parser.add_argument("--description", default="", help="Role description text, or @path to read it from a file")
    parser.add_argument("--out", default="report.md", help="Output markdown path")
    parser.add_argument("--json", dest="json_out", default=None, help="Also write the raw result as JSON to this path")
    parser.add_argument("--provider", default=None, choices=["gemini", "mistral"], help="Override LLM_PROVIDER")
    parser.add_argument("--language", default="english", choices=["english", "indonesia"], help="Report language")
    args = parser.parse_args()

    if args.provider:
        # Settings are read once; the override has to be in place before the first read
        os.environ["LLM_PROVIDER"] = args.provider

    description = args.description
    if description.startswith("@"):
        description = Path(description[1:]).read_text(encoding="utf-8")

    try:
        document = load_document(args.cv)
    except (OSError, ValueError) as e:
        print(f"[ERR] {e}")
        return 2

    orchestrator = AnalysisOrchestrator()
    try:
        outcome = asyncio.run(orchestrator.submit_analysis(document, args.role, description))
    except PreconditionError as e:
        print(f"[ERR] {e.message}")
        return 2

    for w in outcome.warnings:
        print(f"[WARN] {w}")

    if not outcome.succeeded:
        print(f"[ERR] Analysis failed ({outcome.error_kind.value}): {outcome.error.message}")
        return 1

    out_path = Path(args.out)
    out_path.write_text(render_markdown(outcome.result, args.language), encoding="utf-8")
    print(f"[OK] Report written to: {out_path.resolve()}")
    if args.json_out:
        json_path = Path(args.json_out)
        json_path.write_text(json.dumps(outcome.result.model_dump(), indent=2, ensure_ascii=False), encoding="utf-8")
        print(f"[OK] JSON written to: {json_path.resolve()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
