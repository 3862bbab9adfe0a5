from __future__ import annotations
import re
from typing import Dict, Iterable, List

from .response_validator import AnalysisResult


HEADERS: Dict[str, List[str]] = {
    "english": ["## Match Score", "## ATS Friendliness", "## Skills Found", "## Missing Keywords", "## Bullet Point Rewrites"],
    "indonesia": ["## Skor Kecocokan", "## Keramahan ATS", "## Keahlian Terdeteksi", "## Kata Kunci yang Hilang", "## Perbaikan Poin Pengalaman"],
}

NONE_LABEL = {"english": "None identified", "indonesia": "Belum teridentifikasi"}
TABLE_HEAD = {"english": "| Original | Suggestion |", "indonesia": "| Asli | Saran |"}


def _lang(language: str | None) -> str:
    lang = (language or "").lower()
    if lang.startswith("indo") or lang == "id":
        return "indonesia"
    return "english"


def normalize_keywords(items: Iterable[str]) -> List[str]:
    """Case-insensitive de-duplication for display, keeping the first spelling seen."""
    seen: set[str] = set()
    out: List[str] = []
    for item in items:
        key = item.strip().casefold()
        if key and key not in seen:
            seen.add(key)
            out.append(item.strip())
    return out


def _cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ").strip()


def postprocess_markdown(md: str) -> str:
    s = md.replace("\r\n", "\n").replace("\r", "\n")
    # Collapse 3+ blank lines to 2
    s = re.sub(r"\n{3,}", "\n\n", s)
    # Trim trailing spaces
    s = re.sub(r"[ \t]+\n", "\n", s)
    return s.rstrip() + "\n"


def render_markdown(result: AnalysisResult, language: str = "english") -> str:
    lang = _lang(language)
    score_h, ats_h, skills_h, missing_h, bullets_h = HEADERS[lang]
    none = NONE_LABEL[lang]

    lines: List[str] = [score_h, f"**{result.score}/100**"]
    lines += ["", ats_h, result.atsFriendliness.strip() or "-"]

    lines += ["", skills_h]
    skills = normalize_keywords(result.skillsFound)
    lines += [f"- {s}" for s in skills] or [f"- {none}"]

    lines += ["", missing_h]
    missing = normalize_keywords(result.missingKeywords)
    lines += [f"- {k}" for k in missing] or [f"- {none}"]

    lines += ["", bullets_h, TABLE_HEAD[lang], "|---|---|"]
    if result.weakBulletPoints:
        for bp in result.weakBulletPoints:
            lines.append(f"| {_cell(bp.original)} | {_cell(bp.suggestion)} |")
    else:
        lines.append(f"| - | {none} |")
    return postprocess_markdown("\n".join(lines))
