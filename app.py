from __future__ import annotations
import asyncio
from pathlib import Path
import sys
import streamlit as st
BASE_DIR = Path(__file__).parent.resolve()
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

from resumelens.orchestrator import AnalysisOrchestrator
from resumelens.agents.report_agent import normalize_keywords, render_markdown
from resumelens.config import get_settings
from resumelens.errors import ConfigurationError, PreconditionError
from resumelens.state import Document
from resumelens.utils import media_type_for, slugify
from dotenv import load_dotenv


def get_orchestrator() -> AnalysisOrchestrator:
    # One orchestrator per browser session
    if "orchestrator" not in st.session_state:
        st.session_state["orchestrator"] = AnalysisOrchestrator()
    return st.session_state["orchestrator"]


def render_outcome(outcome, role: str, language: str) -> None:
    for w in outcome.warnings:
        st.warning(w)

    if not outcome.succeeded:
        st.error(f"Analysis failed ({outcome.error_kind.value}): {outcome.error.message}")
        return

    result = outcome.result
    col1, col2 = st.columns(2)
    col1.metric("Match score", f"{result.score}%")
    col2.metric("ATS friendliness", result.atsFriendliness)
    st.progress(result.score / 100)

    st.subheader("Skills found")
    st.write(", ".join(normalize_keywords(result.skillsFound)) or "-")
    st.subheader("Missing keywords")
    st.write(", ".join(normalize_keywords(result.missingKeywords)) or "-")

    st.subheader("Bullet point rewrites")
    for bp in result.weakBulletPoints:
        st.markdown(f"~~{bp.original}~~")
        st.code(bp.suggestion, language=None)

    md = render_markdown(result, language)
    fname = f"report-{slugify(role)}-{slugify(language)}.md"
    st.download_button(
        label="Download as .md",
        data=md.encode("utf-8"),
        file_name=fname,
        mime="text/markdown"
    )


def main():
    load_dotenv()
    st.set_page_config(page_title="ResumeLens", page_icon="📄", layout="centered")
    st.title("ResumeLens")
    st.caption("Score a resume against a target role, find missing keywords and sharpen weak bullet points.")

    with st.sidebar:
        role = st.text_input("Target role", placeholder="e.g., Data Analyst")
        description = st.text_area("Role description (optional)", height=200)
        language = st.selectbox("Report language", options=["english", "indonesia"], index=0)
        uploaded = st.file_uploader("Upload CV", type=["pdf", "docx", "txt", "md"], accept_multiple_files=False)
        run = st.button("Run analysis")

    if not run:
        return

    # Validate API key early for crisp UX
    try:
        get_settings().credentials()
    except ConfigurationError as e:
        st.error(e.message)
        return

    document = None
    if uploaded:
        try:
            document = Document(content=uploaded.getvalue(), media_type=media_type_for(uploaded.name), name=uploaded.name)
        except ValueError as e:
            st.error(str(e))
            return

    orchestrator = get_orchestrator()
    try:
        with st.spinner("Running analysis..."):
            outcome = asyncio.run(orchestrator.submit_analysis(document, role, description))
    except PreconditionError as e:
        st.warning(e.message)
        return

    render_outcome(outcome, role or "role", language)


if __name__ == "__main__":
    main()
