from __future__ import annotations
import asyncio
from typing import Awaitable, Callable
from langgraph.graph import StateGraph, END
from ..state import AnalysisRequest, Phase, PipelineState
from ..utils import DocumentTextExtractor
from ..errors import ConfigurationError, ExtractionError, InferenceError, ValidationError
from ..agents.prompt_builder import PromptBuilder
from ..agents.inference import InferenceClient
from ..agents.response_validator import ResponseValidator

PhaseCallback = Callable[[str, Phase], None]


def build_graph(
    extractor: DocumentTextExtractor,
    prompt_builder: PromptBuilder,
    inference_client: InferenceClient,
    validator: ResponseValidator,
    on_phase: PhaseCallback,
) -> Callable[[PipelineState], Awaitable[PipelineState]]:
    """Compile extract -> infer -> validate. A node that finds ``state.error`` set passes the state through."""

    async def extract_node(state: PipelineState) -> PipelineState:
        on_phase(state.run_id, Phase.EXTRACTING)
        try:
            state.extracted = await asyncio.to_thread(extractor.extract, state.document)
        except ExtractionError as e:
            state.error = e
        # The document is consumed once and not kept past extraction
        state.document = None
        return state

    async def infer_node(state: PipelineState) -> PipelineState:
        if state.error:
            return state
        on_phase(state.run_id, Phase.AWAITING_INFERENCE)
        request = AnalysisRequest.from_role(state.extracted.text, state.role_title, state.role_description)
        state.payload = prompt_builder.build(request)
        try:
            state.raw_response = await inference_client.ainfer(
                state.payload.prompt_text, state.payload.output_schema
            )
        except (ConfigurationError, InferenceError) as e:
            state.error = e
        return state

    async def validate_node(state: PipelineState) -> PipelineState:
        if state.error:
            return state
        on_phase(state.run_id, Phase.VALIDATING)
        try:
            state.result = validator.validate(state.raw_response)
        except ValidationError as e:
            state.error = e
        return state

    g = StateGraph(PipelineState)
    g.add_node("extract", extract_node)
    g.add_node("infer", infer_node)
    g.add_node("validate", validate_node)

    g.set_entry_point("extract")
    g.add_edge("extract", "infer")
    g.add_edge("infer", "validate")
    g.add_edge("validate", END)

    app = g.compile()

    async def runner(state: PipelineState) -> PipelineState:
        final = await app.ainvoke(state)
        # LangGraph may hand back a plain dict; coerce into PipelineState for uniform handling
        if isinstance(final, dict):
            final = PipelineState.model_validate(final)
        return final

    return runner
