import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from rightshield.core.config import Settings
from rightshield.core.errors import describe_validation_error
from rightshield.models.schemas import DocumentAnalysis
from rightshield.services.simulation import CATEGORY_FIELDS, OVERALL_FIELD
from rightshield.utils.llm_client import call_chat_completion
from rightshield.utils.store_client import get_user_id, insert_row, store_enabled, update_rows

logger = logging.getLogger(__name__)

# ---------------------------------------------------------
# 1. PROMPT
# ---------------------------------------------------------

ANALYSIS_SYSTEM_PROMPT = """You are a legal document analysis AI that provides comprehensive scoring and analysis.

Analyze the document and return a JSON object with:
1. rights_shield_score (0-100): Overall fairness score
2. financial_fairness_score (0-100): How fair are the financial terms
3. termination_flexibility_score (0-100): How flexible are termination terms
4. privacy_data_score (0-100): How well does it protect privacy/data
5. legal_liability_score (0-100): How balanced is the liability
6. ethics_fairness_score (0-100): Overall ethical fairness
7. document_type: rental, employment, service, nda, etc.
8. key_clauses: Array of important clauses with type, text, risk_level
9. risk_factors: Array of risks with description, severity, impact
10. important_dates: Array of dates/deadlines with type, date, description
11. obligations: Array of obligations with party, description, frequency
12. word_count: Number of words
13. summary: 2-3 sentence summary
14. confidence_score: How confident you are (0-100)

Be thorough and realistic in scoring. Higher scores = more fair/favorable.
Return the JSON object only."""

def build_analysis_messages(content: str):
    return [
        {"role": "system", "content": ANALYSIS_SYSTEM_PROMPT},
        {"role": "user", "content": f"Please analyze this legal document:\n\n{content}"},
    ]

# ---------------------------------------------------------
# 2. Strict decode
# ---------------------------------------------------------

@dataclass
class AnalysisDecoded:
    analysis: DocumentAnalysis

@dataclass
class AnalysisParseError:
    message: str
    raw: str

AnalysisResult = Union[AnalysisDecoded, AnalysisParseError]

def decode_analysis(raw: str) -> AnalysisResult:
    """
    Validates the model reply against DocumentAnalysis. No repair is
    attempted: text around the JSON, missing scores or out-of-range values
    all produce an AnalysisParseError.
    """
    try:
        return AnalysisDecoded(DocumentAnalysis.model_validate_json(raw))
    except ValidationError as e:
        return AnalysisParseError(describe_validation_error(e), raw)

def count_words(content: str) -> int:
    return len(content.split())

def default_analysis(content: str) -> DocumentAnalysis:
    """
    Neutral analysis used when the model reply cannot be decoded: every
    score 60, confidence 50, no clauses. Responses built from it are marked
    with ``fallback: true``.
    """
    scores = {field: 60 for field in CATEGORY_FIELDS.values()}
    scores[OVERALL_FIELD] = 60
    return DocumentAnalysis(
        **scores,
        document_type="general",
        word_count=count_words(content),
        summary="Document analysis completed with basic scoring.",
        confidence_score=50,
    )

# ---------------------------------------------------------
# 3. Presentation
# ---------------------------------------------------------

def score_band(score: float) -> str:
    if score >= 80:
        return "Fair"
    if score >= 60:
        return "Caution"
    return "Risky"

def build_analysis_payload(document_id: Any, analysis: DocumentAnalysis) -> Dict[str, Any]:
    data = analysis.model_dump()
    score_fields = [OVERALL_FIELD, *CATEGORY_FIELDS.values()]
    data.update({
        "fileName": f"Document {document_id}",
        "confidenceScore": analysis.confidence_score,
        "legalCategory": analysis.document_type,
        "sensitiveClause": analysis.risk_factors[0].description if analysis.risk_factors else None,
        "ratings": {f: score_band(data[f]) for f in score_fields},
    })
    return data

# ---------------------------------------------------------
# 4. Persistence
# ---------------------------------------------------------

async def persist_analysis(
    config: Settings,
    document_id: Any,
    content: str,
    analysis: DocumentAnalysis,
    token: Optional[str] = None,
) -> None:
    data = analysis.model_dump()
    values = {f: data[f] for f in (OVERALL_FIELD, *CATEGORY_FIELDS.values())}
    values.update({
        "processing_status": "completed",
        "document_type": analysis.document_type,
        "parsed_content": content,
        "key_clauses": data["key_clauses"],
        "risk_factors": data["risk_factors"],
        "important_dates": data["important_dates"],
        "obligations": data["obligations"],
        "word_count": analysis.word_count,
    })
    await update_rows(config, "documents", {"id": document_id}, values)

    user_id = await get_user_id(config, token)
    if user_id:
        await insert_row(config, "analysis_results", {
            "document_id": document_id,
            "user_id": user_id,
            "analysis_type": "comprehensive",
            "result_data": data,
            "confidence_score": analysis.confidence_score,
        })

# ---------------------------------------------------------
# 5. MAIN LOGIC
# ---------------------------------------------------------

async def analyze_document(
    config: Settings,
    document_id: Any,
    content: str,
    token: Optional[str] = None,
) -> Dict[str, Any]:
    logger.info("[ANALYZE] analyzing document %s (%d chars)", document_id, len(content))

    raw = await call_chat_completion(
        config,
        build_analysis_messages(content),
        max_tokens=2000,
        temperature=0.3,
        json_mode=True,
    )

    result = decode_analysis(raw)
    fallback_reason = None
    if isinstance(result, AnalysisDecoded):
        analysis = result.analysis
        if analysis.word_count is None:
            analysis.word_count = count_words(content)
    else:
        logger.warning("[ANALYZE] could not decode model reply, using default analysis: %s", result.message)
        analysis = default_analysis(content)
        fallback_reason = result.message

    if store_enabled(config):
        await persist_analysis(config, document_id, content, analysis, token)

    logger.info("[ANALYZE] document %s scored %s", document_id, analysis.rights_shield_score)

    return {
        "success": True,
        "analysis": build_analysis_payload(document_id, analysis),
        "fallback": fallback_reason is not None,
        "fallbackReason": fallback_reason,
    }
