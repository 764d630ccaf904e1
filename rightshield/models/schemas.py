from pydantic import BaseModel, ConfigDict, Field, confloat, conint, constr
from typing import List, Dict, Any, Optional, Union

Score = Union[conint(ge=0, le=100), confloat(ge=0, le=100)]

# --- Scores & Simulation ---

class ScoreSet(BaseModel):
    rights_shield_score: Score
    financial_fairness_score: Score
    termination_flexibility_score: Score
    privacy_data_score: Score
    legal_liability_score: Score
    ethics_fairness_score: Score

class ChangeProposal(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str
    category: Optional[str] = None
    old_value: Any = Field(..., alias="oldValue")
    new_value: Any = Field(..., alias="newValue")
    description: Optional[str] = None

class SimulationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    original_scores: ScoreSet = Field(..., alias="originalScores")
    changes: List[ChangeProposal]

class ChangeImpact(BaseModel):
    type: str
    category: Optional[str] = None
    delta: float

class SimulationResult(BaseModel):
    simulated_scores: ScoreSet
    total_impact: float
    explanation: str
    impacts: List[ChangeImpact] = []

# --- Document Analysis ---

class AnalyzeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # 0 and "" are not document ids
    document_id: Union[conint(ge=1), constr(strip_whitespace=True, min_length=1)] = Field(..., alias="documentId")
    content: str = Field(..., min_length=1)

class KeyClause(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str = ""
    text: str = ""
    risk_level: Optional[str] = None

class RiskFactor(BaseModel):
    model_config = ConfigDict(extra="ignore")

    description: str = ""
    severity: Optional[str] = None
    impact: Optional[str] = None

class ImportantDate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: Optional[str] = None
    date: Optional[str] = None
    description: str = ""

class Obligation(BaseModel):
    model_config = ConfigDict(extra="ignore")

    party: Optional[str] = None
    description: str = ""
    frequency: Optional[str] = None

class DocumentAnalysis(ScoreSet):
    model_config = ConfigDict(extra="ignore")

    document_type: str = "general"
    key_clauses: List[KeyClause] = []
    risk_factors: List[RiskFactor] = []
    important_dates: List[ImportantDate] = []
    obligations: List[Obligation] = []
    word_count: Optional[int] = Field(None, ge=0)
    summary: str = ""
    confidence_score: Score = 50

# --- Chat ---

class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., min_length=1)
    session_id: Optional[str] = Field(None, alias="sessionId")
    personality: Optional[str] = "teacher"
    document_content: Optional[str] = Field(None, alias="documentContent")

# --- Benchmarks ---

class Benchmark(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    category: str
    metric_name: str
    metric_value: Optional[float] = None
    percentile_25: Optional[float] = None
    percentile_50: Optional[float] = None
    percentile_75: Optional[float] = None
    percentile_90: Optional[float] = None
    sample_size: Optional[int] = None
    geography: Optional[str] = None
    last_updated: Optional[str] = None

class BenchmarkView(BaseModel):
    metric_name: str
    category: str
    description: str
    average: Optional[str] = None
    percentiles: Dict[str, Optional[str]] = {}
    sample_size: int = 0

# --- Chat sessions & Templates ---

class ChatSessionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    personality: Optional[str] = "teacher"
    document_id: Optional[Union[int, str]] = Field(None, alias="documentId")
    document_type: Optional[str] = Field(None, alias="documentType")

class ContractTemplate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    name: str
    category: str
    description: Optional[str] = None
    template_content: str = ""
    fairness_score: Optional[float] = None
    is_verified: Optional[bool] = None
    tags: Optional[List[str]] = None
    usage_count: Optional[int] = None
