import json

import pytest

from rightshield.services.analysis import (
    AnalysisDecoded,
    AnalysisParseError,
    build_analysis_payload,
    decode_analysis,
    default_analysis,
    score_band,
)

LLM_TARGET = "rightshield.services.analysis.call_chat_completion"

GOOD_REPLY = {
    "rights_shield_score": 72,
    "financial_fairness_score": 65,
    "termination_flexibility_score": 40,
    "privacy_data_score": 85,
    "legal_liability_score": 70,
    "ethics_fairness_score": 80,
    "document_type": "rental",
    "key_clauses": [{"type": "termination", "text": "90 days notice", "risk_level": "high"}],
    "risk_factors": [
        {"description": "Long notice period", "severity": "high", "impact": "Hard to leave"},
        {"description": "Late fee", "severity": "low", "impact": "Minor cost"},
    ],
    "important_dates": [{"type": "renewal", "date": "2027-01-01", "description": "Auto renews"}],
    "obligations": [{"party": "tenant", "description": "Pay rent", "frequency": "monthly"}],
    "word_count": 1200,
    "summary": "A residential lease.",
    "confidence_score": 88,
}


# --- decode ---

def test_decode_valid_reply():
    result = decode_analysis(json.dumps(GOOD_REPLY))
    assert isinstance(result, AnalysisDecoded)
    assert result.analysis.document_type == "rental"
    assert result.analysis.key_clauses[0].risk_level == "high"


def test_decode_rejects_prose_around_json():
    result = decode_analysis("Here is the analysis: " + json.dumps(GOOD_REPLY))
    assert isinstance(result, AnalysisParseError)
    assert result.raw.startswith("Here is")


def test_decode_rejects_out_of_range_score():
    result = decode_analysis(json.dumps({**GOOD_REPLY, "privacy_data_score": 140}))
    assert isinstance(result, AnalysisParseError)
    assert "privacy_data_score" in result.message


def test_decode_rejects_missing_score():
    reply = dict(GOOD_REPLY)
    del reply["rights_shield_score"]
    assert isinstance(decode_analysis(json.dumps(reply)), AnalysisParseError)


def test_default_analysis():
    analysis = default_analysis("one two  three\nfour")
    assert analysis.rights_shield_score == 60
    assert analysis.ethics_fairness_score == 60
    assert analysis.confidence_score == 50
    assert analysis.document_type == "general"
    assert analysis.word_count == 4
    assert analysis.key_clauses == []


@pytest.mark.parametrize("score,band", [(100, "Fair"), (80, "Fair"), (79.9, "Caution"), (60, "Caution"), (59, "Risky"), (0, "Risky")])
def test_score_band(score, band):
    assert score_band(score) == band


def test_payload_aliases():
    analysis = decode_analysis(json.dumps(GOOD_REPLY)).analysis
    payload = build_analysis_payload(7, analysis)
    assert payload["fileName"] == "Document 7"
    assert payload["legalCategory"] == "rental"
    assert payload["confidenceScore"] == 88
    assert payload["sensitiveClause"] == "Long notice period"
    assert payload["ratings"]["termination_flexibility_score"] == "Risky"
    assert payload["ratings"]["privacy_data_score"] == "Fair"


def test_payload_without_risks_has_no_sensitive_clause():
    assert build_analysis_payload(1, default_analysis("x"))["sensitiveClause"] is None


# --- endpoint ---

def test_analyze_endpoint(client, fake_llm):
    calls = fake_llm(LLM_TARGET, json.dumps(GOOD_REPLY))
    resp = client.post("/api/analyze", json={"documentId": 7, "content": "The tenant shall pay rent."})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["fallback"] is False
    assert body["analysis"]["rights_shield_score"] == 72

    call = calls[0]
    assert call["json_mode"] is True
    assert call["max_tokens"] == 2000
    assert call["temperature"] == 0.3
    assert "The tenant shall pay rent." in call["messages"][1]["content"]


def test_analyze_fills_missing_word_count(client, fake_llm):
    reply = dict(GOOD_REPLY)
    del reply["word_count"]
    fake_llm(LLM_TARGET, json.dumps(reply))
    body = client.post("/api/analyze", json={"documentId": 1, "content": "a b c"}).json()
    assert body["analysis"]["word_count"] == 3


def test_analyze_uses_default_path_on_bad_reply(client, fake_llm):
    fake_llm(LLM_TARGET, "I cannot help with that.")
    body = client.post("/api/analyze", json={"documentId": 3, "content": "short doc"}).json()
    assert body["success"] is True
    assert body["fallback"] is True
    assert body["fallbackReason"]
    assert body["analysis"]["rights_shield_score"] == 60
    assert body["analysis"]["summary"] == "Document analysis completed with basic scoring."


def test_analyze_requires_content(client):
    resp = client.post("/api/analyze", json={"documentId": 3})
    assert resp.status_code == 400
    assert resp.json()["success"] is False


@pytest.mark.parametrize("document_id", [0, "", "   ", None])
def test_analyze_rejects_empty_document_id(client, fake_llm, document_id):
    calls = fake_llm(LLM_TARGET, json.dumps(GOOD_REPLY))
    resp = client.post("/api/analyze", json={"documentId": document_id, "content": "text"})
    assert resp.status_code == 400
    assert "documentId" in resp.json()["error"]
    assert calls == []


def test_analyze_accepts_uuid_document_id(client, fake_llm):
    fake_llm(LLM_TARGET, json.dumps(GOOD_REPLY))
    resp = client.post("/api/analyze", json={"documentId": "9b1d-44", "content": "text"})
    assert resp.status_code == 200


def test_analyze_without_llm_key(client, use_config):
    from rightshield.core.config import Settings
    use_config(Settings(OPENAI_API_KEY="", SUPABASE_URL=""))
    resp = client.post("/api/analyze", json={"documentId": 3, "content": "text"})
    assert resp.status_code == 503
    assert "OPENAI_API_KEY" in resp.json()["error"]


def test_analyze_persists_results(client, use_config, store_config, fake_llm, monkeypatch):
    use_config(store_config)
    fake_llm(LLM_TARGET, json.dumps(GOOD_REPLY))
    updates, inserts = [], []

    async def fake_update(config, table, match, values):
        updates.append((table, match, values))

    async def fake_insert(config, table, row):
        inserts.append((table, row))

    async def fake_user(config, token):
        return "user-1" if token == "good-token" else None

    monkeypatch.setattr("rightshield.services.analysis.update_rows", fake_update)
    monkeypatch.setattr("rightshield.services.analysis.insert_row", fake_insert)
    monkeypatch.setattr("rightshield.services.analysis.get_user_id", fake_user)

    resp = client.post(
        "/api/analyze",
        json={"documentId": 9, "content": "lease text"},
        headers={"Authorization": "Bearer good-token"},
    )
    assert resp.status_code == 200

    table, match, values = updates[0]
    assert table == "documents"
    assert match == {"id": 9}
    assert values["processing_status"] == "completed"
    assert values["termination_flexibility_score"] == 40
    assert values["parsed_content"] == "lease text"

    table, row = inserts[0]
    assert table == "analysis_results"
    assert row["user_id"] == "user-1"
    assert row["analysis_type"] == "comprehensive"
    assert row["confidence_score"] == 88


def test_analyze_skips_result_row_without_user(client, use_config, store_config, fake_llm, monkeypatch):
    use_config(store_config)
    fake_llm(LLM_TARGET, json.dumps(GOOD_REPLY))
    inserts = []

    async def fake_update(config, table, match, values):
        return None

    async def fake_insert(config, table, row):
        inserts.append(table)

    async def fake_user(config, token):
        return None

    monkeypatch.setattr("rightshield.services.analysis.update_rows", fake_update)
    monkeypatch.setattr("rightshield.services.analysis.insert_row", fake_insert)
    monkeypatch.setattr("rightshield.services.analysis.get_user_id", fake_user)

    assert client.post("/api/analyze", json={"documentId": 9, "content": "x"}).status_code == 200
    assert inserts == []


def test_analyze_reports_store_failure(client, use_config, store_config, fake_llm, monkeypatch):
    from rightshield.core.errors import StoreError
    use_config(store_config)
    fake_llm(LLM_TARGET, json.dumps(GOOD_REPLY))

    async def failing_update(config, table, match, values):
        raise StoreError("Database request failed (500)")

    monkeypatch.setattr("rightshield.services.analysis.update_rows", failing_update)
    resp = client.post("/api/analyze", json={"documentId": 9, "content": "x"})
    assert resp.status_code == 502
    assert resp.json() == {"success": False, "error": "Database request failed (500)"}
