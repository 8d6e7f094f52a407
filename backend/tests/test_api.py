"""
Endpoint tests through the FastAPI TestClient.

These check the HTTP contract: camelCase bodies, the 400 rules and the
{"error": ...} shape. The service logic itself is covered in the other
test modules.
Run with: pytest tests/test_api.py -v
"""

import pytest

from app.services.generation.poi import POI_TEMPLATES


MOTION = "This House would ban single-use plastics"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


# =============================================================================
# /api/adjudicate
# =============================================================================

def test_adjudicate_prohibition_round(client):
    response = client.post("/api/adjudicate", json={
        "motion": MOTION,
        "userRole": "LO",
        "speeches": [
            {"role": "LO", "content": "However, the government's evidence is weak", "isAI": False},
        ],
        "seed": 3,
    })

    assert response.status_code == 200
    body = response.json()
    prohibition = [c for c in body["clashes"] if c["title"] == "Prohibition Scope and Justification"]
    assert prohibition and prohibition[0]["weight"] == 9
    assert set(body["teamScores"]["OO"]) == {"matter", "manner", "method", "total"}
    assert "averageArgumentQuality" in body["performanceMetrics"]


def test_adjudicate_without_human_speech(client):
    response = client.post("/api/adjudicate", json={
        "motion": MOTION,
        "userRole": "PM",
        "speeches": [{"role": "PM", "content": "We propose.", "isAI": True}],
    })

    assert response.status_code == 200
    body = response.json()
    assert body["ranking"] == ["OG", "OO", "CG", "CO"]
    assert body["teamScores"] == {
        "OG": {"total": 20},
        "OO": {"total": 18},
        "CG": {"total": 16},
        "CO": {"total": 14},
    }
    assert set(body["performanceMetrics"].values()) == {5}
    assert body["feedback"] == "Unable to analyze speech properly. Please try again."
    assert "methodology" not in body


def test_adjudicate_seed_makes_cards_identical(client):
    payload = {
        "motion": MOTION,
        "userRole": "PM",
        "speeches": [{"role": "PM", "content": "First, the harm matters.", "isAI": False}],
        "seed": 12,
    }
    first = client.post("/api/adjudicate", json=payload).json()
    second = client.post("/api/adjudicate", json=payload).json()
    assert first == second


def test_bad_body_is_400_with_error(client):
    response = client.post("/api/adjudicate", json={"speeches": "not a list"})

    assert response.status_code == 400
    assert "error" in response.json()


# =============================================================================
# /api/comprehensive-feedback
# =============================================================================

def test_comprehensive_feedback_shape(client):
    response = client.post("/api/comprehensive-feedback", json={
        "motion": "This House would ban zoos",
        "userRole": "PM",
        "userSpeech": "We define the motion clearly. The harm to animals is severe.",
        "speeches": [],
        "debatePhase": "complete",
    })

    assert response.status_code == 200
    body = response.json()
    assert {"clashPoints", "teamFeedback", "debateProgression", "strategicRecommendations",
            "debateQuality", "methodology"} <= set(body)
    assert [t["team"] for t in body["teamFeedback"]] == ["Government", "Opposition"]
    assert all(1 <= c["strategicImportance"] <= 10 for c in body["clashPoints"])


# =============================================================================
# /api/generate-poi
# =============================================================================

def test_poi_outside_window_is_null(client):
    response = client.post("/api/generate-poi", json={
        "currentTranscript": "We believe in this policy.",
        "role": "PM",
        "motion": MOTION,
        "timeSpoken": 30,
    })

    assert response.status_code == 200
    assert response.json() == {"poi": None}


def test_poi_beginner_inside_window(client):
    response = client.post("/api/generate-poi", json={
        "currentTranscript": "We believe in this policy.",
        "role": "PM",
        "motion": MOTION,
        "timeSpoken": 120,
        "skillLevel": "beginner",
    })

    assert response.status_code == 200
    assert response.json()["poi"] in POI_TEMPLATES["beginner"]


# =============================================================================
# /api/generate-speech
# =============================================================================

@pytest.mark.parametrize(
    "user_speech",
    [{}, {"userSpeech": ""}, {"userSpeech": None}],
    ids=["absent", "empty", "null"],
)
def test_generate_speech_requires_user_speech(client, user_speech):
    response = client.post("/api/generate-speech", json={"motion": MOTION, "role": "LO", **user_speech})

    assert response.status_code == 400
    assert response.json() == {"error": "User must speak first"}


def test_generate_speech(client):
    response = client.post("/api/generate-speech", json={
        "motion": MOTION,
        "role": "LO",
        "userSpeech": "Plastic waste harms the environment because it never breaks down.",
        "userSkillLevel": "advanced",
        "previousSpeeches": [{"role": "PM", "content": "Plastic waste...", "isAI": False}],
    })

    assert response.status_code == 200
    body = response.json()
    assert body["skillLevel"] == "advanced"
    assert body["speech"].startswith("Thank you, Chair.")


def test_generate_speech_missing_role_is_400(client):
    response = client.post("/api/generate-speech", json={"motion": MOTION, "userSpeech": "hello"})
    assert response.status_code == 400


# =============================================================================
# /api/generate-speech-with-engagement
# =============================================================================

def test_engaged_speech(client):
    response = client.post("/api/generate-speech-with-engagement", json={
        "motion": MOTION,
        "role": "MO",
        "userSpeech": "My argument is that the economic cost falls on the poor.",
        "previousSpeeches": [
            {"role": "PM", "content": "The economic benefits will be enormous for everyone.", "isAI": True},
            {"role": "LO", "content": "My argument is that the economic cost falls on the poor.", "isAI": False},
        ],
    })

    assert response.status_code == 200
    body = response.json()
    assert body["speech"]
    assert body["engagementAnalysis"]["rebuttals"] == ["Counter PM's argument about economic argument"]
    assert 0 <= body["engagementQuality"]["overallScore"] <= 10
    assert "CURRENT SPEAKER: Member of Opposition" in body["debateState"]


def test_engaged_speech_without_user_speech(client):
    response = client.post("/api/generate-speech-with-engagement", json={"motion": MOTION, "role": "GW"})
    assert response.status_code == 200


# =============================================================================
# /api/process-prep-notes
# =============================================================================

def test_process_prep_notes(client):
    response = client.post("/api/process-prep-notes", json={
        "notes": "Taxes will cost families money because prices rise.",
        "motion": "This House would tax sugar",
        "role": "GW",
        "team": "Closing Government",
        "skillLevel": "intermediate",
    })

    assert response.status_code == 200
    body = response.json()
    assert len(body["structuredCase"]["mainArguments"]) == 2
    assert body["strategicGuidance"]["timingGuidance"]["totalTime"] == "7 minutes maximum"
    assert body["roleSpecificDuties"][0] == "Summarize government case"
    assert body["structuredCase"]["rebuttals"][0]["target"] == "Opposition Challenges"


# =============================================================================
# /api/structure-notes
# =============================================================================

def test_structure_notes(client):
    response = client.post("/api/structure-notes", json={
        "motion": MOTION,
        "role": "MG",
        "notes": "Focus on ocean harm.",
    })

    assert response.status_code == 200
    notes = response.json()["structuredNotes"]
    assert "### Role: Member of Government (Closing Government)" in notes


def test_structure_notes_empty_motion(client):
    response = client.post("/api/structure-notes", json={"motion": "", "role": "PM", "notes": ""})

    assert response.status_code == 400
    assert response.json() == {"error": "Motion is required and must be a non-empty string."}


def test_structure_notes_unknown_role(client):
    response = client.post("/api/structure-notes", json={"motion": MOTION, "role": "Whip", "notes": ""})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid role provided. Accepted roles are: PM, LO, DPM, DLO, MG, MO, GW, OW."


def test_structure_notes_non_string_notes(client):
    response = client.post("/api/structure-notes", json={"motion": MOTION, "role": "PM", "notes": ["a", "b"]})

    assert response.status_code == 400
    assert response.json() == {"error": "Notes must be a string."}
