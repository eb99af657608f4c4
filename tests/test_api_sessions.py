"""Tests for sessions API endpoints."""

from conftest import PATIENT_USER

SESSIONS = [
    {
        "id": "s1",
        "patientId": "p1",
        "patient": {"id": "p1", "fullName": "Ana Ruiz"},
        "startedAt": "2025-11-10T08:00:00Z",
        "durationSecs": 30,
        "romMaxDeg": 90,
        "exerciseId": "heel_slide",
        "phaseLabel": "Phase 1",
    },
    {
        "id": "s2",
        "patientId": "p1",
        "patient": {"id": "p1", "fullName": "Ana Ruiz"},
        "startedAt": "2025-11-12T08:00:00Z",
        "durationSecs": 40,
        "romMaxDeg": 100,
        "exerciseId": "heel_slide",
        "phaseLabel": "Phase 1",
    },
    {
        "id": "s3",
        "patientId": "p2",
        "patient": {"id": "p2", "name": "Luis"},
        "startedAt": "2025-11-11T08:00:00Z",
        "durationSecs": 20,
        "romMaxDeg": 60,
        "exerciseId": "mini_squat_0_45",
        "phaseLabel": None,
        "sessionType": "gamification_session",
    },
    {
        "id": "s4",
        "patientId": "p2",
        "startedAt": "2025-11-09T08:00:00Z",
        "durationSecs": None,
        "romMaxDeg": None,
        "exerciseId": "",
    },
]


class TestAuthGuard:
    """Test role guard on clinical routes."""

    def test_missing_token_returns_401(self, api_client):
        response = api_client.get("/api/sessions")
        assert response.status_code == 401

    def test_patient_role_returns_403(self, api_client, fake_backend, auth_headers):
        fake_backend.add("GET", "/auth/profile", PATIENT_USER)
        response = api_client.get("/api/sessions", headers=auth_headers)
        assert response.status_code == 403

    def test_expired_token_relayed_as_401(self, api_client, fake_backend, auth_headers):
        fake_backend.add("GET", "/auth/profile", {"message": "jwt expired"}, status=401)
        response = api_client.get("/api/sessions", headers=auth_headers)
        assert response.status_code == 401
        assert response.json()["detail"] == "Unauthorized"

    def test_token_forwarded_to_backend(self, api_client, fake_backend, auth_headers):
        fake_backend.add("GET", "/sessions", [])
        api_client.get("/api/sessions", headers=auth_headers)
        assert all(r.headers["Authorization"] == "Bearer tok-123" for r in fake_backend.requests)


class TestListSessions:
    """Test GET /api/sessions."""

    def test_newest_first(self, api_client, fake_backend, auth_headers):
        fake_backend.add("GET", "/sessions", SESSIONS)

        data = api_client.get("/api/sessions", headers=auth_headers).json()

        assert data["total"] == 4
        assert [s["id"] for s in data["sessions"]] == ["s2", "s3", "s1", "s4"]

    def test_filters(self, api_client, fake_backend, auth_headers):
        fake_backend.add("GET", "/sessions", SESSIONS)

        response = api_client.get(
            "/api/sessions",
            params={"from": "2025-11-10", "to": "2025-11-11", "search": "heel"},
            headers=auth_headers,
        )

        data = response.json()
        assert data["total"] == 4
        assert [s["id"] for s in data["sessions"]] == ["s1"]

    def test_camel_case_payload(self, api_client, fake_backend, auth_headers):
        fake_backend.add("GET", "/sessions", SESSIONS[:1])

        session = api_client.get("/api/sessions", headers=auth_headers).json()["sessions"][0]

        assert session["exerciseId"] == "heel_slide"
        assert session["romMaxDeg"] == 90


class TestSessionsAnalytics:
    """Test GET /api/sessions/analytics."""

    def test_exercise_statistics(self, api_client, fake_backend, auth_headers):
        fake_backend.add("GET", "/sessions", SESSIONS)

        response = api_client.get("/api/sessions/analytics", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["totalSessions"] == 4
        assert data["exerciseCount"] == 2
        assert data["topExercise"]["exerciseId"] == "heel_slide"
        heel, squat = data["exercises"]
        assert heel == {
            "exerciseId": "heel_slide",
            "label": "Heel Slide",
            "count": 2,
            "avgRom": 95,
            "maxRom": 100,
            "avgDuration": 35,
            "totalDuration": 70,
        }
        assert squat["label"] == "Mini Squat 0-45°"
        assert data["globalAvgRom"] == 77.5

    def test_pie_data(self, api_client, fake_backend, auth_headers):
        fake_backend.add("GET", "/sessions", SESSIONS)

        data = api_client.get("/api/sessions/analytics", headers=auth_headers).json()

        assert data["sessionsByPhase"] == [
            {"name": "Phase 1", "value": 2},
            {"name": "No phase", "value": 2},
        ]
        assert data["topPatients"] == [
            {"name": "Ana Ruiz", "value": 2},
            {"name": "Luis", "value": 1},
        ]

    def test_no_sessions(self, api_client, fake_backend, auth_headers):
        fake_backend.add("GET", "/sessions", [])

        data = api_client.get("/api/sessions/analytics", headers=auth_headers).json()

        assert data["exercises"] == []
        assert data["topExercise"] is None
        assert data["globalAvgRom"] is None


class TestGetSession:
    """Test GET /api/sessions/{session_id}."""

    def test_with_backend_analysis(self, api_client, fake_backend, auth_headers):
        fake_backend.add("GET", "/sessions/s1", SESSIONS[0])
        fake_backend.add(
            "GET",
            "/analysis/session/s1",
            {
                "sessionId": "s1",
                "patientId": "p1",
                "exerciseId": "heel_slide",
                "rom": 90,
                "durationSecs": 30,
                "percentilePatientExercise": 40,
                "percentileGlobalExercise": 70,
                "abovePatientAvg": False,
                "aboveGlobalAvg": True,
                "patientExerciseAvgRom": 95,
                "globalExerciseAvgRom": 80,
            },
        )

        data = api_client.get("/api/sessions/s1", headers=auth_headers).json()

        assert data["usedFallback"] is False
        assert data["analysis"]["percentileGlobalExercise"] == 70

    def test_fallback_when_analysis_missing(self, api_client, fake_backend, auth_headers):
        fake_backend.add("GET", "/sessions/s1", SESSIONS[0])

        data = api_client.get("/api/sessions/s1", headers=auth_headers).json()

        assert data["usedFallback"] is True
        assert data["analysis"]["rom"] == 90
        assert data["analysis"]["percentilePatientExercise"] == 50
        assert len(data["analysis"]["clinicalFlags"]) == 1

    def test_missing_session_returns_404(self, api_client, fake_backend, auth_headers):
        response = api_client.get("/api/sessions/nope", headers=auth_headers)
        assert response.status_code == 404

    def test_fallback_when_analysis_malformed(self, api_client, fake_backend, auth_headers):
        fake_backend.add("GET", "/sessions/s1", SESSIONS[0])
        fake_backend.add(
            "GET",
            "/analysis/session/s1",
            {"sessionId": "s1", "patientId": "p1", "exerciseId": "heel_slide", "rom": None},
        )

        response = api_client.get("/api/sessions/s1", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["usedFallback"] is True
        assert data["analysis"]["rom"] == 90

    def test_fallback_when_analysis_not_json(self, api_client, fake_backend, auth_headers):
        fake_backend.add("GET", "/sessions/s1", SESSIONS[0])
        fake_backend.add("GET", "/analysis/session/s1", "<html>Bad Gateway</html>")

        response = api_client.get("/api/sessions/s1", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["usedFallback"] is True

    def test_fallback_when_analysis_unreachable(self, api_client, fake_backend, auth_headers):
        fake_backend.add("GET", "/sessions/s1", SESSIONS[0])
        fake_backend.refuse("GET", "/analysis/session/s1")

        response = api_client.get("/api/sessions/s1", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["usedFallback"] is True

    def test_exercise_catalog_details(self, api_client, fake_backend, auth_headers):
        fake_backend.add("GET", "/sessions/s1", SESSIONS[0])

        data = api_client.get("/api/sessions/s1", headers=auth_headers).json()

        assert data["exerciseLabel"] == "Heel Slide"
        assert data["exerciseDescription"].startswith("Assisted heel slide")

    def test_unknown_exercise_uses_raw_id(self, api_client, fake_backend, auth_headers):
        fake_backend.add("GET", "/sessions/s9", {**SESSIONS[0], "id": "s9", "exerciseId": "step_up"})

        data = api_client.get("/api/sessions/s9", headers=auth_headers).json()

        assert data["exerciseLabel"] == "step_up"
        assert data["exerciseDescription"] is None
