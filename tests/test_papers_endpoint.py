from __future__ import annotations


def _add_questions(client, n: int, *, type: str, difficulty: str, tags: list[str], confidence: int = 50) -> list[int]:
    ids = []
    for idx in range(n):
        resp = client.post(
            "/api/questions",
            json={
                "question": f"{type} {difficulty} question {idx} on {', '.join(tags)}",
                "type": type,
                "difficulty": difficulty,
                "source_text": "Chapter notes",
                "answer": "Model answer",
                "tags": tags,
                "confidence": confidence + idx,
            },
        )
        assert resp.status_code == 201
        ids.append(resp.json()["id"])
    return ids


def _paper_request(**overrides) -> dict:
    payload = {
        "title": "Mid-term",
        "subject": "Physics",
        "total_marks": 15,
        "duration": 90,
        "difficulty": "medium",
        "question_types": {
            "mcq": {"count": 5, "marks": 1, "total_marks": 5},
            "short": {"count": 2, "marks": 5, "total_marks": 10},
            "long": {"count": 0, "marks": 10, "total_marks": 0},
        },
        "topics": ["newton"],
        "difficulty_distribution": {"easy": 40, "medium": 40, "hard": 20},
    }
    payload.update(overrides)
    return payload


def _seed_bank(client) -> None:
    _add_questions(client, 4, type="multiple-choice", difficulty="easy", tags=["Newton's Laws"])
    _add_questions(client, 4, type="multiple-choice", difficulty="medium", tags=["Newton's Laws"])
    _add_questions(client, 2, type="multiple-choice", difficulty="hard", tags=["Newton's Laws"])
    _add_questions(client, 1, type="short-answer", difficulty="easy", tags=["Newton's Laws"])
    _add_questions(client, 1, type="short-answer", difficulty="medium", tags=["Newton's Laws"])
    _add_questions(client, 3, type="essay", difficulty="hard", tags=["Optics"])


def test_generate_paper_and_read_it_back(client):
    _seed_bank(client)

    resp = client.post("/api/papers/generate", json=_paper_request())
    assert resp.status_code == 201
    body = resp.json()

    paper = body["paper"]
    assert body["paper_id"] == paper["paper_id"]
    assert body["message"] == "Paper generated successfully"
    assert body["shortfalls"] == []
    assert [q["section"] for q in paper["questions"]] == ["MCQ"] * 5 + ["Short Answer"] * 2
    assert [q["difficulty"] for q in paper["questions"][:5]] == ["easy", "easy", "medium", "medium", "hard"]
    assert all(q["marks"] == 1 for q in paper["questions"][:5])
    assert all(q["marks"] == 5 for q in paper["questions"][5:])

    stats = body["stats"]
    assert stats["total_questions"] == 7
    assert stats["questions_by_type"] == {"multiple-choice": 5, "short-answer": 2}
    assert stats["topic_coverage"] == ["Newton's Laws"]

    stored = client.get(f"/api/papers/{body['paper_id']}")
    assert stored.status_code == 200
    assert [q["question_id"] for q in stored.json()["questions"]] == [q["question_id"] for q in paper["questions"]]
    assert stored.json()["configuration"]["topics"] == ["newton"]
    assert stored.json()["stats"] == stats

    listing = client.get("/api/papers")
    assert listing.status_code == 200
    assert [(p["paper_id"], p["question_count"]) for p in listing.json()] == [(body["paper_id"], 7)]


def test_highest_confidence_questions_win(client):
    ids = _add_questions(client, 4, type="multiple-choice", difficulty="easy", tags=["Optics"], confidence=10)
    request = _paper_request(
        total_marks=2,
        topics=[],
        question_types={
            "mcq": {"count": 2, "marks": 1},
            "short": {"count": 0, "marks": 1},
            "long": {"count": 0, "marks": 1},
        },
        difficulty_distribution={"easy": 100, "medium": 0, "hard": 0},
    )

    resp = client.post("/api/papers/generate", json=request)
    assert resp.status_code == 201
    assert [q["question_id"] for q in resp.json()["paper"]["questions"]] == [ids[3], ids[2]]


def test_marks_mismatch_is_rejected(client):
    _seed_bank(client)

    resp = client.post("/api/papers/generate", json=_paper_request(total_marks=40))
    assert resp.status_code == 400
    detail = resp.json()["detail"]
    assert detail["error"] == "configuration_invalid"
    assert "Expected: 40" in detail["message"]
    assert client.get("/api/papers").json() == []


def test_percentage_mismatch_is_rejected(client):
    _seed_bank(client)

    resp = client.post(
        "/api/papers/generate",
        json=_paper_request(difficulty_distribution={"easy": 50, "medium": 40, "hard": 20}),
    )
    assert resp.status_code == 400
    assert resp.json()["detail"]["error"] == "configuration_invalid"


def test_empty_bank_is_rejected(client):
    resp = client.post("/api/papers/generate", json=_paper_request())
    assert resp.status_code == 400
    assert resp.json()["detail"]["error"] == "empty_pool"


def test_unmatched_topic_is_rejected(client):
    _seed_bank(client)

    resp = client.post("/api/papers/generate", json=_paper_request(topics=["Photosynthesis"]))
    assert resp.status_code == 400
    detail = resp.json()["detail"]
    assert detail["error"] == "no_matching_questions"
    assert "Photosynthesis" in detail["message"]


def test_short_supply_is_reported_not_fatal(client):
    _seed_bank(client)
    request = _paper_request(
        total_marks=50,
        topics=[],
        question_types={
            "mcq": {"count": 0, "marks": 1},
            "short": {"count": 0, "marks": 1},
            "long": {"count": 5, "marks": 10},
        },
        difficulty_distribution={"easy": 0, "medium": 0, "hard": 100},
    )

    resp = client.post("/api/papers/generate", json=request)
    assert resp.status_code == 201
    body = resp.json()
    assert [q["section"] for q in body["paper"]["questions"]] == ["Long Answer"] * 3
    assert body["shortfalls"] == [
        {"category": "long", "difficulty": "hard", "requested": 5, "selected": 3}
    ]


def test_paper_is_a_snapshot(client):
    _seed_bank(client)
    paper = client.post("/api/papers/generate", json=_paper_request()).json()["paper"]
    first = paper["questions"][0]

    patched = client.patch(f"/api/questions/{first['question_id']}", json={"question": "Rewritten"})
    assert patched.status_code == 200
    assert client.delete(f"/api/questions/{paper['questions'][1]['question_id']}").status_code == 200

    stored = client.get(f"/api/papers/{paper['paper_id']}").json()
    assert stored["questions"][0]["question"] == first["question"]
    assert len(stored["questions"]) == len(paper["questions"])


def test_regenerating_creates_a_new_paper(client):
    _seed_bank(client)
    first = client.post("/api/papers/generate", json=_paper_request()).json()
    second = client.post("/api/papers/generate", json=_paper_request()).json()

    assert first["paper_id"] != second["paper_id"]
    assert len(client.get("/api/papers").json()) == 2


def test_delete_paper(client):
    _seed_bank(client)
    paper_id = client.post("/api/papers/generate", json=_paper_request()).json()["paper_id"]

    assert client.delete(f"/api/papers/{paper_id}").status_code == 200
    assert client.get(f"/api/papers/{paper_id}").status_code == 404
    assert client.delete(f"/api/papers/{paper_id}").status_code == 404


def test_topics_are_unique_and_sorted(client):
    _add_questions(client, 2, type="essay", difficulty="hard", tags=["Optics", "Waves"])
    _add_questions(client, 1, type="short-answer", difficulty="easy", tags=["Energy", "Optics"])

    resp = client.get("/api/papers/topics")
    assert resp.status_code == 200
    assert resp.json() == {"topics": ["Energy", "Optics", "Waves"]}


def test_templates_round_trip(client):
    request = _paper_request()
    del request["question_types"]["mcq"]["total_marks"]

    saved = client.post("/api/papers/templates", json=request)
    assert saved.status_code == 201
    body = saved.json()
    assert body["id"] > 0
    assert body["question_types"]["mcq"]["total_marks"] == 5
    assert body["topics"] == ["newton"]

    listed = client.get("/api/papers/templates")
    assert listed.status_code == 200
    assert [t["id"] for t in listed.json()] == [body["id"]]
    assert client.get("/api/papers").json() == []


def test_malformed_request_is_a_validation_error(client):
    resp = client.post("/api/papers/generate", json=_paper_request(difficulty="impossible"))
    assert resp.status_code == 422
