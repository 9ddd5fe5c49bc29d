from dailydose.models.orm import Role

ANSWERS = "/v1/student/answers"

def _browse(client, hdr, subject_id, **params):
    return client.get("/v1/questions", headers=hdr, params={"subjectId": subject_id, **params})

def test_browse_subject_without_answers(client, seed, auth, math_student):
    physics = seed.subject("Physics")
    seed.questions(physics, math_student["author_id"], 3)
    r = _browse(client, auth(math_student["student_id"]), math_student["subject_id"])
    assert r.status_code == 200
    body = r.json()
    assert body["total"] == 12
    assert [q["id"] for q in body["questions"]] == math_student["question_ids"]
    first = body["questions"][0]
    assert "correctOption" not in first and "explanation" not in first
    assert first["subjectId"] == math_student["subject_id"]
    assert sorted(o["key"] for o in first["options"]) == ["A", "B", "C", "D"]

def test_browse_limit_and_unknown_subject(client, seed, auth, math_student):
    hdr = auth(seed.user(Role.QAUTHOR))
    assert len(_browse(client, hdr, math_student["subject_id"], limit=5).json()["questions"]) == 5
    r = _browse(client, hdr, "missing")
    assert r.status_code == 404
    assert r.json()["error"]["type"] == "subject_not_found"
    assert client.get("/v1/questions", headers=hdr).status_code == 422
    assert client.get("/v1/questions", params={"subjectId": math_student["subject_id"]}).status_code == 401

def test_practice_answer_is_graded_once(client, auth, math_student):
    hdr = auth(math_student["student_id"])
    qid = math_student["question_ids"][0]
    r = client.post(ANSWERS, headers=hdr, json={"questionId": qid, "selectedOption": "B"})
    assert r.status_code == 200
    body = r.json()
    assert body["alreadyAttempted"] is False
    assert body["correctOption"] == "A"
    assert body["attempt"]["isCorrect"] is False
    assert body["attempt"]["selectedOption"] == "B"

    again = client.post(ANSWERS, headers=hdr, json={"questionId": qid, "selectedOption": "A"}).json()
    assert again["alreadyAttempted"] is True
    assert again["attempt"]["id"] == body["attempt"]["id"]
    assert again["attempt"]["isCorrect"] is False

    progress = client.get("/v1/student/progress", headers=hdr).json()
    assert progress["totalAttempts"] == 1

def test_practiced_question_left_out_of_daily_set(client, auth, math_student):
    hdr = auth(math_student["student_id"])
    first = math_student["question_ids"][0]
    client.post(ANSWERS, headers=hdr, json={"questionId": first, "selectedOption": "A"})
    ids = [q["id"] for q in client.get("/v1/daily-questions", headers=hdr).json()["questions"]]
    assert first not in ids
    assert ids == math_student["question_ids"][1:11]

def test_practice_unknown_question(client, seed, auth):
    r = client.post(ANSWERS, headers=auth(seed.user(Role.STUDENT)), json={"questionId": "missing", "selectedOption": "A"})
    assert r.status_code == 404
    assert r.json()["error"]["type"] == "question_not_found"

def test_practice_students_only(client, seed, auth, math_student):
    body = {"questionId": math_student["question_ids"][0], "selectedOption": "A"}
    assert client.post(ANSWERS, headers=auth(math_student["author_id"]), json=body).status_code == 403
