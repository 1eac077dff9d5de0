def test_teacher_creates_classroom_with_generated_code(client, teacher_headers):
    r = client.post(
        "/classrooms",
        headers=teacher_headers,
        json={"name": "Chemistry", "subject": "Science"},
    )
    assert r.status_code == 201, r.text
    classroom = r.json()["classroom"]
    assert len(classroom["code"]) == 6
    assert classroom["code"].isalnum() and classroom["code"].upper() == classroom["code"]
    assert classroom["teacher"]["email"] == "teacher1@example.com"


def test_duplicate_class_code_is_rejected(client, teacher_headers):
    r = client.post(
        "/classrooms",
        headers=teacher_headers,
        json={"name": "Copy", "subject": "Biology", "code": "abc123"},
    )
    assert r.status_code == 400
    assert "already exists" in r.json()["message"]


def test_student_cannot_create_classroom(client, student_headers):
    r = client.post("/classrooms", headers=student_headers, json={"name": "X", "subject": "Y"})
    assert r.status_code == 403


def test_student_joins_by_code_and_sees_classroom(client, outsider_headers, seed):
    r = client.post("/classrooms/join", headers=outsider_headers, json={"code": "abc123"})
    assert r.status_code == 200, r.text
    assert r.json()["classroom"]["id"] == seed["classroom"]

    r = client.get("/classrooms/me", headers=outsider_headers)
    assert [c["id"] for c in r.json()["classrooms"]] == [seed["classroom"]]

    r = client.get(f"/classrooms/{seed['classroom']}", headers=outsider_headers)
    assert r.status_code == 200
    emails = {s["email"] for s in r.json()["classroom"]["students"]}
    assert emails == {"student1@example.com", "student2@example.com"}


def test_join_twice_is_rejected(client, student_headers):
    r = client.post("/classrooms/join", headers=student_headers, json={"code": "ABC123"})
    assert r.status_code == 400
    assert r.json()["message"] == "You are already enrolled in this classroom"


def test_teacher_cannot_join_as_student(client, other_teacher_headers):
    r = client.post("/classrooms/join", headers=other_teacher_headers, json={"code": "ABC123"})
    assert r.status_code == 403


def test_unknown_code_is_404(client, outsider_headers):
    r = client.post("/classrooms/join", headers=outsider_headers, json={"code": "ZZZZZZ"})
    assert r.status_code == 404
    assert r.json()["message"] == "Invalid class code"


def test_non_member_cannot_view_classroom(client, outsider_headers, other_teacher_headers, seed):
    assert client.get(f"/classrooms/{seed['classroom']}", headers=outsider_headers).status_code == 403
    assert client.get(f"/classrooms/{seed['classroom']}", headers=other_teacher_headers).status_code == 403


def test_leave_classroom_revokes_access(client, student_headers, seed):
    r = client.post(f"/classrooms/{seed['classroom']}/leave", headers=student_headers)
    assert r.status_code == 200
    r = client.get(f"/assignments/classroom/{seed['classroom']}", headers=student_headers)
    assert r.status_code == 403


def test_only_owner_deletes_classroom(client, teacher_headers, other_teacher_headers, seed):
    r = client.delete(f"/classrooms/{seed['classroom']}", headers=other_teacher_headers)
    assert r.status_code == 403

    r = client.delete(f"/classrooms/{seed['classroom']}", headers=teacher_headers)
    assert r.status_code == 200
    r = client.get(f"/assignments/{seed['assignment']}", headers=teacher_headers)
    assert r.status_code == 404


def test_deleting_classroom_removes_stored_files(client, teacher_headers, student_headers, seed, upload_dir):
    r = client.put(
        f"/assignments/{seed['assignment']}",
        headers=teacher_headers,
        files=[("attachments", ("brief.pdf", b"%PDF-1.4 brief", "application/pdf"))],
    )
    assert r.status_code == 200, r.text
    r = client.post(
        f"/assignments/{seed['assignment']}/submit",
        headers=student_headers,
        files=[("files", ("work.pdf", b"%PDF-1.4 work", "application/pdf"))],
    )
    assert r.status_code == 201, r.text
    assert len(list(upload_dir.iterdir())) == 2

    r = client.delete(f"/classrooms/{seed['classroom']}", headers=teacher_headers)
    assert r.status_code == 200
    assert list(upload_dir.iterdir()) == []
