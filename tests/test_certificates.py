"""
Tests for certificate upload, approval, preview and student download.
"""
import base64

from certportal.db.models.student import Student


def _make_issuable(db, student, png_bytes):
    student.certificate = png_bytes
    student.eligible = True
    student.certificate_approved = True
    db.commit()


def test_upload_certificate(client, admin_headers, student, png_bytes, db):
    response = client.put(
        f"/students/{student.id}/certificate",
        files={"file": ("cert.png", png_bytes, "image/png")},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["has_certificate"] is True
    db.refresh(student)
    assert student.certificate == png_bytes


def test_upload_certificate_rejects_non_image(client, admin_headers, student):
    response = client.put(
        f"/students/{student.id}/certificate",
        files={"file": ("cert.txt", b"hello", "text/plain")},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Please select an image file"


def test_upload_certificate_rejects_unreadable_image(client, admin_headers, student):
    response = client.put(
        f"/students/{student.id}/certificate",
        files={"file": ("cert.png", b"not really a png", "image/png")},
        headers=admin_headers,
    )

    assert response.status_code == 400


def test_approval_toggle(client, admin_headers, student):
    response = client.put(f"/students/{student.id}/approval", json={"approved": True}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["certificate_approved"] is True


def test_certificate_data_is_base64(client, admin_headers, student, png_bytes, db):
    _make_issuable(db, student, png_bytes)

    data = client.get(f"/students/{student.id}/certificate", headers=admin_headers).json()

    assert data["eligible"] is True
    assert data["certificate_approved"] is True
    assert base64.b64decode(data["certificate"]) == png_bytes


def test_preview_not_eligible(client, admin_headers, student, png_bytes, db):
    student.certificate = png_bytes
    db.commit()

    response = client.get(f"/students/{student.id}/certificate/preview", headers=admin_headers)

    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "NOT_ELIGIBLE"
    assert response.json()["detail"]["title"] == "Not Eligible"


def test_preview_not_approved(client, admin_headers, student, png_bytes, db):
    student.certificate = png_bytes
    student.eligible = True
    db.commit()

    response = client.get(f"/students/{student.id}/certificate/preview", headers=admin_headers)

    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "NOT_APPROVED"


def test_preview_without_certificate(client, admin_headers, student, db):
    student.eligible = True
    student.certificate_approved = True
    db.commit()

    response = client.get(f"/students/{student.id}/certificate/preview", headers=admin_headers)

    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "NO_CERTIFICATE"


def test_preview_returns_pdf(client, admin_headers, student, png_bytes, db):
    _make_issuable(db, student, png_bytes)

    response = client.get(f"/students/{student.id}/certificate/preview", headers=admin_headers)

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")


def test_student_downloads_own_certificate(client, student_headers, student, png_bytes, db):
    _make_issuable(db, student, png_bytes)

    first = client.get("/me/certificate", headers=student_headers)
    second = client.get("/me/certificate", headers=student_headers)

    assert first.status_code == 200
    assert second.status_code == 200
    assert first.content.startswith(b"%PDF")
    assert "attachment" in first.headers["content-disposition"]
    row = db.query(Student).filter(Student.id == student.id).first()
    db.refresh(row)
    assert row.downloaded_count == 2


def test_student_download_blocked_until_eligible(client, student_headers, student, db):
    response = client.get("/me/certificate", headers=student_headers)

    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "NOT_ELIGIBLE"
    db.refresh(student)
    assert student.downloaded_count == 0


def test_student_info(client, student_headers, student):
    response = client.get("/me/student", headers=student_headers)

    assert response.status_code == 200
    assert response.json()["phone"] == student.phone
