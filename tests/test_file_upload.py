import base64
import os

import pytest

from jobboard.core.config import get_settings
from jobboard.core.errors import AuthorizationError, ValidationError
from jobboard.db.postgres import get_db_session
from jobboard.schemas.schemas import ResumeUpload, StudentProfileUpdate
from jobboard.services import account_service
from jobboard.utils.file_upload import decode_content, safe_file_name, store_resume


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode()


@pytest.mark.parametrize("name,expected", [
    ("resume.pdf", "resume.pdf"),
    ("my resume (final).pdf", "my_resume__final_.pdf"),
    ("../../etc/passwd", "passwd"),
    ("cv-v2_ok.docx", "cv-v2_ok.docx"),
])
def test_safe_file_name(name, expected):
    assert safe_file_name(name) == expected


def test_decode_plain_and_data_url():
    assert decode_content(b64(b"%PDF-1.4"), 1024) == b"%PDF-1.4"
    assert decode_content("data:application/pdf;base64," + b64(b"%PDF-1.4"), 1024) == b"%PDF-1.4"


def test_decode_rejects_garbage():
    with pytest.raises(ValidationError) as exc_info:
        decode_content("not base64!!", 1024)
    assert "content" in exc_info.value.field_errors


def test_decode_rejects_oversize():
    with pytest.raises(ValidationError) as exc_info:
        decode_content(b64(b"x" * 2048), 1024)
    assert exc_info.value.message == "File too large"


def test_store_resume_writes_file_and_updates_profile(student):
    upload = ResumeUpload(file_name="My CV.pdf", content=b64(b"%PDF-1.4 resume"))
    with get_db_session() as db:
        result = store_resume(db, student, upload)

    settings = get_settings()
    assert result.url.startswith(settings.upload_url_prefix + "/" + student.user_id + "_")
    assert result.url.endswith("_My_CV.pdf")

    stored = os.path.join(settings.upload_dir, result.url.rsplit("/", 1)[1])
    with open(stored, "rb") as f:
        assert f.read() == b"%PDF-1.4 resume"

    with get_db_session() as db:
        assert account_service.get_student_profile(db, student).resume_url == result.url


def test_employers_cannot_upload_resumes(employer):
    upload = ResumeUpload(file_name="cv.pdf", content=b64(b"data"))
    with get_db_session() as db:
        with pytest.raises(AuthorizationError):
            store_resume(db, employer, upload)


def stored_path(url):
    return os.path.join(get_settings().upload_dir, url.rsplit("/", 1)[1])


def test_rolled_back_upload_leaves_no_file(student):
    upload = ResumeUpload(file_name="draft.pdf", content=b64(b"%PDF-1.4 draft"))
    with pytest.raises(RuntimeError):
        with get_db_session() as db:
            result = store_resume(db, student, upload)
            assert os.path.exists(stored_path(result.url))
            raise RuntimeError("request aborted")

    assert not os.path.exists(stored_path(result.url))
    with get_db_session() as db:
        assert account_service.get_student_profile(db, student).resume_url is None


def test_replaced_resume_file_is_removed(student):
    with get_db_session() as db:
        first = store_resume(db, student, ResumeUpload(file_name="v1.pdf", content=b64(b"one")))
    with get_db_session() as db:
        second = store_resume(db, student, ResumeUpload(file_name="v2.pdf", content=b64(b"two")))

    assert not os.path.exists(stored_path(first.url))
    assert os.path.exists(stored_path(second.url))


def test_external_resume_url_is_left_alone(student):
    with get_db_session() as db:
        account_service.update_student_profile(
            db, student, StudentProfileUpdate(resume_url="https://cdn.example.com/cv.pdf")
        )
    with get_db_session() as db:
        result = store_resume(db, student, ResumeUpload(file_name="cv.pdf", content=b64(b"data")))
    assert os.path.exists(stored_path(result.url))
