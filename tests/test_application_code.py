from idlink.database.models.application import Application, ApplicationStatus
from idlink.utils.application import format_application_code, generate_application_code
from idlink.utils.uploads import build_upload_filename

# Mid-March 2026 in every timezone; epoch milliseconds end in 123000
NOW = 1773480123.0


def test_code_uses_year_and_millisecond_suffix(db):
    assert generate_application_code(db, now=NOW) == "APP2026-123000"


def test_suffix_is_zero_padded():
    assert format_application_code(2026, 42) == "APP2026-000042"


def test_taken_code_advances_suffix(db, make_user):
    user = make_user()
    db.add(Application(app_id="APP2026-123000", user_id=user.id, status=ApplicationStatus.SUBMITTED))
    db.add(Application(app_id="APP2026-123001", user_id=user.id, status=ApplicationStatus.SUBMITTED))
    db.commit()

    assert generate_application_code(db, now=NOW) == "APP2026-123002"


def test_upload_filename_keeps_extension():
    assert build_upload_filename("photo", "portrait.PNG", now=1.5) == "photo-1500.PNG"
    assert build_upload_filename("cor", "scan", now=2) == "cor-2000"
