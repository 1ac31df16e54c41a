import io
import zipfile
from datetime import date, datetime, timezone

from domain.models import Statement
from services.export import (
    archive_filename,
    build_colorblock_archive,
    colorblock_filename,
    download_filename,
    sanitize_heading,
)


def _statement(sid: str, heading=None) -> Statement:
    return Statement(id=sid, project_id="p1", content="Statement text", heading=heading)


def test_sanitize_heading_strips_punctuation_and_joins_words():
    assert sanitize_heading("Hello, World! 2024", 0) == "Hello_World_2024"
    assert sanitize_heading("keep-dashes and_underscores", 0) == "keep-dashes_and_underscores"


def test_sanitize_heading_truncates():
    assert len(sanitize_heading("a" * 80, 0)) == 50


def test_sanitize_heading_falls_back_to_position():
    assert sanitize_heading(None, 0) == "statement_1"
    assert sanitize_heading("", 4) == "statement_5"
    assert sanitize_heading("!!!", 2) == "statement_3"


def test_colorblock_filename_uses_id_prefix():
    statement = _statement("abcdef1234567890", heading="Big Launch")
    assert colorblock_filename(statement, 0) == "Big_Launch_abcdef12.png"


def test_archive_and_download_names():
    assert archive_filename("Acme", date(2025, 1, 2)) == "Acme_approved_colorblocks_2025-01-02.zip"
    now = datetime(2025, 1, 1, tzinfo=timezone.utc)
    assert download_filename(now) == "colorblock-1735689600000.png"


def test_archive_skips_items_that_fail():
    statements = [
        _statement("11111111aaaa", heading="First"),
        _statement("22222222bbbb", heading="Broken"),
        _statement("33333333cccc"),
    ]

    def load_png(statement):
        if statement.heading == "Broken":
            raise OSError("render failed")
        return b"png-" + statement.id.encode()

    data, names = build_colorblock_archive(statements, load_png)

    assert names == ["First_11111111.png", "statement_3_33333333.png"]
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        assert archive.namelist() == names
        assert archive.read("First_11111111.png") == b"png-11111111aaaa"


def test_archive_filename_is_ascii_safe():
    today = date(2025, 1, 2)
    assert archive_filename('Café ☕ "Launch"', today) == "Caf_Launch_approved_colorblocks_2025-01-02.zip"
    assert archive_filename("☕☕", today) == "project_approved_colorblocks_2025-01-02.zip"
    assert archive_filename(None, today) == "project_approved_colorblocks_2025-01-02.zip"
