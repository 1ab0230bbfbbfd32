import base64

import pandas as pd
import pytest
from dash import no_update

from gantt_viewer.config import GanttConfig
from gantt_viewer.constants import UI, XLSX_CONTENT_TYPE
from gantt_viewer.dash_app import GanttDashApp

from .conftest import HEADERS


@pytest.fixture
def client(tmp_path):
    app = GanttDashApp(GanttConfig(storage_dir=tmp_path))
    return app.app.server.test_client()


def test_download_before_upload_is_404(client):
    response = client.get("/download")

    assert response.status_code == 404
    assert response.get_json() == {"error": "No file uploaded yet"}
    assert response.headers["Access-Control-Allow-Origin"] == "*"


def test_upload_then_download(client):
    payload = base64.b64encode(b"workbook bytes").decode()
    response = client.post("/upload", json={"file": payload})

    assert response.status_code == 200
    assert response.get_json() == {"success": True, "message": "File uploaded successfully"}

    url = client.get("/download").get_json()["url"]
    assert url == "/files/latest-gantt.xlsx"

    file_response = client.get(url)
    assert file_response.status_code == 200
    assert file_response.data == b"workbook bytes"


@pytest.mark.parametrize("body", [{}, {"file": ""}, {"file": "***not base64***"}])
def test_bad_upload_bodies(client, body):
    response = client.post("/upload", json=body)

    assert response.status_code == 400
    assert "error" in response.get_json()


def test_unknown_file_key(client):
    assert client.get("/files/other.xlsx").status_code == 404


@pytest.fixture
def gantt(tmp_path, today):
    return GanttDashApp(GanttConfig(storage_dir=tmp_path / "store"), today=today)


def _workbook(tmp_path, rows) -> bytes:
    path = tmp_path / "book.xlsx"
    pd.DataFrame(rows[1:], columns=rows[0]).to_excel(
        path, sheet_name="Proyectos Abiertos", index=False, engine="openpyxl",
    )
    return path.read_bytes()


def _contents(data: bytes) -> str:
    return f"data:{XLSX_CONTENT_TYPE};base64," + base64.b64encode(data).decode()


def test_upload_then_load_existing(gantt, tmp_path, sample_rows):
    data = _workbook(tmp_path, sample_rows)
    rows, title, message, href = gantt.load_document("upload.contents", _contents(data))

    assert title == "Proyectos Abiertos"
    assert rows[0] == HEADERS
    assert len(rows) == len(sample_rows)
    assert message.children == UI["msg_uploaded"]
    assert href == "/files/latest-gantt.xlsx"
    assert gantt.store.read() == data

    reloaded, _title, message, _href = gantt.load_document("btn-load.n_clicks")
    assert reloaded == rows
    assert message == ""


def test_load_existing_without_upload(gantt):
    rows, title, message, href = gantt.load_document("btn-load.n_clicks")

    assert rows is no_update
    assert href is no_update
    assert UI["msg_no_file"] in message.children


def test_unreadable_upload_keeps_stored_document(gantt, tmp_path, sample_rows):
    data = _workbook(tmp_path, sample_rows)
    gantt.load_document("upload.contents", _contents(data))

    rows, _title, message, _href = gantt.load_document("upload.contents", _contents(b"not a workbook"))

    assert rows is no_update
    assert "Unreadable workbook" in message.children
    assert gantt.store.read() == data


def test_new_file_clears_document(gantt):
    assert gantt.load_document("btn-new.n_clicks") == ([], "", "", "")


def test_new_document_resets_visibility(gantt, sample_rows):
    assert gantt.update_visibility("rows-store.data", sample_rows, {"1": False}) == ({}, None)


def test_expand_and_collapse_all(gantt, sample_rows):
    states, _cell = gantt.update_visibility("btn-collapse.n_clicks", sample_rows, {})
    assert states == {"1": False, "5": False}

    _fig, table, _title = gantt.render_chart("visibility-store.data", sample_rows, states)
    assert [r["id"] for r in table] == ["1", "5"]

    states, _cell = gantt.update_visibility("btn-expand.n_clicks", sample_rows, states)
    assert states == {"1": True, "5": True}


def test_project_click_toggles_and_clears_cell(gantt, sample_rows):
    _fig, table, _title = gantt.render_chart("", sample_rows, {})
    cell = {"row": 0, "column": 0, "column_id": "name"}

    states, active = gantt.update_visibility("tasks-table.active_cell", sample_rows, {}, cell, table)
    assert states == {"1": False, "5": True}
    assert active is None

    fig, table, _title = gantt.render_chart("visibility-store.data", sample_rows, states)
    assert [r["id"] for r in table] == ["1", "5", "6", "7"]
    assert table[0]["name"] == "▶ Alpha"
    assert not [tr for tr in fig.data if (tr.meta or {}).get("kind") == "dep"]

    states, _active = gantt.update_visibility("tasks-table.active_cell", sample_rows, states, cell, table)
    assert states == {"1": True, "5": True}


def test_click_on_task_row_is_ignored(gantt, sample_rows):
    _fig, table, _title = gantt.render_chart("", sample_rows, {})
    cell = {"row": 1, "column": 0, "column_id": "name"}

    assert gantt.update_visibility("tasks-table.active_cell", sample_rows, {}, cell, table) == (no_update, None)


def test_today_button_scrolls_chart(gantt, sample_rows):
    fig, _table, title = gantt.render_chart("btn-today.n_clicks", sample_rows, {}, "Plan")

    # today is day 45 of the window
    assert tuple(fig.layout.xaxis.range) == (45 * 30 - 600, 45 * 30 + 600)
    assert title == "Plan"
