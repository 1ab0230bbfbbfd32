from __future__ import annotations

import base64
import binascii
import logging
import threading
import webbrowser
from datetime import date
from typing import Any, List, Optional, Tuple

import dash
from dash import Dash, html, dcc, dash_table, Input, Output, State, no_update
from dash import callback_context
from flask import jsonify, request, send_file

from .config import GanttConfig
from .constants import UI, XLSX_CONTENT_TYPE
from .errors import DocumentNotFoundError, StorageError
from .figure_builder import GanttFigureBuilder, task_table_rows
from .repository import ExcelTaskRepository, serialize_rows
from .session import GanttSession
from .storage import LocalBlobStore

logger = logging.getLogger(__name__)

# width of the chart viewport used when scrolling to today
VIEWPORT_WIDTH = 1200


def _triggered() -> str:
    return callback_context.triggered[0]["prop_id"] if callback_context.triggered else ""


class GanttDashApp:
    ROWS_KEY = "rows-store"
    TITLE_KEY = "title-store"
    VISIBILITY_KEY = "visibility-store"
    FILES_ROUTE = "/files"

    def __init__(
        self,
        config: Optional[GanttConfig] = None,
        store: Optional[LocalBlobStore] = None,
        repo: Optional[ExcelTaskRepository] = None,
        today: Optional[date] = None,
    ):
        self.config = config or GanttConfig()
        self.today = today
        self.store = store or LocalBlobStore(self.config.storage_dir, self.config.document_key, base_url=self.FILES_ROUTE)
        self.repo = repo or ExcelTaskRepository(self.config.sheet_name)
        self.app: Dash = dash.Dash(__name__, title=UI["title_app"])
        self._build_layout()
        self._register_callbacks()
        self._register_routes()

    # -------- helpers --------
    def _session(self, rows, visibility=None, title: str = "") -> GanttSession:
        return GanttSession.from_rows(
            rows or [], config=self.config, visibility=visibility, title=title, today=self.today,
        )

    def _fig_builder(self, session: GanttSession) -> GanttFigureBuilder:
        return GanttFigureBuilder(session.timeline_calc, self.config.label_min_width)

    def _read_document(self, data: bytes) -> Tuple[str, List[List[Any]]]:
        title, rows = self.repo.load(data)
        return title, serialize_rows(rows)

    @staticmethod
    def _message(text: str, error: bool = False) -> html.Div:
        if error:
            return html.Div(f'{UI["msg_error_prefix"]} {text}', className="error-message", style={"color": "#c0392b"})
        return html.Div(text, className="success-message", style={"color": "#27ae60"})

    def _build_layout(self) -> None:
        self.app.layout = html.Div(
            [
                html.H2(UI["title_default"], id="project-title"),
                html.Div(
                    [
                        dcc.Upload(
                            html.Button(UI["btn_upload"]),
                            id="upload",
                            accept=".xlsx,.xls",
                            style={"display": "inline-block"},
                        ),
                        html.Span("  "),
                        html.Button(UI["btn_load_existing"], id="btn-load"),
                        html.Span("  "),
                        html.A(UI["btn_download"], id="download-link", href="", target="_blank"),
                        html.Span("  "),
                        html.Button(UI["btn_expand_all"], id="btn-expand"),
                        html.Button(UI["btn_collapse_all"], id="btn-collapse"),
                        html.Button(UI["btn_reset_view"], id="btn-today"),
                        html.Button(UI["btn_new_file"], id="btn-new"),
                        html.Div(id="upload-msg", style={"marginTop": "6px"}),
                    ],
                    style={"marginBottom": "10px"},
                ),

                dcc.Store(id=self.ROWS_KEY, data=[]),
                dcc.Store(id=self.TITLE_KEY, data=""),
                dcc.Store(id=self.VISIBILITY_KEY, data={}),

                html.Div(
                    [
                        html.Div(
                            [
                                dash_table.DataTable(
                                    id="tasks-table",
                                    columns=[
                                        {"name": UI["col_name"], "id": "name"},
                                        {"name": UI["col_days"], "id": "days"},
                                        {"name": UI["col_start"], "id": "start"},
                                        {"name": UI["col_end"], "id": "end"},
                                        {"name": UI["col_remaining"], "id": "remaining"},
                                        {"name": UI["col_assigned"], "id": "assigned"},
                                    ],
                                    data=[],
                                    page_action="none",
                                    style_table={"overflowY": "auto"},
                                    style_cell={"textAlign": "left", "padding": "4px", "whiteSpace": "pre"},
                                    style_data_conditional=[
                                        {"if": {"filter_query": '{type} = "Project"'}, "fontWeight": "bold"},
                                        {"if": {"filter_query": '{urgency} = "overdue"', "column_id": "remaining"}, "color": "#e74c3c"},
                                        {"if": {"filter_query": '{urgency} = "due-soon"', "column_id": "remaining"}, "color": "#f39c12"},
                                    ],
                                ),
                            ],
                            style={"width": "38%", "display": "inline-block", "verticalAlign": "top"},
                        ),
                        html.Div(
                            [dcc.Graph(id="gantt-graph")],
                            style={"width": "61%", "display": "inline-block", "marginLeft": "1%", "verticalAlign": "top"},
                        ),
                    ]
                ),
            ],
            style={"padding": "14px"},
        )

    # -------- callback bodies --------
    def load_document(self, trigger: str, contents: Optional[str] = None):
        """(rows, title, message, download href) for an upload, a reload or a new file."""
        if trigger == "btn-new.n_clicks":
            return [], "", "", ""

        try:
            if trigger == "upload.contents":
                if not contents:
                    return no_update, no_update, no_update, no_update
                _header, _, payload = contents.partition(",")
                data = base64.b64decode(payload)
                # the stored document is only replaced by a readable workbook
                title, rows = self._read_document(data)
                self.store.put(data)
                message = self._message(UI["msg_uploaded"])
            else:
                title, rows = self._read_document(self.store.read())
                message = ""
            return rows, title, message, self.store.get()
        except DocumentNotFoundError:
            return no_update, no_update, self._message(UI["msg_no_file"], error=True), no_update
        except (StorageError, ValueError, binascii.Error) as exc:
            logger.error("document load failed: %s", exc)
            return no_update, no_update, self._message(str(exc), error=True), no_update

    def update_visibility(self, trigger: str, rows, visibility, active_cell=None, table_rows=None):
        """(visibility map, active cell) after a reload, expand/collapse all or a project click."""
        # a new document starts with every project expanded
        if trigger == f"{self.ROWS_KEY}.data":
            return {}, None

        session = self._session(rows, visibility)
        if trigger == "btn-expand.n_clicks":
            session.expand_all()
        elif trigger == "btn-collapse.n_clicks":
            session.collapse_all()
        elif trigger == "tasks-table.active_cell":
            if not active_cell or not table_rows:
                return no_update, no_update
            row_idx = active_cell.get("row")
            if row_idx is None or row_idx >= len(table_rows):
                return no_update, None
            clicked = table_rows[row_idx]
            if clicked.get("type") != "Project" or not clicked.get("id"):
                return no_update, None
            session.toggle(str(clicked["id"]))
        else:
            return no_update, no_update
        # cleared so a second click on the same cell fires again
        return session.visibility.states, None

    def render_chart(self, trigger: str, rows, visibility, title: str = ""):
        """(figure, table rows, page title) for the current document and visibility map."""
        session = self._session(rows, visibility, title=title or "")
        fig = self._fig_builder(session).build(
            session.layout, session.connectors, today=session.today, title=session.title,
        )
        if trigger == "btn-today.n_clicks":
            x0 = session.scroll_to_today(VIEWPORT_WIDTH)
            fig.update_xaxes(range=[x0, x0 + VIEWPORT_WIDTH])

        table = task_table_rows(session.layout, session.visibility)
        return fig, table, session.title or UI["title_default"]

    def _register_callbacks(self) -> None:
        app = self.app

        @app.callback(
            Output(self.ROWS_KEY, "data"),
            Output(self.TITLE_KEY, "data"),
            Output("upload-msg", "children"),
            Output("download-link", "href"),
            Input("upload", "contents"),
            Input("btn-load", "n_clicks"),
            Input("btn-new", "n_clicks"),
            prevent_initial_call=True,
        )
        def load_document(contents, _n_load, _n_new):
            return self.load_document(_triggered(), contents)

        @app.callback(
            Output(self.VISIBILITY_KEY, "data"),
            Output("tasks-table", "active_cell"),
            Input(self.ROWS_KEY, "data"),
            Input("btn-expand", "n_clicks"),
            Input("btn-collapse", "n_clicks"),
            Input("tasks-table", "active_cell"),
            State("tasks-table", "data"),
            State(self.VISIBILITY_KEY, "data"),
            prevent_initial_call=True,
        )
        def update_visibility(rows, _n_expand, _n_collapse, active_cell, table_rows, visibility):
            return self.update_visibility(_triggered(), rows, visibility, active_cell, table_rows)

        @app.callback(
            Output("gantt-graph", "figure"),
            Output("tasks-table", "data"),
            Output("project-title", "children"),
            Input(self.ROWS_KEY, "data"),
            Input(self.VISIBILITY_KEY, "data"),
            Input("btn-today", "n_clicks"),
            State(self.TITLE_KEY, "data"),
        )
        def render_chart(rows, visibility, _n_today, title):
            return self.render_chart(_triggered(), rows, visibility, title)

    def _register_routes(self) -> None:
        server = self.app.server

        def reply(body: dict, status: int = 200):
            response = jsonify(body)
            response.status_code = status
            response.headers["Access-Control-Allow-Origin"] = "*"
            return response

        @server.route("/upload", methods=["POST"])
        def upload():
            logger.info("POST /upload")
            body = request.get_json(silent=True) or {}
            encoded = body.get("file")
            if not isinstance(encoded, str) or not encoded:
                return reply({"error": "Missing file"}, 400)
            try:
                data = base64.b64decode(encoded, validate=True)
            except (binascii.Error, ValueError):
                return reply({"error": "File is not valid base64"}, 400)
            try:
                self.store.put(data)
            except StorageError as exc:
                logger.exception("upload failed")
                return reply({"error": str(exc)}, 500)
            return reply({"success": True, "message": "File uploaded successfully"})

        @server.route("/download", methods=["GET"])
        def download():
            logger.info("GET /download")
            try:
                return reply({"url": self.store.get()})
            except DocumentNotFoundError:
                return reply({"error": "No file uploaded yet"}, 404)

        @server.route(f"{self.FILES_ROUTE}/<key>", methods=["GET"])
        def files(key: str):
            if key != self.store.key or not self.store.exists():
                return reply({"error": "Not found"}, 404)
            return send_file(self.store.path.resolve(), mimetype=XLSX_CONTENT_TYPE, download_name=key)

    def run(self, open_browser: bool = True):
        host, port = self.config.host, self.config.port
        url = f"http://{host}:{port}/"
        if open_browser:
            threading.Timer(1.0, lambda: webbrowser.open_new(url)).start()
        self.app.run(host=host, port=port, debug=self.config.debug, use_reloader=False)
