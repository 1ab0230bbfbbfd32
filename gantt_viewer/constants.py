# gantt_viewer/constants.py
from __future__ import annotations

# =========================
# UI Text (Spanish, as shown on the page)
# =========================

UI = {
    "title_app": "MS Project Style Gantt Chart Viewer",
    "title_default": "Diagrama de Gantt",
    "btn_upload": "Seleccionar Archivo Excel",
    "btn_load_existing": "Cargar Archivo Existente",
    "btn_download": "Descargar Excel",
    "btn_expand_all": "Expandir Todo",
    "btn_collapse_all": "Contraer Todo",
    "btn_reset_view": "Hoy",
    "btn_new_file": "Cargar Nuevo Archivo",
    "msg_uploaded": "Archivo subido exitosamente!",
    "msg_upload_error": "Error al subir archivo",
    "msg_no_file": "No hay archivo disponible",
    "msg_error_prefix": "Error:",
    "today_label": "HOY",
    "unassigned": "No asignado",
    "col_name": "Nombre de Tarea",
    "col_days": "Días",
    "col_start": "Inicio",
    "col_end": "Fin",
    "col_remaining": "Restante",
    "col_assigned": "Asignado",
    "tip_description": "Descripción:",
    "tip_assigned": "Asignado a:",
    "tip_start": "Inicio:",
    "tip_end": "Fin:",
    "tip_duration": "Duración:",
    "tip_remaining": "Tiempo restante:",
    "tip_status": "Estado:",
    "tip_dependencies": "Dependencias:",
}

MONTH_NAMES = ["Ene", "Feb", "Mar", "Abr", "May", "Jun",
               "Jul", "Ago", "Sep", "Oct", "Nov", "Dic"]

ICON_EXPANDED = "▼"
ICON_COLLAPSED = "▶"

# =========================
# Geometry (px-equivalent units)
# =========================

DAY_WIDTH = 30
ROW_HEIGHT = 28
PLACEHOLDER_DAYS = 7
LEAD_PADDING_DAYS = 30
TRAIL_PADDING_DAYS = 60
EMPTY_WINDOW_MONTHS = 6
CONNECTOR_OFFSET = 20
ARROW_GAP = 5
LABEL_MIN_WIDTH = 100
DUE_SOON_DAYS = 3
# weekend bands and day grid lines are only drawn up to this window length
MAX_DECORATED_DAYS = 5 * 366

# =========================
# Storage
# =========================

DEFAULT_SHEET_NAME = "Proyectos Abiertos"
DOCUMENT_KEY = "latest-gantt.xlsx"
XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# =========================
# Colors
# =========================

COLOR_PROJECT = "rgba(44,62,80,0.95)"
COLOR_TASK = "rgba(52,152,219,0.90)"
COLOR_SUBTASK = "rgba(133,193,233,0.90)"
COLOR_OVERDUE = "rgba(231,76,60,0.90)"
COLOR_DUE_SOON = "rgba(243,156,18,0.90)"
COLOR_PLACEHOLDER_OPACITY = 0.45
COLOR_CONNECTOR = "#666"
COLOR_TODAY = "#e74c3c"
