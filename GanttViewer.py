from __future__ import annotations

import argparse
import logging
from dataclasses import replace

from gantt_viewer.config import GanttConfig
from gantt_viewer.dash_app import GanttDashApp


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Serve the Gantt chart viewer.")
    parser.add_argument("--host", default=None)
    parser.add_argument("--port", type=int, default=None)
    parser.add_argument("--no-browser", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

    config = GanttConfig.from_env()
    overrides = {k: v for k, v in (("host", args.host), ("port", args.port)) if v is not None}
    if overrides:
        config = replace(config, **overrides)

    app = GanttDashApp(config)
    app.run(open_browser=not args.no_browser)


if __name__ == "__main__":
    main()
