#!/usr/bin/env python
"""Launch the Dose-Response Viewer GUI application.

Usage:
    python -m dose_response_viewer.run_app [--port PORT] [--example]
"""

import argparse
import logging


def main():
    parser = argparse.ArgumentParser(description='Launch Dose-Response Viewer GUI')
    parser.add_argument('--port', type=int, default=5007, help='Port to serve on')
    parser.add_argument('--example', action='store_true',
                       help='Start with the bundled example dataset loaded')
    parser.add_argument('--no-browser', action='store_true',
                       help='Do not open browser automatically')
    parser.add_argument('--log-level', type=str, default='INFO',
                       help='Logging level (DEBUG, INFO, WARNING, ...)')

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format='%(asctime)s %(name)s %(levelname)s: %(message)s',
    )

    import panel as pn
    from dose_response_viewer.app import create_app

    print(f"Starting Dose-Response Viewer on port {args.port}...")

    app = create_app(load_example=args.example)

    pn.serve(
        app.view(),
        port=args.port,
        show=not args.no_browser,
        title="Dose-Response Viewer",
    )


if __name__ == "__main__":
    main()
