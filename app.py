#!/usr/bin/env python3
"""
netnet - airodump-ng dump viewer.

Serves the access points and client stations from an airodump-ng CSV dump
that is re-read in the background every few seconds.
"""

from __future__ import annotations

import argparse
import logging
import os
import time
from pathlib import Path
from typing import Optional

from flask import Flask, jsonify, render_template_string, Response, send_from_directory

import config
from utils.logging import get_logger, set_level
from utils.wifi import (
    OrganizationRegistry,
    get_refresher,
    get_snapshot_store,
    start_refresher,
)

logger = get_logger('netnet.app')

app = Flask(__name__, static_folder=None)
app.config['PUBLIC_DIR'] = config.PUBLIC_DIR
app.config['DEFAULT_RECENCY_MINUTES'] = config.DEFAULT_RECENCY_MINUTES

_app_start_time = time.time()

# Registries are loaded once in main()
registry: Optional[OrganizationRegistry] = None


@app.route('/')
def index() -> Response:
    """Landing page from the public directory."""
    index_path = Path(app.config['PUBLIC_DIR']) / 'index.html'
    try:
        template = index_path.read_text(encoding='utf-8')
    except OSError as e:
        logger.error(f"Cannot read landing page {index_path}: {e}")
        return jsonify({
            'status': 'error',
            'message': 'Landing page not found'
        }), 404
    return render_template_string(template, version=config.VERSION)


@app.route('/public/<path:filename>')
def public_files(filename: str) -> Response:
    """Static files from the public directory."""
    return send_from_directory(app.config['PUBLIC_DIR'], filename)


@app.route('/health')
def health() -> Response:
    """Health check with refresher and snapshot state."""
    refresher = get_refresher()
    return jsonify({
        'status': 'healthy',
        'version': config.VERSION,
        'uptime_seconds': round(time.time() - _app_start_time, 1),
        'refresher': refresher.get_status() if refresher else {'running': False},
        'snapshot': get_snapshot_store().current().to_summary_dict(),
        'registry': registry.stats() if registry else {'oui_entries': 0, 'cid_entries': 0},
    })


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description='netnet - serve airodump-ng access points and clients over HTTP',
    )
    parser.add_argument('-f', '--file', default=config.DUMP_FILE,
                        help='airodump-ng csv file to parse (default: %(default)s)')
    parser.add_argument('-p', '--port', type=int, default=config.PORT,
                        help='port the server listens on (default: %(default)s)')
    parser.add_argument('-d', '--dir', default=config.PUBLIC_DIR,
                        help='public directory with index.html and assets')
    parser.add_argument('--host', default=config.HOST,
                        help='address to bind (default: %(default)s)')
    parser.add_argument('--oui', default=config.OUI_FILE,
                        help='IEEE oui.txt registry (default: %(default)s)')
    parser.add_argument('--cid', default=config.CID_FILE,
                        help='IEEE cid.txt registry (default: %(default)s)')
    parser.add_argument('--interval', type=float, default=config.REFRESH_INTERVAL,
                        help='seconds between dump re-reads (default: %(default)s)')
    parser.add_argument('--debug', action='store_true', default=config.DEBUG,
                        help='enable debug logging and Flask debug mode')
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    global registry

    args = parse_args(argv)

    from routes import register_blueprints
    register_blueprints(app)

    if args.debug:
        set_level(logging.DEBUG)

    app.config['PUBLIC_DIR'] = os.path.abspath(args.dir)

    registry = OrganizationRegistry.from_files(args.oui, args.cid)
    start_refresher(args.file, registry=registry, interval=args.interval)

    logger.info(f"Started netnet server at {args.host}:{args.port}")
    # Reloader would start a second refresher
    app.run(host=args.host, port=args.port, debug=args.debug, use_reloader=False, threaded=True)


if __name__ == '__main__':
    main()
