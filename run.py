#!/usr/bin/env python3
"""
Entry point for the file server application.

Usage:
    python run.py ~/directory-to-share          # Share a directory
    python run.py --ro --prefix /share/ ~/pub   # Read only, under /share/
    FLASK_ENV=development python run.py         # Run with the Flask debugger
"""
import argparse
import os

from treeshare import create_app
from treeshare.config import get_config


def parse_args(argv=None):
    """Parse command line switches; unset ones fall back to the environment."""
    parser = argparse.ArgumentParser(
        description="Share a directory over HTTP."
    )
    parser.add_argument("root", nargs="?", default=None,
                        help="directory to share (default: ROOT_DIR or .)")
    parser.add_argument("--host", default=None, help="host to listen to")
    parser.add_argument("-p", "--port", type=int, default=None, help="port to listen to")
    parser.add_argument("--prefix", default=None,
                        help="url prefix at which the share is reached, e.g. /share/ (slashes matter)")
    parser.add_argument("--symlinks", action="store_true", default=None,
                        help="follow symlinks; WARNING: links may escape the shared directory")
    parser.add_argument("--show-hidden", action="store_true",
                        help="list and serve hidden files")
    parser.add_argument("--ro", action="store_true", default=None,
                        help="read only mode (no upload, rename, move, etc...)")
    parser.add_argument("--verb", action="store_true", default=None, help="verbosity")
    return parser.parse_args(argv)


def main(argv=None):
    """Run the application."""
    args = parse_args(argv)

    # Get configuration
    config_name = os.getenv("FLASK_ENV", "production")
    config = get_config(config_name)

    # Create app
    app = create_app(
        config_name,
        root=args.root,
        prefix=args.prefix,
        follow_symlinks=args.symlinks,
        skip_hidden=False if args.show_hidden else None,
        read_only=args.ro,
        verbose=args.verb,
    )

    host = args.host or config.HOST
    port = args.port or config.PORT
    print(f"Listening on http://{host}:{port}{app.settings.prefix}")

    # Run the application
    app.run(
        host=host,
        port=port,
        debug=config.DEBUG,
        threaded=True
    )


if __name__ == "__main__":
    main()
