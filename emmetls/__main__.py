"""
Main entry point for the Emmet Language Server.

This file is executed when running: python -m emmetls

The server communicates with editors via stdin/stdout using JSON-RPC.
"""
import os
import sys

from emmetls.lsp.server import create_server


def main():
    """Start the language server on stdin/stdout."""

    # stdout carries JSON-RPC, so debug chatter goes to stderr
    if os.getenv("DEBUG"):
        print("emmetls starting in DEBUG mode", file=sys.stderr)
        print("Waiting for debugger to attach on port 5678...", file=sys.stderr)
        try:
            import debugpy  # type: ignore
            debugpy.listen(("127.0.0.1", 5678))
            debugpy.wait_for_client()
            print("Debugger attached! Continuing...", file=sys.stderr)
        except ImportError:
            print("debugpy not available - install with: pip install debugpy", file=sys.stderr)

    server = create_server()
    server.start_io()


if __name__ == "__main__":
    main()
