"""CLI entry point: python -m idleprogress.mcp <game_module>"""

from __future__ import annotations

import sys


def main() -> None:
    if len(sys.argv) < 2:
        print("Usage: python -m idleprogress.mcp <game_module>", file=sys.stderr)
        print(
            "Example: python -m idleprogress.mcp examples.blackhole_example",
            file=sys.stderr,
        )
        sys.exit(1)

    module_path = sys.argv[1]

    # stdout carries the protocol, so anything define_game() prints goes to stderr
    real_stdout = sys.stdout
    sys.stdout = sys.stderr
    try:
        from idleprogress.cli import load_game

        definition = load_game(module_path)
    finally:
        sys.stdout = real_stdout

    from idleprogress.mcp.server import create_server

    server = create_server(definition)
    server.run(transport="stdio")


if __name__ == "__main__":
    main()
