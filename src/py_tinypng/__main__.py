"""Entry point for python -m py_tinypng.

默认运行命令行工具，`mcp` 子命令启动 MCP 服务器。
"""

import sys


def main() -> None:
    """主入口函数"""
    if len(sys.argv) > 1 and sys.argv[1] == "mcp":
        from .mcp_server import main as server_main

        server_main()
        return

    from .cli import main as cli_main

    sys.exit(cli_main())


if __name__ == "__main__":
    main()
