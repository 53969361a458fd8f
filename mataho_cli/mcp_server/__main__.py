from mataho_cli.mcp_server import main

main()
