from mataho_cli.cli import main

main()
