from perftree.interface.cli.main import main

main()
