from dirload.cli import main

main()
