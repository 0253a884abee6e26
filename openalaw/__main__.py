from openalaw.cli import main

main()
