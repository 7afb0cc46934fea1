from dotenv_registry.cli import main

main()
