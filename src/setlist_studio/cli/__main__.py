from src.setlist_studio.cli import main

main()
