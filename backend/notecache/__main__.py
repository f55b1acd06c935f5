from notecache.cli import main

main()
