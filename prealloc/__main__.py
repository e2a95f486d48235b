from prealloc.cli import main

main()
