from conceptzoom.cli import main

main()
