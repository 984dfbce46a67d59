from chesslink.app import main

main()
