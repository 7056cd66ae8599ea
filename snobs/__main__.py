from snobs.main import main

main()
