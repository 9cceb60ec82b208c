from bbmonitor.main import main

main()
