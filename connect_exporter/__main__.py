from connect_exporter.cli import main

main()
