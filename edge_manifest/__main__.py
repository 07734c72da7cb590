from edge_manifest.cli import main

main()
