from monitoring_mcp.main import main

main()
