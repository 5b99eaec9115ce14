from pbs_mcp.stdio_runner import main

if __name__ == "__main__":
    main()
