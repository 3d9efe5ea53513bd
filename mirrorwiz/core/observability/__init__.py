"""
Observability — logging setup shared by the CLI and the web server.
"""
