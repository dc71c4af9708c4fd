"""
Vibe Status Hub Server Launcher

Starts the local HTTP server that serves the REST API and the MCP endpoint.

Usage:
    python start_server.py
    python start_server.py --port 31415
    python start_server.py --config ./config.properties --host 0.0.0.0
"""

import argparse
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))


def main():
    parser = argparse.ArgumentParser(description="Vibe Status Hub server")
    parser.add_argument("--host", default=None, help="Host to bind (default: hub.http_host or 127.0.0.1)")
    parser.add_argument("--port", type=int, default=None, help="Port to bind (default: hub.http_port or 31415)")
    parser.add_argument("--config", default=None, help="Path to config.properties")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload for development")
    args = parser.parse_args()

    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn is required. Install it with:")
        print("  pip install uvicorn[standard]")
        sys.exit(1)

    from status_hub.config import ConfigProperties, HubConfig
    from status_hub.utils.exceptions import ConfigurationError

    try:
        config = HubConfig.from_properties(args.config)
    except (ConfigurationError, ValueError) as e:
        print(f"Error: invalid configuration: {e}")
        sys.exit(2)

    host = args.host or config.http_host
    port = args.port or config.http_port

    # The app factory re-reads its settings in the server process; hand the
    # resolved values over as environment overrides.
    os.environ["HUB_HTTP_HOST"] = host
    os.environ["HUB_HTTP_PORT"] = str(port)
    os.environ["HUB_BLOCK_PLUGIN_STATUS"] = "true" if config.block_plugin_status else "false"
    os.environ["HUB_HEARTBEAT_TIMEOUT_MS"] = str(config.heartbeat_timeout_ms)

    source = ConfigProperties.source_path()
    print(f"""
============================================================
  Vibe Status Hub
  REST API:   http://{host}:{port}/api/status
  MCP:        http://{host}:{port}/mcp
  Config:     {source or "(defaults)"}
  Heartbeat timeout: {config.heartbeat_timeout_ms} ms
  Block plugin status: {config.block_plugin_status}
============================================================
    """)

    uvicorn.run(
        "hub_server.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=args.reload,
        log_level="info",
    )


if __name__ == "__main__":
    main()
