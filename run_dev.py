#!/usr/bin/env python3
"""Development server runner for TrioRelevan."""

import os
import sys

from dotenv import load_dotenv

from trio_relevan import create_app


def main():
    """Run the development server."""
    if load_dotenv():
        print("✓ Environment variables loaded from .env file")

    try:
        app = create_app()

        # Configuration
        port = int(os.getenv("PORT", 5000))
        debug = os.getenv("FLASK_DEBUG", "True").lower() == "true"
        host = os.getenv("FLASK_HOST", "127.0.0.1")

        print(f"🚀 Starting TrioRelevan on http://{host}:{port}")
        print(f"🔎 Search backend: {app.extensions['search_backend'].name}")
        print(f"📝 Debug mode: {debug}")
        print("🛑 Press Ctrl+C to stop the server")

        app.run(
            host=host,
            port=port,
            debug=debug
        )

    except Exception as e:
        print(f"❌ Failed to start server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
