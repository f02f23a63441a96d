#!/usr/bin/env python3
"""
Development server launcher for the Cascade Chat API.

This script starts the FastAPI server with auto-reload for development.
For production, run the app under a proper ASGI server deployment.
"""

import os
import uvicorn
from pathlib import Path

project_root = Path(__file__).parent
src_path = project_root / "src"

if __name__ == "__main__":
    port = int(os.getenv("PORT", "8000"))
    print("Starting Cascade Chat API Development Server")
    print(f"Server will be available at: http://localhost:{port}")
    print(f"Chat endpoint: POST http://localhost:{port}/api/chat")
    print(f"API documentation at: http://localhost:{port}/docs")
    print("\n" + "="*50 + "\n")

    uvicorn.run(
        "cascade.api.main:app",
        host="0.0.0.0",  # Accept connections from any IP
        port=port,
        reload=True,     # Auto-reload on code changes (development only)
        reload_dirs=[str(src_path)],  # Only watch src directory
        log_level="info"
    )
