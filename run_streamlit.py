"""
Launcher script for the YouTube Video Insights Streamlit app.
"""

import os
import argparse
import subprocess
import sys
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def build_command(app_path: Path, port: int):
    """Construct the streamlit command line."""
    return [
        "streamlit", "run", str(app_path),
        "--server.port", str(port),
        "--server.headless", "true",
        "--browser.serverAddress", "localhost",
        "--browser.gatherUsageStats", "false",
    ]


def main():
    """Launch the Streamlit app with command line options."""
    parser = argparse.ArgumentParser(description="YouTube Video Insights Streamlit App")
    parser.add_argument("--port", type=int, default=8501, help="Port to run Streamlit on")
    parser.add_argument("--backend-url", help="URL of the analysis backend (default: BACKEND_URL or http://localhost:5000)")
    args = parser.parse_args()

    # Get the absolute path of the app directory
    app_dir = Path(__file__).parent.absolute()
    app_path = app_dir / "ytsummary" / "frontend" / "streamlit_app.py"

    env = os.environ.copy()
    if args.backend_url:
        env["BACKEND_URL"] = args.backend_url

    # Add the project root to PYTHONPATH to fix import issues
    env["PYTHONPATH"] = str(app_dir) + os.pathsep + env.get("PYTHONPATH", "")

    print(f"Starting YouTube Video Insights Streamlit app on port {args.port}")
    print(f"Analysis backend: {env.get('BACKEND_URL', 'http://localhost:5000')}")

    try:
        subprocess.run(build_command(app_path, args.port), env=env, check=True)
    except KeyboardInterrupt:
        print("Streamlit app stopped")
    except (OSError, subprocess.CalledProcessError) as e:
        print(f"Error running Streamlit app: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
