"""Global test configuration for page-sync tests."""

from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file for testing, so IDE test runners
# see the same environment as the CLI
env_file = Path(__file__).parent.parent / ".env"
if env_file.exists():
    load_dotenv(env_file)
