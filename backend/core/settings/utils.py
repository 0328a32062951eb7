"""
Utility functions for Django settings configuration.

Environment-specific configuration loading built on python-decouple, so each
deployment reads its own .env file while sharing one settings codebase.
"""

from pathlib import Path

from decouple import Config, RepositoryEnv
from decouple import config as default_config

# Map environment names to their corresponding .env files
ENV_FILES = {
    "development": ".env.dev",
    "production": ".env.production",
}


def load_environment_config(environment, base_dir=None):
    """
    Load environment-specific configuration from the appropriate .env file.

    Args:
        environment (str): Target environment ('development', 'production')
        base_dir (Path): Directory holding the .env files, defaults to the repository root

    Returns:
        Config: A decouple config callable reading from the environment file,
                or the default process-environment config when the file is missing
    """
    env_file_name = ENV_FILES.get(environment, ".env")
    root = Path(base_dir) if base_dir else Path(__file__).resolve().parent.parent.parent.parent
    env_file_path = root / env_file_name

    if env_file_path.exists():
        print(f"✓ Loading environment: {environment} from {env_file_name}")
        return Config(RepositoryEnv(str(env_file_path)))

    print(f"✗ Warning: {env_file_name} not found, using default config")
    return default_config
