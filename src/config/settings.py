"""Toolkit settings loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # SAM build layout
    sam_build_dir: str = ".aws-sam"
    sam_build_subdir: str = "build"

    # Path the Lambda runtime mounts function code at
    lambda_task_path: str = "/var/task"

    # Node.js
    nodejs_manifest_file: str = "package.json"

    # Tagging API
    aws_region: str = "us-east-1"
    tag_key_cache_ttl: int = 300  # seconds, 0 disables caching

    # Logging
    log_level: str = "INFO"
    log_file: str = ""  # Empty = stdout only

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
