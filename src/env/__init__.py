from env.env import (
    ConfigError,
    Environment,
    LoggingEnvironment,
    OAuthSettings,
    get_env,
    get_logging_env,
    reset_env_caches,
)

from env.paths import PROJECT_ROOT, config_dir, logs_dir, out_dir

__all__ = [
    "ConfigError",
    "Environment",
    "LoggingEnvironment",
    "OAuthSettings",
    "get_env",
    "get_logging_env",
    "reset_env_caches",
    "PROJECT_ROOT",
    "config_dir",
    "logs_dir",
    "out_dir",
]
