"""Autogram solver configuration."""

from dotenv import find_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Determine the environment file path, or None if not found
ENV_FILE = find_dotenv(usecwd=True) or None


class SolverConfig(BaseSettings):
    """Configuration settings for the autogram solver."""

    deterministic: bool = True
    """Whether to report solutions ordered by the top-level candidate count (buffers branch
    results until all branches complete). Default: True."""

    max_workers: int | None = None
    """Maximum number of worker processes to use. If None (default), uses os.cpu_count() - 1."""

    use_branch_parallelism: bool = True
    """Whether to distribute the top-level candidate counts over worker processes.
    Default: True."""

    first_solution_only: bool = False
    """Stop the search once any branch reports a solution. Default: False."""

    lenient_preamble: bool = False
    """Silently drop characters other than a-z and spaces from the preamble, instead of
    rejecting it. Default: False."""

    report_interval: int = 1_000_000
    """Interval (in number of search nodes) at which workers report progress. 0 disables
    progress reports. Default: 1,000,000."""

    log_dir: str = "logs"

    model_config = SettingsConfigDict(
        env_prefix="AUTOGRAM_",
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )


config = SolverConfig()
