"""Process configuration read from the environment."""
import os
import pathlib
import platform
from temporalio.client import Client
from temporalio.envconfig import ClientConfig

from minesweeper.storage import JsonFileStore

DEFAULT_TASK_QUEUE = "minesweeper-task-queue"


def get_task_queue() -> str:
    return os.getenv("MINESWEEPER_TASK_QUEUE", DEFAULT_TASK_QUEUE)


def get_data_dir() -> pathlib.Path:
    data_dir = os.getenv("MINESWEEPER_DATA_DIR")
    if data_dir:
        return pathlib.Path(data_dir)
    return pathlib.Path.home() / ".minesweeper"


def get_store() -> JsonFileStore:
    """Key-value store holding settings and the leaderboard."""
    return JsonFileStore(get_data_dir())


def get_port() -> int:
    return int(os.getenv("PORT", 3000))


# Connects with the profile named by TEMPORAL_PROFILE when the Temporal
# config file exists, otherwise with TEMPORAL_ADDRESS and TEMPORAL_NAMESPACE.
async def get_temporal_client() -> Client:
    config_file_path = get_config_file_path()
    profile_name = os.getenv("TEMPORAL_PROFILE")
    if profile_name and config_file_path.is_file():
        connect_config = ClientConfig.load_client_connect_config(
            profile=profile_name,
            config_file=str(config_file_path),
        )
        return await Client.connect(**connect_config)
    return await Client.connect(
        os.getenv("TEMPORAL_ADDRESS", "localhost:7233"),
        namespace=os.getenv("TEMPORAL_NAMESPACE", "default"),
    )


# Default location of the Temporal config file for the current OS.
def get_config_file_path() -> pathlib.Path:
    home = pathlib.Path.home()
    system = platform.system()

    if system == "Darwin":
        return home / "Library/Application Support/temporalio/temporal.toml"
    if system == "Windows":
        app_data = os.getenv("AppData")
        if app_data is None:
            raise RuntimeError("AppData environment variable not set")
        return pathlib.Path(app_data) / "temporalio/temporal.toml"

    xdg_config_home = os.getenv("XDG_CONFIG_HOME")
    if xdg_config_home:
        return pathlib.Path(xdg_config_home) / "temporalio/temporal.toml"
    return home / ".config/temporalio/temporal.toml"
