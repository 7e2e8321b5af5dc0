from .experiment_api import ApiState, ExperimentAPI
from .global_api import (
    active_list,
    configure,
    default_ex,
    get_api,
    reset_default_api,
    set_ex,
    show_ex,
)

__all__ = [
    "ApiState",
    "ExperimentAPI",
    "active_list",
    "configure",
    "default_ex",
    "get_api",
    "reset_default_api",
    "set_ex",
    "show_ex",
]
