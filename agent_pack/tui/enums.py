from enum import Enum

from agent_pack.lint.models import Severity
from agent_pack.models import ActionStatus, InstallStatus


class UIStyle(str, Enum):
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    CYAN = "cyan"
    MAGENTA = "magenta"
    DIM = "dim"
    WHITE = "white"


ACTION_STATUS_STYLE = {
    ActionStatus.CREATE: UIStyle.GREEN.value,
    ActionStatus.UPDATE: UIStyle.CYAN.value,
    ActionStatus.FIX: UIStyle.YELLOW.value,
    ActionStatus.REMOVE: UIStyle.MAGENTA.value,
    ActionStatus.NOOP: UIStyle.DIM.value,
    ActionStatus.CONFLICT: UIStyle.RED.value,
}

INSTALL_STATUS_STYLE = {
    InstallStatus.INSTALLED: UIStyle.GREEN.value,
    InstallStatus.MISSING: UIStyle.YELLOW.value,
    InstallStatus.DRIFT: UIStyle.YELLOW.value,
    InstallStatus.CONFLICT: UIStyle.RED.value,
}

SEVERITY_STYLE = {
    Severity.ERROR: UIStyle.RED.value,
    Severity.WARNING: UIStyle.YELLOW.value,
}
