from agent_pack.tui.renderers import PackConsoleUI

__all__ = ["PackConsoleUI"]
