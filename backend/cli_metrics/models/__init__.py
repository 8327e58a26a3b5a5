from .log_item import LogItem

__all__ = ['LogItem']
