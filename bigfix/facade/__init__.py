from .bigfix_facade import BigFixStatsFacade

__all__ = ['BigFixStatsFacade']
