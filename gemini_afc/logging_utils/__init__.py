from .fc_debug import FCDebugLogger, FCModule, get_fc_logger

__all__ = ["FCDebugLogger", "FCModule", "get_fc_logger"]
