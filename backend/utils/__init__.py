from utils.logs import ratelimited_log, setup_logs, time_it

__all__ = ["ratelimited_log", "setup_logs", "time_it"]
