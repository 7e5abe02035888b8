from .database import get_conn, init_db

__all__ = ['get_conn', 'init_db']
