"""PyMySQL adapter for sqlhelper."""

from sqlhelper.adapters.pymysql.config import PyMysqlConfig, PyMysqlConnectionParams
from sqlhelper.adapters.pymysql.driver import PyMysqlDriver, PyMysqlExceptionHandler, PyMysqlResultHandle

__all__ = ("PyMysqlConfig", "PyMysqlConnectionParams", "PyMysqlDriver", "PyMysqlExceptionHandler", "PyMysqlResultHandle")
